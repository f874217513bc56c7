from .mime import DEFAULT_MIME, guess_mime_type, parse_media_type
from .pathcodec import SLASH_REPLACEMENT, decode, encode, join_path, split_path
from .rwlock import RWLock
from .time import now_utc, normalize_dt, parse_optional_rfc3339, parse_rfc3339, to_rfc3339

__all__ = [
    "DEFAULT_MIME",
    "guess_mime_type",
    "parse_media_type",
    "SLASH_REPLACEMENT",
    "encode",
    "decode",
    "split_path",
    "join_path",
    "RWLock",
    "now_utc",
    "parse_rfc3339",
    "parse_optional_rfc3339",
    "to_rfc3339",
    "normalize_dt",
]
