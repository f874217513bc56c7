from __future__ import annotations

import mimetypes

DEFAULT_MIME: str = "application/octet-stream"


def guess_mime_type(name: str) -> str:
    """Guess a MIME type from a document name, falling back to octet-stream."""
    guessed, _ = mimetypes.guess_type(name, strict=False)
    return guessed or DEFAULT_MIME


def parse_media_type(content_type: str) -> str:
    """
    Return the lower-cased media type of a Content-Type header value.

    Raises:
        ValueError: if the value has no "type/subtype" part.
    """
    if not isinstance(content_type, str):
        raise ValueError("content type must be a string")
    media_type = content_type.split(";", 1)[0].strip().lower()
    main, sep, sub = media_type.partition("/")
    if not sep or not main or not sub:
        raise ValueError(f"invalid media type: {content_type!r}")
    return media_type
