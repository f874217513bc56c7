"""Public error exports for digipostefs."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    CantCopyError,
    CantDirMoveError,
    CantMoveError,
    CantSetModTimeError,
    ConflictError,
    DigiposteFsError,
    DirectoryExistsError,
    DirectoryNotFoundError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    IsDirectoryError,
    NetworkError,
    NotEmptyError,
    NotFoundError,
    NotImplementedOperationError,
    ObjectNotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    RemoteFailure,
    UnsupportedEntryError,
    map_http_error,
)

__all__ = [
    "DigiposteFsError",
    "InvalidStateError",
    "InvalidArgumentError",
    "NotFoundError",
    "DirectoryNotFoundError",
    "ObjectNotFoundError",
    "IsDirectoryError",
    "DirectoryExistsError",
    "NotEmptyError",
    "UnsupportedEntryError",
    "CantMoveError",
    "CantCopyError",
    "CantDirMoveError",
    "NotImplementedOperationError",
    "CantSetModTimeError",
    "RemoteFailure",
    "AuthError",
    "PermissionError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
