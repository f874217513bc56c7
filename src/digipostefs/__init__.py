"""digipostefs public API."""

from __future__ import annotations

from digipostefs.auth import AuthInfo, OAuthClient
from digipostefs.config import FsConfig
from digipostefs.controller import DigiposteController
from digipostefs.entries import DocumentEntry, Entry, EntryKind, FolderEntry
from digipostefs.errors import (
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
from digipostefs.fs import DigiposteFs
from digipostefs.models import (
    CacheSyncWarning,
    Document,
    Folder,
    Location,
    Profile,
    Share,
    Usage,
)
from digipostefs.tree import TreeCache

__all__ = [
    # High-level
    "DigiposteFs",
    "FsConfig",
    "TreeCache",
    "DigiposteController",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Entries / Models
    "Entry",
    "EntryKind",
    "FolderEntry",
    "DocumentEntry",
    "Folder",
    "Document",
    "Location",
    "Profile",
    "Share",
    "Usage",
    "CacheSyncWarning",
    # Errors
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
