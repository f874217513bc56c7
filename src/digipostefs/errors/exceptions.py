"""Exception hierarchy and HTTP error mapping for digipostefs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class DigiposteFsError(Exception):
    """
    Base exception for digipostefs.

    Attributes:
        details: Optional structured information (path, ids, HTTP status...).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidStateError(DigiposteFsError):
    """Raised when the library is used in an invalid state (e.g., tree not built)."""


class InvalidArgumentError(DigiposteFsError):
    """Raised when arguments are invalid (bad config, HTTP 400, etc.)."""


class NotFoundError(DigiposteFsError):
    """Raised when a path segment or a named entry is absent."""


class DirectoryNotFoundError(NotFoundError):
    """Raised when a path does not resolve to a cached folder."""


class ObjectNotFoundError(NotFoundError):
    """Raised when no document matches a path."""


class IsDirectoryError(DigiposteFsError):
    """Raised when a path names a folder where a document was expected."""


class DirectoryExistsError(DigiposteFsError):
    """Raised when a directory move targets a name already taken."""


class NotEmptyError(DigiposteFsError):
    """Raised by rmdir when the folder still holds documents."""


class UnsupportedEntryError(DigiposteFsError):
    """Raised when an entry kind is not valid for the requested operation."""


class CantMoveError(UnsupportedEntryError):
    """Raised when a server-side move is impossible for the given entry."""


class CantCopyError(UnsupportedEntryError):
    """Raised when a server-side copy is impossible for the given entry."""


class CantDirMoveError(UnsupportedEntryError):
    """Raised when a server-side directory move is impossible."""


class NotImplementedOperationError(DigiposteFsError, NotImplementedError):
    """Raised for operations the store does not model (e.g., in-place update)."""


class CantSetModTimeError(DigiposteFsError):
    """Raised when a modification time can't be set without re-uploading."""


class RemoteFailure(DigiposteFsError):
    """Base class for failures reported by the remote store or its transport."""


class AuthError(RemoteFailure):
    """Raised when token loading/refresh fails or the session is rejected (401)."""


class PermissionError(RemoteFailure):
    """Raised when access is denied (HTTP 403 non-quota)."""


class ConflictError(RemoteFailure):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(RemoteFailure):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(RemoteFailure):
    """Raised when the storage quota is exceeded."""


class NetworkError(RemoteFailure):
    """Raised when network/timeout issues prevent the request."""


class ApiError(RemoteFailure):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to digipostefs exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "space",
    "storage_full",
    "max_size",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DigiposteFsError:
    """
    Map an HTTP error to a digipostefs exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionError, but QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 413 -> QuotaExceededError
        - 429 -> RateLimitError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 413:
        return QuotaExceededError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
