"""Digiposte API controller (internal use only)."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO, Callable, Optional, Sequence, TypeVar, Union

import requests
from google.auth.exceptions import RefreshError

from digipostefs.auth import AuthInfo, OAuthClient
from digipostefs.config import DEFAULT_API_URL
from digipostefs.errors import (
    ApiError,
    AuthError,
    DigiposteFsError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from digipostefs.models import Document, Folder, Location, Profile, Share
from digipostefs.util.mime import guess_mime_type
from digipostefs.util.time import parse_optional_rfc3339, to_rfc3339

from . import endpoints

T = TypeVar("T")

Content = Union[bytes, BinaryIO]


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class DigiposteController:
    """
    Digiposte API controller (internal only).

    Notes:
        - The HTTP session is NOT exposed.
        - Every call carries the configured timeout as its deadline.
        - Rate-limit, network and 5xx failures are retried here, at the
          transport level; callers never retry.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        max_retries: int = 3,
    ) -> None:
        client = OAuthClient(auth_info)
        self._session = client.build_session(ensure_valid=True)
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._retry_policy = _RetryPolicy(max_retries=max_retries)

    @classmethod
    def from_session(
        cls,
        session: Any,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        max_retries: int = 3,
    ) -> "DigiposteController":
        """Create controller from a pre-built requests session (useful for tests)."""
        obj = cls.__new__(cls)
        obj._session = session
        obj._api_url = api_url.rstrip("/")
        obj._timeout = timeout
        obj._retry_policy = _RetryPolicy(max_retries=max_retries)
        return obj

    # ----------------------------
    # Listing
    # ----------------------------
    def list_folders(self) -> list[Folder]:
        """Return the top-level folders, each with its nested sub-folders."""
        data = self._json("GET", endpoints.FOLDERS)
        return [_folder_dict_to_folder(f) for f in data.get("folders", []) or []]

    def list_documents(self) -> list[Document]:
        """Return the documents stored at the account root."""
        data = self._json("GET", endpoints.DOCUMENTS)
        return _documents_from_payload(data)

    def search_documents(
        self,
        parent_id: str,
        *,
        locations: Optional[Sequence[Location]] = None,
    ) -> list[Document]:
        body: dict[str, Any] = {"folder_id": parent_id}
        if locations:
            body["locations"] = [Location(loc).value for loc in locations]
        data = self._json("POST", endpoints.DOCUMENTS_SEARCH, json=body)
        return _documents_from_payload(data)

    def get_trashed_documents(self) -> list[Document]:
        data = self._json("GET", endpoints.DOCUMENTS_TRASHED)
        return _documents_from_payload(data)

    def get_trashed_folders(self) -> list[Folder]:
        data = self._json("GET", endpoints.FOLDERS_TRASHED)
        return [_folder_dict_to_folder(f) for f in data.get("folders", []) or []]

    def get_profile(self) -> Profile:
        data = self._json(
            "GET",
            endpoints.PROFILE,
            params={"mode": endpoints.PROFILE_MODE_DEFAULT},
        )
        return _profile_dict_to_profile(data)

    # ----------------------------
    # Folders
    # ----------------------------
    def create_folder(self, parent_id: str, name: str) -> Folder:
        body: dict[str, Any] = {"name": name}
        if parent_id:
            body["parent_id"] = parent_id
        data = self._json("POST", endpoints.FOLDER, json=body)
        return _folder_dict_to_folder(data)

    def rename_folder(self, folder_id: str, name: str) -> Folder:
        data = self._json(
            "PUT",
            endpoints.FOLDER_RENAME.format(folder_id=folder_id),
            json={"name": name},
        )
        return _folder_dict_to_folder(data)

    # ----------------------------
    # Documents
    # ----------------------------
    def create_document(
        self,
        parent_id: str,
        name: str,
        content: Content,
        *,
        mime_type: Optional[str] = None,
        document_type: str = endpoints.DOCUMENT_TYPE_BASIC,
    ) -> Document:
        # Read once so that retries resend the same bytes.
        payload = content if isinstance(content, bytes) else content.read()
        form: dict[str, Any] = {"title": name, "document_type": document_type}
        if parent_id:
            form["folder_id"] = parent_id
        files = {"archive": (name, payload, mime_type or guess_mime_type(name))}
        data = self._json("POST", endpoints.DOCUMENT, data=form, files=files)
        return _document_dict_to_document(data)

    def rename_document(self, document_id: str, name: str) -> Document:
        data = self._json(
            "PUT",
            endpoints.DOCUMENT_RENAME.format(document_id=document_id),
            json={"name": name},
        )
        return _document_dict_to_document(data)

    def copy_documents(self, document_ids: Sequence[str]) -> list[Document]:
        data = self._json(
            "POST",
            endpoints.DOCUMENTS_COPY,
            json={"document_ids": list(document_ids)},
        )
        return _documents_from_payload(data)

    def document_content(self, document_id: str) -> tuple[bytes, str]:
        """Download a document. Returns (content, Content-Type header)."""
        resp = self._request(
            "GET",
            endpoints.DOCUMENT_CONTENT.format(document_id=document_id),
        )
        return resp.content, resp.headers.get("Content-Type", "")

    # ----------------------------
    # Tree operations (documents and folders at once)
    # ----------------------------
    def move(
        self,
        dest_parent_id: str,
        document_ids: Optional[Sequence[str]] = None,
        folder_ids: Optional[Sequence[str]] = None,
    ) -> None:
        body = _tree_body(document_ids, folder_ids)
        body["destination_folder_id"] = dest_parent_id
        self._request("PUT", endpoints.TREE_MOVE, json=body)

    def delete(
        self,
        document_ids: Optional[Sequence[str]] = None,
        folder_ids: Optional[Sequence[str]] = None,
    ) -> None:
        self._request("POST", endpoints.TREE_DELETE, json=_tree_body(document_ids, folder_ids))

    def trash(
        self,
        document_ids: Optional[Sequence[str]] = None,
        folder_ids: Optional[Sequence[str]] = None,
    ) -> None:
        self._request("POST", endpoints.TREE_TRASH, json=_tree_body(document_ids, folder_ids))

    # ----------------------------
    # Shares
    # ----------------------------
    def create_share(
        self,
        start_date: datetime,
        end_date: Optional[datetime],
        title: str,
        security_code: str = "",
    ) -> Share:
        body: dict[str, Any] = {
            "start_date": to_rfc3339(start_date),
            "title": title,
            "security_code": security_code,
        }
        if end_date is not None:
            body["end_date"] = to_rfc3339(end_date)
        data = self._json("POST", endpoints.SHARE, json=body)
        return _share_dict_to_share(data)

    def set_share_documents(self, share_id: str, document_ids: Sequence[str]) -> None:
        self._request(
            "PUT",
            endpoints.SHARE_DOCUMENTS.format(share_id=share_id),
            json={"document_ids": list(document_ids)},
        )

    def list_shares_with_documents(self) -> list[Share]:
        data = self._json("GET", endpoints.SHARES_WITH_DOCUMENTS)
        shares: list[Share] = []
        for item in data.get("share_data_and_documents", []) or []:
            share = _share_dict_to_share(item.get("share_data", {}) or {})
            share.documents = _documents_from_payload(item)
            shares.append(share)
        return shares

    def delete_share(self, share_id: str) -> None:
        self._request("DELETE", endpoints.SHARE_ITEM.format(share_id=share_id))

    def logout(self) -> None:
        self._request("POST", endpoints.LOGOUT)

    # ----------------------------
    # Internals
    # ----------------------------
    def _url(self, path: str) -> str:
        return f"{self._api_url}{path}"

    def _json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        resp = self._request(method, path, **kwargs)
        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError(
                "Invalid JSON response",
                details={"method": method, "path": path},
                cause=exc,
            ) from exc
        if not isinstance(data, dict):
            raise ApiError(
                "Unexpected JSON response",
                details={"method": method, "path": path},
            )
        return data

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)

        def send() -> requests.Response:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
            return resp

        return self._execute(send)

    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    time.sleep(delay)
                    delay *= 2
                    continue
                if mapped is exc:
                    raise
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, DigiposteFsError):
            return exc

        if isinstance(exc, requests.HTTPError) and exc.response is not None:
            info = _http_error_to_info(exc.response)
            return map_http_error(info, cause=exc)

        if isinstance(exc, RefreshError):
            return AuthError("Failed to refresh session token", cause=exc)

        if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
            return NetworkError("Network error", cause=exc)

        if isinstance(exc, requests.RequestException):
            return ApiError("Digiposte API error", cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Digiposte API error", cause=exc)


def _tree_body(
    document_ids: Optional[Sequence[str]],
    folder_ids: Optional[Sequence[str]],
) -> dict[str, Any]:
    return {
        "document_ids": list(document_ids or []),
        "folder_ids": list(folder_ids or []),
    }


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return 0


def _folder_dict_to_folder(data: dict[str, Any]) -> Folder:
    children = data.get("folders", []) or []
    return Folder(
        id=_str(data.get("id")),
        name=_str(data.get("name")),
        created_at=parse_optional_rfc3339(data.get("created_at")),
        updated_at=parse_optional_rfc3339(data.get("updated_at")),
        folders=[_folder_dict_to_folder(c) for c in children if isinstance(c, dict)],
        document_count=_int(data.get("document_count")),
    )


def _document_dict_to_document(data: dict[str, Any]) -> Document:
    tags = data.get("user_tags", []) or []
    folder_id = data.get("folder_id")
    return Document(
        id=_str(data.get("id")),
        name=_str(data.get("filename")),
        size=_int(data.get("size")),
        mime_type=_str(data.get("mimetype")),
        created_at=parse_optional_rfc3339(data.get("creation_date")),
        location=_str(data.get("location")) or Location.SAFE.value,
        user_tags=[t for t in tags if isinstance(t, str)],
        folder_id=folder_id if isinstance(folder_id, str) else None,
    )


def _documents_from_payload(data: dict[str, Any]) -> list[Document]:
    return [
        _document_dict_to_document(d)
        for d in data.get("documents", []) or []
        if isinstance(d, dict)
    ]


def _profile_dict_to_profile(data: dict[str, Any]) -> Profile:
    offer = data.get("offer", {}) or {}
    user_info = data.get("user_info", {}) or {}
    return Profile(
        space_max=_int(data.get("space_max")),
        space_used=_int(data.get("space_used")),
        space_free=_int(data.get("space_free")),
        space_not_computed=_int(data.get("space_not_computed")),
        subscription_date=parse_optional_rfc3339(offer.get("subscription_date")),
        first_name=_str(user_info.get("first_name")),
        last_name=_str(user_info.get("last_name")),
        email=_str(user_info.get("email")),
        login=_str(user_info.get("login")),
    )


def _share_dict_to_share(data: dict[str, Any]) -> Share:
    return Share(
        id=_str(data.get("id")),
        title=_str(data.get("title")),
        short_url=_str(data.get("short_url")),
        start_date=parse_optional_rfc3339(data.get("start_date")),
        end_date=parse_optional_rfc3339(data.get("end_date")),
    )


def _http_error_to_info(resp: Any) -> HttpErrorInfo:
    status_code = getattr(resp, "status_code", None)
    reason = getattr(resp, "reason", None)

    message = None
    details: dict[str, Any] = {}

    try:
        payload = resp.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, str):
            details["error"] = err
            reason = err
        message = payload.get("error_description") or payload.get("message") or None
        if not isinstance(message, str):
            message = None

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
