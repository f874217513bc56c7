"""Session credentials for digipostefs."""

from __future__ import annotations

import json
import os

from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2.credentials import Credentials

from digipostefs.errors import AuthError, InvalidArgumentError
from digipostefs.util.time import parse_optional_rfc3339

from .auth_info import AuthInfo


class OAuthClient:
    """Load, refresh and persist the bearer token used against the API."""

    def __init__(self, auth_info: AuthInfo) -> None:
        if auth_info.kind != "token":
            raise InvalidArgumentError("OAuthClient requires AuthInfo(kind='token')")
        self._auth_info = auth_info

    def get_credentials(self, ensure_valid: bool = True) -> Credentials:
        """
        Return credentials loaded from the token file.

        Args:
            ensure_valid: If True, refresh expired credentials when possible.

        Raises:
            AuthError: on load/refresh failures or when no usable token exists.
        """
        token_file = self._auth_info.token_file
        if not os.path.exists(token_file):
            raise AuthError(
                "token_file does not exist",
                details={"token_file": token_file},
            )

        try:
            with open(token_file, "r", encoding="utf-8") as f:
                creds = _credentials_from_info(json.load(f))
        except (OSError, ValueError, TypeError) as exc:
            raise AuthError(
                "Failed to load token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

        if not ensure_valid:
            return creds

        if not creds.valid and creds.refresh_token:
            try:
                creds.refresh(Request())
            except Exception as exc:
                raise AuthError(
                    "Failed to refresh session token",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc
            self._save_credentials(creds)

        if not creds.valid:
            raise AuthError(
                "Session token is expired and can't be refreshed",
                details={"token_file": token_file},
            )
        return creds

    def build_session(self, ensure_valid: bool = True) -> AuthorizedSession:
        """Build a requests session that sends (and refreshes) the bearer token."""
        creds = self.get_credentials(ensure_valid=ensure_valid)
        return AuthorizedSession(creds)

    def _save_credentials(self, creds: Credentials) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save session token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc


def _credentials_from_info(info: dict) -> Credentials:
    if not isinstance(info, dict):
        raise ValueError("token file must hold a JSON object")

    token = info.get("token") or info.get("access_token")
    if not isinstance(token, str) or not token:
        raise ValueError("token file has no access token")

    expiry = parse_optional_rfc3339(info.get("expiry"))
    return Credentials(
        token=token,
        refresh_token=info.get("refresh_token"),
        token_uri=info.get("token_uri"),
        client_id=info.get("client_id"),
        client_secret=info.get("client_secret"),
        # google-auth compares expiry against a naive UTC datetime.
        expiry=expiry.replace(tzinfo=None) if expiry is not None else None,
    )
