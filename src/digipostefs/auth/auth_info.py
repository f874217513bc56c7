"""Authentication information for digipostefs (stored session token)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Only stored tokens are supported:
        kind = "token"
        data must include:
            - token_file
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "token":
            raise ValueError("AuthInfo.kind must be 'token'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        value = self.data.get("token_file")
        if not isinstance(value, str) or not value.strip():
            raise ValueError("AuthInfo.data['token_file'] must be a non-empty string")

    @property
    def token_file(self) -> str:
        """Path to the session token JSON."""
        return str(self.data["token_file"])
