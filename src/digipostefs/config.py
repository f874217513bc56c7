"""Configuration for a DigiposteFs instance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from digipostefs.errors import InvalidArgumentError

DEFAULT_API_URL: str = "https://api.digiposte.fr/api"
STAGING_API_URL: str = "https://api.interop.digiposte.io/api"

API_URL_KEY = "api_url"
ROOT_KEY = "root"
TIMEOUT_KEY = "timeout"
MAX_RETRIES_KEY = "max_retries"


@dataclass(slots=True, frozen=True)
class FsConfig:
    """
    Settings of a DigiposteFs.

    Attributes:
        api_url: Base URL of the Digiposte API.
        root: Sub-path the filesystem is rooted at ("" for the account root).
        timeout: Per-request deadline in seconds.
        max_retries: Transport retries for rate-limit, network and 5xx failures.
    """

    api_url: str = DEFAULT_API_URL
    root: str = ""
    timeout: float = 60.0
    max_retries: int = 3

    def __post_init__(self) -> None:
        if not isinstance(self.api_url, str) or not self.api_url.strip():
            raise InvalidArgumentError(
                "FsConfig.api_url must be a non-empty string",
                details={"api_url": self.api_url},
            )
        if not isinstance(self.root, str):
            raise InvalidArgumentError("FsConfig.root must be a string")
        if not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise InvalidArgumentError(
                "FsConfig.timeout must be a positive number",
                details={"timeout": self.timeout},
            )
        if not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise InvalidArgumentError(
                "FsConfig.max_retries must be a non-negative integer",
                details={"max_retries": self.max_retries},
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> FsConfig:
        """Build a config from a key/value mapping; unknown keys are ignored."""
        kwargs: dict[str, Any] = {}
        for key in (API_URL_KEY, ROOT_KEY):
            if mapping.get(key) is not None:
                kwargs[key] = str(mapping[key])
        try:
            if mapping.get(TIMEOUT_KEY) is not None:
                kwargs["timeout"] = float(mapping[TIMEOUT_KEY])
            if mapping.get(MAX_RETRIES_KEY) is not None:
                kwargs["max_retries"] = int(mapping[MAX_RETRIES_KEY])
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(
                "Invalid numeric setting",
                details={key: mapping.get(key) for key in (TIMEOUT_KEY, MAX_RETRIES_KEY)},
                cause=exc,
            ) from exc
        return cls(**kwargs)
