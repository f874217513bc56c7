"""Advisory outcomes of best-effort cache patches."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CacheSyncWarning:
    """
    A cache patch that could not be applied after a successful remote call.

    The primary operation is still reported as successful; the cached node
    stays stale until the next rebuild.
    """

    operation: str
    path: str
    message: str
