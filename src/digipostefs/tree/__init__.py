"""Tree cache exports for digipostefs."""

from __future__ import annotations

from .cache import TreeCache, documents_total_count

__all__ = ["TreeCache", "documents_total_count"]
