"""Entry adapter exports for digipostefs."""

from __future__ import annotations

from .base import Entry, EntryKind
from .document import DocumentEntry
from .folder import FolderEntry

__all__ = ["Entry", "EntryKind", "FolderEntry", "DocumentEntry"]
