"""Entry kinds shared by the folder and document adapters."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from digipostefs.util.pathcodec import clean_path, split_path

if TYPE_CHECKING:
    from digipostefs.fs import DigiposteFs


class EntryKind(str, Enum):
    FOLDER = "folder"
    DOCUMENT = "document"


class Entry:
    """
    Base of the adapters returned by DigiposteFs.

    Capabilities (`has_id`, `is_dir`) are fixed when the entry is built, so
    callers branch on them instead of inspecting types.

    Entries hold references into the tree cache and are valid only until the
    next mutating call on their filesystem.
    """

    kind: EntryKind

    def __init__(self, fs: DigiposteFs, remote: str, entry_id: str) -> None:
        self._fs = fs
        self._remote = clean_path(remote)
        self._id = entry_id
        self.has_id = bool(entry_id)
        self.is_dir = self.kind is EntryKind.FOLDER

    @property
    def fs(self) -> DigiposteFs:
        return self._fs

    @property
    def remote(self) -> str:
        """Path relative to the filesystem root."""
        return self._remote

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent_remote(self) -> str:
        return split_path(self._remote)[0]

    def __str__(self) -> str:
        return self._remote

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._remote!r} id={self._id!r}>"
