"""Directory adapter over a cached folder node."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from digipostefs.errors import DigiposteFsError
from digipostefs.models import (
    NORMAL_LOCATIONS,
    TRASH_DIR_NAME,
    TRASH_LOCATIONS,
    Folder,
    Location,
)
from digipostefs.tree import documents_total_count
from digipostefs.util.pathcodec import encode, join_path

from .base import Entry, EntryKind

if TYPE_CHECKING:
    from digipostefs.fs import DigiposteFs

logger = logging.getLogger(__name__)


class FolderEntry(Entry):
    kind = EntryKind.FOLDER

    def __init__(
        self,
        fs: DigiposteFs,
        remote: str,
        folder: Folder,
        *,
        trashed: Optional[bool] = None,
    ) -> None:
        super().__init__(fs, remote, folder.id)
        self._folder = folder
        if trashed is None:
            # Trash detection works on the account path, not the rooted one.
            trashed = fs.absolute_path(self.remote).startswith(TRASH_DIR_NAME + "/")
        self._in_trash = trashed

    @property
    def folder(self) -> Folder:
        return self._folder

    @property
    def name(self) -> str:
        return self._folder.name

    @property
    def mod_time(self) -> Optional[datetime]:
        return self._folder.updated_at

    @property
    def in_trash(self) -> bool:
        return self._in_trash

    def items(self) -> int:
        """Recursive document count, from the cache (no remote call)."""
        return documents_total_count(self._folder)

    def size(self) -> int:
        """
        Total byte size of the documents under this folder.

        Notes:
            - Computed live on every call (one search per folder); the cache
              tracks counts only.
            - Folders under the trash root sum trashed documents, the others
              sum normal ones.
            - A failed search is logged and counts as 0.
        """
        locations = TRASH_LOCATIONS if self.in_trash else NORMAL_LOCATIONS

        total = 0
        try:
            for document in self._documents(locations):
                total += document.size
        except DigiposteFsError as exc:
            logger.error("%s: search in %r: %s", self.remote, self._folder.id, exc)

        for child in self._folder.folders:
            total += FolderEntry(
                self._fs,
                join_path(self.remote, encode(child.name)),
                child,
                trashed=self._in_trash,
            ).size()

        return total

    def _documents(self, locations: tuple[Location, ...]):
        controller = self._fs.controller
        if not self._folder.id:
            wanted = {loc.value for loc in locations}
            return [d for d in controller.list_documents() if d.location in wanted]
        return controller.search_documents(self._folder.id, locations=locations)
