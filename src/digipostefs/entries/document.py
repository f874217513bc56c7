"""File adapter over a remote document."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, BinaryIO, Optional

from digipostefs.errors import CantSetModTimeError, NotImplementedOperationError
from digipostefs.models import Document

from .base import Entry, EntryKind

if TYPE_CHECKING:
    from digipostefs.fs import DigiposteFs


class DocumentEntry(Entry):
    """
    Read-only view of a document found by a live listing.

    Content can't be updated in place: documents are replaced by creating a
    new one and deleting the old (see DigiposteFs.put).
    """

    kind = EntryKind.DOCUMENT

    def __init__(self, fs: DigiposteFs, remote: str, document: Document) -> None:
        super().__init__(fs, remote, document.id)
        self._document = document

    @property
    def document(self) -> Document:
        return self._document

    @property
    def name(self) -> str:
        return self._document.name

    @property
    def size(self) -> int:
        return self._document.size

    @property
    def mime_type(self) -> str:
        return self._document.mime_type

    @property
    def mod_time(self) -> Optional[datetime]:
        return self._document.created_at

    @property
    def tier(self) -> str:
        return self._document.location

    @property
    def storable(self) -> bool:
        return True

    def metadata(self) -> dict[str, str]:
        """User tags as a mapping, each tag split on its first "="."""
        result: dict[str, str] = {}
        for tag in self._document.user_tags:
            key, _, value = tag.partition("=")
            result[key] = value
        return result

    def open(self) -> BinaryIO:
        return self._fs.open_object(self)

    def remove(self) -> None:
        """Move the document to the trash and patch its parent's count."""
        self._fs.remove_object(self)

    def update(self, content: Any, **kwargs: Any) -> None:
        raise NotImplementedOperationError(
            "Updating a document in place is not supported",
            details={"remote": self.remote, "document_id": self.id},
        )

    def set_mod_time(self, mod_time: datetime) -> None:
        raise CantSetModTimeError(
            "Can't set modification time without re-uploading",
            details={"remote": self.remote, "document_id": self.id},
        )
