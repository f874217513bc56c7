"""Data model for remote documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Location(str, Enum):
    """Where a document lives: normal or trashed, inbox or safe."""

    INBOX = "INBOX"
    SAFE = "SAFE"
    TRASH_INBOX = "TRASH_INBOX"
    TRASH_SAFE = "TRASH_SAFE"

    @property
    def trashed(self) -> bool:
        return self in TRASH_LOCATIONS


NORMAL_LOCATIONS: tuple[Location, ...] = (Location.INBOX, Location.SAFE)
TRASH_LOCATIONS: tuple[Location, ...] = (Location.TRASH_INBOX, Location.TRASH_SAFE)

# Host path under which trashed folders are presented.
TRASH_DIR_NAME: str = ".Trash"


@dataclass(slots=True)
class Document:
    """
    A remote document.

    Documents are never members of the tree cache; they are rebuilt from a
    live listing on every call.
    """

    id: str
    name: str
    size: int = 0
    mime_type: str = ""
    created_at: Optional[datetime] = None
    location: str = Location.SAFE.value
    user_tags: list[str] = field(default_factory=list)
    folder_id: Optional[str] = None
