"""Folder node of the tree cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True, eq=False)
class Folder:
    """
    A remote folder, as returned by the store and kept in the tree cache.

    Notes:
        - `folders` is owned by this node; there is no back reference to the
          parent. Parents are found again by walking from the root.
        - `document_count` counts documents directly inside this folder. It is
          patched by every mutation made through this process.
        - Nodes compare by identity.
    """

    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    folders: list[Folder] = field(default_factory=list)
    document_count: int = 0

    def children_named(self, name: str) -> list[Folder]:
        return [child for child in self.folders if child.name == name]
