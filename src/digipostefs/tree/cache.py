"""Tree cache: lazily built mirror of the remote folder graph."""

from __future__ import annotations

import logging
from typing import Any, Optional

from digipostefs.errors import (
    ApiError,
    DigiposteFsError,
    DirectoryNotFoundError,
    InvalidStateError,
    RemoteFailure,
)
from digipostefs.models import Folder
from digipostefs.util.pathcodec import clean_path, decode

logger = logging.getLogger(__name__)


class TreeCache:
    """
    In-memory mirror of the folder graph, rooted at a synthetic root node.

    Notes:
        - Built once on first use and patched in place afterwards; changes
          made by other processes are never observed until `flush()`.
        - Not thread-safe by itself. The owning filesystem serializes access
          with its reader/writer lock.
    """

    def __init__(self, controller: Any) -> None:
        self._controller = controller
        self._root: Optional[Folder] = None

    @property
    def is_built(self) -> bool:
        return self._root is not None

    @property
    def root(self) -> Folder:
        """Return the root node. Requires ensure_built() first."""
        if self._root is None:
            raise InvalidStateError("Tree is not built. Call ensure_built() first.")
        return self._root

    def ensure_built(self) -> Folder:
        """
        Build the tree if needed and return its root.

        Raises:
            RemoteFailure: if any of the three remote reads fails. The cache
                stays unset so the next call retries every read.
        """
        if self._root is not None:
            return self._root

        folders = _read("list folders", self._controller.list_folders)
        documents = _read("list documents", self._controller.list_documents)
        profile = _read("get profile", self._controller.get_profile)

        root = Folder(
            id="",
            name="",
            created_at=profile.subscription_date,
            updated_at=profile.subscription_date,
            folders=list(folders),
            document_count=len(documents),
        )
        self._root = root
        logger.debug(
            "Built tree cache: %d top-level folders, %d root documents",
            len(root.folders),
            root.document_count,
        )
        return root

    def flush(self) -> None:
        """Drop the tree; the next ensure_built() rebuilds it from scratch."""
        self._root = None

    def resolve_folder(self, path: str) -> Folder:
        """
        Return the folder node at `path`.

        Notes:
            - "" (after trimming slashes) is the root.
            - Each segment is matched against child names in order; the first
              match wins when siblings share a name.

        Raises:
            DirectoryNotFoundError: at the first segment without a match.
        """
        folder = self.root
        path = clean_path(path)
        if not path:
            return folder

        for segment in path.split("/"):
            name = decode(segment)
            for child in folder.folders:
                if child.name == name:
                    folder = child
                    break
            else:
                raise DirectoryNotFoundError(
                    f"Directory not found: {path!r}",
                    details={"path": path, "segment": segment},
                )

        return folder

    @staticmethod
    def remove_child(parent: Folder, folder_id: str) -> int:
        """Drop every child carrying `folder_id`. Returns how many were removed."""
        kept = [child for child in parent.folders if child.id != folder_id]
        removed = len(parent.folders) - len(kept)
        parent.folders = kept
        return removed


def documents_total_count(folder: Folder) -> int:
    """Recursive sum of the cached document counts under `folder`."""
    total = folder.document_count
    for child in folder.folders:
        total += documents_total_count(child)
    return total


def _read(step: str, func: Any) -> Any:
    try:
        return func()
    except DigiposteFsError as exc:
        error_type = type(exc) if isinstance(exc, RemoteFailure) else ApiError
        raise error_type(
            f"build tree: {step}: {exc}",
            details={**exc.details, "step": step},
            cause=exc,
        ) from exc
