"""DigiposteFs: hierarchical filesystem view over the Digiposte document store."""

from __future__ import annotations

import io
import logging
from contextlib import ExitStack
from dataclasses import replace
from datetime import timedelta
from typing import Any, BinaryIO, Callable, Optional, Sequence, TypeVar, Union

from digipostefs.auth import AuthInfo
from digipostefs.config import FsConfig
from digipostefs.controller import DigiposteController
from digipostefs.errors import (
    CantCopyError,
    CantDirMoveError,
    CantMoveError,
    ConflictError,
    DigiposteFsError,
    DirectoryExistsError,
    DirectoryNotFoundError,
    InvalidArgumentError,
    InvalidStateError,
    IsDirectoryError,
    NotEmptyError,
    NotFoundError,
    ObjectNotFoundError,
    UnsupportedEntryError,
)
from digipostefs.entries import DocumentEntry, Entry, FolderEntry
from digipostefs.models import TRASH_DIR_NAME, CacheSyncWarning, Document, Folder, Usage
from digipostefs.tree import TreeCache, documents_total_count
from digipostefs.util.mime import parse_media_type
from digipostefs.util.pathcodec import clean_path, decode, encode, join_path, split_path
from digipostefs.util.rwlock import RWLock
from digipostefs.util.time import now_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")

Content = Union[bytes, BinaryIO]


class DigiposteFs:
    """
    Slash-delimited filesystem over a Digiposte account.

    Notes:
        - The folder tree is cached in-process on first use and patched by
          every mutation; documents are always listed live.
        - One reader/writer lock guards the instance: listing verbs share it,
          mutating verbs hold it exclusively (network waits included).
        - Failed remote calls propagate. Cache bookkeeping that can't be
          applied after a successful remote call is recorded as a
          CacheSyncWarning instead (see `sync_warnings`).
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        config: Optional[FsConfig] = None,
        name: str = "digiposte",
    ) -> None:
        config = config or FsConfig()
        controller = DigiposteController(
            auth_info,
            api_url=config.api_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )
        self._setup(controller, config, name)

    @classmethod
    def from_controller(
        cls,
        controller: Any,
        *,
        config: Optional[FsConfig] = None,
        name: str = "digiposte",
    ) -> "DigiposteFs":
        """Create a filesystem around an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._setup(controller, config or FsConfig(), name)
        return obj

    def _setup(self, controller: Any, config: FsConfig, name: str) -> None:
        self._name = name
        self._config = config
        self._root = clean_path(config.root)
        self._controller = controller
        self._tree = TreeCache(controller)
        self._lock = RWLock()
        self._sync_warnings: list[CacheSyncWarning] = []

    # ----------------------------
    # Properties
    # ----------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def root(self) -> str:
        return self._root

    @property
    def config(self) -> FsConfig:
        return self._config

    @property
    def controller(self) -> Any:
        return self._controller

    @property
    def tree(self) -> TreeCache:
        return self._tree

    @property
    def features(self) -> dict[str, bool]:
        return {
            "can_have_empty_directories": True,
            "case_insensitive": False,
            "duplicate_files": True,
            "read_metadata": True,
            "read_mime_type": True,
            "write_mime_type": True,
            "get_tier": True,
            "server_side_move": True,
            "server_side_copy": True,
            "server_side_dir_move": True,
            "merge_dirs": True,
            "public_link": True,
        }

    @property
    def sync_warnings(self) -> list[CacheSyncWarning]:
        """Cache patches skipped since the last drain."""
        with self._lock.read_locked():
            return list(self._sync_warnings)

    def drain_sync_warnings(self) -> list[CacheSyncWarning]:
        """Return and clear the recorded warnings; waits for running mutations."""
        with self._lock.write_locked():
            warnings, self._sync_warnings = self._sync_warnings, []
            return warnings

    def absolute_path(self, remote: str) -> str:
        """Map a path relative to this filesystem to a path from the account root."""
        return join_path(self._root, remote)

    def __str__(self) -> str:
        return f"{self._name}:{self._root}"

    # ----------------------------
    # Read APIs (shared lock)
    # ----------------------------
    def list(self, dir: str = "") -> list[Entry]:
        """
        List the folders and documents directly inside `dir`.

        Raises:
            DirectoryNotFoundError: if `dir` doesn't resolve.
        """
        dir = clean_path(dir)
        with self._lock.read_locked():
            self._tree.ensure_built()
            folder = self._resolve(dir)

            entries: list[Entry] = [
                FolderEntry(self, join_path(dir, encode(child.name)), child)
                for child in folder.folders
            ]
            for document in self._documents_in(folder, "list", dir):
                entries.append(
                    DocumentEntry(self, join_path(dir, encode(document.name)), document)
                )
            return entries

    def new_object(self, remote: str) -> DocumentEntry:
        """
        Find the document at `remote`.

        Raises:
            ObjectNotFoundError: if no document matches (or the parent is missing).
            IsDirectoryError: if `remote` names a folder.
        """
        with self._lock.read_locked():
            self._tree.ensure_built()
            return self._find_document(remote)

    def get(self, remote: str) -> Entry:
        """Return the folder or document at `remote`."""
        remote = clean_path(remote)
        with self._lock.read_locked():
            self._tree.ensure_built()
            try:
                return FolderEntry(self, remote, self._resolve(remote))
            except DirectoryNotFoundError:
                pass
            return self._find_document(remote)

    def open_object(self, entry: DocumentEntry) -> BinaryIO:
        """Download a document's content."""
        content, content_type = self._call_remote(
            "open",
            self._controller.document_content,
            entry.id,
            details={"remote": entry.remote, "document_id": entry.id},
        )

        try:
            media_type = parse_media_type(content_type)
        except ValueError as exc:
            logger.debug("%s: failed to check content type %r: %s", entry.remote, content_type, exc)
        else:
            if entry.mime_type and media_type != entry.mime_type.lower():
                logger.info(
                    "%s: content type mismatch: %r != %r",
                    entry.remote,
                    media_type,
                    entry.mime_type,
                )

        return io.BytesIO(content)

    def about(self) -> Usage:
        """Quota figures from the profile, plus cached and trashed totals."""
        with self._lock.read_locked():
            root = self._tree.ensure_built()
            profile = self._call_remote("about", self._controller.get_profile)
            trashed = self._trashed_usage()

            return Usage(
                total=profile.space_max,
                used=profile.space_used,
                free=profile.space_free,
                other=profile.space_not_computed,
                objects=documents_total_count(root),
                trashed=trashed,
            )

    def user_info(self) -> dict[str, str]:
        profile = self._call_remote("user info", self._controller.get_profile)
        return {
            "firstName": profile.first_name,
            "lastName": profile.last_name,
            "email": profile.email,
            "login": profile.login,
        }

    def public_link(
        self,
        remote: str,
        *,
        expire: Optional[timedelta] = None,
        unlink: bool = False,
    ) -> str:
        """
        Create (or with `unlink`, delete) a public share for the document at `remote`.

        Returns:
            The short URL of the share.
        """
        with self._lock.read_locked():
            self._tree.ensure_built()
            if unlink:
                return self._delete_public_link(remote)
            return self._create_public_link(remote, expire)

    # ----------------------------
    # Mutating APIs (exclusive lock)
    # ----------------------------
    def put(
        self,
        remote: str,
        content: Content,
        *,
        mime_type: Optional[str] = None,
    ) -> DocumentEntry:
        """
        Upload a document to `remote`, replacing any document of the same name.

        Notes:
            - The new document is created first, then the previous one is
              deleted. If that delete fails, the created entry is available in
              the raised error's `details["entry"]`.

        Raises:
            ConflictError: if several documents already carry that name.
        """
        remote = clean_path(remote)
        parent_path, base = split_path(remote)
        if not base:
            raise InvalidArgumentError("Can't upload to the root", details={"remote": remote})
        name = decode(base)

        with self._lock.write_locked():
            self._tree.ensure_built()
            parent = self._resolve(parent_path)

            if parent.children_named(name):
                logger.info("%s: found folder with the same name, ignoring it", remote)

            previous = [
                d.id for d in self._documents_in(parent, "put", parent_path) if d.name == name
            ]
            if len(previous) > 1:
                raise ConflictError(
                    f"put: found {len(previous)} documents named {name!r}",
                    details={"remote": remote, "document_ids": previous},
                )

            document = self._call_remote(
                "put: create document",
                self._controller.create_document,
                parent.id,
                name,
                content,
                mime_type=mime_type,
                details={"remote": remote, "parent_id": parent.id},
            )
            parent.document_count += 1
            entry = DocumentEntry(self, remote, document)

            if previous:
                self._call_remote(
                    "put: delete previous",
                    self._controller.delete,
                    document_ids=previous,
                    details={"remote": remote, "document_ids": previous, "entry": entry},
                )
                parent.document_count -= len(previous)

            return entry

    def remove_object(self, entry: Entry) -> None:
        """Trash a document and decrement its parent's cached count."""
        if entry.is_dir or not entry.has_id:
            raise UnsupportedEntryError(
                f"Can't remove {entry!r} as a document",
                details={"remote": entry.remote},
            )

        with self._lock.write_locked():
            self._call_remote(
                "remove",
                self._controller.trash,
                document_ids=[entry.id],
                details={"remote": entry.remote, "document_id": entry.id},
            )
            self._adjust_count("remove", entry.parent_remote, -1)

    def mkdir(self, dir: str) -> None:
        """Create the folder `dir`. Does nothing if it already exists."""
        dir = clean_path(dir)
        parent_path, base = split_path(dir)

        with self._lock.write_locked():
            self._tree.ensure_built()
            if not base:
                self._resolve(dir)
                return

            parent = self._resolve(parent_path)
            name = decode(base)
            if parent.children_named(name):
                return

            folder = self._call_remote(
                "mkdir",
                self._controller.create_folder,
                parent.id,
                name,
                details={"path": dir, "parent_id": parent.id},
            )
            parent.folders.append(folder)

    def rmdir(self, dir: str) -> None:
        """
        Remove the folder `dir` if it holds no documents.

        Raises:
            NotEmptyError: if any matching folder has documents (recursively).
            DirectoryNotFoundError: if no folder matches.
        """
        self._delete_folders(clean_path(dir), "rmdir", check_empty=True)

    def purge(self, dir: str) -> None:
        """Remove the folder `dir` and everything in it."""
        self._delete_folders(clean_path(dir), "purge", check_empty=False)

    def move(self, src: Entry, dst: str) -> DocumentEntry:
        """
        Server-side move of a document to `dst`.

        Notes:
            - A move call is issued only if the parent changes, a rename call
              only if the name changes.
        """
        document_id = _document_id(src, CantMoveError)
        self._check_same_fs(src, CantMoveError)

        dst = clean_path(dst)
        src_parent_path, src_base = split_path(src.remote)
        dst_parent_path, dst_base = split_path(dst)
        if not dst_base:
            raise CantMoveError("Can't move onto the root", details={"dst": dst})

        with self._lock.write_locked():
            self._tree.ensure_built()
            dst_parent = self._resolve_for(dst_parent_path, CantMoveError)

            if src_parent_path != dst_parent_path:
                self._call_remote(
                    "move",
                    self._controller.move,
                    dst_parent.id,
                    document_ids=[document_id],
                    details={"src": src.remote, "dst": dst, "document_id": document_id},
                )
                self._adjust_count("move", src_parent_path, -1)
                self._adjust_count("move", dst_parent_path, +1)

            document = _entry_document(src, dst_parent)
            if src_base != dst_base:
                document = self._call_remote(
                    "move: rename",
                    self._controller.rename_document,
                    document_id,
                    decode(dst_base),
                    details={"src": src.remote, "dst": dst, "document_id": document_id},
                )

            return DocumentEntry(self, dst, document)

    def copy(self, src: Entry, dst: str) -> DocumentEntry:
        """Server-side copy of a document to `dst`."""
        document_id = _document_id(src, CantCopyError)
        self._check_same_fs(src, CantCopyError)

        dst = clean_path(dst)
        src_parent_path, src_base = split_path(src.remote)
        dst_parent_path, dst_base = split_path(dst)
        if not dst_base:
            raise CantCopyError("Can't copy onto the root", details={"dst": dst})

        with self._lock.write_locked():
            self._tree.ensure_built()
            dst_parent = self._resolve_for(dst_parent_path, CantCopyError)

            copies = self._call_remote(
                "copy",
                self._controller.copy_documents,
                [document_id],
                details={"src": src.remote, "dst": dst, "document_id": document_id},
            )
            if len(copies) != 1:
                raise CantCopyError(
                    f"copy: expected 1 document, got {len(copies)}",
                    details={"src": src.remote, "document_id": document_id},
                )
            copied = copies[0]

            if src_parent_path != dst_parent_path:
                try:
                    self._controller.move(dst_parent.id, document_ids=[copied.id])
                except DigiposteFsError as exc:
                    # The copy stays next to its source.
                    self._adjust_count("copy", src_parent_path, +1)
                    raise _with_context(
                        exc,
                        "copy: move copy",
                        {"src": src.remote, "dst": dst, "document_id": copied.id},
                    ) from exc

            dst_parent.document_count += 1

            if src_base != dst_base:
                copied = self._call_remote(
                    "copy: rename",
                    self._controller.rename_document,
                    copied.id,
                    decode(dst_base),
                    details={"src": src.remote, "dst": dst, "document_id": copied.id},
                )

            return DocumentEntry(self, dst, copied)

    def dir_move(self, src_fs: Any, src_remote: str, dst_remote: str) -> None:
        """
        Server-side move of the folder `src_remote` of `src_fs` to `dst_remote`.

        Notes:
            - When `src_fs` is another instance on the same remote, both
              instances are locked exclusively (in a fixed order) and both
              tree caches are patched.

        Raises:
            CantDirMoveError: if `src_fs` is not this remote, the root is
                involved, or the folder would move under itself.
            DirectoryExistsError: if `dst_remote` is already taken.
            DirectoryNotFoundError: if the source folder doesn't exist.
        """
        if not isinstance(src_fs, DigiposteFs) or not self._same_remote(src_fs):
            raise CantDirMoveError(
                "Can't move directories across remotes",
                details={"src_fs": str(src_fs), "dst_fs": str(self)},
            )

        src_abs = src_fs.absolute_path(src_remote)
        dst_abs = self.absolute_path(dst_remote)
        src_parent_abs, src_base = split_path(src_abs)
        dst_parent_abs, dst_base = split_path(dst_abs)
        details = {"src": src_abs, "dst": dst_abs}

        if not src_base or not dst_base:
            raise CantDirMoveError("Can't move the root directory", details=details)
        if dst_abs == src_abs or dst_abs.startswith(src_abs + "/"):
            raise CantDirMoveError("Can't move a directory into itself", details=details)

        locks = [self._lock] if src_fs is self else sorted([self._lock, src_fs._lock], key=id)
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock.write_locked())

            self._tree.ensure_built()
            src_parent = self._tree.resolve_folder(src_parent_abs)
            matches = src_parent.children_named(decode(src_base))
            if not matches:
                raise DirectoryNotFoundError(f"Directory not found: {src_abs!r}", details=details)
            folder = matches[0]

            try:
                dst_parent = self._tree.resolve_folder(dst_parent_abs)
            except DirectoryNotFoundError as exc:
                raise CantDirMoveError(
                    f"Destination parent not found: {dst_parent_abs!r}",
                    details=details,
                    cause=exc,
                ) from exc

            if any(child is not folder for child in dst_parent.children_named(decode(dst_base))):
                raise DirectoryExistsError(f"Directory exists: {dst_abs!r}", details=details)

            # Other instances of this remote whose cache must follow the move.
            others = [src_fs] if src_fs is not self and src_fs.tree.is_built else []

            details["folder_id"] = folder.id
            if src_parent_abs != dst_parent_abs:
                self._call_remote(
                    "dir move",
                    self._controller.move,
                    dst_parent.id,
                    folder_ids=[folder.id],
                    details=details,
                )
                TreeCache.remove_child(src_parent, folder.id)
                TreeCache.remove_child(dst_parent, folder.id)
                dst_parent.folders.append(folder)
                for other in others:
                    other._relocate_folder(folder.id, src_parent_abs, dst_parent_abs)

            if src_base != dst_base:
                renamed = self._call_remote(
                    "dir move: rename",
                    self._controller.rename_folder,
                    folder.id,
                    decode(dst_base),
                    details=details,
                )
                folder.name = renamed.name or decode(dst_base)
                if renamed.updated_at is not None:
                    folder.updated_at = renamed.updated_at
                for other in others:
                    other._rename_folder(folder.id, dst_parent_abs, folder.name, folder.updated_at)

    def merge_dirs(self, dirs: Sequence[Entry]) -> None:
        """
        Move the contents of `dirs[1:]` into `dirs[0]`, then delete `dirs[1:]`.

        Notes:
            - All documents and child folders move in a single remote call.
            - The cache is patched on a best-effort basis; a flush gives exact
              counts back.
        """
        with self._lock.write_locked():
            self._tree.ensure_built()
            if len(dirs) < 2:
                return

            for entry in dirs:
                if not entry.is_dir or entry.fs is not self:
                    raise UnsupportedEntryError(
                        f"Can't merge {entry!r}: not a directory of {self}",
                        details={"remote": entry.remote},
                    )

            dest_entry, sources = dirs[0], list(dirs[1:])
            dest = self._resolve(dest_entry.remote)

            document_ids: list[str] = []
            folder_ids: list[str] = []
            merged: list[tuple[str, Folder]] = []
            for entry in sources:
                folder = self._resolve(entry.remote)
                merged.append((entry.remote, folder))
                folder_ids.extend(child.id for child in folder.folders)
                document_ids.extend(
                    d.id for d in self._documents_in(folder, "merge dirs", entry.remote)
                )

            details = {"dest": dest_entry.remote, "sources": [r for r, _ in merged]}
            self._call_remote(
                "merge dirs: move",
                self._controller.move,
                dest.id,
                document_ids=document_ids,
                folder_ids=folder_ids,
                details=details,
            )
            for _, folder in merged:
                dest.folders.extend(folder.folders)
                folder.folders = []
                folder.document_count = 0
            dest.document_count += len(document_ids)

            self._call_remote(
                "merge dirs: delete",
                self._controller.delete,
                folder_ids=[folder.id for _, folder in merged],
                details=details,
            )
            for remote, folder in merged:
                self._detach_folder("merge dirs", remote, folder)

    def clean_up(self) -> None:
        """Permanently delete everything in the trash."""
        documents = self._call_remote("clean up", self._controller.get_trashed_documents)
        folders = self._call_remote("clean up", self._controller.get_trashed_folders)
        if not documents and not folders:
            return

        self._call_remote(
            "clean up: delete",
            self._controller.delete,
            document_ids=[d.id for d in documents],
            folder_ids=[f.id for f in folders],
        )

    def dir_cache_flush(self) -> None:
        """Drop the tree cache; the next call rebuilds it."""
        with self._lock.write_locked():
            self._tree.flush()

    def disconnect(self) -> None:
        """Log the current session out."""
        self._call_remote("disconnect", self._controller.logout)

    # ----------------------------
    # Internals
    # ----------------------------
    def _resolve(self, remote: str) -> Folder:
        return self._tree.resolve_folder(self.absolute_path(remote))

    def _resolve_for(self, remote: str, error_type: type[DigiposteFsError]) -> Folder:
        try:
            return self._resolve(remote)
        except DirectoryNotFoundError as exc:
            raise error_type(
                f"Destination parent not found: {remote!r}",
                details={"path": remote},
                cause=exc,
            ) from exc

    def _find_document(self, remote: str) -> DocumentEntry:
        remote = clean_path(remote)
        parent_path, base = split_path(remote)
        if not base:
            raise IsDirectoryError("The root is a directory", details={"remote": remote})

        try:
            folder = self._resolve(parent_path)
        except DirectoryNotFoundError as exc:
            raise ObjectNotFoundError(
                f"Object not found: {remote!r}",
                details={"remote": remote, "parent": parent_path},
                cause=exc,
            ) from exc

        name = decode(base)
        for document in self._documents_in(folder, "new object", parent_path):
            if document.name == name:
                return DocumentEntry(self, remote, document)

        if folder.children_named(name):
            raise IsDirectoryError(f"Is a directory: {remote!r}", details={"remote": remote})

        raise ObjectNotFoundError(f"Object not found: {remote!r}", details={"remote": remote})

    def _documents_in(self, folder: Folder, operation: str, path: str) -> list[Document]:
        details = {"path": path, "folder_id": folder.id}
        if not folder.id:
            return self._call_remote(
                f"{operation}: list documents",
                self._controller.list_documents,
                details=details,
            )
        return self._call_remote(
            f"{operation}: search in {folder.name!r}",
            self._controller.search_documents,
            folder.id,
            details=details,
        )

    def _delete_folders(self, dir: str, operation: str, *, check_empty: bool) -> None:
        parent_path, base = split_path(dir)
        if not base:
            raise InvalidArgumentError(f"{operation}: can't remove the root", details={"path": dir})

        with self._lock.write_locked():
            self._tree.ensure_built()
            parent = self._resolve(parent_path)
            matches = parent.children_named(decode(base))
            if not matches:
                raise DirectoryNotFoundError(f"Directory not found: {dir!r}", details={"path": dir})

            if len(matches) > 1:
                logger.info(
                    "%s: found %d folders with the same name, deleting all",
                    dir,
                    len(matches),
                )

            if check_empty:
                for folder in matches:
                    count = documents_total_count(folder)
                    if count > 0:
                        raise NotEmptyError(
                            f"Directory not empty: {dir!r}",
                            details={"path": dir, "folder_id": folder.id, "documents": count},
                        )

            for folder in matches:
                self._call_remote(
                    operation,
                    self._controller.delete,
                    folder_ids=[folder.id],
                    details={"path": dir, "folder_id": folder.id},
                )
                TreeCache.remove_child(parent, folder.id)

    def _create_public_link(self, remote: str, expire: Optional[timedelta]) -> str:
        remote = clean_path(remote)
        parent_path, base = split_path(remote)
        try:
            folder = self._resolve(parent_path)
        except DirectoryNotFoundError as exc:
            raise ObjectNotFoundError(
                f"Object not found: {remote!r}",
                details={"remote": remote},
                cause=exc,
            ) from exc

        name = decode(base)
        if folder.children_named(name):
            logger.error("%s: can't create public link for folder", remote)

        document_ids = [
            d.id for d in self._documents_in(folder, "public link", parent_path) if d.name == name
        ]
        if not document_ids:
            raise ObjectNotFoundError(f"Object not found: {remote!r}", details={"remote": remote})

        start_date = now_utc()
        end_date = start_date + expire if expire is not None else None

        share = self._call_remote(
            "public link: create share",
            self._controller.create_share,
            start_date,
            end_date,
            name,
            details={"remote": remote},
        )
        self._call_remote(
            "public link: add to share",
            self._controller.set_share_documents,
            share.id,
            document_ids,
            details={"remote": remote, "share_id": share.id},
        )
        return share.short_url

    def _delete_public_link(self, remote: str) -> str:
        name = decode(split_path(remote)[1])
        shares = self._call_remote("public link: list shares", self._controller.list_shares_with_documents)

        found: list[str] = []
        for share in shares:
            if share.title != name:
                continue
            if any(document.name != name for document in share.documents):
                continue

            self._call_remote(
                "public link: delete share",
                self._controller.delete_share,
                share.id,
                details={"remote": remote, "share_id": share.id},
            )
            found.append(share.short_url)

        if not found:
            raise NotFoundError(f"No share found for {remote!r}", details={"remote": remote})
        if len(found) > 1:
            logger.info("%s: found %d shares, deleted all", remote, len(found))
        return found[0]

    def _trashed_usage(self) -> int:
        documents = self._call_remote("about: trashed documents", self._controller.get_trashed_documents)
        total = sum(d.size for d in documents)

        folders = self._call_remote("about: trashed folders", self._controller.get_trashed_folders)
        for folder in folders:
            total += FolderEntry(
                self,
                join_path(TRASH_DIR_NAME, encode(folder.name)),
                folder,
                trashed=True,
            ).size()
        return total

    def _adjust_count(self, operation: str, remote_dir: str, delta: int) -> None:
        try:
            folder = self._resolve(remote_dir)
        except (DirectoryNotFoundError, InvalidStateError) as exc:
            self._advise(operation, remote_dir, f"failed to update cache: {exc}")
            return
        folder.document_count += delta

    def _relocate_folder(self, folder_id: str, src_parent_abs: str, dst_parent_abs: str) -> None:
        """Mirror a folder move made by another instance. Caller holds our write lock."""
        try:
            src_parent = self._tree.resolve_folder(src_parent_abs)
            dst_parent = self._tree.resolve_folder(dst_parent_abs)
        except DirectoryNotFoundError as exc:
            self._advise("dir move", src_parent_abs, f"failed to update cache: {exc}")
            return

        nodes = [child for child in src_parent.folders if child.id == folder_id]
        TreeCache.remove_child(src_parent, folder_id)
        TreeCache.remove_child(dst_parent, folder_id)
        dst_parent.folders.extend(nodes[:1])

    def _rename_folder(
        self,
        folder_id: str,
        parent_abs: str,
        name: str,
        updated_at: Any,
    ) -> None:
        try:
            parent = self._tree.resolve_folder(parent_abs)
        except DirectoryNotFoundError as exc:
            self._advise("dir move: rename", parent_abs, f"failed to update cache: {exc}")
            return

        for child in parent.folders:
            if child.id == folder_id:
                child.name = name
                if updated_at is not None:
                    child.updated_at = updated_at

    def _detach_folder(self, operation: str, remote: str, folder: Folder) -> None:
        parent_path = split_path(remote)[0]
        try:
            parent = self._resolve(parent_path)
        except (DirectoryNotFoundError, InvalidStateError) as exc:
            self._advise(operation, parent_path, f"failed to update cache: {exc}")
            return
        TreeCache.remove_child(parent, folder.id)

    def _advise(self, operation: str, path: str, message: str) -> None:
        warning = CacheSyncWarning(operation=operation, path=path, message=message)
        self._sync_warnings.append(warning)
        logger.warning("%s: %s: %s", path or "/", operation, message)

    def _check_same_fs(self, src: Entry, error_type: type[DigiposteFsError]) -> None:
        if src.fs is not self:
            raise error_type(
                f"{src!r} belongs to another filesystem",
                details={"remote": src.remote, "src_fs": str(src.fs), "dst_fs": str(self)},
            )

    def _same_remote(self, other: DigiposteFs) -> bool:
        return other is self or (
            other.name == self.name and other.config.api_url == self.config.api_url
        )

    def _call_remote(
        self,
        operation: str,
        func: Callable[..., T],
        *args: Any,
        details: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> T:
        try:
            return func(*args, **kwargs)
        except DigiposteFsError as exc:
            raise _with_context(exc, operation, details or {}) from exc


def _with_context(
    exc: DigiposteFsError,
    operation: str,
    details: dict[str, Any],
) -> DigiposteFsError:
    """Re-create `exc` with the operation name and identifiers attached."""
    return type(exc)(
        f"{operation}: {exc}",
        details={**exc.details, **details, "operation": operation},
        cause=exc,
    )


def _document_id(src: Entry, error_type: type[DigiposteFsError]) -> str:
    if src.is_dir or not src.has_id:
        raise error_type(
            f"Unsupported object {src!r}: only documents can be moved or copied",
            details={"remote": src.remote},
        )
    return src.id


def _entry_document(src: Entry, dst_parent: Folder) -> Document:
    if isinstance(src, DocumentEntry):
        return replace(src.document, folder_id=dst_parent.id or None)
    return Document(id=src.id, name=decode(split_path(src.remote)[1]), folder_id=dst_parent.id or None)
