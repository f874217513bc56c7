"""In-memory stand-in for DigiposteController used by the filesystem tests."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

from digipostefs.errors import NotFoundError
from digipostefs.models import (
    NORMAL_LOCATIONS,
    TRASH_LOCATIONS,
    Document,
    Folder,
    Location,
    Profile,
    Share,
)

DT = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeController:
    """
    Minimal remote store: folders and documents keyed by id.

    Notes:
        - `calls` records (method, args...) tuples in order.
        - `fail[method] = exc` makes the next calls of `method` raise `exc`.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail: dict[str, Exception] = {}
        self._ids = itertools.count(1)

        # id -> {"name", "parent", "trashed"}
        self.folders: dict[str, dict] = {}
        # id -> Document (folder_id "" means the account root)
        self.documents: dict[str, Document] = {}
        self.contents: dict[str, bytes] = {}
        self.shares: dict[str, Share] = {}
        self.profile = Profile(
            space_max=1000,
            space_used=100,
            space_free=900,
            space_not_computed=5,
            subscription_date=DT,
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            login="jdoe",
        )

    # ----------------------------
    # Seeding helpers
    # ----------------------------
    def add_folder(self, name: str, parent_id: str = "") -> str:
        folder_id = f"F{next(self._ids)}"
        self.folders[folder_id] = {"name": name, "parent": parent_id, "trashed": False}
        return folder_id

    def add_document(
        self,
        name: str,
        folder_id: str = "",
        content: bytes = b"data",
        *,
        location: Location = Location.SAFE,
        mime_type: str = "text/plain",
        user_tags: list[str] | None = None,
    ) -> str:
        document_id = f"D{next(self._ids)}"
        self.documents[document_id] = Document(
            id=document_id,
            name=name,
            size=len(content),
            mime_type=mime_type,
            created_at=DT,
            location=location.value,
            user_tags=list(user_tags or []),
            folder_id=folder_id,
        )
        self.contents[document_id] = content
        return document_id

    def names_in(self, folder_id: str) -> list[str]:
        return sorted(d.name for d in self._docs_in(folder_id, NORMAL_LOCATIONS))

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    # ----------------------------
    # Controller API
    # ----------------------------
    def list_folders(self) -> list[Folder]:
        self._record("list_folders")
        return self._folder_nodes("")

    def list_documents(self) -> list[Document]:
        self._record("list_documents")
        return self._docs_in("", NORMAL_LOCATIONS)

    def search_documents(self, parent_id, *, locations=None) -> list[Document]:
        self._record("search_documents", parent_id, tuple(locations or ()))
        return self._docs_in(parent_id, tuple(locations or NORMAL_LOCATIONS))

    def get_profile(self) -> Profile:
        self._record("get_profile")
        return self.profile

    def create_folder(self, parent_id, name) -> Folder:
        self._record("create_folder", parent_id, name)
        folder_id = self.add_folder(name, parent_id)
        return Folder(id=folder_id, name=name, created_at=DT, updated_at=DT)

    def rename_folder(self, folder_id, name) -> Folder:
        self._record("rename_folder", folder_id, name)
        self._folder(folder_id)["name"] = name
        return Folder(id=folder_id, name=name, created_at=DT, updated_at=DT)

    def create_document(self, parent_id, name, content, *, mime_type=None) -> Document:
        self._record("create_document", parent_id, name)
        payload = content if isinstance(content, bytes) else content.read()
        document_id = self.add_document(
            name,
            parent_id,
            payload,
            mime_type=mime_type or "application/octet-stream",
        )
        return _copy(self.documents[document_id])

    def rename_document(self, document_id, name) -> Document:
        self._record("rename_document", document_id, name)
        document = self._document(document_id)
        document.name = name
        return _copy(document)

    def move(self, dest_parent_id, document_ids=None, folder_ids=None) -> None:
        self._record("move", dest_parent_id, tuple(document_ids or ()), tuple(folder_ids or ()))
        for document_id in document_ids or ():
            self._document(document_id).folder_id = dest_parent_id
        for folder_id in folder_ids or ():
            self._folder(folder_id)["parent"] = dest_parent_id

    def copy_documents(self, document_ids) -> list[Document]:
        self._record("copy_documents", tuple(document_ids))
        copies = []
        for document_id in document_ids:
            source = self._document(document_id)
            new_id = self.add_document(
                source.name,
                source.folder_id or "",
                self.contents[document_id],
                mime_type=source.mime_type,
                user_tags=source.user_tags,
            )
            copies.append(_copy(self.documents[new_id]))
        return copies

    def delete(self, document_ids=None, folder_ids=None) -> None:
        self._record("delete", tuple(document_ids or ()), tuple(folder_ids or ()))
        for document_id in document_ids or ():
            self._document(document_id)
            del self.documents[document_id]
        for folder_id in folder_ids or ():
            self._delete_folder(folder_id)

    def trash(self, document_ids=None, folder_ids=None) -> None:
        self._record("trash", tuple(document_ids or ()), tuple(folder_ids or ()))
        for document_id in document_ids or ():
            document = self._document(document_id)
            document.location = (
                Location.TRASH_INBOX.value
                if document.location == Location.INBOX.value
                else Location.TRASH_SAFE.value
            )
        for folder_id in folder_ids or ():
            self._folder(folder_id)["trashed"] = True

    def document_content(self, document_id) -> tuple[bytes, str]:
        self._record("document_content", document_id)
        document = self._document(document_id)
        return self.contents[document_id], f"{document.mime_type}; charset=utf-8"

    def get_trashed_documents(self) -> list[Document]:
        self._record("get_trashed_documents")
        return [
            _copy(d)
            for d in self.documents.values()
            if d.location in {loc.value for loc in TRASH_LOCATIONS}
        ]

    def get_trashed_folders(self) -> list[Folder]:
        self._record("get_trashed_folders")
        return [
            Folder(id=folder_id, name=data["name"], folders=self._folder_nodes(folder_id, True))
            for folder_id, data in self.folders.items()
            if data["trashed"]
        ]

    def create_share(self, start_date, end_date, title, security_code="") -> Share:
        self._record("create_share", title, end_date)
        share_id = f"S{next(self._ids)}"
        share = Share(
            id=share_id,
            title=title,
            short_url=f"https://dgpt.fr/{share_id}",
            start_date=start_date,
            end_date=end_date,
        )
        self.shares[share_id] = share
        return share

    def set_share_documents(self, share_id, document_ids) -> None:
        self._record("set_share_documents", share_id, tuple(document_ids))
        self.shares[share_id].documents = [_copy(self._document(i)) for i in document_ids]

    def list_shares_with_documents(self) -> list[Share]:
        self._record("list_shares_with_documents")
        return list(self.shares.values())

    def delete_share(self, share_id) -> None:
        self._record("delete_share", share_id)
        self.shares.pop(share_id)

    def logout(self) -> None:
        self._record("logout")

    # ----------------------------
    # Internals
    # ----------------------------
    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if method in self.fail:
            raise self.fail[method]

    def _folder(self, folder_id: str) -> dict:
        if folder_id not in self.folders:
            raise NotFoundError("folder not found", details={"folder_id": folder_id})
        return self.folders[folder_id]

    def _document(self, document_id: str) -> Document:
        if document_id not in self.documents:
            raise NotFoundError("document not found", details={"document_id": document_id})
        return self.documents[document_id]

    def _docs_in(self, folder_id: str, locations) -> list[Document]:
        wanted = {Location(loc).value for loc in locations}
        return [
            _copy(d)
            for d in self.documents.values()
            if (d.folder_id or "") == folder_id and d.location in wanted
        ]

    def _folder_nodes(self, parent_id: str, include_trashed: bool = False) -> list[Folder]:
        nodes = []
        for folder_id, data in self.folders.items():
            if data["parent"] != parent_id:
                continue
            if data["trashed"] and not include_trashed:
                continue
            nodes.append(
                Folder(
                    id=folder_id,
                    name=data["name"],
                    created_at=DT,
                    updated_at=DT,
                    folders=self._folder_nodes(folder_id, include_trashed),
                    document_count=len(self._docs_in(folder_id, NORMAL_LOCATIONS)),
                )
            )
        return nodes

    def _delete_folder(self, folder_id: str) -> None:
        self._folder(folder_id)
        for child_id in [i for i, d in self.folders.items() if d["parent"] == folder_id]:
            self._delete_folder(child_id)
        for document_id in [i for i, d in self.documents.items() if d.folder_id == folder_id]:
            del self.documents[document_id]
        del self.folders[folder_id]


def _copy(document: Document) -> Document:
    return Document(
        id=document.id,
        name=document.name,
        size=document.size,
        mime_type=document.mime_type,
        created_at=document.created_at,
        location=document.location,
        user_tags=list(document.user_tags),
        folder_id=document.folder_id,
    )
