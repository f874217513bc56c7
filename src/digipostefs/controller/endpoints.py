"""Endpoint paths of the Digiposte API (relative to the configured API URL)."""

from __future__ import annotations

FOLDERS: str = "/v3/folders"
FOLDERS_TRASHED: str = "/v3/folders/trashed"
FOLDER: str = "/v3/folder"
FOLDER_RENAME: str = "/v3/folder/{folder_id}/rename"

DOCUMENTS: str = "/v3/documents"
DOCUMENTS_SEARCH: str = "/v3/documents/search"
DOCUMENTS_TRASHED: str = "/v3/documents/trashed"
DOCUMENTS_COPY: str = "/v3/documents/copy"
DOCUMENT: str = "/v3/document"
DOCUMENT_RENAME: str = "/v3/document/{document_id}/rename"
DOCUMENT_CONTENT: str = "/v3/document/{document_id}/content"

TREE_MOVE: str = "/v3/file/tree/move"
TREE_DELETE: str = "/v3/file/tree/delete"
TREE_TRASH: str = "/v3/file/tree/trash"

PROFILE: str = "/v3/profile"
PROFILE_MODE_DEFAULT: str = "default"

SHARE: str = "/v3/share"
SHARE_ITEM: str = "/v3/share/{share_id}"
SHARE_DOCUMENTS: str = "/v3/share/{share_id}/documents"
SHARES_WITH_DOCUMENTS: str = "/v3/shares/documents"

LOGOUT: str = "/v3/logout"

DOCUMENT_TYPE_BASIC: str = "basic"
