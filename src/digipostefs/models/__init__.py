"""Public model exports for digipostefs."""

from __future__ import annotations

from .document import NORMAL_LOCATIONS, TRASH_DIR_NAME, TRASH_LOCATIONS, Document, Location
from .folder import Folder
from .profile import Profile, Usage
from .results import CacheSyncWarning
from .share import Share

__all__ = [
    "Folder",
    "Document",
    "Location",
    "NORMAL_LOCATIONS",
    "TRASH_LOCATIONS",
    "TRASH_DIR_NAME",
    "Profile",
    "Usage",
    "Share",
    "CacheSyncWarning",
]
