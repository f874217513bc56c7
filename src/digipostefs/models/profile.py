"""Account profile and usage models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Profile:
    """Account profile: quota figures, offer subscription date and user info."""

    space_max: int = 0
    space_used: int = 0
    space_free: int = 0
    space_not_computed: int = 0
    subscription_date: Optional[datetime] = None

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    login: str = ""


@dataclass(slots=True)
class Usage:
    """Quota report returned by DigiposteFs.about()."""

    total: int
    used: int
    free: int
    other: int
    objects: int
    trashed: int
