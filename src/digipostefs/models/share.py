"""Public share model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .document import Document


@dataclass(slots=True)
class Share:
    id: str
    title: str
    short_url: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    documents: list[Document] = field(default_factory=list)
