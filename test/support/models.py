"""Table models declared the way an application using appdb declares them."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from sqlmodel import Field

from appdb.core.database.base import Base

REVISIONS_DIR = Path(__file__).resolve().parent / "revisions"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base, table=True):
    """A user note. Table: notes"""

    __tablename__ = "notes"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200, index=True)
    body: str = Field(default="")
    pinned: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utc_now)

    def __repr__(self) -> str:
        return f"Note(id={self.id}, title={self.title})"


class Tag(Base, table=True):
    """A label attached to notes. Table: tags"""

    __tablename__ = "tags"
    __registry_name__ = "Labels"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=64, unique=True)


class KnownTables(Enum):
    """Model kinds known when the application is written."""

    Notes = Note
    Tags = Tag
