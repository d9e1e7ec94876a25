"""
Base database models and utilities.

This module provides the foundational database components shared by every
model an application declares with appdb. All tables derive from ``Base`` so
that ``Base.metadata`` describes the complete schema for ``create_all`` and
for Alembic autogeneration.
"""

from __future__ import annotations

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def is_table_model(model_type: object) -> bool:
    """Return True if ``model_type`` is a SQLModel class mapped to a table."""
    return isinstance(model_type, type) and issubclass(model_type, SQLModel) and hasattr(model_type, "__table__")
