"""
Database layer for appdb.

This package wraps SQLAlchemy (through SQLModel), the aiosqlite driver and
Alembic so that applications declare tables and get persistence.

Structure:
- base.py: ``Base`` class every table model derives from
- registry.py: name to model lookup for dynamic collection access
- context.py: ``AppDbContext``, the engine handle and composition root
- repositories/: generic collection handle over one model class
- migrations.py: Alembic call-through helpers
- migration_env/: Alembic environment targeting ``Base.metadata``
- utils.py: engine and session factory helpers
"""

from .base import Base, is_table_model
from .context import AppDbContext
from .registry import DuplicatePolicy, TableMapping, TableRegistry
from .repositories import AsyncRepository
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    drop_all,
)

__all__ = [
    "AppDbContext",
    "AsyncRepository",
    "Base",
    "DuplicatePolicy",
    "TableMapping",
    "TableRegistry",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "drop_all",
    "is_table_model",
]
