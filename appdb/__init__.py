"""
appdb: declare SQLModel tables, get an embedded SQLite database for free.

The public surface re-exported here is what a desktop application normally
needs: the configuration holder, the database context, the table registry and
the error types.
"""

from appdb.core.config import AppDbConfig, Settings, settings
from appdb.core.database import (
    AppDbContext,
    AsyncRepository,
    Base,
    DuplicatePolicy,
    TableMapping,
    TableRegistry,
)
from appdb.core.errors import (
    AppDbError,
    ConfigurationError,
    ConfigurationLockedError,
    DuplicateTableError,
    TableNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "AppDbConfig",
    "AppDbContext",
    "AppDbError",
    "AsyncRepository",
    "Base",
    "ConfigurationError",
    "ConfigurationLockedError",
    "DuplicatePolicy",
    "DuplicateTableError",
    "Settings",
    "TableMapping",
    "TableNotFoundError",
    "TableRegistry",
    "settings",
]
