"""Error types for the appdb package.

Defines a small hierarchy of exceptions raised by the table registry and the
configuration holder. Errors raised by SQLAlchemy or Alembic are never wrapped
in these types; they reach the caller unmodified.
"""

from __future__ import annotations


class AppDbError(Exception):
    """Base error for all appdb exceptions."""


class TableNotFoundError(AppDbError, KeyError):
    """Raised when a table name was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Table not registered: '{name}'")
        self.name = name

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0])


class DuplicateTableError(AppDbError, ValueError):
    """Raised when a name is already mapped to another model under the error policy."""

    def __init__(self, name: str, existing: type, requested: type) -> None:
        super().__init__(
            f"Table '{name}' is already registered to {existing.__name__}; refusing to remap it to {requested.__name__}"
        )
        self.name = name
        self.existing = existing
        self.requested = requested


class ConfigurationError(AppDbError):
    """Raised when the database location is not configured."""


class ConfigurationLockedError(ConfigurationError):
    """Raised when the configuration is modified after a context was built from it."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Configuration is locked; '{field}' cannot be changed after the database context is created")
        self.field = field
