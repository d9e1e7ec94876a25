"""
Configuration Settings.

This module defines the package configuration using Pydantic's BaseSettings.
Values are loaded from environment variables and the ``.env`` file without
explicit dotenv loading.

Two models live here:

- ``AppDbConfig``: where the embedded database file lives. Read once, when an
  ``AppDbContext`` is built from it, and locked from then on.
- ``Settings``: ambient knobs (logging, SQL echo, monitoring) shared by the
  whole package.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from appdb.core.errors import ConfigurationError, ConfigurationLockedError

SQLITE_ASYNC_SCHEME = "sqlite+aiosqlite"


# =====================================================================
# Database Location
# =====================================================================


class AppDbConfig(BaseSettings):
    """
    Location of the embedded database file.

    ``db_directory`` and ``db_name`` are concatenated into the connection target
    handed to the engine. The directory must already exist; nothing here creates
    or validates it beyond checking that both values are set.

    The holder is settable until ``lock()`` is called, which happens when an
    ``AppDbContext`` is constructed from it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )

    db_directory: str = Field(
        default="",
        alias="APPDB_DB_DIRECTORY",
        description="Absolute folder path holding the database file",
    )
    db_name: str = Field(
        default="app.db",
        alias="APPDB_DB_NAME",
        description="File name of the embedded database file",
    )

    _locked: bool = PrivateAttr(default=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_") and self._locked:
            raise ConfigurationLockedError(name)
        super().__setattr__(name, value)

    @property
    def locked(self) -> bool:
        """Whether the configuration has been read by a database context."""
        return self._locked

    def lock(self) -> None:
        """Freeze ``db_directory`` and ``db_name``. Idempotent."""
        self._locked = True

    @property
    def connection_target(self) -> str:
        """
        File-system path of the database file.

        Returns:
            ``db_directory`` followed by ``db_name``, with a separator inserted
            only when the directory does not already end with one.

        Raises:
            ConfigurationError: If either value is empty.
        """
        if not self.db_directory:
            raise ConfigurationError("db_directory is not set")
        if not self.db_name:
            raise ConfigurationError("db_name is not set")

        directory = self.db_directory
        if not directory.endswith(("/", os.sep)):
            directory += os.sep
        return directory + self.db_name

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the async SQLite driver."""
        return f"{SQLITE_ASYNC_SCHEME}:///{self.connection_target}"


# =====================================================================
# Ambient Settings
# =====================================================================


class MonitoringConfig(BaseModel):
    """Logfire tracing configuration."""

    logfire_enabled: bool = Field(default=False, description="Send traces to Logfire")
    logfire_token: str = Field(default="", description="Logfire write token")
    logfire_service_name: str = Field(default="appdb", description="Service name reported to Logfire")
    logfire_environment: str = Field(default="development", description="Deployment environment label")
    logfire_trace_sqlalchemy: bool = Field(default=True, description="Instrument the SQLAlchemy engine")


class Settings(BaseSettings):
    """
    Package settings model.

    All properties are bound from ``APPDB_``-prefixed environment variables and
    the ``.env`` file. Nested groups use a double underscore, for example
    ``APPDB_MONITORING__LOGFIRE_ENABLED=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix="APPDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to <log_file_dir>/appdb.log",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo every SQL statement the engine emits",
    )

    monitoring: MonitoringConfig = Field(
        default_factory=MonitoringConfig,
        description="Logfire monitoring configuration",
    )


settings = Settings()
