"""Unit tests for the configuration models.

Tests verify that AppDbConfig builds the connection target the way the engine
expects it, enforces its set-once lifecycle, and that Settings binds the
APPDB_* environment variables.
"""

import os

import pytest

from appdb.core.config import AppDbConfig, MonitoringConfig, Settings
from appdb.core.errors import ConfigurationError, ConfigurationLockedError


class TestConnectionTarget:
    """Test directory + file name concatenation."""

    def test_separator_inserted_when_missing(self):
        config = AppDbConfig(db_directory="/data/app", db_name="app.db")
        assert config.connection_target == "/data/app" + os.sep + "app.db"

    @pytest.mark.parametrize("directory", ["/data/app/", "/data/app" + os.sep])
    def test_no_double_separator(self, directory):
        config = AppDbConfig(db_directory=directory, db_name="app.db")
        assert config.connection_target == directory + "app.db"

    def test_database_url_uses_async_sqlite_driver(self):
        config = AppDbConfig(db_directory="/data/app/", db_name="app.db")
        assert config.database_url == "sqlite+aiosqlite:////data/app/app.db"

    def test_missing_directory_raises(self):
        config = AppDbConfig(db_name="app.db")
        with pytest.raises(ConfigurationError, match="db_directory"):
            _ = config.connection_target

    def test_missing_name_raises(self):
        config = AppDbConfig(db_directory="/data/app", db_name="")
        with pytest.raises(ConfigurationError, match="db_name"):
            _ = config.database_url

    def test_directory_is_not_created(self, tmp_path):
        target = tmp_path / "not-there"
        config = AppDbConfig(db_directory=str(target), db_name="app.db")

        assert config.connection_target.startswith(str(target))
        assert not target.exists()


class TestLocking:
    """Test the settable-until-first-use lifecycle."""

    def test_fields_are_settable_before_lock(self):
        config = AppDbConfig()
        config.db_directory = "/data/app"
        config.db_name = "other.db"

        assert config.locked is False
        assert config.connection_target.endswith("other.db")

    def test_assignment_after_lock_raises(self):
        config = AppDbConfig(db_directory="/data/app", db_name="app.db")
        config.lock()

        with pytest.raises(ConfigurationLockedError) as exc_info:
            config.db_directory = "/elsewhere"

        assert exc_info.value.field == "db_directory"
        assert config.db_directory == "/data/app"

    def test_lock_is_idempotent(self):
        config = AppDbConfig(db_directory="/data/app")
        config.lock()
        config.lock()
        assert config.locked is True

    def test_locked_error_is_a_configuration_error(self):
        config = AppDbConfig(db_directory="/data/app")
        config.lock()
        with pytest.raises(ConfigurationError):
            config.db_name = "x.db"


class TestEnvironmentBinding:
    """Test environment variable binding."""

    def test_app_db_config_reads_environment(self, monkeypatch):
        monkeypatch.setenv("APPDB_DB_DIRECTORY", "/env/dir")
        monkeypatch.setenv("APPDB_DB_NAME", "env.db")

        config = AppDbConfig()
        assert config.db_directory == "/env/dir"
        assert config.db_name == "env.db"

    def test_constructor_values_win_over_environment(self, monkeypatch):
        monkeypatch.setenv("APPDB_DB_NAME", "env.db")
        config = AppDbConfig(db_name="explicit.db")
        assert config.db_name == "explicit.db"

    def test_default_name(self):
        assert AppDbConfig().db_name == "app.db"

    def test_settings_defaults(self, monkeypatch):
        for key in list(os.environ):
            if key.startswith("APPDB_"):
                monkeypatch.delenv(key)

        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_format == "detailed"
        assert settings.enable_file_logging is False
        assert settings.echo_sql is False
        assert settings.monitoring == MonitoringConfig()

    def test_settings_bind_prefixed_and_nested_variables(self, monkeypatch):
        monkeypatch.setenv("APPDB_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("APPDB_ECHO_SQL", "true")
        monkeypatch.setenv("APPDB_MONITORING__LOGFIRE_ENABLED", "true")
        monkeypatch.setenv("APPDB_MONITORING__LOGFIRE_SERVICE_NAME", "notes-app")

        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.echo_sql is True
        assert settings.monitoring.logfire_enabled is True
        assert settings.monitoring.logfire_service_name == "notes-app"
