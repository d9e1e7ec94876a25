"""
Alembic call-through helpers.

Schema creation and upgrade are Alembic's job; this module only builds the
``alembic.config.Config`` that points Alembic at appdb's migration environment
(``appdb/core/database/migration_env/env.py``, targeting ``Base.metadata``) and at
the application's own revision directories.

The command helpers are synchronous and take a SQLAlchemy ``Connection`` so
they can be passed to ``AsyncConnection.run_sync``. Alembic errors reach the
caller unmodified.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import Script
from sqlalchemy.engine import Connection

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_LOCATION = Path(__file__).resolve().parent / "migration_env"

PathLike = Union[str, Path]


def build_alembic_config(
    database_url: str,
    script_location: Optional[PathLike] = None,
    version_locations: Optional[Iterable[PathLike]] = None,
    model_modules: Optional[Iterable[str]] = None,
) -> Config:
    """Build an in-memory Alembic configuration.

    Args:
        database_url: SQLAlchemy URL of the target database
        script_location: Migration environment directory; appdb's packaged
            environment when omitted
        version_locations: Directories holding the application's revision files
        model_modules: Modules the environment imports before comparing
            metadata, so that autogenerate sees every declared model

    Returns:
        Alembic ``Config`` ready for ``alembic.command`` calls
    """
    config = Config()
    config.set_main_option("script_location", str(script_location or DEFAULT_SCRIPT_LOCATION))
    # ConfigParser interpolation treats "%" specially
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    config.set_main_option("path_separator", "os")
    if version_locations:
        config.set_main_option("version_locations", os.pathsep.join(str(p) for p in version_locations))
    if model_modules:
        config.set_main_option("model_modules", " ".join(model_modules))
    return config


def upgrade(connection: Connection, config: Config, revision: str = "head") -> None:
    """Apply pending revisions up to ``revision`` on an open connection."""
    config.attributes["connection"] = connection
    logger.info("Upgrading database schema to '%s'", revision)
    command.upgrade(config, revision)


def downgrade(connection: Connection, config: Config, revision: str) -> None:
    """Revert revisions down to ``revision`` on an open connection."""
    config.attributes["connection"] = connection
    logger.info("Downgrading database schema to '%s'", revision)
    command.downgrade(config, revision)


def current_revision(connection: Connection) -> Optional[str]:
    """Revision recorded in the database, or None for an unversioned schema."""
    return MigrationContext.configure(connection).get_current_revision()


def make_revision(
    connection: Connection,
    config: Config,
    message: str,
    *,
    autogenerate: bool = True,
    version_path: Optional[PathLike] = None,
) -> List[Script]:
    """Write a new revision file.

    With ``autogenerate`` Alembic compares ``Base.metadata`` against the live
    schema reachable through ``connection`` and renders the difference.

    Returns:
        The scripts Alembic generated
    """
    config.attributes["connection"] = connection
    result = command.revision(
        config,
        message=message,
        autogenerate=autogenerate,
        version_path=str(version_path) if version_path is not None else None,
    )
    if result is None:
        return []
    scripts = result if isinstance(result, list) else [result]
    for script in scripts:
        logger.info("Generated revision %s: %s", script.revision, script.path)
    return scripts
