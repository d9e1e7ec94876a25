"""
Database context: the composition root of an appdb application.

An ``AppDbContext`` is built once from an ``AppDbConfig``. It owns the async
engine, the session factory and the ``TableRegistry``, and exposes the
engine's capabilities the rest of the application needs:

- collection handles per model class (``collection``) or per registered name
  (``table``)
- sessions and transactions
- schema creation (``ensure_created``) and Alembic migrations (``migrate``)

Every one of those calls goes straight to SQLAlchemy or Alembic; errors they
raise are not wrapped.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Type, Union

from alembic.config import Config
from alembic.script import Script
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from appdb.core.config import AppDbConfig, settings
from appdb.core.monitoring import instrument_engine, log_migration

from . import migrations
from .base import is_table_model
from .registry import TableRegistry
from .repositories.base import AsyncRepository, EntityType
from .utils import create_all, create_engine, create_sessionmaker

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AppDbContext:
    """
    Engine handle for one embedded database file.

    Constructing the context reads ``config.database_url`` and locks the
    config; later assignments to it raise ``ConfigurationLockedError``. The
    database directory must already exist before the first statement runs.

    Usage::

        config = AppDbConfig(db_directory=str(app_dir), db_name="notes.db")
        async with AppDbContext(config, version_locations=[migrations_dir]) as db:
            db.registry.register_table("Notes", Note)
            await db.migrate()
            notes = db.table("Notes")
            await notes.add(Note(title="hello"))
    """

    def __init__(
        self,
        config: AppDbConfig,
        registry: Optional[TableRegistry] = None,
        *,
        echo: Optional[bool] = None,
        script_location: Optional[PathLike] = None,
        version_locations: Optional[Iterable[PathLike]] = None,
        model_modules: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Initialize the context.

        Args:
            config: Location of the database file.
            registry: Table registry to use; a new empty one when omitted.
            echo: Echo emitted SQL; defaults to ``APPDB_ECHO_SQL``.
            script_location: Alembic environment directory; appdb's packaged
                environment when omitted.
            version_locations: Directories holding the application's revisions.
            model_modules: Modules to import before autogenerating revisions.

        Raises:
            ConfigurationError: If the directory or file name is not set.
        """
        self.database_url = config.database_url
        config.lock()
        self.config = config
        self.registry = registry if registry is not None else TableRegistry()

        self._script_location = script_location
        self._version_locations: List[PathLike] = list(version_locations or [])
        self._model_modules: List[str] = list(model_modules or [])

        self.engine: AsyncEngine = create_engine(self.database_url, echo=settings.echo_sql if echo is None else echo)
        self.session_factory: async_sessionmaker[AsyncSession] = create_sessionmaker(self.engine)
        self._collections: Dict[Type[Any], AsyncRepository[Any]] = {}

        instrument_engine(self.engine)
        logger.info("Database context created for %s", config.connection_target)

    # =====================================================================
    # Sessions and Transactions
    # =====================================================================

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a plain session; the caller decides when to commit."""
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session inside a transaction.

        The transaction commits when the block exits normally and rolls back
        when it raises; the exception is re-raised.
        """
        async with self.session_factory() as session:
            async with session.begin():
                yield session

    # =====================================================================
    # Collections
    # =====================================================================

    def collection(self, model_type: Type[EntityType]) -> AsyncRepository[EntityType]:
        """
        Collection handle for a model class.

        Args:
            model_type: A SQLModel class declared with ``table=True``.

        Returns:
            The handle for ``model_type``; the same object on repeated calls.

        Raises:
            TypeError: If ``model_type`` is not a mapped table class.
        """
        if not is_table_model(model_type):
            name = getattr(model_type, "__name__", repr(model_type))
            raise TypeError(f"{name} is not a mapped SQLModel table")
        repo = self._collections.get(model_type)
        if repo is None:
            repo = self._collections.setdefault(model_type, AsyncRepository(self.session_factory, model_type))
        return repo

    def table(self, name: str) -> AsyncRepository[Any]:
        """
        Collection handle for a registered table name.

        Raises:
            TableNotFoundError: If ``name`` is not registered.
        """
        return self.registry.get_collection(self, name)

    # =====================================================================
    # Schema
    # =====================================================================

    async def ensure_created(self) -> None:
        """Create every table declared on ``Base.metadata`` that does not exist yet."""
        await create_all(self.engine)

    def alembic_config(self) -> Config:
        """Alembic configuration bound to this context's database and revisions."""
        return migrations.build_alembic_config(
            self.database_url,
            script_location=self._script_location,
            version_locations=self._version_locations,
            model_modules=self._model_modules,
        )

    async def migrate(self, revision: str = "head") -> None:
        """Apply pending Alembic revisions up to ``revision``."""
        config = self.alembic_config()
        async with self.engine.begin() as conn:
            await conn.run_sync(migrations.upgrade, config, revision)
        log_migration(self.config.connection_target, revision, "upgrade")

    async def downgrade(self, revision: str) -> None:
        """Revert Alembic revisions down to ``revision``."""
        config = self.alembic_config()
        async with self.engine.begin() as conn:
            await conn.run_sync(migrations.downgrade, config, revision)
        log_migration(self.config.connection_target, revision, "downgrade")

    async def current_revision(self) -> Optional[str]:
        """Revision currently recorded in the database file."""
        async with self.engine.connect() as conn:
            return await conn.run_sync(migrations.current_revision)

    async def make_revision(
        self,
        message: str,
        *,
        autogenerate: bool = True,
        version_path: Optional[PathLike] = None,
    ) -> List[Script]:
        """Generate a revision file, comparing models against this database when autogenerating."""
        config = self.alembic_config()
        async with self.engine.connect() as conn:
            return await conn.run_sync(
                migrations.make_revision,
                config,
                message,
                autogenerate=autogenerate,
                version_path=version_path,
            )

    # =====================================================================
    # Lifecycle
    # =====================================================================

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()

    async def __aenter__(self) -> "AppDbContext":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.dispose()

    def __repr__(self) -> str:
        return f"AppDbContext(database={self.config.connection_target!r}, tables={self.registry.names()})"
