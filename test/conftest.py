from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator

import pytest
from dotenv import load_dotenv

# Load dotenv files early so settings models see test overrides
TEST_ROOT = Path(__file__).resolve().parent
load_dotenv(TEST_ROOT / ".env", override=False)

from appdb.core.config import AppDbConfig
from appdb.core.database.context import AppDbContext
from appdb.core.database.registry import TableRegistry
from appdb.core.database.utils import drop_all
from support.models import REVISIONS_DIR


@pytest.fixture(autouse=True)
def _isolate_appdb_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's APPDB_* variables out of the tests."""
    monkeypatch.delenv("APPDB_DB_DIRECTORY", raising=False)
    monkeypatch.delenv("APPDB_DB_NAME", raising=False)


@pytest.fixture
def db_config(tmp_path: Path) -> AppDbConfig:
    """Configuration pointing at a fresh database file under tmp_path."""
    return AppDbConfig(db_directory=str(tmp_path), db_name="test.db")


@pytest.fixture
def registry() -> TableRegistry:
    return TableRegistry()


@pytest.fixture
async def db(db_config: AppDbConfig, registry: TableRegistry) -> AsyncGenerator[AppDbContext, None]:
    """Context over a file database whose tables come from Base.metadata."""
    context = AppDbContext(db_config, registry, echo=False)
    await context.ensure_created()
    try:
        yield context
    finally:
        await drop_all(context.engine)
        await context.dispose()


@pytest.fixture
async def migrated_db(db_config: AppDbConfig, registry: TableRegistry) -> AsyncGenerator[AppDbContext, None]:
    """Context whose schema is left to the test's Alembic calls."""
    context = AppDbContext(db_config, registry, echo=False, version_locations=[REVISIONS_DIR])
    try:
        yield context
    finally:
        await context.dispose()
