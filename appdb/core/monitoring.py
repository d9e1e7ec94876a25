"""
Monitoring and Tracing Configuration Module.

This module provides optional integration with Pydantic Logfire for tracing
the database work an application does through appdb:
- SQL statements issued by the SQLAlchemy engine
- Schema migrations applied through Alembic

Tracing is off unless ``APPDB_MONITORING__LOGFIRE_ENABLED`` is true and a
token is configured. Monitoring failures are logged and never interrupt
database work.
"""

import logging
from typing import Optional

import logfire
from sqlalchemy.ext.asyncio import AsyncEngine

from appdb.core.config import MonitoringConfig, settings

logger = logging.getLogger(__name__)

_configured = False


def initialize_logfire(config: Optional[MonitoringConfig] = None) -> bool:
    """
    Configure Logfire once per process.

    Args:
        config: Monitoring settings; the package settings when omitted.

    Returns:
        True if Logfire is configured and ready to receive traces.
    """
    global _configured
    cfg = config or settings.monitoring

    if not cfg.logfire_enabled:
        logger.debug("Logfire monitoring is disabled. Set APPDB_MONITORING__LOGFIRE_ENABLED=true to enable.")
        return False

    if not cfg.logfire_token:
        logger.warning(
            "Logfire is enabled but no token is set. "
            "Set APPDB_MONITORING__LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    if _configured:
        return True

    try:
        logfire.configure(
            token=cfg.logfire_token,
            service_name=cfg.logfire_service_name,
            environment=cfg.logfire_environment,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    _configured = True
    logger.info(
        f"Logfire monitoring initialized: service={cfg.logfire_service_name}, environment={cfg.logfire_environment}"
    )
    return True


def instrument_engine(engine: AsyncEngine, config: Optional[MonitoringConfig] = None) -> bool:
    """
    Trace every statement the given engine executes.

    Args:
        engine: The context's async engine.
        config: Monitoring settings; the package settings when omitted.

    Returns:
        True if the engine was instrumented.
    """
    cfg = config or settings.monitoring
    if not cfg.logfire_trace_sqlalchemy or not initialize_logfire(cfg):
        return False

    try:
        logfire.instrument_sqlalchemy(engine=engine.sync_engine)
    except Exception as e:
        logger.warning(f"Failed to instrument SQLAlchemy: {e}")
        return False

    logger.info("Logfire: SQLAlchemy instrumentation enabled")
    return True


def log_migration(database: str, revision: str, direction: str) -> None:
    """
    Record a schema migration.

    Args:
        database: Connection target of the migrated database
        revision: Target revision identifier
        direction: ``upgrade`` or ``downgrade``
    """
    if not _configured:
        return
    try:
        logfire.info("Schema migration applied", database=database, revision=revision, direction=direction)
    except Exception:
        logger.debug(f"Could not log migration to Logfire: revision={revision}")
