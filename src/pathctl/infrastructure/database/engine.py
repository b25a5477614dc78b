"""Async database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode for concurrent reads, foreign
keys for referential integrity, ACID transactions for atomic mutations.
The DB is stored at {root}/.pathctl/pathctl.db.

The driver's own deferred BEGIN (sent only before the first write) is
switched off; SQLAlchemy's ``begin`` event emits the BEGIN instead, so a
transaction covers its reads too. Connections carrying the
:data:`IMMEDIATE` execution option start with ``BEGIN IMMEDIATE`` and hold
the database write lock from their first statement, which serialises
writers across tasks and processes alike.

SQLAlchemy Core (not ORM) over the asyncio extension: every store call is
awaited on the aiosqlite driver, so callers suspend without holding a
worker thread of their own.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pathctl.infrastructure.database.schema import metadata

logger = logging.getLogger(__name__)

DATA_DIRNAME = ".pathctl"
IMMEDIATE = "pathctl_begin_immediate"


def create_db_engine(
    db_path: Path,
    *,
    busy_timeout_ms: int = 5000,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        echo=echo,
        connect_args={"timeout": busy_timeout_ms / 1000.0},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn: Any) -> None:
        if conn.get_execution_options().get(IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


async def init_database(
    root: Path,
    *,
    filename: str = "pathctl.db",
    busy_timeout_ms: int = 5000,
    echo: bool = False,
) -> AsyncEngine:
    """Initialize the pathctl database at ``{root}/.pathctl/{filename}``.

    Creates the data directory and all tables from :data:`schema.metadata`.
    Idempotent: safe to call on an existing database.

    Returns the engine ready for use.
    """
    data_dir = root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    db_path = data_dir / filename
    engine = create_db_engine(db_path, busy_timeout_ms=busy_timeout_ms, echo=echo)

    async with engine.execution_options(**{IMMEDIATE: True}).begin() as conn:
        await conn.run_sync(metadata.create_all)

    logger.debug("Initialized database at %s", db_path)
    return engine
