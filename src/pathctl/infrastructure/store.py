"""GraphStore — repository access with transaction coordination.

The GraphStore is the single dependency injected into every service. It
owns the async database engine, the graph engine, and the pair locks.

- **DB**: Native SQLAlchemy ``engine.begin()``: commit on success,
  rollback on any exception, including task cancellation. Write
  transactions open with ``BEGIN IMMEDIATE``, so at most one runs at a time
  and a check made inside one still holds when it commits.
- **Graph**: Cache is invalidated on transaction end (success or failure).
- **Pair locks**: In-process ``asyncio.Lock`` per unordered point pair.
  Operations on the same pair queue here, in the event loop, instead of
  holding a pooled connection while SQLite's busy handler waits.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pathctl.infrastructure.database.engine import IMMEDIATE, init_database
from pathctl.infrastructure.graph.engine import GraphEngine
from pathctl.infrastructure.repositories import (
    EdgeRepository,
    PointRepository,
    ProjectRepository,
    UserRepository,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

    from pathctl.config.settings import PathSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# StoreTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class StoreTransaction:
    """Active transaction with repositories bound to its connection."""

    conn: AsyncConnection
    points: PointRepository = field(init=False)
    edges: EdgeRepository = field(init=False)
    projects: ProjectRepository = field(init=False)
    users: UserRepository = field(init=False)

    def __post_init__(self) -> None:
        self.points = PointRepository(self.conn)
        self.edges = EdgeRepository(self.conn)
        self.projects = ProjectRepository(self.conn)
        self.users = UserRepository(self.conn)


# ---------------------------------------------------------------------------
# Pair locks
# ---------------------------------------------------------------------------


@dataclass
class _PairLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    waiters: int = 0


class PairLocks:
    """Registry of locks keyed by unordered point pairs.

    Entries are dropped once nobody holds or waits on them, so the registry
    only grows with concurrency, not with graph size.
    """

    def __init__(self) -> None:
        self._locks: dict[frozenset[int], _PairLock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, a: int, b: int) -> AsyncIterator[None]:
        key = frozenset((a, b))
        entry = self._locks.setdefault(key, _PairLock())
        entry.waiters += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.waiters -= 1
            if entry.waiters == 0:
                self._locks.pop(key, None)


# ---------------------------------------------------------------------------
# GraphStore
# ---------------------------------------------------------------------------


class GraphStore:
    """Repository encapsulating database and graph access.

    Construct with :meth:`open`; services receive the store via their
    :class:`BaseService` constructor.
    """

    def __init__(self, engine: AsyncEngine, settings: PathSettings) -> None:
        self._engine = engine
        self._writer = engine.execution_options(**{IMMEDIATE: True})
        self._settings = settings
        self._graph = GraphEngine(engine)
        self._pair_locks = PairLocks()

    @classmethod
    async def open(cls, settings: PathSettings) -> GraphStore:
        """Initialize the database under ``settings.root`` and return a store."""
        engine = await init_database(
            settings.root,
            filename=settings.database.filename,
            busy_timeout_ms=settings.database.busy_timeout_ms,
            echo=settings.database.echo,
        )
        return cls(engine, settings)

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def graph(self) -> GraphEngine:
        """The graph engine (lazy-built from committed edges)."""
        return self._graph

    @property
    def settings(self) -> PathSettings:
        return self._settings

    @property
    def pair_locks(self) -> PairLocks:
        return self._pair_locks

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreTransaction]:
        """One atomic unit of work.

        Everything executed through the yielded :class:`StoreTransaction`
        commits together when the block exits normally and rolls back
        together when it raises or the task is cancelled.

        Usage::

            async with store.transaction() as txn:
                point_id = await txn.points.insert(title="A", created_user=1, now=now)
                await txn.edges.insert(origin_id, point_id, now=now)
        """
        try:
            async with self._writer.begin() as conn:
                yield StoreTransaction(conn)
        finally:
            self._graph.invalidate()

    @asynccontextmanager
    async def pair_lock(self, a: int, b: int) -> AsyncIterator[None]:
        """Hold the lock for the unordered pair ``{a, b}``.

        No-op when ``graph.pair_locking`` is disabled.
        """
        if not self._settings.graph.pair_locking:
            yield
            return
        async with self._pair_locks.hold(a, b):
            yield

    @asynccontextmanager
    async def read(self) -> AsyncIterator[StoreTransaction]:
        """Read-only access on one snapshot, outside any write transaction."""
        async with self._engine.connect() as conn:
            yield StoreTransaction(conn)
