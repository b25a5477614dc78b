"""GraphEngine — lazy-built NetworkX graph from SQLite points and edges.

Built from committed state on first use and dropped whenever a store
transaction ends, so it never reflects half-applied mutations.
Used by read-side audits; the mutation path relies on the bounded SQL
reachability query instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

import networkx as nx
from sqlalchemy import select

from pathctl.infrastructure.database.schema import edges, points

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

_Graph: TypeAlias = nx.DiGraph


class GraphEngine:
    """Lazy-loading graph engine backed by SQLite edge data."""

    def __init__(self, db: AsyncEngine) -> None:
        self._db = db
        self._graph: _Graph | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of invalidations so far."""
        return self._generation

    async def graph(self) -> _Graph:
        """Return the graph, building from DB on first access.

        A build that overlaps :meth:`invalidate` is returned to its caller
        but not cached; the next call rebuilds.
        """
        if self._graph is not None:
            return self._graph
        generation = self._generation
        g = await self._build_from_db()
        if generation == self._generation:
            self._graph = g
        return g

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._generation += 1
        self._graph = None

    async def _build_from_db(self) -> _Graph:
        """Build a DiGraph: all points first (isolated ones included), then edges.

        Both selects share one read transaction, so nodes and edges come
        from the same snapshot.
        """
        g: _Graph = nx.DiGraph()
        async with self._db.begin() as conn:
            for row in await conn.execute(select(points.c.id, points.c.title)):
                g.add_node(row.id, title=row.title)

            for row in await conn.execute(select(edges)):
                g.add_edge(row.origin_id, row.destination_id, created_at=row.created_at)
        return g
