"""Edge repository — directed edges and the bounded reachability query."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, literal, or_, select

from pathctl.infrastructure.database.schema import edges

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection


class EdgeRepository:
    """Encapsulates SQL for edge records within one connection."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def find_by_origin_and_destination(
        self, origin_id: int, destination_id: int
    ) -> dict[str, Any] | None:
        row = (
            (
                await self._conn.execute(
                    select(edges).where(
                        edges.c.origin_id == origin_id,
                        edges.c.destination_id == destination_id,
                    )
                )
            )
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    async def insert(self, origin_id: int, destination_id: int, *, now: str) -> dict[str, Any]:
        """Insert one edge and return it as a record dict."""
        result = await self._conn.execute(
            insert(edges).values(origin_id=origin_id, destination_id=destination_id, created_at=now)
        )
        return {
            "id": int(result.inserted_primary_key[0]),
            "origin_id": origin_id,
            "destination_id": destination_id,
            "created_at": now,
        }

    async def delete_by_origin_and_destination(self, origin_id: int, destination_id: int) -> int:
        """Delete the edge for an ordered pair. Returns the affected row count."""
        result = await self._conn.execute(
            delete(edges).where(
                edges.c.origin_id == origin_id,
                edges.c.destination_id == destination_id,
            )
        )
        return result.rowcount

    async def exists_path_within_depth(self, origin_id: int, destination_id: int, depth: int) -> bool:
        """Whether *destination_id* is reachable from *origin_id* in at most *depth* hops.

        Recursive CTE seeded with the origin's outgoing edges and extended one
        hop per iteration until *depth*. Terminates on cyclic data too, since
        the depth column bounds the recursion.
        """
        if depth < 1:
            return False

        seed = select(
            edges.c.origin_id.label("start_id"),
            edges.c.destination_id.label("reached_id"),
            literal(1).label("depth"),
        ).where(edges.c.origin_id == origin_id)
        paths = seed.cte("paths", recursive=True)

        step = (
            select(paths.c.start_id, edges.c.destination_id, paths.c.depth + 1)
            .select_from(paths.join(edges, paths.c.reached_id == edges.c.origin_id))
            .where(paths.c.depth < depth)
        )
        paths = paths.union_all(step)

        stmt = select(literal(1)).select_from(paths).where(paths.c.reached_id == destination_id).limit(1)
        return (await self._conn.execute(stmt)).first() is not None

    async def find_all_by_point_id_in(self, point_ids: Iterable[int]) -> list[dict[str, Any]]:
        """All edges with either endpoint in *point_ids*."""
        wanted = sorted(set(point_ids))
        if not wanted:
            return []
        stmt = (
            select(edges)
            .where(or_(edges.c.origin_id.in_(wanted), edges.c.destination_id.in_(wanted)))
            .order_by(edges.c.id)
        )
        return [dict(r) for r in (await self._conn.execute(stmt)).mappings().all()]

    async def count_incident(self, point_id: int) -> int:
        stmt = select(func.count(edges.c.id)).where(
            or_(edges.c.origin_id == point_id, edges.c.destination_id == point_id)
        )
        return int((await self._conn.execute(stmt)).scalar_one())
