"""Point repository — point records and their projected item ordering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update

from pathctl.infrastructure.database.schema import point_items, points

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection


class PointRepository:
    """Encapsulates SQL for point records within one connection."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def find_by_id(self, point_id: int) -> dict[str, Any] | None:
        row = (
            (await self._conn.execute(select(points).where(points.c.id == point_id)))
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    async def exists_by_id(self, point_id: int) -> bool:
        row = (await self._conn.execute(select(points.c.id).where(points.c.id == point_id))).first()
        return row is not None

    async def exists_by_id_in(self, point_ids: Iterable[int]) -> bool:
        """True when every id in *point_ids* refers to an existing point."""
        wanted = set(point_ids)
        if not wanted:
            return True
        count = (
            await self._conn.execute(
                select(func.count(points.c.id)).where(points.c.id.in_(wanted))
            )
        ).scalar_one()
        return int(count) == len(wanted)

    async def insert(
        self,
        *,
        title: str,
        created_user: int | None,
        now: str,
        summary: str | None = None,
    ) -> int:
        """Insert a point and return its assigned id."""
        result = await self._conn.execute(
            insert(points).values(
                title=title,
                summary=summary,
                created_user=created_user,
                created_at=now,
                updated_at=now,
                summary_at=now if summary is not None else None,
            )
        )
        return int(result.inserted_primary_key[0])

    async def update(self, point_id: int, **values: Any) -> int:
        """Update columns of one point. Returns the affected row count."""
        result = await self._conn.execute(
            update(points).where(points.c.id == point_id).values(**values)
        )
        return result.rowcount

    async def delete_by_id(self, point_id: int) -> int:
        """Delete one point. Returns the affected row count.

        Raises the driver's integrity error while edges or items still
        reference the point.
        """
        result = await self._conn.execute(delete(points).where(points.c.id == point_id))
        return result.rowcount

    async def find_full_by_ids(
        self,
        point_ids: Iterable[int],
        *,
        updated_after: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch points with their ordered ``item_ids`` projection.

        When *updated_after* is given, only points modified strictly later
        are returned.
        """
        wanted = sorted(set(point_ids))
        if not wanted:
            return []

        stmt = select(points).where(points.c.id.in_(wanted)).order_by(points.c.id)
        if updated_after is not None:
            stmt = stmt.where(points.c.updated_at > updated_after)
        rows = [dict(r) for r in (await self._conn.execute(stmt)).mappings().all()]
        if not rows:
            return []

        item_rows = await self._conn.execute(
            select(point_items.c.point_id, point_items.c.item_id)
            .where(point_items.c.point_id.in_([r["id"] for r in rows]))
            .order_by(point_items.c.point_id, point_items.c.position)
        )
        items: dict[int, list[int]] = {}
        for point_id, item_id in item_rows:
            items.setdefault(point_id, []).append(item_id)

        for row in rows:
            row["item_ids"] = items.get(row["id"], [])
        return rows

    async def find_all_ids(self) -> list[int]:
        result = await self._conn.execute(select(points.c.id).order_by(points.c.id))
        return [row.id for row in result]

    async def add_item(self, point_id: int, item_id: int, position: int) -> None:
        """Record a dependent item at *position* in the point's ordering."""
        await self._conn.execute(
            insert(point_items).values(point_id=point_id, item_id=item_id, position=position)
        )
