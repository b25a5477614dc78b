"""Project records and point membership."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from pathctl.infrastructure.database.schema import project_points, projects

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection


class ProjectRepository:
    """Encapsulates SQL for projects and the project/point join table."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def insert(self, *, created_user: int | None, now: str) -> int:
        result = await self._conn.execute(
            insert(projects).values(created_user=created_user, created_at=now, updated_at=now)
        )
        return int(result.inserted_primary_key[0])

    async def exists_by_id(self, project_id: int) -> bool:
        row = (
            await self._conn.execute(select(projects.c.id).where(projects.c.id == project_id))
        ).first()
        return row is not None

    async def find_by_id(self, project_id: int) -> dict[str, Any] | None:
        row = (
            (await self._conn.execute(select(projects).where(projects.c.id == project_id)))
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    async def add_point(self, project_id: int, point_id: int) -> None:
        """Insert a membership row; re-adding an existing member is a no-op."""
        stmt = (
            sqlite_insert(project_points)
            .values(project_id=project_id, point_id=point_id)
            .on_conflict_do_nothing(index_elements=["project_id", "point_id"])
        )
        await self._conn.execute(stmt)

    async def touch(self, project_id: int, *, now: str) -> int:
        result = await self._conn.execute(
            update(projects).where(projects.c.id == project_id).values(updated_at=now)
        )
        return result.rowcount

    async def find_point_ids_by_project_id(self, project_id: int) -> list[int]:
        result = await self._conn.execute(
            select(project_points.c.point_id)
            .where(project_points.c.project_id == project_id)
            .order_by(project_points.c.point_id)
        )
        return [row.point_id for row in result]
