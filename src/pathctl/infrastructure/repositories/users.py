"""User records (creator references for points and projects)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select

from pathctl.infrastructure.database.schema import users

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection


class UserRepository:
    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def insert(
        self,
        *,
        email: str,
        now: str,
        name: str | None = None,
        avatar: str | None = None,
    ) -> int:
        result = await self._conn.execute(
            insert(users).values(
                email=email,
                name=name,
                avatar=avatar,
                created_at=now,
                updated_at=now,
            )
        )
        return int(result.inserted_primary_key[0])

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        row = (
            (await self._conn.execute(select(users).where(users.c.email == email)))
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    async def find_by_id(self, user_id: int) -> dict[str, Any] | None:
        row = (
            (await self._conn.execute(select(users).where(users.c.id == user_id)))
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None
