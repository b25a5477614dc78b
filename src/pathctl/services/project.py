"""ProjectService — thin aggregation of points into projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pathctl.domain.errors import ErrorCode, PathError
from pathctl.domain.ids import parse_id
from pathctl.services._helpers import now_iso
from pathctl.services.base import BaseService
from pathctl.services.constraints import ConstraintKind, ConstraintRule, translating
from pathctl.services.result import ServiceResult
from pathctl.services.telemetry import traced

if TYPE_CHECKING:
    from pathctl.infrastructure.store import StoreTransaction

logger = logging.getLogger(__name__)


async def attach_point(txn: StoreTransaction, project_id: int, point_id: int, *, now: str) -> None:
    """Add *point_id* to *project_id* and refresh the project timestamp.

    Runs inside the caller's transaction, which has already checked that the
    project exists. A missing point surfaces as ``POINT_NOT_FOUND`` through
    the membership foreign key.
    """
    with translating(
        ConstraintRule(
            ErrorCode.POINT_NOT_FOUND,
            ("foreign key",),
            kind=ConstraintKind.FOREIGN_KEY,
            params={"point": point_id},
        ),
    ):
        await txn.projects.add_point(project_id, point_id)
    await txn.projects.touch(project_id, now=now)


class ProjectService(BaseService):
    """Creates projects and tracks which points belong to them."""

    @traced
    async def create_project(self, user_id: object) -> ServiceResult:
        op = "create_project"
        now = now_iso()
        try:
            owner = parse_id(user_id, "user_id")
            with translating(
                ConstraintRule(
                    ErrorCode.USER_NOT_FOUND,
                    ("foreign key",),
                    kind=ConstraintKind.FOREIGN_KEY,
                    params={"user": owner},
                ),
            ):
                async with self._store.transaction() as txn:
                    project_id = await txn.projects.insert(created_user=owner, now=now)
        except PathError as exc:
            return self._failure(op, exc)

        logger.info("Created project %d", project_id)
        return self._success(
            op,
            {"project_id": project_id, "created_user": owner, "created_at": now},
        )

    async def is_project_exists(self, project_id: int) -> bool:
        async with self._store.read() as txn:
            return await txn.projects.exists_by_id(project_id)

    @traced
    async def add_point_to_project(self, project_id: object, point_id: object) -> ServiceResult:
        """Attach an existing point; re-adding a member only refreshes the project."""
        op = "add_point_to_project"
        now = now_iso()
        try:
            pid = parse_id(project_id, "project_id")
            point = parse_id(point_id, "point_id")
            with translating():
                async with self._store.transaction() as txn:
                    if not await txn.projects.exists_by_id(pid):
                        raise PathError(ErrorCode.PROJECT_NOT_FOUND, project=pid)
                    await attach_point(txn, pid, point, now=now)
        except PathError as exc:
            return self._failure(op, exc)

        return self._success(op, {"project_id": pid, "point_id": point, "updated_at": now})

    async def find_point_ids_by_project_id(self, project_id: int) -> list[int]:
        async with self._store.read() as txn:
            return await txn.projects.find_point_ids_by_project_id(project_id)
