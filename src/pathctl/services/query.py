"""QueryService — read-only retrieval of points, projects, and paths.

Three surfaces using engine.connect() (no write transaction):
- get_point: one point with its projected item ordering and lifecycle state,
  optionally as a delta fetch (``updated_after``)
- get_project: project record with its ordered member point ids
- get_path: a project's points plus every edge touching them
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pathctl.domain.errors import ErrorCode, PathError
from pathctl.domain.ids import parse_id
from pathctl.domain.lifecycle import can_delete, compute_point_state
from pathctl.services._helpers import normalize_since
from pathctl.services.base import BaseService
from pathctl.services.constraints import translating
from pathctl.services.result import ServiceResult
from pathctl.services.telemetry import trace_span, traced


class QueryService(BaseService):
    """Handles point, project, and path retrieval."""

    # ------------------------------------------------------------------
    # get_point: single point, optionally a delta fetch
    # ------------------------------------------------------------------

    @traced
    async def get_point(
        self,
        point_id: object,
        *,
        updated_after: str | datetime | None = None,
    ) -> ServiceResult:
        """Retrieve a point with ``item_ids``, ``state`` and ``deletable``.

        With *updated_after*, ``data["point"]`` is None when the point has
        not changed since that instant; a missing point is still an error.
        """
        op = "get_point"
        try:
            pid = parse_id(point_id, "point_id")
            try:
                since = normalize_since(updated_after)
            except ValueError as exc:
                raise PathError(
                    ErrorCode.INVALID_INPUT, field="updated_after", value=updated_after
                ) from exc

            with translating():
                async with self._store.read() as txn:
                    if not await txn.points.exists_by_id(pid):
                        raise PathError(ErrorCode.POINT_NOT_FOUND, point=pid)
                    rows = await txn.points.find_full_by_ids([pid], updated_after=since)
                    degree = await txn.edges.count_incident(pid)
        except PathError as exc:
            return self._failure(op, exc)

        point: dict[str, Any] | None = None
        if rows:
            point = rows[0]
            state = compute_point_state(True, degree)
            point["state"] = str(state)
            point["degree"] = degree
            point["deletable"] = can_delete(state) and not point["item_ids"]
        return self._success(op, {"point": point, "updated_after": since})

    # ------------------------------------------------------------------
    # get_project: project record and members
    # ------------------------------------------------------------------

    @traced
    async def get_project(self, project_id: object) -> ServiceResult:
        op = "get_project"
        try:
            pid = parse_id(project_id, "project_id")
            with translating():
                async with self._store.read() as txn:
                    project = await txn.projects.find_by_id(pid)
                    if project is None:
                        raise PathError(ErrorCode.PROJECT_NOT_FOUND, project=pid)
                    point_ids = await txn.projects.find_point_ids_by_project_id(pid)
        except PathError as exc:
            return self._failure(op, exc)

        return self._success(op, {"project": {**project, "point_ids": point_ids}})

    # ------------------------------------------------------------------
    # get_path: points and edges of one project
    # ------------------------------------------------------------------

    @traced
    async def get_path(self, project_id: object) -> ServiceResult:
        """Return the project's points and the edges incident to any of them.

        Edges may lead to points outside the project; those ids are listed
        under ``external_point_ids``.
        """
        op = "get_path"
        try:
            pid = parse_id(project_id, "project_id")
            with translating():
                async with self._store.read() as txn:
                    if not await txn.projects.exists_by_id(pid):
                        raise PathError(ErrorCode.PROJECT_NOT_FOUND, project=pid)
                    point_ids = await txn.projects.find_point_ids_by_project_id(pid)
                    with trace_span("load_points"):
                        point_rows = await txn.points.find_full_by_ids(point_ids)
                    with trace_span("load_edges"):
                        edge_rows = await txn.edges.find_all_by_point_id_in(point_ids)
        except PathError as exc:
            return self._failure(op, exc)

        members = set(point_ids)
        external = sorted(
            {e["origin_id"] for e in edge_rows} | {e["destination_id"] for e in edge_rows}
        )
        return self._success(
            op,
            {
                "project_id": pid,
                "points": point_rows,
                "edges": edge_rows,
                "external_point_ids": [p for p in external if p not in members],
                "count": {"points": len(point_rows), "edges": len(edge_rows)},
            },
        )
