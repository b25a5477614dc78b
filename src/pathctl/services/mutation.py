"""GraphMutationService — create, connect, split, disconnect, update, delete.

Every operation is one atomic unit: validation errors fail before any store
access, each store failure is translated to a stable :class:`ErrorCode`, and
any error rolls the whole transaction back.

Each unit runs in a ``BEGIN IMMEDIATE`` transaction, so the reachability
check and the insert it guards see no interleaved writer. Operations that
add edges between existing points first queue on the pair lock of every
endpoint pair they touch.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING, Any

from pathctl.domain.creation import CreationMode, SingleEdge, SplitEdge, Standalone
from pathctl.domain.errors import ErrorCode, PathError
from pathctl.domain.ids import normalize_summary, normalize_title, parse_id, parse_point_pair
from pathctl.services._helpers import now_iso
from pathctl.services.base import BaseService
from pathctl.services.constraints import ConstraintKind, ConstraintRule, translating
from pathctl.services.project import attach_point
from pathctl.services.reachability import ReachabilityValidator
from pathctl.services.result import ServiceResult
from pathctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pathctl.infrastructure.store import StoreTransaction

logger = logging.getLogger(__name__)

_NOT_DELETABLE_REASON = "point should be empty. move or delete all edges and items"


# ── Translation rules ────────────────────────────────────────────────


def _point_rules(title: str, user_id: int | None) -> tuple[ConstraintRule, ...]:
    return (
        ConstraintRule(
            ErrorCode.POINT_NAME_DUPLICATED,
            ("points.title",),
            kind=ConstraintKind.UNIQUE,
            params={"title": title},
        ),
        ConstraintRule(
            ErrorCode.NULL_INPUT,
            ("points.title",),
            kind=ConstraintKind.NOT_NULL,
            params={"fields": "title"},
        ),
        ConstraintRule(
            ErrorCode.USER_NOT_FOUND,
            ("foreign key",),
            kind=ConstraintKind.FOREIGN_KEY,
            params={"user": user_id},
        ),
    )


def _edge_rules(origin_id: int, destination_id: int) -> tuple[ConstraintRule, ...]:
    return (
        ConstraintRule(
            ErrorCode.EDGE_ALREADY_EXISTS,
            ("edges.origin_id", "edges.destination_id"),
            kind=ConstraintKind.UNIQUE,
            params={"origin": origin_id, "destination": destination_id},
        ),
        ConstraintRule(
            ErrorCode.NON_EXISTENT_POINTS,
            ("foreign key",),
            kind=ConstraintKind.FOREIGN_KEY,
            params={"points": [origin_id, destination_id]},
        ),
        ConstraintRule(
            ErrorCode.SAME_POINTS,
            ("ck_edges_distinct",),
            kind=ConstraintKind.CHECK,
            params={"point": origin_id},
        ),
    )


def _edge_data(edge: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": edge["id"],
        "origin_id": edge["origin_id"],
        "destination_id": edge["destination_id"],
    }


class GraphMutationService(BaseService):
    """Point and edge mutations under the bounded acyclicity invariant."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    async def create_point(
        self,
        project_id: object,
        user_id: object,
        title: str | None,
        mode: CreationMode | None = None,
        *,
        summary: str | None = None,
    ) -> ServiceResult:
        """Create a point in *project_id* using one of three creation modes.

        ``Standalone`` stores the point alone. ``SingleEdge`` links it to one
        existing point. ``SplitEdge`` inserts it into ``origin -> destination``,
        which yields the same edge set as creating the point and then calling
        :meth:`split_edge`.
        """
        op = "create_point"
        mode = mode if mode is not None else Standalone()
        now = now_iso()
        try:
            clean_title = normalize_title(title)
            project = parse_id(project_id, "project_id")
            user = parse_id(user_id, "user_id")
            pairs: tuple[tuple[int, int], ...] = ()
            if isinstance(mode, SplitEdge):
                pairs = (parse_point_pair(mode.origin_id, mode.destination_id),)
            elif isinstance(mode, SingleEdge):
                parse_id(mode.existing_point_id, "existing_point_id")

            async with self._lock_pairs(*pairs), self._unit() as txn:
                if not await txn.projects.exists_by_id(project):
                    raise PathError(ErrorCode.PROJECT_NOT_FOUND, project=project)

                if isinstance(mode, SingleEdge) and not await txn.points.exists_by_id(
                    mode.existing_point_id
                ):
                    raise PathError(ErrorCode.POINT_NOT_FOUND, point=mode.existing_point_id)

                if isinstance(mode, SplitEdge):
                    await self._validator().assert_no_cycle(
                        txn.edges, mode.origin_id, mode.destination_id
                    )

                with translating(*_point_rules(clean_title, user)):
                    point_id = await txn.points.insert(
                        title=clean_title,
                        created_user=user,
                        now=now,
                        summary=normalize_summary(summary),
                    )

                created: list[dict[str, Any]] = []
                removed = False
                if isinstance(mode, SingleEdge):
                    origin_id, destination_id = mode.endpoints(point_id)
                    created.append(await self._insert_edge(txn, origin_id, destination_id, now))
                elif isinstance(mode, SplitEdge):
                    removed, created = await self._split(
                        txn, mode.origin_id, mode.destination_id, point_id, now
                    )

                await attach_point(txn, project, point_id, now=now)
        except PathError as exc:
            return self._failure(op, exc)

        logger.info("Created point %d (%s) in project %d", point_id, mode.kind, project)
        return self._success(
            op,
            {
                "point_id": point_id,
                "title": clean_title,
                "project_id": project,
                "mode": mode.kind,
                "edges": [_edge_data(e) for e in created],
                "removed_edge": removed,
            },
        )

    @traced
    async def connect(self, origin: object, destination: object) -> ServiceResult:
        """Insert ``origin -> destination`` unless it would close a short cycle."""
        op = "connect"
        now = now_iso()
        try:
            origin_id, destination_id = parse_point_pair(origin, destination)
            async with self._lock_pairs((origin_id, destination_id)), self._unit() as txn:
                existing = await txn.edges.find_by_origin_and_destination(origin_id, destination_id)
                if existing is not None:
                    raise PathError(
                        ErrorCode.EDGE_ALREADY_EXISTS,
                        origin=origin_id,
                        destination=destination_id,
                    )
                if not await txn.points.exists_by_id_in((origin_id, destination_id)):
                    raise PathError(
                        ErrorCode.NON_EXISTENT_POINTS, points=[origin_id, destination_id]
                    )
                await self._validator().assert_no_cycle(txn.edges, origin_id, destination_id)
                edge = await self._insert_edge(txn, origin_id, destination_id, now)
        except PathError as exc:
            return self._failure(op, exc)

        logger.info("Connected %d -> %d", origin_id, destination_id)
        return self._success(op, {"edge": _edge_data(edge)})

    @traced
    async def disconnect(self, origin: object, destination: object) -> ServiceResult:
        """Remove ``origin -> destination``; an absent edge is reported, not failed."""
        op = "disconnect"
        warnings: list[str] = []
        try:
            origin_id, destination_id = parse_point_pair(origin, destination)
            async with self._lock_pairs((origin_id, destination_id)), self._unit() as txn:
                removed = await txn.edges.delete_by_origin_and_destination(
                    origin_id, destination_id
                )
        except PathError as exc:
            return self._failure(op, exc)

        if not removed:
            warnings.append(f"No edge {origin_id} -> {destination_id}; nothing removed")
        return self._success(
            op,
            {"origin_id": origin_id, "destination_id": destination_id, "removed": bool(removed)},
            warnings=warnings,
        )

    @traced
    async def split_edge(self, origin: object, destination: object, middle: object) -> ServiceResult:
        """Replace ``origin -> destination`` with ``origin -> middle -> destination``.

        The original edge is optional. Both new edges pass the backward-path
        check, evaluated after the original edge is gone.
        """
        op = "split_edge"
        now = now_iso()
        try:
            origin_id, destination_id = parse_point_pair(origin, destination)
            middle_id = parse_id(middle, "middle")
            if middle_id in (origin_id, destination_id):
                raise PathError(ErrorCode.SAME_POINTS, point=middle_id)

            pairs = ((origin_id, destination_id), (origin_id, middle_id), (middle_id, destination_id))
            async with self._lock_pairs(*pairs), self._unit() as txn:
                if not await txn.points.exists_by_id_in((origin_id, destination_id, middle_id)):
                    raise PathError(
                        ErrorCode.NON_EXISTENT_POINTS,
                        points=[origin_id, destination_id, middle_id],
                    )
                removed, created = await self._split(
                    txn, origin_id, destination_id, middle_id, now, check=True
                )
        except PathError as exc:
            return self._failure(op, exc)

        logger.info("Split %d -> %d at %d", origin_id, destination_id, middle_id)
        return self._success(
            op,
            {
                "origin_id": origin_id,
                "destination_id": destination_id,
                "middle_id": middle_id,
                "removed_edge": removed,
                "edges": [_edge_data(e) for e in created],
            },
        )

    @traced
    async def update_point(
        self,
        point_id: object,
        title: str | None = None,
        summary: str | None = None,
    ) -> ServiceResult:
        """Change title and/or summary. A blank *summary* clears it."""
        op = "update_point"
        now = now_iso()
        try:
            pid = parse_id(point_id, "point_id")
            if title is None and summary is None:
                raise PathError(ErrorCode.NULL_INPUT, fields="title, summary")

            values: dict[str, Any] = {"updated_at": now}
            if title is not None:
                values["title"] = normalize_title(title)
            if summary is not None:
                values["summary"] = normalize_summary(summary)
                values["summary_at"] = now

            async with self._unit() as txn:
                with translating(*_point_rules(values.get("title", ""), None)):
                    updated = await txn.points.update(pid, **values)
                if not updated:
                    raise PathError(ErrorCode.POINT_NOT_FOUND, point=pid)
                point = await txn.points.find_by_id(pid)
        except PathError as exc:
            return self._failure(op, exc)

        changed = sorted(set(values) - {"updated_at"})
        return self._success(op, {"point": point, "fields_changed": changed})

    @traced
    async def delete_point(self, point_id: object) -> ServiceResult:
        """Delete a point with no incident edges and no dependent items."""
        op = "delete_point"
        try:
            pid = parse_id(point_id, "point_id")
            async with self._unit() as txn:
                with translating(
                    ConstraintRule(
                        ErrorCode.POINT_NOT_DELETABLE,
                        ("foreign key",),
                        kind=ConstraintKind.FOREIGN_KEY,
                        params={"point": pid, "reason": _NOT_DELETABLE_REASON},
                    ),
                ):
                    deleted = await txn.points.delete_by_id(pid)
                if not deleted:
                    raise PathError(ErrorCode.POINT_NOT_FOUND, point=pid)
        except PathError as exc:
            return self._failure(op, exc)

        logger.info("Deleted point %d", pid)
        return self._success(op, {"point_id": pid, "deleted": True})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validator(self) -> ReachabilityValidator:
        return ReachabilityValidator(self.max_depth)

    @asynccontextmanager
    async def _unit(self) -> AsyncIterator[StoreTransaction]:
        """One transaction whose untranslated store failures become INTERNAL_SERVER."""
        with translating():
            async with self._store.transaction() as txn:
                yield txn

    @asynccontextmanager
    async def _lock_pairs(self, *pairs: tuple[int, int]) -> AsyncIterator[None]:
        """Hold the pair lock of every distinct unordered pair, in sorted order."""
        keys = sorted({tuple(sorted(pair)) for pair in pairs})
        async with AsyncExitStack() as stack:
            for a, b in keys:
                await stack.enter_async_context(self._store.pair_lock(a, b))
            yield

    async def _insert_edge(
        self, txn: StoreTransaction, origin_id: int, destination_id: int, now: str
    ) -> dict[str, Any]:
        with translating(*_edge_rules(origin_id, destination_id)):
            return await txn.edges.insert(origin_id, destination_id, now=now)

    async def _split(
        self,
        txn: StoreTransaction,
        origin_id: int,
        destination_id: int,
        middle_id: int,
        now: str,
        *,
        check: bool = False,
    ) -> tuple[bool, list[dict[str, Any]]]:
        """Delete ``origin -> destination`` and insert the two halves via *middle_id*."""
        with trace_span("split"):
            removed = await txn.edges.delete_by_origin_and_destination(origin_id, destination_id)
            if check:
                validator = self._validator()
                await validator.assert_no_cycle(txn.edges, origin_id, destination_id)
                await validator.assert_no_cycle(txn.edges, origin_id, middle_id)
                await validator.assert_no_cycle(txn.edges, middle_id, destination_id)
            first = await self._insert_edge(txn, origin_id, middle_id, now)
            second = await self._insert_edge(txn, middle_id, destination_id, now)
        return bool(removed), [first, second]
