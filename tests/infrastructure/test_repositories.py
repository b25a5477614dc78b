"""Tests for point, edge, project, and user repositories."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from pathctl.infrastructure.store import GraphStore, StoreTransaction

NOW = "2026-01-01T00:00:00.000000+00:00"
LATER = "2026-01-02T00:00:00.000000+00:00"


async def _points(txn: StoreTransaction, *titles: str) -> list[int]:
    return [await txn.points.insert(title=t, created_user=None, now=NOW) for t in titles]


async def _chain(txn: StoreTransaction, ids: list[int]) -> None:
    for origin, destination in zip(ids, ids[1:]):
        await txn.edges.insert(origin, destination, now=NOW)


# ---------------------------------------------------------------------------
# PointRepository
# ---------------------------------------------------------------------------


class TestPointRepository:
    async def test_insert_and_find(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            (pid,) = await _points(txn, "Alpha")
            row = await txn.points.find_by_id(pid)
        assert row is not None
        assert row["title"] == "Alpha"
        assert row["created_at"] == row["updated_at"] == NOW
        assert row["summary_at"] is None

    async def test_summary_sets_summary_at(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            pid = await txn.points.insert(title="S", created_user=None, now=NOW, summary="x")
            row = await txn.points.find_by_id(pid)
        assert row["summary_at"] == NOW

    async def test_exists_by_id_in_requires_all(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b = await _points(txn, "A", "B")
            assert await txn.points.exists_by_id_in([a, b])
            assert not await txn.points.exists_by_id_in([a, b, 999])
            assert await txn.points.exists_by_id_in([])

    async def test_duplicate_title_raises(self, store: GraphStore) -> None:
        with pytest.raises(IntegrityError, match="points.title"):
            async with store.transaction() as txn:
                await _points(txn, "Same", "Same")

    async def test_update_and_delete_rowcounts(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            (pid,) = await _points(txn, "A")
            assert await txn.points.update(pid, title="B", updated_at=LATER) == 1
            assert await txn.points.update(999, title="C") == 0
            assert await txn.points.delete_by_id(pid) == 1
            assert await txn.points.delete_by_id(pid) == 0

    async def test_delete_referenced_point_raises(self, store: GraphStore) -> None:
        with pytest.raises(IntegrityError, match="FOREIGN KEY"):
            async with store.transaction() as txn:
                a, b = await _points(txn, "A", "B")
                await txn.edges.insert(a, b, now=NOW)
                await txn.points.delete_by_id(a)

    async def test_item_ids_projection_is_ordered(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            (pid,) = await _points(txn, "A")
            await txn.points.add_item(pid, 30, position=2)
            await txn.points.add_item(pid, 10, position=0)
            await txn.points.add_item(pid, 20, position=1)
            rows = await txn.points.find_full_by_ids([pid])
        assert rows[0]["item_ids"] == [10, 20, 30]

    async def test_find_full_updated_after(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b = await _points(txn, "A", "B")
            await txn.points.update(b, updated_at=LATER)
            rows = await txn.points.find_full_by_ids([a, b], updated_after=NOW)
        assert [r["id"] for r in rows] == [b]

    async def test_find_all_ids(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            ids = await _points(txn, "A", "B", "C")
            assert await txn.points.find_all_ids() == ids


# ---------------------------------------------------------------------------
# EdgeRepository
# ---------------------------------------------------------------------------


class TestEdgeRepository:
    async def test_insert_and_find(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b = await _points(txn, "A", "B")
            edge = await txn.edges.insert(a, b, now=NOW)
            found = await txn.edges.find_by_origin_and_destination(a, b)
            reverse = await txn.edges.find_by_origin_and_destination(b, a)
        assert found is not None
        assert found["id"] == edge["id"]
        assert reverse is None

    async def test_unique_pair(self, store: GraphStore) -> None:
        with pytest.raises(IntegrityError, match="edges.origin_id, edges.destination_id"):
            async with store.transaction() as txn:
                a, b = await _points(txn, "A", "B")
                await txn.edges.insert(a, b, now=NOW)
                await txn.edges.insert(a, b, now=NOW)

    async def test_self_edge_rejected(self, store: GraphStore) -> None:
        with pytest.raises(IntegrityError, match="ck_edges_distinct"):
            async with store.transaction() as txn:
                (a,) = await _points(txn, "A")
                await txn.edges.insert(a, a, now=NOW)

    async def test_delete_rowcount(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b = await _points(txn, "A", "B")
            await txn.edges.insert(a, b, now=NOW)
            assert await txn.edges.delete_by_origin_and_destination(b, a) == 0
            assert await txn.edges.delete_by_origin_and_destination(a, b) == 1

    async def test_count_incident_and_find_all(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b, c, d = await _points(txn, "A", "B", "C", "D")
            await _chain(txn, [a, b, c])
            assert await txn.edges.count_incident(b) == 2
            assert await txn.edges.count_incident(d) == 0
            found = await txn.edges.find_all_by_point_id_in([a])
            assert [(e["origin_id"], e["destination_id"]) for e in found] == [(a, b)]
            assert await txn.edges.find_all_by_point_id_in([]) == []


class TestExistsPathWithinDepth:
    @pytest.mark.parametrize(
        ("depth", "expected"),
        [(1, False), (2, False), (3, True), (5, True)],
    )
    async def test_chain_of_three_hops(self, store: GraphStore, depth: int, expected: bool) -> None:
        async with store.transaction() as txn:
            ids = await _points(txn, "A", "B", "C", "D")
            await _chain(txn, ids)
            assert await txn.edges.exists_path_within_depth(ids[0], ids[3], depth) is expected

    async def test_direction_matters(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b = await _points(txn, "A", "B")
            await txn.edges.insert(a, b, now=NOW)
            assert await txn.edges.exists_path_within_depth(a, b, 1)
            assert not await txn.edges.exists_path_within_depth(b, a, 5)

    async def test_zero_depth(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b = await _points(txn, "A", "B")
            await txn.edges.insert(a, b, now=NOW)
            assert not await txn.edges.exists_path_within_depth(a, b, 0)

    async def test_terminates_on_cyclic_data(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b, c, d = await _points(txn, "A", "B", "C", "D")
            await _chain(txn, [a, b, c, a])
            assert await txn.edges.exists_path_within_depth(a, c, 10)
            assert not await txn.edges.exists_path_within_depth(a, d, 10)

    async def test_branching(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            a, b, c, d = await _points(txn, "A", "B", "C", "D")
            await _chain(txn, [a, b])
            await _chain(txn, [a, c, d])
            assert await txn.edges.exists_path_within_depth(a, d, 2)
            assert not await txn.edges.exists_path_within_depth(b, d, 5)


# ---------------------------------------------------------------------------
# ProjectRepository / UserRepository
# ---------------------------------------------------------------------------


class TestProjectRepository:
    async def test_membership(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            project_id = await txn.projects.insert(created_user=None, now=NOW)
            a, b = await _points(txn, "A", "B")
            await txn.projects.add_point(project_id, b)
            await txn.projects.add_point(project_id, a)
            await txn.projects.add_point(project_id, a)
            assert await txn.projects.find_point_ids_by_project_id(project_id) == [a, b]

    async def test_touch(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            project_id = await txn.projects.insert(created_user=None, now=NOW)
            assert await txn.projects.touch(project_id, now=LATER) == 1
            row = await txn.projects.find_by_id(project_id)
        assert row["updated_at"] == LATER
        assert row["created_at"] == NOW

    async def test_membership_cascades_with_point(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            project_id = await txn.projects.insert(created_user=None, now=NOW)
            (a,) = await _points(txn, "A")
            await txn.projects.add_point(project_id, a)
            await txn.points.delete_by_id(a)
            assert await txn.projects.find_point_ids_by_project_id(project_id) == []

    async def test_exists(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            project_id = await txn.projects.insert(created_user=None, now=NOW)
            assert await txn.projects.exists_by_id(project_id)
            assert not await txn.projects.exists_by_id(project_id + 1)


class TestUserRepository:
    async def test_insert_and_lookup(self, store: GraphStore) -> None:
        async with store.transaction() as txn:
            uid = await txn.users.insert(email="a@b.c", now=NOW, name="A")
            by_email = await txn.users.find_by_email("a@b.c")
            by_id = await txn.users.find_by_id(uid)
        assert by_email == by_id
        assert by_id["name"] == "A"

    async def test_duplicate_email(self, store: GraphStore) -> None:
        with pytest.raises(IntegrityError, match="users.email"):
            async with store.transaction() as txn:
                await txn.users.insert(email="a@b.c", now=NOW)
                await txn.users.insert(email="a@b.c", now=NOW)
