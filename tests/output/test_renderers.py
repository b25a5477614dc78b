"""Tests for the operation-specific Rich renderers."""

from __future__ import annotations

from pathctl.output.renderers import render_quiet, render_result
from pathctl.services.result import ServiceError, ServiceResult


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


class TestMutationRenderers:
    def test_create_point_with_edges(self) -> None:
        result = _ok(
            "create_point",
            point_id=3,
            title="Normalize",
            project_id=1,
            mode="split_edge",
            edges=[
                {"id": 2, "origin_id": 1, "destination_id": 3},
                {"id": 3, "origin_id": 3, "destination_id": 2},
            ],
            removed_edge=True,
        )
        output = render_result(result)
        assert "OK" in output
        assert "create_point" in output
        assert "title: Normalize" in output
        assert "1 -> 3" in output
        assert "3 -> 2" in output

    def test_split_shows_replaced_edge(self) -> None:
        result = _ok(
            "split_edge",
            origin_id=1,
            destination_id=2,
            middle_id=3,
            removed_edge=True,
            edges=[],
        )
        assert "replaced: 1 -> 2" in render_result(result)

    def test_connect(self) -> None:
        result = _ok("connect", edge={"id": 5, "origin_id": 4, "destination_id": 6})
        assert "4 -> 6" in render_result(result)

    def test_disconnect_absent(self) -> None:
        result = _ok("disconnect", origin_id=1, destination_id=2, removed=False)
        assert "absent: 1 -> 2" in render_result(result)

    def test_update(self) -> None:
        result = _ok(
            "update_point",
            point={"id": 1, "title": "New", "summary": None, "updated_at": "t"},
            fields_changed=["title", "updated_at"],
        )
        output = render_result(result)
        assert "title: New" in output
        assert "fields_changed" in output


class TestQueryRenderers:
    def test_point(self) -> None:
        point = {
            "id": 1,
            "title": "A",
            "state": "isolated",
            "degree": 0,
            "deletable": True,
            "item_ids": [],
        }
        output = render_result(_ok("get_point", point=point, updated_after=None))
        assert "state: isolated" in output
        assert "deletable: True" in output

    def test_point_unchanged(self) -> None:
        output = render_result(_ok("get_point", point=None, updated_after="2026-01-01"))
        assert "Unchanged since 2026-01-01" in output

    def test_path_table(self) -> None:
        result = _ok(
            "get_path",
            project_id=1,
            points=[{"id": 1, "title": "Alpha"}, {"id": 2, "title": "Beta"}],
            edges=[
                {"id": 1, "origin_id": 1, "destination_id": 2},
                {"id": 2, "origin_id": 2, "destination_id": 9},
            ],
            external_point_ids=[9],
            count={"points": 2, "edges": 2},
        )
        output = render_result(result)
        assert "Project 1" in output
        assert "Alpha" in output
        assert "Beta" in output
        assert "outside project: 9" in output

    def test_path_quiet_lists_ids(self) -> None:
        result = _ok("get_path", project_id=1, points=[{"id": 1}, {"id": 4}])
        assert render_quiet(result) == "1\n4"


class TestCheckRenderer:
    def test_clean(self) -> None:
        assert "No issues found" in render_result(_ok("check", issues=[], count=0))

    def test_grouped_issues(self) -> None:
        issues = [
            {"category": "graph_health", "severity": "error", "message": "Cycle of 3 edges"},
            {"category": "membership", "severity": "warning", "message": "Point 4 is in no project"},
        ]
        output = render_result(_ok("check", issues=issues, count=2))
        assert "graph_health" in output
        assert "membership" in output
        assert "1 errors, 1 warnings" in output


class TestErrorRenderer:
    def test_error_line(self) -> None:
        result = ServiceResult(
            ok=False,
            op="connect",
            error=ServiceError(code="BACKWARD_PATH", message="cycle", detail={"depth": 5}),
        )
        output = render_result(result)
        assert "ERROR" in output
        assert "[BACKWARD_PATH]" in output
        assert "depth" not in output
        assert "depth: 5" in render_result(result, verbose=True)

    def test_verbose_meta(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check",
            data={"issues": [], "count": 0},
            meta={"telemetry": {"name": "CheckService.check", "duration_ms": 1.5}},
        )
        output = render_result(result, verbose=True)
        assert "CheckService.check" in output
