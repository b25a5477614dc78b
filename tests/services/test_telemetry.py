"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from pathctl.services.result import ServiceResult
from pathctl.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ── Span unit tests ──────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        span = Span(name="test")
        assert span.duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_annotate(self) -> None:
        span = Span(name="test")
        span.annotate("backward_path", False)
        assert span.to_dict()["annotations"] == {"backward_path": False}


# ── trace_span ───────────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_no_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("x") as span:
            assert span is None

    def test_child_attached_to_parent(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        _current_span.set(root)
        with trace_span("child") as span:
            assert span is not None
            assert get_current_span() is span
        assert root.children == [span]
        assert get_current_span() is root


# ── @traced ──────────────────────────────────────────────────────────


class _Svc:
    @traced
    def sync_op(self) -> ServiceResult:
        with trace_span("inner"):
            pass
        return ServiceResult(ok=True, op="sync_op")

    @traced
    async def async_op(self) -> ServiceResult:
        with trace_span("inner"):
            pass
        return ServiceResult(ok=True, op="async_op")

    @traced
    async def raises(self) -> ServiceResult:
        raise RuntimeError("boom")


class TestTraced:
    def test_disabled_no_meta(self) -> None:
        assert _Svc().sync_op().meta is None

    def test_sync_injects_meta(self) -> None:
        enable_telemetry()
        result = _Svc().sync_op()
        tele = result.meta["telemetry"]
        assert tele["name"] == "_Svc.sync_op"
        assert tele["children"][0]["name"] == "inner"

    async def test_async_disabled_no_meta(self) -> None:
        assert (await _Svc().async_op()).meta is None

    async def test_async_injects_meta(self) -> None:
        enable_telemetry()
        result = await _Svc().async_op()
        assert result.meta["telemetry"]["name"] == "_Svc.async_op"
        assert result.meta["telemetry"]["children"][0]["name"] == "inner"

    async def test_async_exception_propagates_and_resets(self) -> None:
        enable_telemetry()
        with pytest.raises(RuntimeError):
            await _Svc().raises()
        assert get_current_span() is None

    def test_preserves_name(self) -> None:
        assert _Svc.async_op.__name__ == "async_op"
