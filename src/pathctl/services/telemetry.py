"""Timing spans for service calls.

Disabled unless ``--verbose``: then each ``@traced`` service call becomes a
root :class:`Span`, ``trace_span`` blocks nest under it, and the finished
tree lands in ``ServiceResult.meta["telemetry"]``. State lives in context
variables, so it follows an awaiting coroutine and never leaks between
``asyncio`` tasks.
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from pathctl.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("pathctl_telemetry_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("pathctl_current_span", default=None)

_log = structlog.get_logger("pathctl.telemetry")


@dataclass
class Span:
    """One timed section; ``children`` are the spans opened inside it."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Open a child of the current span; yields None outside a traced call."""
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name=name)
    parent.children.append(span)
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def _root_span(name: str) -> Iterator[Span]:
    span = Span(name=name)
    token = _current_span.set(span)
    try:
        yield span
    except BaseException:
        span.end()
        _log.debug(
            "span.complete", span_name=name, duration_ms=round(span.duration_ms, 2), ok=False
        )
        raise
    finally:
        _current_span.reset(token)


def _attach(span: Span, result: Any) -> Any:
    """End *span*, log it, and merge it into *result*'s meta if it is a ServiceResult."""
    span.end()
    is_result = isinstance(result, ServiceResult)
    _log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        ok=result.ok if is_result else True,
        children=len(span.children),
    )
    if not is_result:
        return result
    return result.model_copy(update={"meta": {**(result.meta or {}), "telemetry": span.to_dict()}})


F = TypeVar("F", bound=Callable[..., Any])


def traced(func: F) -> F:
    """Time a service method (plain or ``async``) as a root span."""
    name = func.__qualname__

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def run_async(*args: Any, **kwargs: Any) -> Any:
            if not _enabled.get():
                return await func(*args, **kwargs)
            with _root_span(name) as span:
                result = await func(*args, **kwargs)
            return _attach(span, result)

        return run_async  # type: ignore[return-value]

    @functools.wraps(func)
    def run(*args: Any, **kwargs: Any) -> Any:
        if not _enabled.get():
            return func(*args, **kwargs)
        with _root_span(name) as span:
            result = func(*args, **kwargs)
        return _attach(span, result)

    return run  # type: ignore[return-value]


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """Innermost open span, for ad-hoc ``annotate`` calls."""
    return _current_span.get() if _enabled.get() else None
