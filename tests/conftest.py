"""Shared pytest fixtures and test helpers for pathctl tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from pathctl.config.settings import PathSettings
from pathctl.infrastructure.database.schema import edges
from pathctl.infrastructure.store import GraphStore


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of settings resolution."""
    monkeypatch.delenv("PATHCTL_CONFIG", raising=False)
    for var in ("PATHCTL_ROOT", "PATHCTL_GRAPH__MAX_DEPTH", "PATHCTL_GRAPH__PAIR_LOCKING"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> PathSettings:
    return PathSettings.from_cli(root=tmp_path)


@pytest.fixture
async def store(settings: PathSettings) -> AsyncIterator[GraphStore]:
    """Fully initialized store on a temp directory."""
    s = await GraphStore.open(settings)
    try:
        yield s
    finally:
        await s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Change CWD to a temp root so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
    yield


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


async def create_user(store: GraphStore, email: str = "ada@example.com") -> int:
    """Register a user via UserService, asserting success."""
    from pathctl.services.user import UserService

    result = await UserService(store).register(email)
    assert result.ok, result.error
    return result.data["user_id"]


async def create_project(store: GraphStore, user_id: int) -> int:
    """Create a project via ProjectService, asserting success."""
    from pathctl.services.project import ProjectService

    result = await ProjectService(store).create_project(user_id)
    assert result.ok, result.error
    return result.data["project_id"]


async def create_point(
    store: GraphStore,
    project_id: int,
    user_id: int,
    title: str,
    mode: Any = None,
) -> int:
    """Create a point via GraphMutationService, asserting success."""
    from pathctl.services.mutation import GraphMutationService

    result = await GraphMutationService(store).create_point(project_id, user_id, title, mode)
    assert result.ok, result.error
    return result.data["point_id"]


async def connect(store: GraphStore, origin: int, destination: int) -> None:
    from pathctl.services.mutation import GraphMutationService

    result = await GraphMutationService(store).connect(origin, destination)
    assert result.ok, result.error


async def edge_set(store: GraphStore) -> set[tuple[int, int]]:
    """All committed edges as ``(origin, destination)`` pairs."""
    async with store.read() as txn:
        rows = await txn.conn.execute(select(edges.c.origin_id, edges.c.destination_id))
        return {(r.origin_id, r.destination_id) for r in rows}


@pytest.fixture
async def seeded(store: GraphStore) -> dict[str, Any]:
    """A user, a project, and three standalone points ``a``, ``b``, ``c``."""
    user_id = await create_user(store)
    project_id = await create_project(store, user_id)
    points = {
        name: await create_point(store, project_id, user_id, f"Point {name.upper()}")
        for name in ("a", "b", "c")
    }
    return {"user_id": user_id, "project_id": project_id, **points}
