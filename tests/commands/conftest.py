"""Fixtures for CLI command tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from pathctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _restore_cli_state() -> Generator[None]:
    """Undo the logging handlers and telemetry flag AppContext installs."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    yield
    root.handlers = original_handlers
    disable_telemetry()
