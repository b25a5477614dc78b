"""Locating and reading ``pathctl.toml``.

Lookup order: ``PATHCTL_CONFIG`` if set, otherwise the nearest
``pathctl.toml`` in the start directory or any ancestor.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pathctl.config.models import PathConfig

CONFIG_FILENAME = "pathctl.toml"
CONFIG_ENV_VAR = "PATHCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: CWD), or None.

    An explicit ``PATHCTL_CONFIG`` disables the walk-up, even when it points
    at a missing file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; raises ``tomllib.TOMLDecodeError`` on bad syntax."""
    return tomllib.loads(path.read_text(encoding="utf-8"))


def load_config(path: Path | None = None, cwd: Path | None = None) -> PathConfig:
    """Validated config from *path*, or from discovery relative to *cwd*.

    Missing file means all defaults.
    """
    path = path or find_config(cwd)
    if path is None:
        return PathConfig()
    return PathConfig.model_validate(read_toml(path))
