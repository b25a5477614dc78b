"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pathctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    # Hop bound for the backward-path check. Cycles longer than
    # max_depth + 1 are not detected on insert.
    max_depth: int = Field(default=5, ge=1, le=64)
    pair_locking: bool = True


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    filename: str = "pathctl.db"
    busy_timeout_ms: int = Field(default=5000, ge=0)
    echo: bool = False


class PathConfig(BaseModel):
    """Root config model representing a full pathctl.toml."""

    model_config = {"frozen": True}

    graph: GraphConfig = Field(default_factory=GraphConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
