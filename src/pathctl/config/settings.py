"""PathSettings — one frozen object for CLI flags, env vars, and TOML.

Resolution order, first wins:

1. keyword arguments (CLI flags, ``--max-depth``)
2. ``PATHCTL_*`` environment variables, ``__`` for nesting
   (``PATHCTL_GRAPH__MAX_DEPTH=8``)
3. the discovered ``pathctl.toml``
4. model defaults
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pathctl.config.discovery import find_config, read_toml
from pathctl.config.models import DatabaseConfig, GraphConfig

# pydantic-settings builds sources from a classmethod, so the file chosen by
# from_cli() reaches it through this variable.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one TOML file (or nothing)."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if path is not None and path.is_file():
            try:
                self._data = read_toml(path)
            except tomllib.TOMLDecodeError as exc:
                raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class PathSettings(BaseSettings):
    """Runtime settings for one pathctl invocation.

    Attributes:
        root: Directory whose ``.pathctl/`` holds the database.
        config_path: TOML file that was read, if any.
        graph: ``[graph]`` section; ``max_depth`` bounds the cycle check.
        database: ``[database]`` section.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PATHCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    graph: GraphConfig = Field(default_factory=GraphConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **overrides: Any,
    ) -> PathSettings:
        """Resolve the TOML file and root, then build settings.

        An explicit *config_path* that does not exist is ignored. Without
        *root*, the config file's directory (or CWD) is used.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **overrides)
        finally:
            _active_toml.reset(token)
