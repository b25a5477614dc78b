"""InitService — create ``pathctl.toml`` and the database under a root.

Static entry point: there is no store before initialization, so this
service does not extend :class:`BaseService`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pathctl.config.discovery import CONFIG_FILENAME
from pathctl.config.models import DatabaseConfig, GraphConfig
from pathctl.domain.errors import ErrorCode, PathError
from pathctl.infrastructure.database.engine import DATA_DIRNAME, init_database
from pathctl.services.constraints import translating
from pathctl.services.result import ServiceError, ServiceResult
from pathctl.services.telemetry import traced

logger = logging.getLogger(__name__)


def render_config(graph: GraphConfig, database: DatabaseConfig) -> str:
    """Render a ``pathctl.toml`` holding the given sections."""
    return (
        "[graph]\n"
        f"max_depth = {graph.max_depth}\n"
        f"pair_locking = {str(graph.pair_locking).lower()}\n"
        "\n"
        "[database]\n"
        f'filename = "{database.filename}"\n'
        f"busy_timeout_ms = {database.busy_timeout_ms}\n"
        f"echo = {str(database.echo).lower()}\n"
    )


class InitService:
    """Handles first-time setup of a pathctl root directory."""

    @staticmethod
    @traced
    async def init_root(
        root: Path,
        *,
        graph: GraphConfig | None = None,
        database: DatabaseConfig | None = None,
        overwrite: bool = False,
    ) -> ServiceResult:
        """Write the config file (unless present) and create the schema.

        Idempotent: an existing database is left untouched and an existing
        config file is only replaced with *overwrite*.
        """
        op = "init"
        graph = graph or GraphConfig()
        database = database or DatabaseConfig()
        config_file = root / CONFIG_FILENAME
        warnings: list[str] = []

        try:
            root.mkdir(parents=True, exist_ok=True)
            if config_file.exists() and not overwrite:
                warnings.append(f"{CONFIG_FILENAME} already exists; left unchanged")
            else:
                config_file.write_text(render_config(graph, database), encoding="utf-8")

            with translating():
                engine = await init_database(
                    root,
                    filename=database.filename,
                    busy_timeout_ms=database.busy_timeout_ms,
                    echo=database.echo,
                )
                await engine.dispose()
        except PathError as exc:
            return ServiceResult(
                ok=False, op=op, warnings=warnings, error=ServiceError.from_path_error(exc)
            )
        except OSError as exc:
            err = PathError(ErrorCode.INTERNAL_SERVER, cause=exc)
            return ServiceResult(ok=False, op=op, error=ServiceError.from_path_error(err))

        logger.info("Initialized pathctl root at %s", root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(root),
                "config": str(config_file),
                "database": str(root / DATA_DIRNAME / database.filename),
                "max_depth": graph.max_depth,
            },
            warnings=warnings,
        )
