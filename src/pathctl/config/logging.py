"""structlog setup for the pathctl CLI.

All log output goes to stderr so stdout stays parseable. Human mode renders
with structlog's console renderer; ``--log-json`` emits one JSON object per
line. Stdlib loggers (``logging.getLogger(__name__)`` in services) share the
same formatter through ``ProcessorFormatter``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Driver loggers stay at WARNING even with --verbose.
_QUIET_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "sqlalchemy.pool")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool, stream: TextIO) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        verbose: ``pathctl`` loggers at DEBUG instead of WARNING.
        log_json: JSON lines instead of the console renderer.
        stream: Output stream (defaults to ``sys.stderr`` at call time).
    """
    stream = stream or sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json, stream),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("pathctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_log_context(**values: object) -> None:
    """Attach key/values (e.g. the graph root) to every later log line."""
    structlog.contextvars.bind_contextvars(**values)
