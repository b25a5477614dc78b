"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Runs service coroutines on a fresh event loop with a
store opened for that call, and centralizes result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from pathctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pathctl.config.settings import PathSettings
    from pathctl.domain.errors import PathError
    from pathctl.infrastructure.store import GraphStore
    from pathctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The store is opened only
    inside :meth:`run`, so ``--help`` and ``--version`` never touch the
    database.
    """

    def __init__(self, settings: PathSettings) -> None:
        self.settings = settings

        from pathctl.config.logging import bind_log_context, configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_log_context(root=str(settings.root))

        if settings.verbose:
            from pathctl.services.telemetry import enable_telemetry

            enable_telemetry()

    def run(self, call: Callable[[GraphStore], Awaitable[ServiceResult]]) -> ServiceResult:
        """Open a store, await ``call(store)``, and always dispose the engine.

        Usage::

            app.emit(app.run(lambda store: GraphMutationService(store).connect(1, 2)))
        """
        from pathctl.infrastructure.store import GraphStore

        async def _main() -> ServiceResult:
            store = await GraphStore.open(self.settings)
            try:
                return await call(store)
            finally:
                await store.close()

        return asyncio.run(_main())

    def fail(self, op: str, exc: PathError) -> None:
        """Emit a domain error raised before any service was called."""
        from pathctl.services.result import ServiceError, ServiceResult

        self.emit(ServiceResult(ok=False, op=op, error=ServiceError.from_path_error(exc)))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
