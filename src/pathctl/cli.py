"""``pathctl`` entry point: global flags, settings, and command registration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from pathctl import __version__
from pathctl.commands import register_commands
from pathctl.commands._base import PathGroup
from pathctl.commands._context import AppContext
from pathctl.config.settings import PathSettings


@click.group(
    cls=PathGroup,
    invoke_without_command=True,
    examples="""\
  pathctl init
  pathctl user add ada@example.com
  pathctl project create --user 1
  pathctl point create "Parse input" --project 1 --user 1
  pathctl --json connect 1 2
  pathctl --max-depth 8 connect 2 3""",
)
@click.version_option(version=__version__, prog_name="pathctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="JSON log lines on stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Path to a pathctl.toml.")
@click.option(
    "-r",
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Graph root directory (default: where pathctl.toml is found, else CWD).",
)
@click.option(
    "--max-depth",
    type=click.IntRange(1, 64),
    default=None,
    help="Override [graph] max_depth for this invocation.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
    max_depth: int | None,
) -> None:
    """pathctl — directed point graph with bounded cycle protection."""
    overrides: dict[str, Any] = {}
    if max_depth is not None:
        overrides["graph"] = {"max_depth": max_depth}

    ctx.obj = AppContext(
        PathSettings.from_cli(
            config_path=config_path,
            root=root,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
            **overrides,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
