"""Command: root initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import click

from pathctl.commands._base import PathCommand

if TYPE_CHECKING:
    from pathctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  pathctl init
  pathctl init /path/to/graph
  pathctl init . --max-depth 8
  pathctl init . --no-pair-locking --force"""


@click.command("init", cls=PathCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option(
    "--max-depth",
    type=click.IntRange(1, 64),
    default=None,
    help="Hop bound for the backward-path check (default 5).",
)
@click.option("--no-pair-locking", is_flag=True, help="Disable in-process pair locks.")
@click.option("--force", is_flag=True, help="Overwrite an existing pathctl.toml.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    max_depth: int | None,
    no_pair_locking: bool,
    force: bool,
) -> None:
    """Initialize a pathctl root: config file plus database."""
    from pathctl.config.discovery import CONFIG_FILENAME, load_config
    from pathctl.services.init import InitService

    root = Path(path).resolve()
    config_file = root / CONFIG_FILENAME
    current = load_config(config_file if config_file.is_file() else None, cwd=root)

    graph_changes: dict[str, object] = {}
    if max_depth is not None:
        graph_changes["max_depth"] = max_depth
    if no_pair_locking:
        graph_changes["pair_locking"] = False
    graph = current.graph.model_copy(update=graph_changes)

    app.emit(
        asyncio.run(
            InitService.init_root(
                root,
                graph=graph,
                database=current.database,
                overwrite=force or bool(graph_changes),
            )
        )
    )
