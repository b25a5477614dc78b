"""Command: graph integrity audit."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pathctl.commands._base import PathCommand

if TYPE_CHECKING:
    from pathctl.commands._context import AppContext


@click.command(
    cls=PathCommand,
    examples="""\
  pathctl check
  pathctl --json check
  pathctl -v check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Report cycles, isolated points, and points outside any project."""
    from pathctl.services.check import CheckService

    app.emit(app.run(lambda store: CheckService(store).check()))
