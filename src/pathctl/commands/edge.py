"""Commands: connect and disconnect points."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pathctl.commands._base import PathCommand

if TYPE_CHECKING:
    from pathctl.commands._context import AppContext


@click.command(
    cls=PathCommand,
    examples="""\
  pathctl connect 1 2
  pathctl --json connect 3 1""",
)
@click.argument("origin")
@click.argument("destination")
@click.pass_obj
def connect(app: AppContext, origin: str, destination: str) -> None:
    """Add the edge ORIGIN -> DESTINATION.

    Rejected when DESTINATION already reaches ORIGIN within the configured
    number of hops.
    """
    from pathctl.services.mutation import GraphMutationService

    app.emit(app.run(lambda store: GraphMutationService(store).connect(origin, destination)))


@click.command(cls=PathCommand, examples="  pathctl disconnect 1 2")
@click.argument("origin")
@click.argument("destination")
@click.pass_obj
def disconnect(app: AppContext, origin: str, destination: str) -> None:
    """Remove the edge ORIGIN -> DESTINATION if it exists."""
    from pathctl.services.mutation import GraphMutationService

    app.emit(app.run(lambda store: GraphMutationService(store).disconnect(origin, destination)))
