"""Command group: point creation, inspection, update, delete, split."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pathctl.commands._base import PathGroup

if TYPE_CHECKING:
    from pathctl.commands._context import AppContext


@click.group(
    cls=PathGroup,
    examples="""\
  pathctl point create "Parse input" --project 1 --user 1
  pathctl point create "Validate" --project 1 --user 1 --origin 1
  pathctl point create "Normalize" --project 1 --user 1 --origin 1 --destination 2
  pathctl point show 3
  pathctl point split 1 2 3""",
)
def point() -> None:
    """Create and manage points."""


@point.command(
    examples="""\
  pathctl point create "Standalone" --project 1 --user 1
  pathctl point create "After 4" --project 1 --user 1 --origin 4
  pathctl point create "Before 4" --project 1 --user 1 --destination 4
  pathctl point create "Between" --project 1 --user 1 --origin 1 --destination 2""",
)
@click.argument("title")
@click.option("--project", "project_id", required=True, help="Project id to add the point to.")
@click.option("--user", "user_id", required=True, help="Creator user id.")
@click.option("--origin", default=None, help="Existing point the new point follows.")
@click.option("--destination", default=None, help="Existing point the new point precedes.")
@click.option("--summary", default=None, help="Free-text summary.")
@click.pass_obj
def create(
    app: AppContext,
    title: str,
    project_id: str,
    user_id: str,
    origin: str | None,
    destination: str | None,
    summary: str | None,
) -> None:
    """Create a point titled TITLE.

    With --origin only, adds origin -> new. With --destination only, adds
    new -> destination. With both, the new point splits that edge.
    """
    from pathctl.domain.creation import mode_from_endpoints
    from pathctl.domain.errors import PathError
    from pathctl.services.mutation import GraphMutationService

    try:
        mode = mode_from_endpoints(origin, destination)
    except PathError as exc:
        app.fail("create_point", exc)
        return

    app.emit(
        app.run(
            lambda store: GraphMutationService(store).create_point(
                project_id, user_id, title, mode, summary=summary
            )
        )
    )


@point.command(
    examples="""\
  pathctl point show 3
  pathctl point show 3 --since 2026-01-01T00:00:00+00:00""",
)
@click.argument("point_id")
@click.option("--since", default=None, help="Only return the point if updated after this ISO time.")
@click.pass_obj
def show(app: AppContext, point_id: str, since: str | None) -> None:
    """Show a point with its state and ordered item ids."""
    from pathctl.services.query import QueryService

    app.emit(app.run(lambda store: QueryService(store).get_point(point_id, updated_after=since)))


@point.command(
    examples="""\
  pathctl point update 3 --title "Renamed"
  pathctl point update 3 --summary "Short note"
  pathctl point update 3 --summary "" """,
)
@click.argument("point_id")
@click.option("--title", default=None, help="New title (must be unique).")
@click.option("--summary", default=None, help="New summary; empty string clears it.")
@click.pass_obj
def update(app: AppContext, point_id: str, title: str | None, summary: str | None) -> None:
    """Update a point's title or summary."""
    from pathctl.services.mutation import GraphMutationService

    if title is None and summary is None:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(
        app.run(lambda store: GraphMutationService(store).update_point(point_id, title, summary))
    )


@point.command(examples="  pathctl point delete 3")
@click.argument("point_id")
@click.pass_obj
def delete(app: AppContext, point_id: str) -> None:
    """Delete a point that has no edges and no items."""
    from pathctl.services.mutation import GraphMutationService

    app.emit(app.run(lambda store: GraphMutationService(store).delete_point(point_id)))


@point.command(examples="  pathctl point split 1 2 3")
@click.argument("origin")
@click.argument("destination")
@click.argument("middle")
@click.pass_obj
def split(app: AppContext, origin: str, destination: str, middle: str) -> None:
    """Replace ORIGIN -> DESTINATION with ORIGIN -> MIDDLE -> DESTINATION."""
    from pathctl.services.mutation import GraphMutationService

    app.emit(
        app.run(lambda store: GraphMutationService(store).split_edge(origin, destination, middle))
    )
