"""Command group: project creation and inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pathctl.commands._base import PathGroup

if TYPE_CHECKING:
    from pathctl.commands._context import AppContext


@click.group(
    cls=PathGroup,
    examples="""\
  pathctl project create --user 1
  pathctl project show 1
  pathctl project path 1""",
)
def project() -> None:
    """Create projects and view their points and edges."""


@project.command(examples="  pathctl project create --user 1")
@click.option("--user", "user_id", required=True, help="Owning user id.")
@click.pass_obj
def create(app: AppContext, user_id: str) -> None:
    """Create an empty project."""
    from pathctl.services.project import ProjectService

    app.emit(app.run(lambda store: ProjectService(store).create_project(user_id)))


@project.command(examples="  pathctl project show 1")
@click.argument("project_id")
@click.pass_obj
def show(app: AppContext, project_id: str) -> None:
    """Show a project and its member point ids."""
    from pathctl.services.query import QueryService

    app.emit(app.run(lambda store: QueryService(store).get_project(project_id)))


@project.command(
    examples="""\
  pathctl project path 1
  pathctl --json project path 1""",
)
@click.argument("project_id")
@click.pass_obj
def path(app: AppContext, project_id: str) -> None:
    """Show a project's points and the edges between them."""
    from pathctl.services.query import QueryService

    app.emit(app.run(lambda store: QueryService(store).get_path(project_id)))
