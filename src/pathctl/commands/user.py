"""Command group: user registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pathctl.commands._base import PathGroup

if TYPE_CHECKING:
    from pathctl.commands._context import AppContext


@click.group(
    cls=PathGroup,
    examples="""\
  pathctl user add ada@example.com --name "Ada"
  pathctl user add ada@example.com --ensure""",
)
def user() -> None:
    """Manage users that own points and projects."""


@user.command(
    examples="""\
  pathctl user add ada@example.com
  pathctl user add ada@example.com --name "Ada" --avatar https://example.com/a.png
  pathctl --quiet user add ada@example.com --ensure""",
)
@click.argument("email")
@click.option("--name", default=None, help="Display name.")
@click.option("--avatar", default=None, help="Avatar URL.")
@click.option("--ensure", is_flag=True, help="Return the existing user instead of failing.")
@click.pass_obj
def add(app: AppContext, email: str, name: str | None, avatar: str | None, ensure: bool) -> None:
    """Register a user by EMAIL."""
    from pathctl.services.user import UserService

    if ensure:
        app.emit(app.run(lambda store: UserService(store).ensure(email, name=name, avatar=avatar)))
    else:
        app.emit(app.run(lambda store: UserService(store).register(email, name=name, avatar=avatar)))
