"""Subcommand modules for pathctl.

Provides register_commands() which uses deferred imports to keep
``pathctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 4 standalone commands.
    """
    # --- Groups ---
    from pathctl.commands.point import point
    from pathctl.commands.project import project
    from pathctl.commands.user import user

    cli.add_command(user)
    cli.add_command(project)
    cli.add_command(point)

    # --- Standalone commands ---
    from pathctl.commands.check import check
    from pathctl.commands.edge import connect, disconnect
    from pathctl.commands.init_cmd import init_cmd

    cli.add_command(init_cmd)
    cli.add_command(connect)
    cli.add_command(disconnect)
    cli.add_command(check)
