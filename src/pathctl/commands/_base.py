"""Click base classes: commands and groups that carry usage examples.

``--help`` stays short; ``--examples`` prints the examples text and exits.
Groups default their subcommands to :class:`PathCommand`, so any command
declared with ``@group.command(examples=...)`` gets the flag.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(textwrap.indent(textwrap.dedent(examples).strip("\n"), "  "))
    ctx.exit(0)


class _ExamplesMixin:
    """Stores ``examples`` and registers the eager ``--examples`` flag."""

    examples: str | None
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_print_examples,
                help="Show usage examples.",
            )
        )


class PathCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class PathGroup(_ExamplesMixin, click.Group):
    command_class = PathCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
