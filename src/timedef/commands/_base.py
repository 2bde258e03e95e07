"""Custom Click base classes and shared parameters.

TimedefCommand and TimedefGroup accept an ``examples`` parameter; passing
``--examples`` prints them and exits, so ``--help`` stays short.
:func:`period_arguments` adds the ``START END`` pair most commands take.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from typing import Any, TypeVar

import click

_F = TypeVar("_F", bound=Callable[..., Any])

INSTANT_HELP = "Instants are ISO-8601: 2015-06-01 (midnight) or 2015-06-01T07:30."


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""
    text = textwrap.indent(textwrap.dedent(examples).strip("\n"), "  ")

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(text)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class TimedefCommand(click.Command):
    """Click Command with ``--examples`` and the instant format in its epilog."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("epilog", INSTANT_HELP)
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class TimedefGroup(click.Group):
    """Click Group with ``--examples``; subcommands default to TimedefCommand."""

    command_class = TimedefCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def period_arguments(func: _F) -> _F:
    """Add the ``START`` and ``END`` positional arguments."""
    func = click.argument("end", metavar="END")(func)
    return click.argument("start", metavar="START")(func)
