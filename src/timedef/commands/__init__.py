"""Subcommand modules for timedef.

Provides register_commands(), which imports command modules lazily so
``timedef --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``period`` group and the standalone ``match`` and ``check`` commands."""
    # --- Groups ---
    from timedef.commands.period import period

    cli.add_command(period)

    # --- Standalone commands ---
    from timedef.commands.match import check, match

    cli.add_command(match)
    cli.add_command(check)
