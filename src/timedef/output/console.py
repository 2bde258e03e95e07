"""Rich Console factory and theme for timedef output.

Consoles render into a StringIO buffer so renderers keep the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich drops the color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TIMEDEF_THEME = Theme(
    {
        "td.ok": "bold green",
        "td.error": "bold red",
        "td.warning": "bold yellow",
        "td.op": "bold cyan",
        "td.key": "dim",
        "td.instant": "bold blue",
        "td.duration": "magenta",
        "td.expr": "bold",
        "td.match": "bold green",
        "td.nomatch": "bold yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=TIMEDEF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
