"""Commands: test a period, or a single instant, against a recurrence expression."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import click

from timedef.commands._base import TimedefCommand, period_arguments

if TYPE_CHECKING:
    from timedef.commands._context import AppContext

_F = TypeVar("_F", bound=Callable[..., Any])

_CRITERIA_OPTIONS = [
    click.option("--year", "years", multiple=True, type=int, help="Calendar year (repeatable)."),
    click.option("--month", "months", multiple=True, help="Month name or number (repeatable)."),
    click.option("--day", "days", multiple=True, type=int, help="Day of month 1-31 (repeatable)."),
    click.option("--hour", "hours", multiple=True, type=int, help="Hour of day 0-23 (repeatable)."),
    click.option("--minute", "minutes", multiple=True, type=int, help="Minute of hour 0-59 (repeatable)."),
    click.option("--weekday", "weekdays", multiple=True, help="Weekday name or 0-6, Monday=0 (repeatable)."),
    click.option(
        "--week-of-month",
        default=None,
        metavar="DAY:N",
        help="N-th weekday of the month; negative counts from the end.",
    ),
    click.option("--duration", default=None, metavar="ISO", help="Exact period length, e.g. PT30M or P3D."),
    click.option("--weeks", type=int, default=None, help="Number of calendar weeks the period touches."),
    click.option("--date-span", default=None, metavar="FROM/TO", help="Date (or date-time) range, inclusive."),
    click.option("--time-span", default=None, metavar="FROM/TO", help="Time-of-day range; FROM > TO wraps midnight."),
    click.option("--any", "any_", is_flag=True, help="Join criteria with OR instead of AND."),
    click.option("--negate", is_flag=True, help="Negate the combined expression."),
]


def criteria_options(func: _F) -> _F:
    """Add the options that build a TimeDef expression."""
    for option in reversed(_CRITERIA_OPTIONS):
        func = option(func)
    return func


@click.command(
    cls=TimedefCommand,
    examples="""\
timedef match 2015-06-01 2018-07-01 --day 1 --day 15 --weekday mon --weekday wed --year 2015
timedef match 2015-06-01T07:00 2015-06-01T07:30 --duration PT30M
timedef match 2015-06-15 2015-07-15 --date-span 2015-06-01/2015-08-01
timedef match 2015-06-01T23:00 2015-06-02T05:00 --time-span 22:00/06:00
timedef match 2015-01-01 2015-03-01 --week-of-month fri:-1 --all --limit 5
timedef match 2015-06-01 2015-06-08 --weekday sat --weekday sun --negate""",
)
@period_arguments
@criteria_options
@click.option("--all", "list_atoms", is_flag=True, help="List matching atoms, not just the verdict.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Max atoms listed with --all.")
@click.pass_obj
def match(
    app: AppContext,
    start: str,
    end: str,
    list_atoms: bool,
    limit: int | None,
    **criteria: Any,
) -> None:
    """Does START..END contain an instant matching the criteria?

    Exits 0 whether or not the period matches; the verdict is in the output.
    Without day, hour or similar criteria, spans must enclose the whole period.
    """
    app.emit(app.matcher.match(start, end, list_atoms=list_atoms, limit=limit, **criteria))


@click.command(
    cls=TimedefCommand,
    examples="""\
timedef check 2015-06-26 --week-of-month fri:-1
timedef check 2015-06-01T23:30 --time-span 22:00/06:00
timedef -q check 2015-06-06 --weekday sat --weekday sun""",
)
@click.argument("instant", metavar="INSTANT")
@criteria_options
@click.pass_obj
def check(app: AppContext, instant: str, **criteria: Any) -> None:
    """Does the single INSTANT match the criteria?

    Duration criteria do not constrain an instant.
    """
    app.emit(app.matcher.check(instant, **criteria))
