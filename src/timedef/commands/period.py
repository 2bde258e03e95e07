"""Command group: period arithmetic and decomposition."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timedef.commands._base import TimedefGroup, period_arguments

if TYPE_CHECKING:
    from timedef.commands._context import AppContext

_PERIOD_EXAMPLES = """\
timedef period describe 2015-01-01 2015-01-04
timedef period split 2015-01-01 2015-01-04 --unit day
timedef period intersect 2015-01-10 2015-01-13 2015-01-11 2015-01-14
timedef period merge 2015-01-01/2015-01-05 2015-01-04/2015-01-09
timedef period covers 2015-01-01 2015-01-10 2015-01-01/2015-01-05 2015-01-05/2015-01-10"""

_UNITS = ("minute", "hour", "day", "week", "month", "year")


@click.group(cls=TimedefGroup, examples=_PERIOD_EXAMPLES)
def period() -> None:
    """Interval arithmetic on periods [START, END]."""


@period.command(
    examples="""\
timedef period describe 2015-06-01T07:00 2015-06-01T07:30
timedef --json period describe 2015-01-01 2015-12-31"""
)
@period_arguments
@click.pass_obj
def describe(app: AppContext, start: str, end: str) -> None:
    """Show a period's bounds, duration and weekdays."""
    app.emit(app.periods.describe(start, end))


@period.command(
    examples="""\
timedef period split 2015-01-01 2015-01-04 --unit day
timedef period split 2015-07-01T08:00 2015-08-02T18:00 --unit week
timedef period split 2015-07-01 2015-08-01 --unit week --week-start sunday
timedef -q period split 2013-01-01T08:00 2015-07-05T05:00 --unit year"""
)
@period_arguments
@click.option(
    "--unit",
    type=click.Choice(_UNITS, case_sensitive=False),
    default="day",
    show_default=True,
    help="Calendar unit to split by.",
)
@click.option("--week-start", default=None, help="First day of the week (default from config).")
@click.pass_obj
def split(app: AppContext, start: str, end: str, unit: str, week_start: str | None) -> None:
    """Split a period into calendar-aligned pieces."""
    app.emit(app.periods.split(start, end, unit, week_start=week_start))


def _binary_command(name: str, op: str, help_text: str, example: str) -> None:
    """Register a command taking two periods: START END OTHER_START OTHER_END."""

    @period.command(name=name, help=help_text, examples=example)
    @period_arguments
    @click.argument("other_start", metavar="OTHER_START")
    @click.argument("other_end", metavar="OTHER_END")
    @click.pass_obj
    def command(app: AppContext, start: str, end: str, other_start: str, other_end: str) -> None:
        app.emit(getattr(app.periods, op)(start, end, other_start, other_end))


_binary_command(
    "intersect",
    "intersect",
    "Overlap of two periods (empty when disjoint).",
    "timedef period intersect 2015-01-10 2015-01-13 2015-01-11 2015-01-14",
)
_binary_command(
    "union",
    "union",
    "Covering period of two overlapping or touching periods.",
    "timedef period union 2015-01-01 2015-01-05 2015-01-05 2015-01-09",
)
_binary_command(
    "subtract",
    "subtract",
    "Parts of the first period not covered by the second.",
    "timedef period subtract 2015-01-01 2015-01-10 2015-01-04 2015-01-06",
)
_binary_command(
    "symdiff",
    "symmetric_difference",
    "Parts covered by exactly one of the two periods.",
    "timedef period symdiff 2015-01-01 2015-01-05 2015-01-03 2015-01-08",
)


@period.command(
    examples="""\
timedef period merge 2015-01-01/2015-01-05 2015-01-04/2015-01-09 2015-02-01/2015-02-02"""
)
@click.argument("ranges", nargs=-1, required=True, metavar="START/END...")
@click.pass_obj
def merge(app: AppContext, ranges: tuple[str, ...]) -> None:
    """Merge overlapping or touching periods."""
    app.emit(app.periods.merge(ranges))


@period.command(
    examples="""\
timedef period covers 2015-01-01 2015-01-10 2015-01-01/2015-01-05 2015-01-05/2015-01-10
timedef -q period covers 2015-01-01 2015-01-10 2015-01-01/2015-01-04"""
)
@period_arguments
@click.argument("ranges", nargs=-1, required=True, metavar="START/END...")
@click.pass_obj
def covers(app: AppContext, start: str, end: str, ranges: tuple[str, ...]) -> None:
    """Check whether the given periods together cover START..END."""
    app.emit(app.periods.covers(start, end, ranges))
