"""MatchService — build a TimeDef from simple criteria and validate a period.

Criteria map onto expression leaves:

==================  =====================================
criterion           leaf
==================  =====================================
years               ``Year``
months              ``Month`` (names or numbers)
days                ``Day`` (day of month)
hours / minutes     ``Hour`` / ``Minute``
weekdays            ``Weekday`` (names or numbers)
week_of_month       ``WeekOfMonth`` from ``"DAY:N"``
duration            ``Days``/``Hours``/``Minutes`` from ISO-8601
weeks               ``Weeks`` at the configured week start
date_span           ``DateSpan``, or ``DateTimeSpan`` with times
time_span           ``TimeSpan`` (``22:00/06:00`` wraps)
==================  =====================================

Leaves are joined with ``And`` (``Or`` when ``any_``), optionally negated.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from timedef.domain.calendar import DayOfWeek, MonthOfYear
from timedef.domain.durations import parse_duration
from timedef.domain.expressions import (
    DateSpan,
    DateTimeSpan,
    Days,
    Hours,
    Minutes,
    Not,
    TimeDef,
    TimeSpan,
    Weeks,
    chain_by_and,
    chain_by_or,
    from_day,
    from_hour,
    from_minute,
    from_month,
    from_week_of_month,
    from_weekday,
    from_year,
    walk,
)
from timedef.services._helpers import (
    parse_date,
    parse_instant,
    parse_period,
    parse_time,
    period_to_dict,
    split_range,
)
from timedef.services.base import BaseService
from timedef.services.result import ServiceResult
from timedef.services.telemetry import trace_span, traced
from timedef.services.validator import TimeDefDateTimeValidator, TimeDefPeriodValidator, infer_granularity

if TYPE_CHECKING:
    from timedef.config.settings import TimedefSettings

INVALID_CRITERIA = "INVALID_CRITERIA"
INVALID_PERIOD = "INVALID_PERIOD"
INVALID_INSTANT = "INVALID_INSTANT"


def duration_leaf(text: str) -> TimeDef:
    """``Days``, ``Hours`` or ``Minutes`` for an ISO-8601 duration.

    Raises:
        ValueError: If the duration is not a whole number of minutes.
    """
    span = parse_duration(text)
    if span < timedelta(0):
        msg = f"Duration must not be negative: {text!r}"
        raise ValueError(msg)
    for unit, leaf in ((timedelta(days=1), Days), (timedelta(hours=1), Hours), (timedelta(minutes=1), Minutes)):
        if span % unit == timedelta(0):
            return leaf(span // unit)
    msg = f"Duration must be a whole number of minutes: {text!r}"
    raise ValueError(msg)


def parse_week_of_month(text: str) -> TimeDef:
    """``"mon:2"`` -> second Monday, ``"fri:-1"`` -> last Friday."""
    day, sep, occurrence = text.partition(":")
    if not sep:
        msg = f"Expected DAY:N, got {text!r}"
        raise ValueError(msg)
    try:
        n = int(occurrence)
    except ValueError:
        msg = f"Occurrence must be an integer, got {occurrence!r}"
        raise ValueError(msg) from None
    return from_week_of_month(DayOfWeek.parse(day), n)


def span_leaf(text: str) -> TimeDef:
    """``DateSpan`` for ``FROM/TO`` dates, ``DateTimeSpan`` when a bound has a time."""
    left, right = split_range(text)
    if "T" in left.upper() or "T" in right.upper():
        return DateTimeSpan(parse_instant(left), parse_instant(right))
    return DateSpan(parse_date(left), parse_date(right))


def time_span_leaf(text: str) -> TimeDef:
    left, right = split_range(text)
    return TimeSpan(parse_time(left), parse_time(right))


def _mixes_timezones(expression: TimeDef, reference: datetime) -> bool:
    for node in walk(expression):
        if isinstance(node, DateTimeSpan):
            kinds = {b.tzinfo is None for b in (node.start, node.end, reference)}
            if len(kinds) > 1:
                return True
    return False


class MatchService(BaseService):
    """Answers "does this period contain a matching instant?" and "does this instant match?"."""

    def __init__(self, settings: TimedefSettings | None = None) -> None:
        super().__init__(settings)
        self._validator = TimeDefPeriodValidator()
        self._instant_validator = TimeDefDateTimeValidator()

    def build_expression(
        self,
        *,
        years: Sequence[int] = (),
        months: Sequence[str | int] = (),
        days: Sequence[int] = (),
        hours: Sequence[int] = (),
        minutes: Sequence[int] = (),
        weekdays: Sequence[str | int] = (),
        week_of_month: str | None = None,
        duration: str | None = None,
        weeks: int | None = None,
        date_span: str | None = None,
        time_span: str | None = None,
        any_: bool = False,
        negate: bool = False,
    ) -> TimeDef:
        """Combine the given criteria into one expression.

        Raises:
            ValueError: For invalid criteria or when none are given.
        """
        leaves: list[TimeDef] = []
        if years:
            leaves.append(from_year(*years))
        if months:
            leaves.append(from_month(*(MonthOfYear.parse(m) for m in months)))
        if days:
            leaves.append(from_day(*days))
        if hours:
            leaves.append(from_hour(*hours))
        if minutes:
            leaves.append(from_minute(*minutes))
        if weekdays:
            leaves.append(from_weekday(*(DayOfWeek.parse(d) for d in weekdays)))
        if week_of_month:
            leaves.append(parse_week_of_month(week_of_month))
        if duration:
            leaves.append(duration_leaf(duration))
        if weeks is not None:
            leaves.append(Weeks(weeks, self._settings.calendar.week_start))
        if date_span:
            leaves.append(span_leaf(date_span))
        if time_span:
            leaves.append(time_span_leaf(time_span))

        if not leaves:
            msg = "No match criteria given"
            raise ValueError(msg)
        expression = chain_by_or(*leaves) if any_ else chain_by_and(*leaves)
        return Not(expression) if negate else expression

    @traced
    def match(
        self,
        start: str,
        end: str,
        *,
        list_atoms: bool = False,
        limit: int | None = None,
        **criteria: object,
    ) -> ServiceResult:
        """Validate the period ``[start, end]`` against the criteria.

        With *list_atoms*, up to *limit* (default ``limits.max_atoms_listed``)
        satisfying atoms are returned as well.
        """
        op = "match"
        try:
            period = parse_period(start, end)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc), start=start, end=end)

        with trace_span("build_expression"):
            try:
                expression = self.build_expression(**criteria)  # type: ignore[arg-type]
            except ValueError as exc:
                return ServiceResult.failure(op, INVALID_CRITERIA, str(exc))

        if _mixes_timezones(expression, period.start):
            return ServiceResult.failure(op, INVALID_CRITERIA, "Cannot mix naive and timezone-aware instants")

        granularity = infer_granularity(expression)
        data: dict[str, object] = {
            "expression": str(expression),
            "granularity": granularity.name.lower() if granularity is not None else None,
            "period": period_to_dict(period),
        }

        with trace_span("validate") as span:
            if list_atoms:
                cap = limit if limit is not None else self._settings.limits.max_atoms_listed
                atoms = list(itertools.islice(self._validator.matching_atoms(expression, period), cap + 1))
                data["matched"] = bool(atoms)
                data["atoms"] = [period_to_dict(a) for a in atoms[:cap]]
                data["atoms_truncated"] = len(atoms) > cap
            else:
                data["matched"] = self._validator.is_valid(expression, period)
            if span:
                span.annotate("granularity", data["granularity"] or "period")

        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def check(self, instant: str, **criteria: object) -> ServiceResult:
        """Does the single instant *instant* satisfy the criteria?

        Duration criteria do not constrain an instant and always hold.
        """
        op = "check"
        try:
            moment = parse_instant(instant)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_INSTANT, str(exc), instant=instant)

        with trace_span("build_expression"):
            try:
                expression = self.build_expression(**criteria)  # type: ignore[arg-type]
            except ValueError as exc:
                return ServiceResult.failure(op, INVALID_CRITERIA, str(exc))

        if _mixes_timezones(expression, moment):
            return ServiceResult.failure(op, INVALID_CRITERIA, "Cannot mix naive and timezone-aware instants")

        with trace_span("validate"):
            matched = self._instant_validator.is_valid(expression, moment)

        return ServiceResult(
            ok=True,
            op=op,
            data={"expression": str(expression), "instant": moment.isoformat(), "matched": matched},
        )
