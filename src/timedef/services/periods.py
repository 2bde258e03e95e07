"""PeriodService — interval arithmetic and decomposition over ISO-8601 input.

Every operation takes raw ISO-8601 strings (as typed on the command
line), builds :class:`Period` values and returns a ServiceResult.
Unparsable or reversed ranges become ``INVALID_PERIOD`` failures.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence

from timedef.domain.calendar import DayOfWeek
from timedef.domain.period import Granularity, InvalidPeriodError, Period, merge_periods
from timedef.services._helpers import parse_period, period_to_dict, split_range
from timedef.services.base import BaseService
from timedef.services.result import ServiceResult
from timedef.services.telemetry import trace_span, traced

INVALID_PERIOD = "INVALID_PERIOD"
TOO_MANY_PIECES = "TOO_MANY_PIECES"
INVALID_UNIT = "INVALID_UNIT"


def _pieces(op: str, periods: Sequence[Period], **extra: object) -> ServiceResult:
    return ServiceResult(
        ok=True,
        op=op,
        data={**extra, "periods": [period_to_dict(p) for p in periods], "count": len(periods)},
    )


def _same_kind(periods: Sequence[Period]) -> list[Period]:
    """Reject a mix of naive and aware periods; they cannot be compared."""
    if len({p.start.tzinfo is None for p in periods}) > 1:
        msg = "Cannot mix naive and timezone-aware instants"
        raise InvalidPeriodError(msg)
    return list(periods)


def _parse_ranges(ranges: Sequence[str]) -> list[Period]:
    return _same_kind([parse_period(*split_range(text)) for text in ranges])


def _parse_pair(start: str, end: str, other_start: str, other_end: str) -> tuple[Period, Period]:
    period, other = _same_kind([parse_period(start, end), parse_period(other_start, other_end)])
    return period, other


class PeriodService(BaseService):
    """Period arithmetic exposed to the CLI."""

    @traced
    def describe(self, start: str, end: str) -> ServiceResult:
        op = "describe"
        try:
            period = parse_period(start, end)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc), start=start, end=end)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **period_to_dict(period),
                "start_weekday": DayOfWeek.of(period.start).name.lower(),
                "end_weekday": DayOfWeek.of(period.end).name.lower(),
                "is_empty": period.is_empty,
            },
        )

    @traced
    def split(
        self,
        start: str,
        end: str,
        unit: str,
        *,
        week_start: str | None = None,
    ) -> ServiceResult:
        """Decompose a period into calendar-aligned pieces.

        Refuses to materialise more than ``limits.max_pieces`` pieces.
        """
        op = "split"
        try:
            period = parse_period(start, end)
            first_day = (
                DayOfWeek.parse(week_start) if week_start is not None else self._settings.calendar.week_start
            )
            granularity = Granularity[unit.upper()]
        except KeyError:
            return ServiceResult.failure(op, INVALID_UNIT, f"Unknown unit: {unit!r}", unit=unit)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc), start=start, end=end)

        limit = self._settings.limits.max_pieces
        with trace_span("decompose") as span:
            pieces = list(itertools.islice(period.split(granularity, first_day), limit + 1))
            if span:
                span.annotate("pieces", len(pieces))
        if len(pieces) > limit:
            return ServiceResult.failure(
                op,
                TOO_MANY_PIECES,
                f"Splitting by {granularity.name.lower()} yields more than {limit} pieces",
                limit=limit,
                unit=granularity.name.lower(),
            )

        return _pieces(
            op,
            pieces,
            unit=granularity.name.lower(),
            week_start=first_day.name.lower() if granularity is Granularity.WEEK else None,
        )

    @traced
    def intersect(self, start: str, end: str, other_start: str, other_end: str) -> ServiceResult:
        op = "intersect"
        try:
            period, other = _parse_pair(start, end, other_start, other_end)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc))
        overlap = period.intersect(other)
        return _pieces(op, [overlap] if overlap is not None else [], overlapping=overlap is not None)

    @traced
    def union(self, start: str, end: str, other_start: str, other_end: str) -> ServiceResult:
        """Covering period of two overlapping periods; disjoint inputs come back unchanged."""
        op = "union"
        try:
            period, other = _parse_pair(start, end, other_start, other_end)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc))
        combined = period.union(other)
        if combined is None:
            return _pieces(op, sorted([period, other]), overlapping=False)
        return _pieces(op, [combined], overlapping=True)

    @traced
    def subtract(self, start: str, end: str, other_start: str, other_end: str) -> ServiceResult:
        op = "subtract"
        try:
            period, other = _parse_pair(start, end, other_start, other_end)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc))
        return _pieces(op, period.subtract(other))

    @traced
    def symmetric_difference(self, start: str, end: str, other_start: str, other_end: str) -> ServiceResult:
        op = "symmetric_difference"
        try:
            period, other = _parse_pair(start, end, other_start, other_end)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc))
        return _pieces(op, period.symmetric_difference(other))

    @traced
    def merge(self, ranges: Sequence[str]) -> ServiceResult:
        """Merge ``START/END`` ranges into disjoint periods."""
        op = "merge"
        try:
            periods = _parse_ranges(ranges)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc))
        return _pieces(op, merge_periods(periods))

    @traced
    def covers(self, start: str, end: str, ranges: Sequence[str]) -> ServiceResult:
        """Whether the ``START/END`` ranges together cover the period."""
        op = "covers"
        try:
            period, *candidates = _same_kind([parse_period(start, end), *_parse_ranges(ranges)])
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_PERIOD, str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "period": period_to_dict(period),
                "covered": period.is_covered_by(candidates),
                "candidates": len(candidates),
            },
        )
