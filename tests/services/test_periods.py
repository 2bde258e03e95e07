"""Tests for PeriodService."""

from __future__ import annotations

import pytest

from timedef.config.models import LimitsConfig
from timedef.config.settings import TimedefSettings
from timedef.services.periods import PeriodService


@pytest.fixture
def service(settings: TimedefSettings) -> PeriodService:
    return PeriodService(settings)


def _bounds(result_periods: list[dict[str, object]]) -> list[tuple[object, object]]:
    return [(p["start"], p["end"]) for p in result_periods]


class TestDescribe:
    def test_describe(self, service: PeriodService) -> None:
        result = service.describe("2015-01-01", "2015-01-04")
        assert result.ok
        assert result.data["duration"] == "P3D"
        assert result.data["duration_seconds"] == 259200.0
        assert result.data["start_weekday"] == "thursday"
        assert result.data["end_weekday"] == "sunday"
        assert result.data["is_empty"] is False

    def test_reversed_period(self, service: PeriodService) -> None:
        result = service.describe("2013-10-20", "2013-10-19")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PERIOD"
        assert result.error.detail == {"start": "2013-10-20", "end": "2013-10-19"}

    def test_unparsable(self, service: PeriodService) -> None:
        result = service.describe("yesterday", "2013-10-19")
        assert result.error is not None
        assert result.error.code == "INVALID_PERIOD"
        assert "yesterday" in result.error.message


class TestSplit:
    def test_days(self, service: PeriodService) -> None:
        result = service.split("2015-01-01", "2015-01-04", "day")
        assert result.ok
        assert result.data["count"] == 3
        assert result.data["unit"] == "day"
        assert result.data["week_start"] is None
        assert result.data["periods"][0]["start"] == "2015-01-01T00:00:00"

    def test_weeks_use_configured_start(self) -> None:
        settings = TimedefSettings(calendar={"week_start": "sunday"})
        result = PeriodService(settings).split("2015-07-01", "2015-07-15", "week")
        assert result.data["week_start"] == "sunday"
        assert [p["start"] for p in result.data["periods"]] == [
            "2015-07-01T00:00:00",
            "2015-07-05T00:00:00",
            "2015-07-12T00:00:00",
        ]

    def test_week_start_argument_wins(self, service: PeriodService) -> None:
        result = service.split("2015-07-01T08:00", "2015-08-02T18:00", "WEEK", week_start="mon")
        assert result.data["count"] == 5
        assert result.data["week_start"] == "monday"

    def test_too_many_pieces(self) -> None:
        settings = TimedefSettings(limits=LimitsConfig(max_pieces=2))
        result = PeriodService(settings).split("2015-01-01", "2015-01-04", "day")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "TOO_MANY_PIECES"
        assert result.error.detail == {"limit": 2, "unit": "day"}

    def test_exactly_at_limit(self) -> None:
        settings = TimedefSettings(limits=LimitsConfig(max_pieces=3))
        assert PeriodService(settings).split("2015-01-01", "2015-01-04", "day").ok

    def test_unknown_unit(self, service: PeriodService) -> None:
        result = service.split("2015-01-01", "2015-01-04", "fortnight")
        assert result.error is not None
        assert result.error.code == "INVALID_UNIT"

    def test_bad_week_start(self, service: PeriodService) -> None:
        result = service.split("2015-01-01", "2015-01-04", "week", week_start="funday")
        assert result.error is not None
        assert result.error.code == "INVALID_PERIOD"


class TestBinaryOperations:
    def test_intersect(self, service: PeriodService) -> None:
        result = service.intersect("2015-01-10", "2015-01-13", "2015-01-11", "2015-01-14")
        assert result.data["overlapping"] is True
        assert _bounds(result.data["periods"]) == [("2015-01-11T00:00:00", "2015-01-13T00:00:00")]

    def test_intersect_disjoint(self, service: PeriodService) -> None:
        result = service.intersect("2015-01-01", "2015-01-02", "2015-01-03", "2015-01-04")
        assert result.ok
        assert result.data["overlapping"] is False
        assert result.data["count"] == 0

    def test_union_overlapping(self, service: PeriodService) -> None:
        result = service.union("2015-01-01", "2015-01-05", "2015-01-04", "2015-01-09")
        assert _bounds(result.data["periods"]) == [("2015-01-01T00:00:00", "2015-01-09T00:00:00")]

    def test_union_disjoint_returns_both_sorted(self, service: PeriodService) -> None:
        result = service.union("2015-01-03", "2015-01-04", "2015-01-01", "2015-01-02")
        assert result.data["overlapping"] is False
        assert [p["start"] for p in result.data["periods"]] == ["2015-01-01T00:00:00", "2015-01-03T00:00:00"]

    def test_subtract_nested(self, service: PeriodService) -> None:
        result = service.subtract("2015-01-01", "2015-01-10", "2015-01-04", "2015-01-06")
        assert _bounds(result.data["periods"]) == [
            ("2015-01-01T00:00:00", "2015-01-04T00:00:00"),
            ("2015-01-06T00:00:00", "2015-01-10T00:00:00"),
        ]

    def test_symmetric_difference(self, service: PeriodService) -> None:
        result = service.symmetric_difference("2015-01-01", "2015-01-05", "2015-01-03", "2015-01-08")
        assert result.data["count"] == 2

    def test_mixed_timezones(self, service: PeriodService) -> None:
        result = service.intersect("2015-01-01", "2015-01-05", "2015-01-03T00:00+00:00", "2015-01-08T00:00+00:00")
        assert result.error is not None
        assert result.error.code == "INVALID_PERIOD"
        assert "naive" in result.error.message


class TestMergeAndCovers:
    def test_merge(self, service: PeriodService) -> None:
        result = service.merge(["2015-01-04/2015-01-09", "2015-01-01/2015-01-05", "2015-02-01/2015-02-02"])
        assert _bounds(result.data["periods"]) == [
            ("2015-01-01T00:00:00", "2015-01-09T00:00:00"),
            ("2015-02-01T00:00:00", "2015-02-02T00:00:00"),
        ]

    def test_merge_bad_range(self, service: PeriodService) -> None:
        result = service.merge(["2015-01-04"])
        assert result.error is not None
        assert result.error.code == "INVALID_PERIOD"
        assert "FROM/TO" in result.error.message

    def test_covers(self, service: PeriodService) -> None:
        result = service.covers("2015-01-01", "2015-01-10", ["2015-01-01/2015-01-05", "2015-01-05/2015-01-10"])
        assert result.data["covered"] is True
        assert result.data["candidates"] == 2

    def test_covers_with_gap(self, service: PeriodService) -> None:
        result = service.covers("2015-01-01", "2015-01-10", ["2015-01-01/2015-01-04", "2015-01-05/2015-01-10"])
        assert result.data["covered"] is False
