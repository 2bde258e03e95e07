"""Tests for the period CLI command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from timedef.cli import cli


class TestDescribe:
    def test_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["period", "describe", "2015-01-01", "2015-01-04"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "P3D" in result.output
        assert "thursday" in result.output

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "period", "describe", "2015-06-01T07:00", "2015-06-01T07:30"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["duration"] == "PT30M"

    def test_reversed_period_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "period", "describe", "2013-10-20", "2013-10-19"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "INVALID_PERIOD"

    def test_missing_argument(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["period", "describe", "2015-01-01"])
        assert result.exit_code == 2


class TestSplit:
    def test_default_unit_is_day(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "period", "split", "2015-01-01", "2015-01-04"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["unit"] == "day"
        assert data["count"] == 3

    def test_quiet_lists_ranges(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "period", "split", "2015-01-15", "2015-03-01", "--unit", "month"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "2015-01-15T00:00:00/2015-02-01T00:00:00",
            "2015-02-01T00:00:00/2015-03-01T00:00:00",
        ]

    def test_week_start_option(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "period", "split", "2015-07-01", "2015-07-15", "--unit", "WEEK", "--week-start", "sun"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["count"] == 3
        assert data["week_start"] == "sunday"

    def test_unknown_unit_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["period", "split", "2015-01-01", "2015-01-04", "--unit", "fortnight"])
        assert result.exit_code == 2

    def test_too_many_pieces(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIMEDEF_LIMITS__MAX_PIECES", "10")
        result = cli_runner.invoke(cli, ["period", "split", "2015-01-01", "2015-01-04", "--unit", "hour"])
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "more than 10 pieces" in result.output

    def test_verbose_shows_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "period", "split", "2015-01-01", "2015-01-04"])
        assert result.exit_code == 0
        assert "PeriodService.split" in result.output
        assert "decompose" in result.output


class TestBinaryCommands:
    def test_intersect(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "period", "intersect", "2015-01-10", "2015-01-13", "2015-01-11", "2015-01-14"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "2015-01-11T00:00:00/2015-01-13T00:00:00"

    def test_union(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "period", "union", "2015-01-01", "2015-01-05", "2015-01-05", "2015-01-09"]
        )
        data = json.loads(result.output)["data"]
        assert data["overlapping"] is True
        assert data["count"] == 1

    def test_subtract(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "period", "subtract", "2015-01-01", "2015-01-10", "2015-01-04", "2015-01-06"]
        )
        assert result.output.splitlines() == [
            "2015-01-01T00:00:00/2015-01-04T00:00:00",
            "2015-01-06T00:00:00/2015-01-10T00:00:00",
        ]

    def test_symdiff(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "period", "symdiff", "2015-01-01", "2015-01-05", "2015-01-03", "2015-01-08"]
        )
        data = json.loads(result.output)
        assert data["op"] == "symmetric_difference"
        assert data["data"]["count"] == 2

    def test_human_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["period", "subtract", "2015-01-01", "2015-01-10", "2015-01-04", "2015-01-06"]
        )
        assert result.exit_code == 0
        assert "2 periods" in result.output


class TestMergeAndCovers:
    def test_merge(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "period", "merge", "2015-01-04/2015-01-09", "2015-01-01/2015-01-05"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "2015-01-01T00:00:00/2015-01-09T00:00:00"

    def test_merge_requires_ranges(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["period", "merge"]).exit_code == 2

    def test_merge_bad_range(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["period", "merge", "2015-01-04"])
        assert result.exit_code == 1
        assert "FROM/TO" in result.output

    def test_covers(self, cli_runner: CliRunner) -> None:
        ranges = ["2015-01-01/2015-01-05", "2015-01-05/2015-01-10"]
        result = cli_runner.invoke(cli, ["-q", "period", "covers", "2015-01-01", "2015-01-10", *ranges])
        assert result.exit_code == 0
        assert result.output.strip() == "true"

    def test_covers_gap(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["period", "covers", "2015-01-01", "2015-01-10", "2015-01-01/2015-01-04"])
        assert result.exit_code == 0
        assert "covered: no" in result.output
