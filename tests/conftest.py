"""Shared pytest fixtures and test helpers for timedef tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from timedef.config.settings import TimedefSettings
from timedef.domain.period import Period
from timedef.services.telemetry import set_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run every test in an empty directory with no TIMEDEF_* variables.

    Also undoes what the CLI does to process-wide state: root logging
    handlers, the ``timedef`` logger level and the telemetry switch.
    """
    for name in list(os.environ):
        if name.startswith("TIMEDEF_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    timedef_level = logging.getLogger("timedef").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("timedef").setLevel(timedef_level)
    set_telemetry(False)


@pytest.fixture
def settings() -> TimedefSettings:
    """Code-default settings (no TOML, no env)."""
    return TimedefSettings()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def dt(text: str) -> datetime:
    """``dt("2015-06-01T07:30")`` — terse ISO datetimes in tests."""
    return datetime.fromisoformat(text)


def period(start: str, end: str) -> Period:
    """``period("2015-01-01", "2015-01-04")``."""
    return Period(dt(start), dt(end))
