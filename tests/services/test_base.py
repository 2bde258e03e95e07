"""Tests for BaseService and service inheritance."""

from __future__ import annotations

from pathlib import Path

import pytest

from timedef.config.settings import TimedefSettings
from timedef.domain.calendar import DayOfWeek
from timedef.services.base import BaseService
from timedef.services.matching import MatchService
from timedef.services.periods import PeriodService


class TestBaseService:
    def test_settings_stored(self, settings: TimedefSettings) -> None:
        assert BaseService(settings).settings is settings

    def test_direct_construction_skips_toml_discovery(self, tmp_path: Path) -> None:
        (tmp_path / "timedef.toml").write_text('[calendar]\nweek_start = "sunday"\n')
        assert BaseService().settings.calendar.week_start is DayOfWeek.MONDAY

    def test_env_reaches_default_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIMEDEF_LIMITS__MAX_PIECES", "7")
        assert BaseService().settings.limits.max_pieces == 7


@pytest.mark.parametrize("service_cls", [PeriodService, MatchService])
def test_services_extend_base(service_cls: type[BaseService]) -> None:
    assert issubclass(service_cls, BaseService)
