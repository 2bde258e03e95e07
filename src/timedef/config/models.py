"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``timedef.toml`` only holds
overrides. An empty (or missing) file is a valid configuration.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from timedef.domain.calendar import DayOfWeek

# --- timedef.toml sections ---


class CalendarConfig(BaseModel):
    """[calendar] section."""

    model_config = {"frozen": True}

    week_start: DayOfWeek = DayOfWeek.MONDAY

    @field_validator("week_start", mode="before")
    @classmethod
    def _parse_week_start(cls, value: Any) -> DayOfWeek:
        # Accepts "monday", "Mon", "0" or 0
        if isinstance(value, DayOfWeek):
            return value
        return DayOfWeek.parse(value)


class LimitsConfig(BaseModel):
    """[limits] section."""

    model_config = {"frozen": True}

    max_pieces: int = Field(default=10_000, gt=0)
    max_atoms_listed: int = Field(default=100, gt=0)


# --- Root config ---


class TimedefConfig(BaseModel):
    """Root model for ``timedef.toml``; every section is optional, unknown ones are errors."""

    model_config = {"frozen": True, "extra": "forbid"}

    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
