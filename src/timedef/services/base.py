"""BaseService — shared foundation for timedef services.

Every service receives the resolved :class:`TimedefSettings` at
construction time; limits and the calendar week start come from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timedef.config.settings import TimedefSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class PeriodService(BaseService):
            @traced
            def split(self, start: str, end: str, unit: str) -> ServiceResult:
                limit = self._settings.limits.max_pieces
                ...
    """

    def __init__(self, settings: TimedefSettings | None = None) -> None:
        if settings is None:
            from timedef.config.settings import TimedefSettings

            settings = TimedefSettings()
        self._settings = settings

    @property
    def settings(self) -> TimedefSettings:
        return self._settings
