"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Owns the resolved settings, lazily built services
and centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timedef.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from timedef.config.settings import TimedefSettings
    from timedef.services.matching import MatchService
    from timedef.services.periods import PeriodService
    from timedef.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: TimedefSettings) -> None:
        self.settings = settings
        self._periods: PeriodService | None = None
        self._matcher: MatchService | None = None

        from timedef.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from timedef.services.telemetry import set_telemetry

            set_telemetry(True)

    @property
    def periods(self) -> PeriodService:
        if self._periods is None:
            from timedef.services.periods import PeriodService

            self._periods = PeriodService(self.settings)
        return self._periods

    @property
    def matcher(self) -> MatchService:
        if self._matcher is None:
            from timedef.services.matching import MatchService

            self._matcher = MatchService(self.settings)
        return self._matcher

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
