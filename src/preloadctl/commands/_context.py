"""Per-invocation state handed to every subcommand via ``@click.pass_obj``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import click

from preloadctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from preloadctl.config.settings import PreloadSettings
    from preloadctl.services.result import ServiceResult


@dataclass(frozen=True)
class AppContext:
    settings: PreloadSettings

    @property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed operation goes to stderr and exits 1.

        A verify report full of violations is still a successful operation.
        """
        click.echo(format_result(result, settings=self.output), err=not result.ok)
        if not result.ok:
            raise SystemExit(1)
