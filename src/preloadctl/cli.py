"""``preloadctl`` entry point."""

from __future__ import annotations

from pathlib import Path

import click

from preloadctl import __version__
from preloadctl.commands import register_commands
from preloadctl.commands._context import AppContext
from preloadctl.config.logging import configure_logging
from preloadctl.config.settings import PreloadSettings
from preloadctl.services.telemetry import enable_telemetry


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="preloadctl")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Policy file to use instead of the nearest preloadctl.toml.",
)
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print offending row numbers only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and phase timings.")
@click.option("--log-json", is_flag=True, help="Write log records to stderr as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, **flags: bool) -> None:
    """Check user import batches before they reach the directory."""
    settings = PreloadSettings.from_cli(config_path=config_path, **flags)
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
    if settings.verbose:
        enable_telemetry()
    ctx.obj = AppContext(settings)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
