"""Command: list the verification rule catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from preloadctl.commands import examples_option

if TYPE_CHECKING:
    from preloadctl.commands._context import AppContext


@click.command()
@examples_option(
    """\
  preloadctl rules
  preloadctl rules --scope dataset
  preloadctl --json rules"""
)
@click.option(
    "--scope",
    type=click.Choice(["row", "dataset"]),
    default=None,
    help="Only list rules of this scope.",
)
@click.pass_obj
def rules(app: AppContext, scope: str | None) -> None:
    """List rule codes, reported fields and descriptions."""
    from preloadctl.services.verify import VerifyService

    app.emit(VerifyService(app.settings).list_rules(scope=scope))
