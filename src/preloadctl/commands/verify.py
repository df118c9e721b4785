"""Command: verify an import batch against the rule catalogs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from preloadctl.commands import examples_option
from preloadctl.domain.types import RuleCode

if TYPE_CHECKING:
    from preloadctl.commands._context import AppContext


@click.command()
@examples_option(
    """\
  preloadctl verify batch.json
  preloadctl --json verify batch.json
  preloadctl verify batch.json --workers 4
  preloadctl verify batch.json --code PLU0021 --code PLU0015
  preloadctl -q verify batch.json"""
)
@click.argument("batch", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Evaluate rows on this many threads.",
)
@click.option(
    "--code",
    "codes",
    multiple=True,
    type=click.Choice([c.value for c in RuleCode], case_sensitive=False),
    help="Only report this rule code (repeatable).",
)
@click.pass_obj
def verify(app: AppContext, batch: Path, workers: int | None, codes: tuple[str, ...]) -> None:
    """Verify every row of BATCH and report all rule violations."""
    from preloadctl.services.verify import VerifyService

    svc = VerifyService(app.settings)
    app.emit(svc.verify_file(batch, workers=workers, codes=codes or None))
