"""Subcommands of ``preloadctl``.

Command modules are imported inside :func:`register_commands` so that
``preloadctl --help`` does not load the rule catalogs.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click


def examples_option(text: str) -> Callable[[Any], Any]:
    """``--examples``: print *text* and exit without running the command."""

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value and not ctx.resilient_parsing:
            click.echo(text)
            ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples and exit.",
    )


def register_commands(cli: click.Group) -> None:
    from preloadctl.commands.rules import rules
    from preloadctl.commands.verify import verify

    cli.add_command(verify)
    cli.add_command(rules)
