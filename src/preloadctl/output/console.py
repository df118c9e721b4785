"""Console and theme for report rendering.

Renderers draw into a StringIO so ``format_result`` can return a string;
Rich drops color codes on its own when stdout is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PRELOAD_THEME = Theme(
    {
        "pl.ok": "bold green",
        "pl.error": "bold red",
        "pl.op": "bold cyan",
        "pl.code": "bold magenta",
        "pl.login": "bold blue",
        "pl.field": "dim",
        "pl.scope.row": "green",
        "pl.scope.dataset": "yellow",
    }
)

REPORT_WIDTH = 120


def create_console() -> Console:
    return Console(file=StringIO(), theme=PRELOAD_THEME, highlight=False, width=REPORT_WIDTH)


def get_output(console: Console) -> str:
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_scope(scope: str) -> str:
    """Theme style for a rule scope (``row`` or ``dataset``); "" if unknown."""
    return f"pl.scope.{scope}" if scope in ("row", "dataset") else ""
