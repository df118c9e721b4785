"""Rich renderers for the ``verify`` and ``rules`` results.

Each renderer draws into a StringIO-backed console from
:func:`create_console`; :func:`render_result` returns the captured text.
Row values come straight from the batch file and are escaped before
they reach Rich markup.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from preloadctl.output.console import create_console, get_output, style_for_scope

if TYPE_CHECKING:
    from rich.console import Console

    from preloadctl.services.result import ServiceResult

_Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* for a terminal; plain text when not attached to one."""
    console = create_console()
    if result.ok:
        renderer: _Renderer = _OP_RENDERERS.get(result.op, _render_ok)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Output for ``--quiet``.

    ``verify`` prints the offending row indices one per line, ``rules``
    prints the codes, anything else a one-word status.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "verify" and result.data.get("rows"):
        return "\n".join(str(entry["row"]) for entry in result.data["rows"])
    if result.op == "rules":
        return "\n".join(str(item["code"]) for item in result.data.get("items", []))
    return f"OK: {result.op}"


# ── Verbose timings ───────────────────────────────────────────────────


def _render_timings(console: Console, result: ServiceResult) -> None:
    """Print the phase timings collected under ``--verbose``."""
    tree = (result.meta or {}).get("telemetry")
    if not tree:
        return
    console.print()
    console.print(Text("  timings:", style="dim"))
    _render_span(console, tree, depth=2)


def _render_span(console: Console, span: dict[str, Any], depth: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    line = Text(" " * depth * 2)
    line.append(f"{duration:>9.2f}ms", style=style)
    line.append(f"  {span.get('name', '?')}")
    notes = span.get("annotations") or {}
    if notes:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in notes.items()) + ")", style="dim")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, depth + 1)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    line = Text("ERROR", style="pl.error")
    line.append(f"  {result.op}", style="pl.op")
    line.append(f" — {err.message if err else 'Unknown error'}")
    console.print(line)
    if err is None:
        return
    console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose:
        for key, value in err.detail.items():
            console.print(Text(f"  {key}: {value}", style="dim"))


# ── Verify renderers ──────────────────────────────────────────────────


def _render_verify(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the violation report as one table row per violation."""
    rows = result.data.get("rows", [])
    checked = result.data.get("rows_checked", 0)

    if not rows:
        console.print(f"[pl.ok]OK[/pl.ok]  {checked} rows checked, no violations found.")
        if verbose:
            _render_timings(console, result)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Row", justify="right", no_wrap=True)
    table.add_column("Login", style="pl.login")
    table.add_column("Code", style="pl.code", no_wrap=True)
    table.add_column("Field", style="pl.field")
    table.add_column("Value")

    for entry in rows:
        first = True
        for violation in entry["violations"]:
            table.add_row(
                str(entry["row"]) if first else "",
                escape(str(entry["login"])) if first else "",
                str(violation["code"]),
                str(violation["field"]),
                escape(str(violation["value"])),
            )
            first = False

    console.print(table)

    count = result.data.get("count", 0)
    offending = result.data.get("rows_with_violations", len(rows))
    console.print(
        f"\n[pl.error]{count} violations[/pl.error] in {offending} of {checked} rows"
    )

    if verbose:
        codes = result.data.get("codes", {})
        if codes:
            console.print()
            for code, n in codes.items():
                console.print(f"  {code}: {n}")
        _render_timings(console, result)


def _render_rules(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the rule catalog."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Code", style="pl.code", no_wrap=True)
    table.add_column("Scope")
    table.add_column("Field", style="pl.field")
    table.add_column("Description")

    for item in items:
        scope = str(item.get("scope", ""))
        style = style_for_scope(scope)
        table.add_row(
            str(item.get("code", "")),
            f"[{style}]{scope}[/{style}]" if style else scope,
            str(item.get("field", "")),
            str(item.get("description", "")),
        )

    console.print(table)
    if verbose:
        _render_timings(console, result)


# ── Fallback ──────────────────────────────────────────────────────────


def _render_ok(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    line = Text("OK", style="pl.ok")
    line.append(f"  {result.op}", style="pl.op")
    console.print(line)
    if verbose:
        _render_timings(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, _Renderer] = {
    "verify": _render_verify,
    "rules": _render_rules,
}
