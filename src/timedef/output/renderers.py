"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
extracts the text via ``get_output(console)``. Renderers are dispatched
by ``result.op`` in :func:`render_result`. Unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from timedef.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from timedef.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    for warning in result.warnings if result.ok else []:
        console.print(Text(f"  warning: {warning}", style="td.warning"))

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one period per line, or a boolean."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    for flag in ("matched", "covered"):
        if flag in result.data:
            return "true" if result.data[flag] else "false"

    periods = result.data.get("periods")
    if isinstance(periods, list):
        return "\n".join(_period_text(p) for p in periods)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _period_text(period: dict[str, Any]) -> str:
    return f"{period.get('start', '?')}/{period.get('end', '?')}"


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="td.ok")
    op = Text(f"  {result.op}", style="td.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="td.key")
    if key in ("start", "end", "instant"):
        v = Text(str(value), style="td.instant")
    elif key == "duration":
        v = Text(str(value), style="td.duration")
    elif key == "expression":
        v = Text(str(value), style="td.expr")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _period_table(periods: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Start", style="td.instant", no_wrap=True)
    table.add_column("End", style="td.instant", no_wrap=True)
    table.add_column("Duration", style="td.duration", no_wrap=True)
    for index, period in enumerate(periods, start=1):
        table.add_row(
            str(index),
            str(period.get("start", "")),
            str(period.get("end", "")),
            str(period.get("duration", "")),
        )
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="td.error")
    op = Text(f"  {result.op}", style="td.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Period renderers ──────────────────────────────────────────────────


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("start", "end", "duration", "start_weekday", "end_weekday", "is_empty"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_periods(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render split/intersect/union/subtract/symdiff/merge results."""
    _status_line(console, result)
    for key in ("unit", "week_start"):
        if result.data.get(key):
            _field(console, key, result.data[key])
    periods = result.data.get("periods", [])
    if periods:
        console.print(_period_table(periods))
    console.print(f"\n{result.data.get('count', len(periods))} periods")
    if verbose:
        _render_meta(console, result)


def _render_covers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    covered = bool(result.data.get("covered"))
    _field(console, "covered", "yes" if covered else "no")
    _field(console, "candidates", result.data.get("candidates", 0))
    if verbose:
        _render_meta(console, result)


# ── Match renderer ────────────────────────────────────────────────────


def _render_match(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    if d.get("matched"):
        console.print(Text("MATCH", style="td.match"))
    else:
        console.print(Text("NO MATCH", style="td.nomatch"))
    _field(console, "expression", d.get("expression", ""))
    period = d.get("period") or {}
    _field(console, "start", period.get("start", ""))
    _field(console, "end", period.get("end", ""))
    _field(console, "granularity", d.get("granularity") or "period")

    atoms = d.get("atoms")
    if atoms:
        console.print()
        console.print(_period_table(atoms))
        suffix = " (truncated)" if d.get("atoms_truncated") else ""
        console.print(f"\n{len(atoms)} matching atoms{suffix}")
    if verbose:
        _render_meta(console, result)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    if d.get("matched"):
        console.print(Text("MATCH", style="td.match"))
    else:
        console.print(Text("NO MATCH", style="td.nomatch"))
    _field(console, "expression", d.get("expression", ""))
    _field(console, "instant", d.get("instant", ""))
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "describe": _render_describe,
    "split": _render_periods,
    "intersect": _render_periods,
    "union": _render_periods,
    "subtract": _render_periods,
    "symmetric_difference": _render_periods,
    "merge": _render_periods,
    "covers": _render_covers,
    "match": _render_match,
    "check": _render_check,
}
