"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from regctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from regctl.services.result import ServiceResult

_LABELS: dict[str, str] = {
    "OUTGOING": "Outgoing Letter",
    "CERTIFICATE": "Certificate Letter",
}


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Display numbers where the op has them, otherwise ``OK: <op>``.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(
            str(item.get("register_display") or item.get("display", "")) for item in items
        )

    for key in ("register_display", "display"):
        if key in result.data:
            return str(result.data[key])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="reg.ok"), Text(f"  {result.op}", style="reg.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="reg.key")
    if key == "id":
        v = Text(str(value), style="reg.id")
    elif key in ("register_display", "display"):
        v = Text(str(value), style="reg.number")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v)


def _status_text(status: str) -> Text:
    return Text(status, style=style_for_status(status))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
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
    """Render a hierarchical span tree with timings."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    console.print(f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}")
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="reg.error"),
        Text(f"  {result.op}", style="reg.op"),
        Text(" — "),
        msg,
    )

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Letter renderers ──────────────────────────────────────────────────


def _render_letter(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render issue/void/show results as a panel headed by the display number."""
    d = result.data
    _status_line(console, result)

    lines: list[str] = [
        f"classification: {_LABELS.get(d.get('classification', ''), d.get('classification'))}",
        f"letter date: {d.get('letter_date', '-')}",
        f"subject: {d.get('subject', '')}",
        f"party: {d.get('party') or '-'}",
        f"status: {d.get('status', '')}",
    ]
    if verbose:
        lines += [
            f"id: {d.get('id', '')}",
            f"sequence: {d.get('year')} #{d.get('register_no')}",
            f"created: {d.get('created_at', '')}",
            f"updated: {d.get('updated_at', '')}",
        ]
    else:
        lines.append(f"id: {d.get('id', '')}")

    border = style_for_status(str(d.get("status", ""))) or "dim"
    title = str(d.get("register_display", "?"))
    console.print(Panel("\n".join(lines), title=title, border_style=border, expand=False))


def _render_purge(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("register_display", "id"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_next(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the next-number preview."""
    _status_line(console, result)
    _field(console, "display", result.data.get("display", ""))
    console.print(Text("  (preview only, not reserved)", style="dim"))


# ── Listing renderers ─────────────────────────────────────────────────


def _letter_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Number", style="reg.number", no_wrap=True)
    table.add_column("Date", no_wrap=True)
    table.add_column("Classification")
    table.add_column("Subject")
    table.add_column("Party")
    table.add_column("Status", no_wrap=True)
    if verbose:
        table.add_column("ID", style="reg.id", no_wrap=True)

    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("register_display", "")),
            str(item.get("letter_date") or "-"),
            _LABELS.get(str(item.get("classification", "")), str(item.get("classification", ""))),
            str(item.get("subject", "")),
            str(item.get("party") or "-"),
            _status_text(status),
        ]
        if verbose:
            row.append(str(item.get("id", "")))
        table.add_row(*row)
    return table


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if items:
        console.print(_letter_table(items, verbose=verbose))
    else:
        console.print(Text("No letters match.", style="dim"))

    stats = result.data.get("stats", {})
    console.print(
        f"\nTotal: {stats.get('total', 0)} • Active: {stats.get('active', 0)} • "
        f"Void: {stats.get('void', 0)} • Shown: {stats.get('shown', len(items))}"
    )


def _render_counters(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(
            Text("No counters yet. They appear after the first letter is issued.", style="dim")
        )
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Year", justify="right")
    table.add_column("Classification")
    table.add_column("Last Number", style="reg.number", no_wrap=True)
    table.add_column("Last #", justify="right")
    for item in items:
        table.add_row(
            str(item.get("year", "")),
            str(item.get("label") or item.get("classification", "")),
            str(item.get("display", "")),
            str(item.get("last", 0)),
        )
    console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_Renderer = Callable[..., None]

_OP_RENDERERS: dict[str, _Renderer] = {
    "issue": _render_letter,
    "void": _render_letter,
    "show": _render_letter,
    "purge": _render_purge,
    "next": _render_next,
    "list": _render_list,
    "counters": _render_counters,
}
