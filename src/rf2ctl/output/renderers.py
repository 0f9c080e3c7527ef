"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from rf2ctl.output.console import create_console, get_output, style_for_view

if TYPE_CHECKING:
    from rich.console import Console

    from rf2ctl.services.result import ServiceResult


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
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "hash" in result.data and "items" not in result.data:
        return str(result.data["hash"])
    if "is_ancestor" in result.data:
        return "true" if result.data["is_ancestor"] else "false"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract an identifier from a dict item (relationship, group, concept)."""
    if isinstance(item, dict):
        for key in ("id", "group"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="rf2.ok")
    op = Text(f"  {result.op}", style="rf2.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="rf2.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="rf2.id")
    elif key == "hash":
        v = Text(str(value), style="rf2.hash")
    elif key in ("characteristic", "source", "target"):
        v = Text(str(value), style=style_for_view(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


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


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
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
    if span_data.get("annotations"):
        extras = [f"{ak}={av}" for ak, av in span_data["annotations"].items()]
        line += f"  ({', '.join(extras)})"
    if span_data.get("counters"):
        totals = " ".join(f"{ck}={cv}" for ck, cv in span_data["counters"].items())
        line += f"  [cyan]{totals}[/cyan]"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _relationship_table(items: list[dict[str, Any]]) -> Table:
    """Build a Rich Table for a list of relationships."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="rf2.id", no_wrap=True)
    table.add_column("Source", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Destination", no_wrap=True)
    table.add_column("Group", justify="right")
    for item in items:
        rel_id = item.get("id")
        table.add_row(
            "" if rel_id is None else str(rel_id),
            str(item.get("source_id", "")),
            str(item.get("type_id", "")),
            str(item.get("destination_id", "")),
            str(item.get("group", "")),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="rf2.error")
    op = Text(f"  {result.op}", style="rf2.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Graph renderers ───────────────────────────────────────────────────


def _render_fields(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render concept, ancestor and group_hash results as fields."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value) or "-"
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_relationships(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
) -> None:
    """Render match and equivalent results as a relationship table."""
    d = result.data
    _status_line(console, result)
    for key in ("concept_id", "characteristic", "mode", "source", "target", "group", "hash"):
        if key in d:
            _field(console, key, d[key])
    if d.get("matched_group") is not None:
        _field(console, "matched_group", d["matched_group"])

    items = d.get("items", [])
    if items:
        console.print()
        console.print(_relationship_table(items))
    console.print(f"{d.get('count', len(items))} relationships")
    if verbose:
        _render_meta(console, result)


def _render_groups(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render every group of a concept with its hash and members."""
    d = result.data
    view = str(d.get("characteristic", ""))
    style = style_for_view(view)
    console.print(Text(str(d.get("concept_id", "?")), style="rf2.id"), Text(view, style=style))
    for item in d.get("items", []):
        rels = item.get("relationships", [])
        console.print(
            f"\n[bold]Group {item.get('group')}[/bold] "
            f"[rf2.hash]{item.get('hash')}[/rf2.hash] ({len(rels)} relationships)"
        )
        for rel in rels:
            console.print(f"  {rel.get('type_id')} → {rel.get('destination_id')}")
    console.print(f"\n{d.get('count', 0)} groups")
    if verbose:
        _render_meta(console, result)


# ── Check renderers ───────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by view and category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[rf2.ok]OK[/rf2.ok]  No issues found.")
        if verbose:
            _render_meta(console, result)
        return

    severity_styles = {"error": "rf2.error", "warning": "rf2.warning"}

    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        cat = f"{issue.get('characteristic', '?')}/{issue.get('category', 'unknown')}"
        by_category.setdefault(cat, []).append(issue)

    for cat, cat_issues in by_category.items():
        console.print(f"\n[bold]{cat}[/bold]")
        for issue in cat_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            console.print(f"  {prefix} [{issue.get('kind', '')}]: {issue.get('message', '')}")

    errors = result.data.get("error_count", 0)
    warnings = result.data.get("warning_count", count - errors)
    console.print(f"\n{errors} errors, {warnings} warnings")
    if verbose:
        _render_meta(console, result)


def _render_compare(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render unmatched stated groups as a table with totals."""
    d = result.data
    items = d.get("items", [])
    if items:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Concept", style="rf2.id", no_wrap=True)
        table.add_column("Group", justify="right")
        table.add_column("Size", justify="right")
        table.add_column("Hash", style="rf2.hash")
        table.add_column("In Inferred")
        for item in items:
            table.add_row(
                str(item.get("id", "")),
                str(item.get("group", "")),
                str(item.get("size", "")),
                str(item.get("hash", "")),
                "yes" if item.get("in_inferred") else "no",
            )
        console.print(table)
        console.print()
    else:
        console.print("[rf2.ok]OK[/rf2.ok]  Every stated group has an inferred counterpart.")

    console.print(
        f"{d.get('concepts', 0)} concepts, {d.get('groups_compared', 0)} groups compared, "
        f"{d.get('matched', 0)} matched, {d.get('unmatched_count', 0)} unmatched"
    )
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Graph
    "concept": _render_fields,
    "ancestor": _render_fields,
    "group_hash": _render_fields,
    "groups": _render_groups,
    "match": _render_relationships,
    "equivalent": _render_relationships,
    # Check
    "check": _render_check,
    "compare": _render_compare,
}
