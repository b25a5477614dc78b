"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from pathctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from pathctl.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode: ids only where there are ids."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    for key in ("point_id", "project_id", "user_id"):
        if key in result.data and result.op != "get_path":
            return str(result.data[key])

    points = result.data.get("points")
    if isinstance(points, list):
        return "\n".join(str(p["id"]) for p in points)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="path.ok")
    op = Text(f"  {result.op}", style="path.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="path.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="path.id")
    elif key == "title":
        v = Text(str(value), style="path.title")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _edge_line(console: Console, edge: dict[str, Any], *, indent: int = 4) -> None:
    console.print(
        f"{' ' * indent}[path.id]{edge['origin_id']}[/path.id]"
        f" [path.edge]->[/path.edge] [path.id]{edge['destination_id']}[/path.id]"
    )


def _span_label(span: dict[str, Any]) -> str:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    label = f"[{style}]{duration:.2f}ms[/{style}] {span.get('name', '?')}"
    notes = span.get("annotations") or {}
    if notes:
        label += " (" + ", ".join(f"{k}={v}" for k, v in notes.items()) + ")"
    return label


def _add_spans(tree: Tree, span: dict[str, Any]) -> None:
    branch = tree.add(_span_label(span))
    for child in span.get("children", []):
        _add_spans(branch, child)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Verbose footer: timing span tree plus any other meta keys."""
    if not result.meta:
        return
    console.print()
    root = Tree("[dim]meta[/dim]", guide_style="dim")
    for key, value in result.meta.items():
        if key == "telemetry":
            _add_spans(root, value)
        else:
            root.add(f"{key}: {value}")
    console.print(root)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="path.error")
    op = Text(f"  {result.op}", style="path.op")
    code = Text(f"  [{err.code}]" if err else "", style="path.key")
    console.print(label, op, code, Text(" - "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/split/connect results: key fields plus created edges."""
    _status_line(console, result)
    for key in ("point_id", "title", "project_id", "mode", "middle_id", "user_id", "email"):
        if key in result.data:
            _field(console, key, result.data[key])

    edge = result.data.get("edge")
    created = [edge] if edge else result.data.get("edges", [])
    if created:
        console.print(Text("  edges:", style="path.key"))
        for e in created:
            _edge_line(console, e)
    if result.data.get("removed_edge") and "origin_id" in result.data:
        _field(console, "replaced", f"{result.data['origin_id']} -> {result.data['destination_id']}")


def _render_disconnect(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    verb = "removed" if data.get("removed") else "absent"
    _field(console, verb, f"{data['origin_id']} -> {data['destination_id']}")


def _render_update(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    point = result.data.get("point") or {}
    for key in ("id", "title", "summary", "updated_at"):
        if point.get(key) is not None:
            _field(console, key, point[key])
    _field(console, "fields_changed", result.data.get("fields_changed", []))


# ── Query renderers ───────────────────────────────────────────────────


def _render_point(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    point = result.data.get("point")
    if point is None:
        console.print(
            f"[path.ok]OK[/path.ok]  Unchanged since {result.data.get('updated_after')}."
        )
        return

    _status_line(console, result)
    keys = ["id", "title", "summary", "state", "degree", "deletable", "item_ids"]
    if verbose:
        keys += ["created_user", "created_at", "updated_at", "summary_at"]
    for key in keys:
        if key in point and point[key] is not None:
            _field(console, key, point[key])


def _render_project(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    project = result.data.get("project", {})
    for key in ("id", "created_user", "created_at", "updated_at", "point_ids"):
        if key in project:
            _field(console, key, project[key])


def _render_path(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a project's points as a table followed by its edges."""
    data = result.data
    points = data.get("points", [])
    edges = data.get("edges", [])

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="path.id", no_wrap=True)
    table.add_column("Title", style="path.title")
    table.add_column("Out", justify="right")
    table.add_column("In", justify="right")
    if verbose:
        table.add_column("Updated", style="dim")

    out_degree: dict[int, int] = {}
    in_degree: dict[int, int] = {}
    for e in edges:
        out_degree[e["origin_id"]] = out_degree.get(e["origin_id"], 0) + 1
        in_degree[e["destination_id"]] = in_degree.get(e["destination_id"], 0) + 1

    for p in points:
        row = [
            str(p["id"]),
            str(p["title"]),
            str(out_degree.get(p["id"], 0)),
            str(in_degree.get(p["id"], 0)),
        ]
        if verbose:
            row.append(str(p.get("updated_at", "")))
        table.add_row(*row)

    console.print(f"[bold]Project {data.get('project_id')}[/bold]")
    console.print(table)
    if edges:
        console.print(Text("edges:", style="path.key"))
        for e in edges:
            _edge_line(console, e, indent=2)
    external = data.get("external_point_ids", [])
    if external:
        console.print(f"[path.external]outside project: {', '.join(map(str, external))}[/path.external]")


# ── Check renderer ────────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[path.ok]OK[/path.ok]  No issues found.")
        return

    severity_styles = {"error": "path.error", "warning": "path.warning"}

    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        cat = str(issue.get("category", "unknown"))
        by_category.setdefault(cat, []).append(issue)

    for cat, cat_issues in by_category.items():
        console.print(f"\n[bold]{cat}[/bold]")
        for issue in cat_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            console.print(f"  {prefix}: {issue.get('message', '')}")
            if verbose and issue.get("beyond_bound"):
                console.print(f"    longer than max_depth + 1 ({result.data.get('max_depth')} + 1)")

    errors = sum(1 for i in issues if i.get("severity") == "error")
    warnings = count - errors
    console.print(f"\n{errors} errors, {warnings} warnings")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Mutations
    "create_point": _render_mutation,
    "connect": _render_mutation,
    "split_edge": _render_mutation,
    "disconnect": _render_disconnect,
    "update_point": _render_update,
    "register_user": _render_mutation,
    "ensure_user": _render_mutation,
    # Query
    "get_point": _render_point,
    "get_project": _render_project,
    "get_path": _render_path,
    # Check
    "check": _render_check,
}
