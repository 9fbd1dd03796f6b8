"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from appsync_aurora.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from appsync_aurora.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    if result.ok and result.op == "render_template":
        # Templates are emitted verbatim so they can be piped or diffed.
        return str(result.data.get("template", "")).rstrip("\n")

    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op == "render_template":
        return str(result.data.get("template", "")).rstrip("\n")

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict) and "id" in item)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="appsync.ok"), Text(f"  {result.op}", style="appsync.op"))


def _field(console: Console, key: str, value: Any, *, indent: int = 2) -> None:
    """Print a single indented key-value field."""
    k = Text(f"{' ' * indent}{key}: ", style="appsync.key")
    if key in ("id", "stack"):
        v = Text(str(value), style="appsync.id")
    elif key.endswith("path") or key.endswith("file") or key == "outdir":
        v = Text(str(value), style="appsync.path")
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
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    duration = span_data.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span_data.get('name', '?')}")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="appsync.error"),
        Text(f"  {result.op}", style="appsync.op"),
        Text(f"  {msg}"),
    )

    problems = result.data.get("problems") or []
    for problem in problems:
        console.print(Text(f"  - {problem}"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_resolvers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render ``list_resolvers`` as a table."""
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="appsync.id", no_wrap=True)
    table.add_column("Type")
    table.add_column("Field")
    if verbose:
        table.add_column("Arguments")
    table.add_column("SQL", style="appsync.sql")

    for item in result.data.get("items", []):
        row = [
            Text(str(item.get("id", ""))),
            Text(str(item.get("type", "")), style=style_for_type(str(item.get("type", "")))),
            Text(str(item.get("field", ""))),
        ]
        if verbose:
            row.append(Text(", ".join(item.get("arguments", []))))
        row.append(Text(str(item.get("sql") or "")))
        table.add_row(*row)

    console.print(table)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "checked", result.data.get("checked", 0))
    console.print(Text("  all mapping templates valid"))


def _render_synth(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the synthesized stack summary with a resource-type table."""
    _status_line(console, result)
    for key in ("stack", "outdir", "template_file", "resource_count"):
        if key in result.data:
            _field(console, key, result.data[key])

    resources: dict[str, int] = result.data.get("resources", {})
    if resources:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Resource type")
        table.add_column("Count", justify="right")
        for rtype, count in resources.items():
            table.add_row(Text(rtype), Text(str(count)))
        console.print(table)

    outputs = result.data.get("outputs", [])
    if outputs:
        _field(console, "outputs", ", ".join(outputs))


def _render_nested(console: Console, data: dict[str, Any], *, indent: int) -> None:
    for key, value in data.items():
        if isinstance(value, dict):
            console.print(Text(f"{' ' * indent}{key}:", style="appsync.key"))
            _render_nested(console, value, indent=indent + 2)
        elif isinstance(value, list):
            _field(console, key, ", ".join(str(v) for v in value), indent=indent)
        elif value is not None:
            _field(console, key, value, indent=indent)


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _render_nested(console, result.data, indent=2)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback: status line plus key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "list_resolvers": _render_resolvers,
    "check_templates": _render_check,
    "synth": _render_synth,
    "describe": _render_describe,
}
