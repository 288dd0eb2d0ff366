"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`;
unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from canvasctl.output.console import create_console, get_output, style_for_category

if TYPE_CHECKING:
    from rich.console import Console

    from canvasctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
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
        return f"ERROR: {result.op}: {msg}"

    for key, id_key in (("tools", "name"), ("sessions", "sessionId")):
        items = result.data.get(key)
        if isinstance(items, list):
            return "\n".join(str(item[id_key]) for item in items if isinstance(item, dict) and id_key in item)

    if "sessionId" in result.data and result.op == "create_session":
        return str(result.data["sessionId"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="canvas.ok"), Text(f"  {result.op}", style="canvas.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="canvas.key")
    if key in ("id", "sessionId"):
        v = Text(str(value), style="canvas.id")
    elif key == "name":
        v = Text(str(value), style="canvas.name")
    elif isinstance(value, (dict, list)):
        v = Text(_compact(value))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    label = Text("ERROR", style="canvas.error")
    op = Text(f"  {result.op}{code}", style="canvas.op")
    console.print(label, op, Text(f": {msg}"), sep="")

    if err is None:
        return
    details = err.detail.get("details")
    if isinstance(details, dict):
        for item in details.get("errors", []):
            where = item.get("path") or "<root>"
            console.print(Text("  ✗ ", style="canvas.error"), Text(f"{where}: {item.get('message')}"), sep="")
    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Tool renderers ────────────────────────────────────────────────────


def _render_tool_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_tools as a table grouped by category order."""
    tools = result.data.get("tools", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="canvas.name", no_wrap=True)
    table.add_column("Category")
    if verbose:
        table.add_column("Command", style="dim")
    table.add_column("Description")

    for tool in tools:
        category = str(tool.get("category", ""))
        row: list[Any] = [str(tool.get("name", "")), Text(category, style=style_for_category(category))]
        if verbose:
            row.append(str(tool.get("command", "")))
        row.append(str(tool.get("description", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(tools))} tools")


def _render_tool_detail(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render show_tool as a panel with one line per parameter."""
    d = result.data
    schema = d.get("inputSchema", {})
    required = set(schema.get("required", []))
    lines = [d.get("description", ""), "", f"category: {d.get('category')}", f"command: {d.get('command')}"]
    if d.get("fixed"):
        lines.append(f"fixed: {_compact(d['fixed'])}")

    properties = schema.get("properties", {})
    if properties:
        lines.append("")
        lines.append("parameters:")
    for name, prop in properties.items():
        marker = "*" if name in required else " "
        kind = prop.get("type") or ("enum" if "enum" in prop else "union" if "anyOf" in prop else "any")
        line = f" {marker} {name} ({kind})"
        if "default" in prop:
            line += f" = {_compact(prop['default'])}"
        if prop.get("description"):
            line += f"  {prop['description']}"
        lines.append(line)

    style = style_for_category(str(d.get("category", "")))
    panel = Panel(Text("\n".join(lines)), title=str(d.get("name", "?")), border_style=style or "dim", expand=False)
    console.print(panel)
    if verbose:
        console.print(Text(_compact(schema)))


def _render_validation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "name", result.data.get("name"))
    _field(console, "params", result.data.get("params", {}))
    envelope = result.data.get("envelope", {})
    if verbose:
        _field(console, "envelope", envelope)
    else:
        _field(console, "command", envelope.get("operation"))


def _render_call(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("operation", "id"):
        if key in result.data:
            _field(console, key, result.data[key])
    if "data" in result.data:
        _field(console, "data", result.data["data"])


# ── Session renderers ─────────────────────────────────────────────────


def _render_session_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    sessions = result.data.get("sessions", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Session", style="canvas.id", no_wrap=True)
    table.add_column("Last update", style="dim")
    for session in sessions:
        table.add_row(str(session.get("sessionId", "")), str(session.get("timestamp", "")))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(sessions))} sessions")


def _render_session(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render show_session: summary fields plus the design state."""
    d = result.data
    design = d.get("designState", {})
    history = d.get("conversationHistory", [])
    lines = [
        f"timestamp: {d.get('timestamp')}",
        f"messages: {len(history)}",
        f"frames: {len(design.get('frames', []))}",
        f"nodes: {len(design.get('nodes', []))}",
        f"styles: {len(design.get('styles', {}))}",
    ]
    extra = sorted(k for k in design if k not in ("frames", "nodes", "styles", "metadata"))
    for key in extra:
        lines.append(f"{key}: {design[key]}")
    if result.meta and "tokenEstimate" in result.meta:
        lines.append(f"tokens (est.): {result.meta['tokenEstimate']}")
    console.print(Panel(Text("\n".join(lines)), title=str(d.get("sessionId", "?")), border_style="dim", expand=False))
    if verbose:
        console.print(Text(_compact(design)))


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    messages = result.data.get("messages", [])
    for message in messages:
        role = str(message.get("role", "?"))
        stamp = message.get("timestamp", "")
        console.print(Text(f"[{role}]", style=f"canvas.role.{role}"), Text(str(stamp), style="dim"))
        console.print(Text(f"  {message.get('content', '')}"))
        for action in message.get("actions") or []:
            console.print(Text(f"  → {action.get('tool')} {_compact(action.get('params', {}))}", style="dim"))
    console.print(f"\n{result.data.get('count', len(messages))} messages")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Tools
    "list_tools": _render_tool_table,
    "show_tool": _render_tool_detail,
    "validate_tool": _render_validation,
    "call_tool": _render_call,
    # Sessions
    "list_sessions": _render_session_table,
    "show_session": _render_session,
    "session_history": _render_history,
    "create_session": _render_generic,
    "delete_session": _render_generic,
    "cleanup_sessions": _render_generic,
}
