"""Command group: browse, check and call catalog operations."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING, Any

import click

from canvasctl.commands._base import CanvasGroup
from canvasctl.domain.operations import Category

if TYPE_CHECKING:
    from canvasctl.commands._context import AppContext
    from canvasctl.config.settings import CanvasSettings
    from canvasctl.services.result import CommandResult

_TOOLS_EXAMPLES = """\
  canvasctl tools list
  canvasctl tools list --category layout-operations
  canvasctl tools show create_rectangle
  canvasctl tools validate set_fill_color '{"nodeId": "1:2", "color": "#ff0000"}'
  canvasctl tools call create_rectangle '{"width": 100, "height": 50}'"""


def _parse_arguments(value: str | None) -> Any:
    """ARGS_JSON -> Python value; ``-`` reads stdin, omitted means ``{}``."""
    if value is None:
        return {}
    text = sys.stdin.read() if value == "-" else value
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON ({exc.msg} at column {exc.colno})", param_hint="ARGS_JSON") from exc


async def _call_remote(settings: CanvasSettings, url: str, name: str, arguments: Any) -> CommandResult:
    from canvasctl.infrastructure.http_transport import HttpBridgeTransport
    from canvasctl.runtime import build_dispatcher
    from canvasctl.services.tools import ToolService

    transport = HttpBridgeTransport(url, timeout_seconds=settings.dispatch.timeout_seconds)
    try:
        return await ToolService(build_dispatcher(settings, transport)).call(name, arguments)
    finally:
        await transport.aclose()


@click.group(cls=CanvasGroup, examples=_TOOLS_EXAMPLES)
@click.pass_obj
def tools(app: AppContext) -> None:
    """Inspect and run canvas operations."""


@tools.command(
    "list",
    examples="""\
  canvasctl tools list
  canvasctl tools list --category text-operations
  canvasctl -q tools list""",
)
@click.option(
    "--category",
    type=click.Choice([str(c) for c in Category]),
    default=None,
    help="Only operations in this category.",
)
@click.pass_obj
def list_cmd(app: AppContext, category: str | None) -> None:
    """List operations in catalog order."""
    app.emit(app.tools.catalog(category))


@tools.command(
    examples="""\
  canvasctl tools show create_text
  canvasctl --json tools show stack_horizontally"""
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show an operation's parameters and JSON Schema."""
    app.emit(app.tools.describe(name))


@tools.command(
    examples="""\
  canvasctl tools validate create_rectangle '{"width": 100, "height": 50}'
  echo '{"nodeIds": ["1:2", "1:3"]}' | canvasctl tools validate stack_vertically -"""
)
@click.argument("name")
@click.argument("args_json", required=False)
@click.pass_obj
def validate(app: AppContext, name: str, args_json: str | None) -> None:
    """Validate arguments and preview the command without sending it."""
    app.emit(app.tools.check(name, _parse_arguments(args_json)))


@tools.command(
    examples="""\
  # Needs a running bridge (canvasctl bridge) with the plugin connected
  canvasctl tools call get_selection
  canvasctl tools call create_rectangle '{"width": 100, "height": 50}'
  canvasctl tools call set_fill_color '{"nodeId": "1:2", "color": "#1a2b3c"}' --bridge-url http://10.0.0.5:8765"""
)
@click.argument("name")
@click.argument("args_json", required=False)
@click.option("--bridge-url", default=None, help="Bridge base URL (default from [bridge]).")
@click.pass_obj
def call(app: AppContext, name: str, args_json: str | None, bridge_url: str | None) -> None:
    """Run one operation through a bridge and print the result."""
    from canvasctl.runtime import bridge_url_for
    from canvasctl.services.tools import from_command_result

    arguments = _parse_arguments(args_json)
    url = bridge_url_for(app.settings, bridge_url)
    result = asyncio.run(_call_remote(app.settings, url, name, arguments))
    app.emit(from_command_result(result))
