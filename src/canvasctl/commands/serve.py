"""serve — MCP over stdio (requires canvasctl[mcp] extra)."""

from __future__ import annotations

from functools import partial

import anyio
import click

from canvasctl.commands._base import CanvasCommand


@click.command(
    cls=CanvasCommand,
    examples="""\
  # MCP on stdio with the bridge in the same process
  canvasctl serve

  # MCP on stdio against a bridge started with `canvasctl bridge`
  canvasctl serve --bridge-url http://127.0.0.1:8765""",
)
@click.option("--bridge-url", default=None, help="Use a bridge running in another process.")
@click.pass_obj
def serve(app: object, bridge_url: str | None) -> None:
    """Start the MCP server (requires canvasctl[mcp] extra)."""
    from canvasctl.mcp.server import mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install canvasctl[mcp]", err=True)
        raise SystemExit(1)

    from canvasctl.commands._context import AppContext
    from canvasctl.runtime import serve_mcp

    assert isinstance(app, AppContext)
    anyio.run(partial(serve_mcp, app.settings, bridge_url=bridge_url))
