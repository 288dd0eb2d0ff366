"""bridge — run the plugin bridge on its own."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import anyio
import click

from canvasctl.commands._base import CanvasCommand

if TYPE_CHECKING:
    from canvasctl.commands._context import AppContext


@click.command(
    cls=CanvasCommand,
    examples="""\
  canvasctl bridge
  canvasctl bridge --port 9000
  CANVASCTL_BRIDGE__HOST=0.0.0.0 canvasctl bridge""",
)
@click.option("--host", default=None, help="Bind address (default from [bridge] host).")
@click.option("--port", default=None, type=int, help="Listen port (default from [bridge] port).")
@click.pass_obj
def bridge(app: AppContext, host: str | None, port: int | None) -> None:
    """Serve the HTTP bridge the canvas plugin polls."""
    from canvasctl.runtime import serve_bridge

    click.echo(
        f"Bridge on http://{host or app.settings.bridge.host}:{port or app.settings.bridge.port}",
        err=True,
    )
    anyio.run(partial(serve_bridge, app.settings, host=host, port=port))
