"""Low-level MCP server setup.

Optional extra — guarded behind try/except ImportError.
Transport: stdio. Tool schemas come straight from the operation catalog,
so the low-level ``Server`` is used rather than decorator-built tools.
"""

from __future__ import annotations

from typing import Any

from canvasctl import __version__
from canvasctl.services.tools import ToolService

mcp_available = False
_Server: Any = None
_stdio_server: Any = None

try:
    from mcp.server.lowlevel import Server as _Server  # type: ignore[no-redef,import-not-found]
    from mcp.server.stdio import stdio_server as _stdio_server  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available", "run_stdio"]

INSTALL_HINT = "MCP extra not installed. Install with: pip install canvasctl[mcp]"


def create_server(tools: ToolService, *, name: str = "canvasctl") -> Any:
    """Create the MCP server and register every catalog tool.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _Server is None:
        raise RuntimeError(INSTALL_HINT)

    from canvasctl.mcp.tools import register_tools

    server = _Server(name, version=__version__)
    register_tools(server, tools)
    return server


async def run_stdio(server: Any) -> None:
    """Serve *server* over stdin/stdout until the client disconnects."""
    if _stdio_server is None:
        raise RuntimeError(INSTALL_HINT)
    async with _stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
