"""MCP tool surface — one MCP tool per catalog operation.

``list_tools_impl`` / ``call_tool_impl`` are testable without the mcp
package. ``register_tools()`` binds them to a low-level MCP server; the
server's own argument validation is switched off so that bad arguments
come back as ValidationError results rather than protocol errors.
"""

from __future__ import annotations

import json
from typing import Any

from canvasctl.services.tools import ToolService


def list_tools_impl(tools: ToolService) -> list[dict[str, Any]]:
    """``{name, description, inputSchema}`` for every operation."""
    return tools.list_tools()


async def call_tool_impl(tools: ToolService, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
    """Run one operation; the CommandResult as a JSON-ready dict."""
    result = await tools.call(name, arguments)
    return result.to_wire()


def register_tools(server: Any, tools: ToolService) -> None:
    """Attach list/call handlers to a ``mcp.server.lowlevel.Server``."""

    @server.list_tools()
    async def handle_list_tools() -> list[Any]:
        from mcp import types

        return [
            types.Tool(name=t["name"], description=t["description"], inputSchema=t["inputSchema"])
            for t in list_tools_impl(tools)
        ]

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[Any]:
        from mcp import types

        payload = await call_tool_impl(tools, name, arguments)
        return [types.TextContent(type="text", text=json.dumps(payload, ensure_ascii=False))]
