"""Wiring: settings -> transport -> dispatcher -> servers.

The MCP server and the bridge share one dispatcher when they run in the
same process; with ``bridge.url`` set the dispatcher talks to a bridge in
another process over HTTP instead.
"""

from __future__ import annotations

import logging

import anyio

from canvasctl.config.settings import CanvasSettings
from canvasctl.infrastructure.bridge import bridge_server, create_bridge_app
from canvasctl.infrastructure.http_transport import HttpBridgeTransport
from canvasctl.infrastructure.sessions import SessionStore
from canvasctl.infrastructure.transport import CommandQueueTransport, CommandTransport
from canvasctl.services.dispatch import Dispatcher
from canvasctl.services.session import SessionService
from canvasctl.services.tools import ToolService

logger = logging.getLogger(__name__)


def build_transport(settings: CanvasSettings, bridge_url: str | None = None) -> CommandTransport:
    url = bridge_url or settings.bridge.url
    if url:
        return HttpBridgeTransport(url, timeout_seconds=settings.dispatch.timeout_seconds)
    return CommandQueueTransport(
        client_ttl_seconds=settings.bridge.client_ttl_seconds,
        client_expiry_seconds=settings.bridge.client_expiry_seconds,
    )


def build_dispatcher(settings: CanvasSettings, transport: CommandTransport) -> Dispatcher:
    return Dispatcher(
        transport,
        timeout_seconds=settings.dispatch.timeout_seconds,
        category_timeouts=settings.dispatch.category_timeouts,
    )


def build_session_service(settings: CanvasSettings) -> SessionService:
    store = SessionStore(settings.data_dir, history_limit=settings.sessions.history_limit)
    return SessionService(store, cleanup_days=settings.sessions.cleanup_days)


async def close_transport(transport: CommandTransport) -> None:
    if isinstance(transport, HttpBridgeTransport):
        await transport.aclose()


async def serve_bridge(settings: CanvasSettings, *, host: str | None = None, port: int | None = None) -> None:
    """Run the bridge alone; other processes send commands over HTTP."""
    transport = CommandQueueTransport(
        client_ttl_seconds=settings.bridge.client_ttl_seconds,
        client_expiry_seconds=settings.bridge.client_expiry_seconds,
    )
    dispatcher = build_dispatcher(settings, transport)
    app = create_bridge_app(transport, dispatcher.exchange)
    server = bridge_server(app, host=host or settings.bridge.host, port=port or settings.bridge.port)
    logger.info("Bridge listening on %s:%s", server.config.host, server.config.port)
    await server.serve()


async def serve_mcp(settings: CanvasSettings, *, bridge_url: str | None = None) -> None:
    """Serve MCP over stdio, with an in-process bridge unless one is remote."""
    from canvasctl.mcp.server import create_server, run_stdio

    transport = build_transport(settings, bridge_url)
    dispatcher = build_dispatcher(settings, transport)
    server = create_server(ToolService(dispatcher), name=settings.mcp.server_name)

    if not isinstance(transport, CommandQueueTransport):
        try:
            await run_stdio(server)
        finally:
            await close_transport(transport)
        return

    bridge = bridge_server(
        create_bridge_app(transport, dispatcher.exchange),
        host=settings.bridge.host,
        port=settings.bridge.port,
    )
    async with anyio.create_task_group() as tg:
        tg.start_soon(bridge.serve)
        await run_stdio(server)
        bridge.should_exit = True


def bridge_url_for(settings: CanvasSettings, override: str | None = None) -> str:
    """The bridge a one-shot client should talk to."""
    return override or settings.bridge.url or f"http://{settings.bridge.host}:{settings.bridge.port}"
