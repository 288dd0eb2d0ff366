"""Bridge HTTP app — the endpoint the canvas plugin polls.

Routes:
    GET  /health             liveness
    GET  /canvas/ping        liveness plus connection summary
    POST /canvas/register    {clientType, clientId?} -> {clientId}
    GET  /canvas/status      connected clients
    POST /canvas/command     envelope in, raw executor reply out (blocks)
    GET  /canvas/commands    plugin poll, requires X-Client-ID
    POST /canvas/response    plugin reply
    POST /canvas/keepalive   refresh X-Client-ID
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
import uvicorn
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from canvasctl import __version__
from canvasctl.domain.commands import CommandEnvelope
from canvasctl.infrastructure.transport import (
    ClientType,
    CommandQueueTransport,
    ReplyTimeout,
    TransportUnavailable,
)

Exchange = Callable[[CommandEnvelope], Awaitable[dict[str, Any]]]

CLIENT_ID_HEADER = "X-Client-ID"

log = structlog.get_logger("canvasctl.bridge")


def _now_ms() -> int:
    return int(time.time() * 1000)


# -- request bodies --


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_type: ClientType = Field(alias="clientType")
    client_id: str | None = Field(default=None, alias="clientId")


class CommandRequest(BaseModel):
    """The wire envelope as posted by a remote dispatcher. Every key is required."""

    id: str = Field(min_length=1)
    category: str
    operation: str
    parameters: dict[str, Any]


class ReplyRequest(BaseModel):
    """Plugin reply; only the id is checked, the rest passes through."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def _error(status: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra, "timestamp": _now_ms()}, status_code=status)


def create_bridge_app(transport: CommandQueueTransport, exchange: Exchange) -> Starlette:
    """Build the bridge around *transport*; ``/canvas/command`` awaits *exchange*."""

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {"status": "ok", "server": "canvasctl-bridge", "version": __version__, "timestamp": _now_ms()}
        )

    async def ping(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "pong": True,
                "timestamp": _now_ms(),
                "connections": {"mcp": transport.mcp_connected, "plugin": transport.plugin_connected},
            }
        )

    async def register(request: Request) -> JSONResponse:
        try:
            payload = RegisterRequest.model_validate(await _json_body(request))
        except ValidationError:
            choices = ", ".join(str(t) for t in ClientType)
            return _error(400, f"Invalid clientType. Must be one of: {choices}")
        client = transport.register(payload.client_type, payload.client_id)
        return JSONResponse(
            {
                "success": True,
                "clientId": client.client_id,
                "message": f"Client {client.client_id} registered as {client.client_type}",
                "timestamp": _now_ms(),
            }
        )

    async def status(request: Request) -> JSONResponse:
        transport.prune()
        return JSONResponse(
            {
                "bridge_connected": True,
                "plugin_connected": transport.plugin_connected,
                "mcp_connected": transport.mcp_connected,
                "connections": transport.connections(),
                "timestamp": _now_ms(),
            }
        )

    async def command(request: Request) -> JSONResponse:
        try:
            payload = CommandRequest.model_validate(await _json_body(request))
        except ValidationError as exc:
            return _error(
                400,
                "Invalid command format. Required: id, category, operation, parameters",
                fieldErrors=exc.error_count(),
            )
        envelope = CommandEnvelope(**payload.model_dump())

        try:
            reply = await exchange(envelope)
        except TransportUnavailable as exc:
            return _error(503, str(exc), commandId=envelope.id)
        except ReplyTimeout as exc:
            return _error(504, str(exc), commandId=envelope.id)
        except ValueError as exc:
            return _error(409, str(exc), commandId=envelope.id)
        return JSONResponse(reply)

    async def poll(request: Request) -> JSONResponse:
        client_id = request.headers.get(CLIENT_ID_HEADER)
        if not client_id:
            return _error(400, f"Missing {CLIENT_ID_HEADER} header")
        commands = transport.drain(client_id)
        if commands:
            log.debug("bridge.poll", client_id=client_id, commands=len(commands))
        return JSONResponse({"commands": commands, "timestamp": _now_ms(), "hasMoreCommands": False})

    async def response(request: Request) -> JSONResponse:
        try:
            payload = ReplyRequest.model_validate(await _json_body(request))
        except ValidationError:
            return _error(400, "Invalid response format. Required: id")
        accepted = transport.submit_reply(payload.model_dump(), request.headers.get(CLIENT_ID_HEADER))
        return JSONResponse(
            {
                "success": True,
                "accepted": accepted,
                "message": "Response received",
                "timestamp": _now_ms(),
            }
        )

    async def keepalive(request: Request) -> JSONResponse:
        client_id = request.headers.get(CLIENT_ID_HEADER)
        known = transport.touch(client_id) if client_id else False
        return JSONResponse({"success": True, "known": known, "timestamp": _now_ms()})

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/canvas/ping", ping, methods=["GET"]),
        Route("/canvas/register", register, methods=["POST"]),
        Route("/canvas/status", status, methods=["GET"]),
        Route("/canvas/command", command, methods=["POST"]),
        Route("/canvas/commands", poll, methods=["GET"]),
        Route("/canvas/response", response, methods=["POST"]),
        Route("/canvas/keepalive", keepalive, methods=["POST"]),
    ]
    return Starlette(routes=routes)


def bridge_server(app: Starlette, *, host: str, port: int) -> uvicorn.Server:
    """A uvicorn server that leaves logging configuration to us."""
    config = uvicorn.Config(app, host=host, port=port, log_config=None, lifespan="off")
    return uvicorn.Server(config)
