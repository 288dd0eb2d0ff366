"""Command channel abstraction and the in-process command queue.

A transport only moves wire dicts. Correlation lives in the dispatcher,
which binds its ``resolve`` callback as the transport's reply handler.

``CommandQueueTransport`` is the bridge the canvas plugin talks to: the
plugin registers, polls for queued commands, and posts replies back.
"""

from __future__ import annotations

import time
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

import structlog

ReplyHandler = Callable[[Any], bool]

log = structlog.get_logger("canvasctl.bridge")


class TransportUnavailable(Exception):
    """No executor reachable; the command was not delivered."""


class ReplyTimeout(Exception):
    """The command was sent but no correlated reply arrived in time."""

    def __init__(self, command_id: str, timeout_seconds: float) -> None:
        super().__init__(f"Command {command_id} timed out after {timeout_seconds:g}s")
        self.command_id = command_id
        self.timeout_seconds = timeout_seconds


class CommandTransport(Protocol):
    def bind(self, on_reply: ReplyHandler) -> None:
        """Route every reply received from the executor to *on_reply*."""
        ...

    async def deliver(self, command: dict[str, Any]) -> None:
        """Hand *command* to the executor or raise :class:`TransportUnavailable`."""
        ...


# ---------------------------------------------------------------------------
# In-process command queue
# ---------------------------------------------------------------------------


class ClientType(StrEnum):
    MCP = "mcp"
    PLUGIN = "plugin"
    PLUGIN_UI = "plugin-ui"


PLUGIN_TYPES = frozenset({ClientType.PLUGIN, ClientType.PLUGIN_UI})


def new_client_id() -> str:
    return f"client_{uuid.uuid4().hex[:12]}"


@dataclass
class BridgeClient:
    client_id: str
    client_type: ClientType
    last_seen: float
    queue: deque[dict[str, Any]] = field(default_factory=deque)

    def to_dict(self, *, alive: bool) -> dict[str, Any]:
        return {
            "id": self.client_id,
            "type": str(self.client_type),
            "connected": alive,
            "lastSeen": self.last_seen,
            "queued": len(self.queue),
        }


class CommandQueueTransport:
    """Per-plugin command queues drained by polling.

    A client counts as alive while it has been seen within
    ``client_ttl_seconds``; clients silent for ``client_expiry_seconds``
    are pruned together with anything still queued for them.
    """

    def __init__(
        self,
        *,
        client_ttl_seconds: float = 60.0,
        client_expiry_seconds: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = client_ttl_seconds
        self._expiry = client_expiry_seconds
        self._clock = clock
        self._clients: dict[str, BridgeClient] = {}
        self._on_reply: ReplyHandler | None = None

    # -- CommandTransport --

    def bind(self, on_reply: ReplyHandler) -> None:
        self._on_reply = on_reply

    async def deliver(self, command: dict[str, Any]) -> None:
        self.prune()
        plugin = self.find_plugin()
        if plugin is None:
            raise TransportUnavailable("Canvas plugin not connected")
        plugin.queue.append(command)
        log.debug("bridge.enqueue", client_id=plugin.client_id, command_id=command.get("id"))

    # -- client lifecycle --

    def register(self, client_type: ClientType | str, client_id: str | None = None) -> BridgeClient:
        """Register (or re-register) a client; an existing queue is kept."""
        kind = ClientType(client_type)
        cid = client_id or new_client_id()
        existing = self._clients.get(cid)
        if existing is not None:
            existing.client_type = kind
            existing.last_seen = self._clock()
            return existing
        client = BridgeClient(client_id=cid, client_type=kind, last_seen=self._clock())
        self._clients[cid] = client
        log.info("bridge.client_registered", client_id=cid, client_type=str(kind))
        return client

    def touch(self, client_id: str) -> bool:
        client = self._clients.get(client_id)
        if client is None:
            return False
        client.last_seen = self._clock()
        return True

    def is_alive(self, client: BridgeClient) -> bool:
        return self._clock() - client.last_seen < self._ttl

    def prune(self) -> list[str]:
        """Drop clients not seen for the expiry window; return their ids."""
        now = self._clock()
        expired = [cid for cid, c in self._clients.items() if now - c.last_seen > self._expiry]
        for cid in expired:
            dropped = self._clients.pop(cid)
            log.info("bridge.client_expired", client_id=cid, dropped_commands=len(dropped.queue))
        return expired

    def find_plugin(self) -> BridgeClient | None:
        for client in self._clients.values():
            if client.client_type in PLUGIN_TYPES and self.is_alive(client):
                return client
        return None

    def find_client(self, client_type: ClientType) -> BridgeClient | None:
        for client in self._clients.values():
            if client.client_type == client_type and self.is_alive(client):
                return client
        return None

    # -- plugin side --

    def drain(self, client_id: str) -> list[dict[str, Any]]:
        """Return and clear everything queued for *client_id*."""
        client = self._clients.get(client_id)
        if client is None:
            return []
        client.last_seen = self._clock()
        commands = list(client.queue)
        client.queue.clear()
        return commands

    def submit_reply(self, reply: Any, client_id: str | None = None) -> bool:
        """Route a plugin reply. False when nobody was waiting for it."""
        if client_id:
            self.touch(client_id)
        if self._on_reply is None:
            return False
        return self._on_reply(reply)

    # -- status --

    @property
    def plugin_connected(self) -> bool:
        return self.find_plugin() is not None

    @property
    def mcp_connected(self) -> bool:
        return self.find_client(ClientType.MCP) is not None

    def connections(self) -> list[dict[str, Any]]:
        return [client.to_dict(alive=self.is_alive(client)) for client in self._clients.values()]
