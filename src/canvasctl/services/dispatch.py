"""Dispatcher — one request, one correlated reply.

The in-flight table maps command id to a pending future. Entries leave the
table on reply, timeout, transport failure, or caller cancellation, so a
late reply for an abandoned id finds nothing and is discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import structlog

from canvasctl.domain.commands import CommandEnvelope
from canvasctl.domain.operations import DEFAULT_CATEGORY_TIMEOUTS, DEFAULT_TIMEOUT_SECONDS
from canvasctl.infrastructure.transport import CommandTransport, ReplyTimeout, TransportUnavailable
from canvasctl.services.normalizer import normalize_reply, transport_failure
from canvasctl.services.result import CommandResult

log = structlog.get_logger("canvasctl.dispatch")


class Dispatcher:
    def __init__(
        self,
        transport: CommandTransport,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        category_timeouts: Mapping[str, float] | None = None,
    ) -> None:
        self._transport = transport
        self._timeout = timeout_seconds
        self._category_timeouts = {
            str(k): v
            for k, v in (DEFAULT_CATEGORY_TIMEOUTS if category_timeouts is None else category_timeouts).items()
        }
        self._pending: dict[str, asyncio.Future[dict[str, Any]]] = {}
        transport.bind(self.resolve)

    @property
    def transport(self) -> CommandTransport:
        return self._transport

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._pending)

    def timeout_for(self, category: str) -> float:
        return self._category_timeouts.get(str(category), self._timeout)

    async def exchange(self, envelope: CommandEnvelope) -> dict[str, Any]:
        """Deliver *envelope* and wait for its reply.

        Raises:
            TransportUnavailable: no executor reachable.
            ReplyTimeout: no correlated reply within the category budget.
            ValueError: *envelope.id* is already in flight.
        """
        if envelope.id in self._pending:
            msg = f"Command id already in flight: {envelope.id}"
            raise ValueError(msg)

        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        self._pending[envelope.id] = future
        budget = self.timeout_for(envelope.category)
        log.debug(
            "command.dispatch",
            command_id=envelope.id,
            category=envelope.category,
            operation=envelope.operation,
            timeout=budget,
        )
        try:
            async with asyncio.timeout(budget):
                await self._transport.deliver(envelope.to_wire())
                return await future
        except TimeoutError as exc:
            log.warning("command.timeout", command_id=envelope.id, timeout=budget)
            raise ReplyTimeout(envelope.id, budget) from exc
        except TransportUnavailable as exc:
            log.warning("transport.unavailable", command_id=envelope.id, reason=str(exc))
            raise
        finally:
            self._pending.pop(envelope.id, None)
            if not future.done():
                future.cancel()

    def resolve(self, reply: Any) -> bool:
        """Complete the pending call whose id matches *reply*.

        Returns False (and logs) for replies nobody is waiting for.
        """
        reply_id = reply.get("id") if isinstance(reply, Mapping) else None
        future = self._pending.pop(reply_id, None) if isinstance(reply_id, str) else None
        if future is None or future.done():
            log.info("command.stale_reply", command_id=reply_id)
            return False
        future.set_result(dict(reply))
        log.debug("command.reply", command_id=reply_id, success=reply.get("success"))
        return True

    async def send(self, envelope: CommandEnvelope, operation: str | None = None) -> CommandResult:
        """Round-trip *envelope*; every failure becomes a CommandResult."""
        try:
            reply = await self.exchange(envelope)
        except (TransportUnavailable, ReplyTimeout) as exc:
            return transport_failure(envelope, exc, operation)
        return normalize_reply(envelope, reply, operation)
