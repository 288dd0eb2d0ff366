"""Tests for HttpBridgeTransport against a mocked bridge."""

from __future__ import annotations

import json
from typing import Any

import anyio
import httpx
import pytest

from canvasctl.domain.commands import build_command
from canvasctl.infrastructure.http_transport import HttpBridgeTransport
from canvasctl.infrastructure.transport import ReplyTimeout, TransportUnavailable
from canvasctl.services.dispatch import Dispatcher

COMMAND = {"id": "cmd_1", "category": "node-creation", "operation": "createFrame", "parameters": {}}


def _other_reply(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"id": "cmd_other", "success": True})


def _transport(handler: Any) -> tuple[HttpBridgeTransport, list[Any]]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://bridge")
    transport = HttpBridgeTransport("http://bridge", client=client)
    replies: list[Any] = []
    transport.bind(lambda reply: replies.append(reply) or True)
    return transport, replies


class TestDeliver:
    @pytest.mark.anyio
    async def test_reply_handed_to_handler(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "cmd_1", "success": True, "data": {"id": "n1"}})

        transport, replies = _transport(handler)
        await transport.deliver(COMMAND)
        assert requests[0].url.path == "/canvas/command"
        assert json.loads(requests[0].content) == COMMAND
        assert replies == [{"id": "cmd_1", "success": True, "data": {"id": "n1"}}]

    @pytest.mark.anyio
    async def test_503_is_unavailable_with_bridge_message(self) -> None:
        transport, replies = _transport(
            lambda request: httpx.Response(503, json={"error": "Canvas plugin not connected"})
        )
        with pytest.raises(TransportUnavailable, match="Canvas plugin not connected"):
            await transport.deliver(COMMAND)
        assert replies == []

    @pytest.mark.anyio
    async def test_504_is_timeout(self) -> None:
        transport, _ = _transport(lambda request: httpx.Response(504, json={"error": "timed out"}))
        with pytest.raises(ReplyTimeout):
            await transport.deliver(COMMAND)

    @pytest.mark.anyio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport, _ = _transport(handler)
        with pytest.raises(TransportUnavailable, match="Bridge unreachable"):
            await transport.deliver(COMMAND)

    @pytest.mark.anyio
    async def test_client_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        transport, _ = _transport(handler)
        with pytest.raises(ReplyTimeout):
            await transport.deliver(COMMAND)

    @pytest.mark.anyio
    async def test_non_json_body(self) -> None:
        transport, _ = _transport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportUnavailable, match="non-JSON"):
            await transport.deliver(COMMAND)

    @pytest.mark.anyio
    async def test_unclaimed_reply_fails_fast(self) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(_other_reply),
            base_url="http://bridge",
        )
        transport = HttpBridgeTransport("http://bridge", client=client)
        transport.bind(lambda reply: False)
        with pytest.raises(TransportUnavailable, match="did not match command cmd_1"):
            await transport.deliver(COMMAND)

    @pytest.mark.anyio
    async def test_unbound_transport_rejects_reply(self) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2])),
            base_url="http://bridge",
        )
        transport = HttpBridgeTransport("http://bridge", client=client)
        with pytest.raises(TransportUnavailable, match="did not match"):
            await transport.deliver(COMMAND)


class TestStatus:
    @pytest.mark.anyio
    async def test_status(self) -> None:
        transport, _ = _transport(lambda request: httpx.Response(200, json={"plugin_connected": True}))
        assert await transport.status() == {"plugin_connected": True}

    @pytest.mark.anyio
    async def test_aclose_keeps_injected_client(self) -> None:
        transport, _ = _transport(lambda request: httpx.Response(200, json={}))
        await transport.aclose()
        assert await transport.status() == {}


class TestThroughDispatcher:
    @pytest.mark.anyio
    async def test_mismatched_reply_is_transport_failure(self) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(_other_reply),
            base_url="http://bridge",
        )
        dispatcher = Dispatcher(HttpBridgeTransport("http://bridge", client=client), timeout_seconds=30)
        envelope = build_command("selection-navigation", "getSelection", {})

        with anyio.fail_after(5):
            result = await dispatcher.send(envelope, operation="get_selection")

        assert result.error is not None
        assert result.error.code == "TRANSPORT_UNAVAILABLE"
        assert dispatcher.in_flight == frozenset()
