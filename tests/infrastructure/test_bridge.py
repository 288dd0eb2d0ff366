"""Tests for the bridge HTTP app."""

from __future__ import annotations

from typing import Any

import anyio
import httpx
import pytest
from starlette.testclient import TestClient

from canvasctl.domain.commands import CommandEnvelope
from canvasctl.infrastructure.bridge import bridge_server, create_bridge_app
from canvasctl.infrastructure.transport import CommandQueueTransport, ReplyTimeout, TransportUnavailable
from canvasctl.services.dispatch import Dispatcher

ENVELOPE = {"id": "cmd_1", "category": "node-creation", "operation": "createFrame", "parameters": {}}


def _client(exchange: Any = None) -> tuple[TestClient, CommandQueueTransport]:
    transport = CommandQueueTransport()

    async def default_exchange(envelope: CommandEnvelope) -> dict[str, Any]:
        return {"id": envelope.id, "success": True, "data": {"echo": envelope.operation}}

    app = create_bridge_app(transport, exchange or default_exchange)
    return TestClient(app), transport


class TestLiveness:
    def test_health(self) -> None:
        client, _ = _client()
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["server"] == "canvasctl-bridge"

    def test_ping_reports_connections(self) -> None:
        client, transport = _client()
        transport.register("plugin")
        body = client.get("/canvas/ping").json()
        assert body["pong"] is True
        assert body["connections"] == {"mcp": False, "plugin": True}


class TestRegistration:
    def test_register(self) -> None:
        client, transport = _client()
        response = client.post("/canvas/register", json={"clientType": "plugin"})
        assert response.status_code == 200
        client_id = response.json()["clientId"]
        assert transport.find_plugin() is not None
        assert transport.find_plugin().client_id == client_id

    def test_register_rejects_unknown_type(self) -> None:
        client, _ = _client()
        response = client.post("/canvas/register", json={"clientType": "browser"})
        assert response.status_code == 400
        assert "clientType" in response.json()["error"]

    @pytest.mark.parametrize(
        "body",
        [None, ["plugin"], {"clientType": "plugin", "clientId": 7}],
        ids=["no-body", "not-an-object", "bad-client-id"],
    )
    def test_register_rejects_malformed_body(self, body: Any) -> None:
        client, transport = _client()
        response = client.post("/canvas/register", json=body)
        assert response.status_code == 400
        assert transport.connections() == []

    def test_register_keeps_given_id(self) -> None:
        client, transport = _client()
        response = client.post("/canvas/register", json={"clientType": "plugin-ui", "clientId": "ui-1"})
        assert response.json()["clientId"] == "ui-1"
        assert transport.find_plugin().client_id == "ui-1"

    def test_status_lists_clients(self) -> None:
        client, _ = _client()
        client.post("/canvas/register", json={"clientType": "mcp", "clientId": "m1"})
        body = client.get("/canvas/status").json()
        assert body["mcp_connected"] is True
        assert body["plugin_connected"] is False
        assert [c["id"] for c in body["connections"]] == ["m1"]


class TestCommandRoute:
    def test_missing_envelope_keys(self) -> None:
        client, _ = _client()
        response = client.post("/canvas/command", json={"id": "cmd_1"})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            {**ENVELOPE, "parameters": ["x"]},
            {**ENVELOPE, "id": ""},
            [ENVELOPE],
        ],
        ids=["parameters-not-object", "empty-id", "not-an-object"],
    )
    def test_malformed_envelope(self, body: Any) -> None:
        seen: list[CommandEnvelope] = []

        async def recording(envelope: CommandEnvelope) -> dict[str, Any]:
            seen.append(envelope)
            return {"id": envelope.id, "success": True}

        client, _ = _client(recording)
        response = client.post("/canvas/command", json=body)
        assert response.status_code == 400
        assert response.json()["fieldErrors"] >= 1
        assert seen == []

    def test_reply_passthrough(self) -> None:
        client, _ = _client()
        response = client.post("/canvas/command", json=ENVELOPE)
        assert response.status_code == 200
        assert response.json() == {"id": "cmd_1", "success": True, "data": {"echo": "createFrame"}}

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (TransportUnavailable("Canvas plugin not connected"), 503),
            (ReplyTimeout("cmd_1", 5), 504),
            (ValueError("Command id already in flight: cmd_1"), 409),
        ],
    )
    def test_failures_map_to_status(self, exc: Exception, status: int) -> None:
        async def failing(envelope: CommandEnvelope) -> dict[str, Any]:
            raise exc

        client, _ = _client(failing)
        response = client.post("/canvas/command", json=ENVELOPE)
        assert response.status_code == status
        assert response.json()["error"] == str(exc)
        assert response.json()["commandId"] == "cmd_1"


class TestPluginSide:
    def test_poll_requires_client_header(self) -> None:
        client, _ = _client()
        assert client.get("/canvas/commands").status_code == 400

    def test_poll_empty(self) -> None:
        client, _ = _client()
        body = client.get("/canvas/commands", headers={"X-Client-ID": "p1"}).json()
        assert body["commands"] == []

    def test_response_requires_id(self) -> None:
        client, _ = _client()
        assert client.post("/canvas/response", json={"success": True}).status_code == 400
        assert client.post("/canvas/response", json={"id": "", "success": True}).status_code == 400
        assert client.post("/canvas/response", json=[1]).status_code == 400

    def test_response_passes_reply_through(self) -> None:
        client, transport = _client()
        replies: list[Any] = []
        transport.bind(lambda reply: replies.append(reply) or True)
        reply = {"id": "cmd_1", "success": False, "error": {"code": "E", "message": "m", "details": [1]}}
        body = client.post("/canvas/response", json=reply).json()
        assert body["accepted"] is True
        assert replies == [reply]

    def test_unclaimed_response_accepted_but_flagged(self) -> None:
        client, _ = _client()
        body = client.post("/canvas/response", json={"id": "cmd_404", "success": True}).json()
        assert body["success"] is True
        assert body["accepted"] is False

    def test_keepalive(self) -> None:
        client, transport = _client()
        transport.register("plugin", "p1")
        assert client.post("/canvas/keepalive", headers={"X-Client-ID": "p1"}).json()["known"] is True
        assert client.post("/canvas/keepalive").json()["known"] is False


class TestRoundTrip:
    """A dispatcher, the bridge and a simulated plugin in one event loop."""

    @pytest.mark.anyio
    async def test_command_reaches_plugin_and_reply_returns(self) -> None:
        transport = CommandQueueTransport()
        dispatcher = Dispatcher(transport)
        app = create_bridge_app(transport, dispatcher.exchange)
        seen: list[dict[str, Any]] = []

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://bridge") as http:
            register = await http.post("/canvas/register", json={"clientType": "plugin"})
            plugin_id = register.json()["clientId"]
            headers = {"X-Client-ID": plugin_id}

            async def plugin() -> None:
                while not seen:
                    polled = await http.get("/canvas/commands", headers=headers)
                    seen.extend(polled.json()["commands"])
                    await anyio.sleep(0.01)
                command = seen[0]
                await http.post(
                    "/canvas/response",
                    json={"id": command["id"], "success": True, "data": {"id": "n1"}},
                    headers=headers,
                )

            async with anyio.create_task_group() as tg:
                tg.start_soon(plugin)
                response = await http.post("/canvas/command", json=ENVELOPE)

        assert response.status_code == 200
        assert response.json() == {"id": "cmd_1", "success": True, "data": {"id": "n1"}}
        assert seen[0]["operation"] == "createFrame"
        assert dispatcher.in_flight == frozenset()

    @pytest.mark.anyio
    async def test_no_plugin_is_503(self) -> None:
        transport = CommandQueueTransport()
        app = create_bridge_app(transport, Dispatcher(transport).exchange)
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://bridge") as http:
            response = await http.post("/canvas/command", json=ENVELOPE)
        assert response.status_code == 503
        assert response.json()["error"] == "Canvas plugin not connected"


def test_bridge_server_leaves_logging_alone() -> None:
    transport = CommandQueueTransport()
    server = bridge_server(create_bridge_app(transport, Dispatcher(transport).exchange), host="127.0.0.1", port=9999)
    assert server.config.port == 9999
    assert server.config.log_config is None
