"""HTTP client transport for a bridge running in another process.

``POST /canvas/command`` on the bridge blocks until the plugin replies, so
delivery and reply arrive in the same HTTP exchange; the reply body is
handed to the bound reply handler like any other reply.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from canvasctl.infrastructure.transport import ReplyHandler, ReplyTimeout, TransportUnavailable

log = structlog.get_logger("canvasctl.bridge")


class HttpBridgeTransport:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None
        self._on_reply: ReplyHandler | None = None

    def bind(self, on_reply: ReplyHandler) -> None:
        self._on_reply = on_reply

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def deliver(self, command: dict[str, Any]) -> None:
        client = self._ensure_client()
        command_id = str(command.get("id"))
        try:
            response = await client.post("/canvas/command", json=command)
        except httpx.TimeoutException as exc:
            raise ReplyTimeout(command_id, self.timeout_seconds) from exc
        except httpx.RequestError as exc:
            raise TransportUnavailable(f"Bridge unreachable at {self.base_url}: {exc}") from exc

        if response.status_code == 504:
            raise ReplyTimeout(command_id, self.timeout_seconds)
        if response.status_code >= 400:
            raise TransportUnavailable(_error_text(response))

        try:
            reply = response.json()
        except ValueError as exc:
            raise TransportUnavailable("Bridge returned a non-JSON reply") from exc

        if self._on_reply is None or not self._on_reply(reply):
            log.warning("bridge.reply_unclaimed", command_id=command_id)
            raise TransportUnavailable(f"Bridge reply did not match command {command_id}")

    async def status(self) -> dict[str, Any]:
        """``GET /canvas/status`` on the remote bridge."""
        client = self._ensure_client()
        try:
            response = await client.get("/canvas/status")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportUnavailable(f"Bridge unreachable at {self.base_url}: {exc}") from exc
        return response.json()


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Bridge error {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Bridge error {response.status_code}"
