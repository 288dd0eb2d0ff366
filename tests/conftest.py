"""Shared pytest fixtures and test helpers for canvasctl tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from canvasctl.infrastructure.sessions import SessionStore
from canvasctl.infrastructure.transport import ReplyHandler, TransportUnavailable


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no config or env overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes; sessions land under ``tmp_path / "data"``.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CANVASCTL_CONFIG", raising=False)
    for name in ("CANVASCTL_BRIDGE__URL", "CANVASCTL_SESSIONS__DATA_DIR"):
        monkeypatch.delenv(name, raising=False)


class FakeClock:
    """Settable UTC clock for session-store tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path: Path, clock: FakeClock) -> SessionStore:
    return SessionStore(tmp_path / "data", clock=clock)


class EchoTransport:
    """In-memory executor: records each command and answers through *responder*.

    ``responder(command)`` returns the reply dict, or None to stay silent.
    With ``connected=False`` every delivery raises TransportUnavailable.
    """

    def __init__(
        self,
        responder: Callable[[dict[str, Any]], dict[str, Any] | None] | None = None,
        *,
        connected: bool = True,
    ) -> None:
        self.responder = responder or (lambda command: {"id": command["id"], "success": True, "data": {}})
        self.connected = connected
        self.delivered: list[dict[str, Any]] = []
        self.on_reply: ReplyHandler | None = None

    def bind(self, on_reply: ReplyHandler) -> None:
        self.on_reply = on_reply

    async def deliver(self, command: dict[str, Any]) -> None:
        if not self.connected:
            raise TransportUnavailable("Canvas plugin not connected")
        self.delivered.append(command)
        reply = self.responder(command)
        if reply is not None:
            assert self.on_reply is not None
            self.on_reply(reply)


@pytest.fixture
def echo_transport() -> EchoTransport:
    return EchoTransport()


@pytest.fixture
def make_transport() -> type[EchoTransport]:
    """The EchoTransport class, for tests that need a custom responder."""
    return EchoTransport
