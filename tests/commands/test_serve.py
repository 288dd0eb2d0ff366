"""Tests for the serve and bridge commands."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from canvasctl.cli import cli


class TestServeCommand:
    def test_serve_registered(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert "serve" in result.output

    def test_serve_without_extra(self, cli_runner: CliRunner) -> None:
        with patch("canvasctl.mcp.server.mcp_available", False):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "pip install canvasctl[mcp]" in result.output

    @pytest.mark.usefixtures("_isolated_project")
    def test_serve_runs_mcp_with_bridge_url(self, cli_runner: CliRunner) -> None:
        calls: list[dict[str, Any]] = []

        async def fake_serve_mcp(settings: Any, *, bridge_url: str | None = None) -> None:
            calls.append({"settings": settings, "bridge_url": bridge_url})

        with (
            patch("canvasctl.mcp.server.mcp_available", True),
            patch("canvasctl.runtime.serve_mcp", fake_serve_mcp),
        ):
            result = cli_runner.invoke(cli, ["serve", "--bridge-url", "http://127.0.0.1:9000"])

        assert result.exit_code == 0, result.output
        assert len(calls) == 1
        assert calls[0]["bridge_url"] == "http://127.0.0.1:9000"

    @pytest.mark.usefixtures("_isolated_project")
    def test_serve_in_process_bridge_by_default(self, cli_runner: CliRunner) -> None:
        calls: list[str | None] = []

        async def fake_serve_mcp(settings: Any, *, bridge_url: str | None = None) -> None:
            calls.append(bridge_url)

        with (
            patch("canvasctl.mcp.server.mcp_available", True),
            patch("canvasctl.runtime.serve_mcp", fake_serve_mcp),
        ):
            result = cli_runner.invoke(cli, ["serve"])

        assert result.exit_code == 0
        assert calls == [None]


@pytest.mark.usefixtures("_isolated_project")
class TestBridgeCommand:
    def test_bridge_uses_options(self, cli_runner: CliRunner) -> None:
        calls: list[tuple[str | None, int | None]] = []

        async def fake_serve_bridge(settings: Any, *, host: str | None = None, port: int | None = None) -> None:
            calls.append((host, port))

        with patch("canvasctl.runtime.serve_bridge", fake_serve_bridge):
            result = cli_runner.invoke(cli, ["bridge", "--port", "9000"])

        assert result.exit_code == 0, result.output
        assert calls == [(None, 9000)]
        assert "Bridge on http://127.0.0.1:9000" in result.output

    def test_bridge_host_from_env(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CANVASCTL_BRIDGE__HOST", "0.0.0.0")

        async def fake_serve_bridge(settings: Any, *, host: str | None = None, port: int | None = None) -> None:
            assert settings.bridge.host == "0.0.0.0"

        with patch("canvasctl.runtime.serve_bridge", fake_serve_bridge):
            result = cli_runner.invoke(cli, ["bridge"])

        assert result.exit_code == 0, result.output
        assert "Bridge on http://0.0.0.0:8765" in result.output

    def test_bad_port(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bridge", "--port", "http"])
        assert result.exit_code == 2
