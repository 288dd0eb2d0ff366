"""Tests for the tools command group."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from canvasctl.cli import cli
from canvasctl.services.result import CommandError, CommandResult, ErrorKind


@pytest.mark.usefixtures("_isolated_project")
class TestToolsList:
    def test_lists_whole_catalog(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "list"])
        assert result.exit_code == 0, result.output
        assert "create_frame" in result.output
        assert "export_node" in result.output
        assert "93 tools" in result.output

    def test_category_filter(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "list", "--category", "export-operations"])
        assert result.exit_code == 0
        assert "2 tools" in result.output
        assert "create_frame" not in result.output

    def test_unknown_category_rejected(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "list", "--category", "paint-operations"])
        assert result.exit_code == 2
        assert "Invalid value" in result.output

    def test_quiet_prints_names(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "tools", "list", "--category", "boolean-operations"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[:4] == ["boolean_union", "boolean_subtract", "boolean_intersect", "boolean_exclude"]

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "tools", "list"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["ok"] is True
        assert payload["op"] == "list_tools"
        assert payload["data"]["count"] == 93
        assert payload["data"]["tools"][0]["name"] == "create_frame"


@pytest.mark.usefixtures("_isolated_project")
class TestToolsShow:
    def test_show_parameters(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "show", "stack_horizontally"])
        assert result.exit_code == 0, result.output
        assert "stack_horizontally" in result.output
        assert "nodeIds" in result.output
        assert "stackHorizontally" in result.output

    def test_show_json_has_schema(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "tools", "show", "create_rectangle"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["inputSchema"]["type"] == "object"
        assert {"width", "height"} <= set(data["inputSchema"]["required"])

    def test_show_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "show", "make_coffee"])
        assert result.exit_code == 1
        assert "UNKNOWN_OPERATION" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestToolsValidate:
    def test_valid_arguments(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["tools", "validate", "set_fill_color", '{"nodeId": "1:2", "color": "#1a2b3c"}']
        )
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "#1A2B3C" in result.output

    def test_envelope_preview_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "tools", "validate", "stack_vertically", '{"nodeIds": ["1:2", "1:3"]}']
        )
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["params"]["spacing"] == 8
        envelope = data["envelope"]
        assert envelope["category"] == "layout-operations"
        assert envelope["operation"] == "layoutOperations"
        assert envelope["parameters"]["action"] == "stackVertically"
        assert envelope["id"]

    def test_invalid_color_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "validate", "set_fill_color", '{"nodeId": "1:2", "color": "red"}'])
        assert result.exit_code == 1
        assert "INVALID_PARAMETERS" in result.output
        assert "color: must be a valid hex color (#RRGGBB)" in result.output

    def test_reads_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["tools", "validate", "stack_vertically", "-"], input='{"nodeIds": ["1:2", "1:3"]}'
        )
        assert result.exit_code == 0, result.output

    def test_missing_arguments_default_to_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "validate", "get_selection"])
        assert result.exit_code == 0

    def test_bad_json_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "validate", "get_selection", "{nope"])
        assert result.exit_code == 2
        assert "ARGS_JSON" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestToolsCall:
    def _fake_remote(self, result: CommandResult, seen: dict[str, Any]):
        async def fake(settings: Any, url: str, name: str, arguments: Any) -> CommandResult:
            seen.update(url=url, name=name, arguments=arguments)
            return result

        return fake

    def test_success(self, cli_runner: CliRunner) -> None:
        seen: dict[str, Any] = {}
        reply = CommandResult(id="c1", operation="get_selection", success=True, data={"nodes": []})
        with patch("canvasctl.commands.tools._call_remote", self._fake_remote(reply, seen)):
            result = cli_runner.invoke(cli, ["tools", "call", "get_selection"])
        assert result.exit_code == 0, result.output
        assert "call_tool" in result.output
        assert seen == {"url": "http://127.0.0.1:8765", "name": "get_selection", "arguments": {}}

    def test_bridge_url_option(self, cli_runner: CliRunner) -> None:
        seen: dict[str, Any] = {}
        reply = CommandResult(id="c1", operation="get_selection", success=True, data={})
        with patch("canvasctl.commands.tools._call_remote", self._fake_remote(reply, seen)):
            cli_runner.invoke(cli, ["tools", "call", "get_selection", "--bridge-url", "http://10.0.0.5:9000"])
        assert seen["url"] == "http://10.0.0.5:9000"

    def test_transport_failure_exits_1(self, cli_runner: CliRunner) -> None:
        reply = CommandResult(
            id="c1",
            operation="get_selection",
            success=False,
            error=CommandError(
                kind=ErrorKind.TRANSPORT_ERROR,
                code="TRANSPORT_UNAVAILABLE",
                message="Canvas plugin not connected",
            ),
        )
        with patch("canvasctl.commands.tools._call_remote", self._fake_remote(reply, {})):
            result = cli_runner.invoke(cli, ["tools", "call", "get_selection"])
        assert result.exit_code == 1
        assert "TRANSPORT_UNAVAILABLE" in result.output
        assert "Canvas plugin not connected" in result.output

    def test_json_failure_payload(self, cli_runner: CliRunner) -> None:
        reply = CommandResult(
            id="c1",
            operation="get_selection",
            success=False,
            error=CommandError(kind=ErrorKind.TRANSPORT_ERROR, code="TIMEOUT", message="No reply"),
        )
        with patch("canvasctl.commands.tools._call_remote", self._fake_remote(reply, {})):
            result = cli_runner.invoke(cli, ["--json", "tools", "call", "get_selection"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "TIMEOUT"
        assert payload["error"]["detail"]["id"] == "c1"
