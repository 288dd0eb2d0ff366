"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Services are built lazily so ``--help`` never touches
the session directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from canvasctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from canvasctl.config.settings import CanvasSettings
    from canvasctl.services.result import ServiceResult
    from canvasctl.services.session import SessionService
    from canvasctl.services.tools import ToolService


class AppContext:
    def __init__(self, settings: CanvasSettings) -> None:
        self.settings = settings
        self._sessions: SessionService | None = None
        self._tools: ToolService | None = None

        from canvasctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def tools(self) -> ToolService:
        """Catalog-only tool service (no dispatcher attached)."""
        if self._tools is None:
            from canvasctl.services.tools import ToolService

            self._tools = ToolService()
        return self._tools

    @property
    def sessions(self) -> SessionService:
        if self._sessions is None:
            from canvasctl.runtime import build_session_service

            self._sessions = build_session_service(self.settings)
        return self._sessions

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr outside JSON mode.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
