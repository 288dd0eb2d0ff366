"""Subcommand modules for canvasctl.

Provides register_commands() which uses deferred imports to keep
``canvasctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from canvasctl.commands.session import session
    from canvasctl.commands.tools import tools

    cli.add_command(tools)
    cli.add_command(session)

    # --- Standalone commands ---
    from canvasctl.commands.bridge import bridge
    from canvasctl.commands.serve import serve

    cli.add_command(serve)
    cli.add_command(bridge)
