"""Command group: persisted design sessions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from canvasctl.commands._base import CanvasGroup

if TYPE_CHECKING:
    from canvasctl.commands._context import AppContext

_SESSION_EXAMPLES = """\
  canvasctl session create
  canvasctl session list
  canvasctl session show 0f8c2d0e-5b1e-4f43-a3c4-2f9e4c8b1d77
  canvasctl session message <id> user "Make the header blue"
  canvasctl session cleanup --days 14"""


@click.group(cls=CanvasGroup, examples=_SESSION_EXAMPLES)
@click.pass_obj
def session(app: AppContext) -> None:
    """Create, inspect and prune design sessions."""


@session.command(
    examples="""\
  canvasctl session create
  canvasctl -q session create"""
)
@click.pass_obj
def create(app: AppContext) -> None:
    """Start an empty session and print its id."""
    app.emit(app.sessions.create())


@session.command(
    "list",
    examples="""\
  canvasctl session list
  canvasctl --json session list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List sessions, most recently updated first."""
    app.emit(app.sessions.list())


@session.command(examples="  canvasctl session show <id>")
@click.argument("session_id")
@click.pass_obj
def show(app: AppContext, session_id: str) -> None:
    """Show a session's design state and size."""
    app.emit(app.sessions.show(session_id))


@session.command(examples="  canvasctl session history <id>")
@click.argument("session_id")
@click.pass_obj
def history(app: AppContext, session_id: str) -> None:
    """Print the retained conversation history."""
    app.emit(app.sessions.history(session_id))


@session.command(
    examples="""\
  canvasctl session message <id> user "Add a login form"
  canvasctl session message <id> assistant "Created the form" """
)
@click.argument("session_id")
@click.argument("role", type=click.Choice(["user", "assistant"]))
@click.argument("content")
@click.pass_obj
def message(app: AppContext, session_id: str, role: str, content: str) -> None:
    """Append a message to the conversation history."""
    app.emit(app.sessions.add_message(session_id, {"role": role, "content": content}))


@session.command(examples="""  canvasctl session design <id> '{"currentFileKey": "abc123"}'""")
@click.argument("session_id")
@click.argument("updates_json")
@click.pass_obj
def design(app: AppContext, session_id: str, updates_json: str) -> None:
    """Merge top-level keys into the session's design state."""
    try:
        updates = json.loads(updates_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON ({exc.msg})", param_hint="UPDATES_JSON") from exc
    if not isinstance(updates, dict):
        raise click.BadParameter("must be a JSON object", param_hint="UPDATES_JSON")
    app.emit(app.sessions.update_design_state(session_id, updates))


@session.command(examples="  canvasctl session delete <id>")
@click.argument("session_id")
@click.pass_obj
def delete(app: AppContext, session_id: str) -> None:
    """Delete a session document."""
    app.emit(app.sessions.delete(session_id))


@session.command(
    examples="""\
  canvasctl session cleanup
  canvasctl session cleanup --days 1"""
)
@click.option("--days", type=click.IntRange(min=0), default=None, help="Age cutoff (default from [sessions]).")
@click.pass_obj
def cleanup(app: AppContext, days: int | None) -> None:
    """Delete sessions not updated within the cutoff."""
    app.emit(app.sessions.cleanup(days))
