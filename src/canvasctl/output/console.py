"""Rich Console factory and theme for canvasctl output.

Consoles render into a StringIO buffer so renderers stay pure
``ServiceResult -> str`` functions. Rich drops color codes on its own
when the output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CANVAS_THEME = Theme(
    {
        "canvas.ok": "bold green",
        "canvas.error": "bold red",
        "canvas.warning": "bold yellow",
        "canvas.op": "bold cyan",
        "canvas.key": "dim",
        "canvas.id": "bold blue",
        "canvas.name": "bold",
        "canvas.role.user": "green",
        "canvas.role.assistant": "magenta",
    }
)

_CATEGORY_STYLES: dict[str, str] = {
    "node-creation": "green",
    "node-modification": "yellow",
    "style-modification": "magenta",
    "text-operations": "cyan",
    "layout-operations": "blue",
    "component-operations": "bright_magenta",
    "boolean-operations": "red",
    "hierarchy-operations": "bright_blue",
    "selection-navigation": "bright_cyan",
    "export-operations": "bright_green",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=CANVAS_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_category(category: str) -> str:
    return _CATEGORY_STYLES.get(category, "")
