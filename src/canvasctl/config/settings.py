"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CANVASCTL_*`` prefix, ``__`` for nesting
  3. TOML file    — ``canvasctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from canvasctl.config.discovery import find_config
from canvasctl.config.models import BridgeConfig, DispatchConfig, McpConfig, SessionsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``canvasctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class CanvasSettings(BaseSettings):
    """Everything the CLI needs, frozen after construction.

    Attributes:
        project_root: Directory holding ``canvasctl.toml`` (or CWD); relative
            ``sessions.data_dir`` values resolve against it.
        config_path: The TOML file actually used, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CANVASCTL_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    sessions: SessionsConfig = Field(default_factory=SessionsConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @property
    def data_dir(self) -> Path:
        path = Path(self.sessions.data_dir).expanduser()
        return path if path.is_absolute() else self.project_root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> CanvasSettings:
        """Discover the TOML file (or use *config_path*) and merge CLI flags on top."""
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
            toml_path = p
        else:
            toml_path = find_config(project_root)

        root = project_root or (toml_path.parent if toml_path else Path.cwd())

        _tls.toml_path = toml_path
        try:
            return cls(project_root=root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
