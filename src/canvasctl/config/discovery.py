"""Config file discovery and loading.

Walk-up finder locates canvasctl.toml the way git finds .git/.
Supports the CANVASCTL_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from canvasctl.config.models import CanvasConfig

CONFIG_FILENAME = "canvasctl.toml"
CONFIG_ENV_VAR = "CANVASCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for canvasctl.toml.

    CANVASCTL_CONFIG, when set, wins; a dangling value means "no config".
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> CanvasConfig:
    """Load the TOML sections only (no env vars, no CLI flags)."""
    if path is None:
        path = find_config(cwd)
    if path is None:
        return CanvasConfig()
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return CanvasConfig.model_validate(data)
