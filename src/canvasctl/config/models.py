"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, canvasctl.toml only holds
overrides. An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from canvasctl.domain.operations import DEFAULT_CATEGORY_TIMEOUTS, DEFAULT_TIMEOUT_SECONDS


class BridgeConfig(BaseModel):
    """[bridge] section."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = Field(default=8765, ge=1, le=65535)
    client_ttl_seconds: float = Field(default=60.0, gt=0)
    client_expiry_seconds: float = Field(default=120.0, gt=0)
    # Set to talk to a bridge running in another process.
    url: str | None = None


class DispatchConfig(BaseModel):
    """[dispatch] section."""

    model_config = {"frozen": True}

    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    category_timeouts: dict[str, float] = Field(
        default_factory=lambda: {str(k): v for k, v in DEFAULT_CATEGORY_TIMEOUTS.items()}
    )


class SessionsConfig(BaseModel):
    """[sessions] section."""

    model_config = {"frozen": True}

    data_dir: str = "data"
    history_limit: int = Field(default=20, ge=1)
    cleanup_days: int = Field(default=7, ge=0)


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    server_name: str = "canvasctl"


class CanvasConfig(BaseModel):
    """All canvasctl.toml sections."""

    model_config = {"frozen": True}

    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    sessions: SessionsConfig = Field(default_factory=SessionsConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
