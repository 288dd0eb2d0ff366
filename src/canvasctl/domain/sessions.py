"""Session records — design state plus bounded conversation history.

Persisted with camelCase keys (``sessionId``, ``designState``,
``conversationHistory``); Python code uses snake_case attributes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(UTC)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Action(_Record):
    """A tool invocation recorded alongside an assistant message."""

    tool: str
    params: dict[str, Any] = Field(default_factory=dict)


class Message(_Record):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime | None = None
    actions: list[Action] | None = None


class DesignState(_Record):
    """Snapshot of what the orchestrator knows about the canvas.

    Unknown keys (``currentFileKey`` and the like) are kept verbatim.
    """

    model_config = ConfigDict(extra="allow")

    frames: list[Any] = Field(default_factory=list)
    nodes: list[Any] = Field(default_factory=list)
    styles: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def merged(self, updates: dict[str, Any]) -> DesignState:
        """Shallow merge: top-level keys in *updates* replace existing ones."""
        current = self.model_dump(by_alias=True)
        return DesignState.model_validate({**current, **updates})


class SessionState(_Record):
    session_id: str
    timestamp: datetime = Field(default_factory=utc_now)
    design_state: DesignState = Field(default_factory=DesignState)
    conversation_history: list[Message] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SessionSummary(_Record):
    session_id: str
    timestamp: datetime
