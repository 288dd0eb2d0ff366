"""Command envelopes: canonical parameters plus a fresh correlation id."""

from __future__ import annotations

import copy
import uuid
from typing import Any

from pydantic import BaseModel, Field

from canvasctl.domain.operations import OperationDefinition


def new_command_id() -> str:
    return f"cmd_{uuid.uuid4().hex}"


class CommandEnvelope(BaseModel):
    """One outbound command. Immutable once built."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=new_command_id)
    category: str
    operation: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def build_command(
    category: str,
    operation: str,
    params: dict[str, Any],
    *,
    command_id: str | None = None,
) -> CommandEnvelope:
    """Wrap already-validated *params*. Never fails."""
    fields: dict[str, Any] = {
        "category": str(category),
        "operation": operation,
        "parameters": copy.deepcopy(params),
    }
    if command_id is not None:
        fields["id"] = command_id
    return CommandEnvelope(**fields)


def envelope_for(
    definition: OperationDefinition,
    params: dict[str, Any],
    *,
    command_id: str | None = None,
) -> CommandEnvelope:
    """Build the wire envelope for *definition*, merging its fixed parameters."""
    return build_command(
        definition.category,
        definition.command,
        {**params, **definition.fixed},
        command_id=command_id,
    )
