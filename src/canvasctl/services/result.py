"""Result contracts.

``ServiceResult`` is what every service operation returns to the CLI.
``CommandResult`` is the uniform outcome of one canvas operation: every
failure mode of validate -> build -> send collapses into it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field, model_validator


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"list_tools"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


class ErrorKind(StrEnum):
    UNKNOWN_OPERATION = "UnknownOperation"
    VALIDATION_ERROR = "ValidationError"
    TRANSPORT_ERROR = "TransportError"
    REMOTE_EXECUTION_ERROR = "RemoteExecutionError"


class CommandError(BaseModel):
    model_config = {"frozen": True}

    kind: ErrorKind
    message: str
    code: str | None = None
    details: Any = None


class CommandResult(BaseModel):
    """Outcome of one operation call.

    INVARIANT: ``success`` XOR ``error``; failures never carry ``data``.
    ``id`` is None when the call failed before an envelope was built.
    """

    model_config = {"frozen": True}

    id: str | None = None
    operation: str
    success: bool
    data: Any = None
    error: CommandError | None = None

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        if self.success and self.error is not None:
            raise ValueError("a successful result cannot carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("a failed result must carry an error")
            if self.data is not None:
                raise ValueError("a failed result cannot carry data")
        return self

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
