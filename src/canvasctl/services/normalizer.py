"""Classify every outcome of the dispatch pipeline into a CommandResult.

Priority: validation failure, transport failure, remote failure, success.
Remote payloads pass through unmodified.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from canvasctl.domain.commands import CommandEnvelope
from canvasctl.domain.validation import Invalid, UnknownOperation
from canvasctl.infrastructure.transport import ReplyTimeout, TransportUnavailable
from canvasctl.services.result import CommandError, CommandResult, ErrorKind

REMOTE_ERROR = "REMOTE_ERROR"
MALFORMED_REPLY = "MALFORMED_REPLY"


def unknown_operation(outcome: UnknownOperation) -> CommandResult:
    return CommandResult(
        operation=outcome.name,
        success=False,
        error=CommandError(
            kind=ErrorKind.UNKNOWN_OPERATION,
            code="UNKNOWN_OPERATION",
            message=f"Unknown operation: {outcome.name}",
        ),
    )


def validation_failure(outcome: Invalid) -> CommandResult:
    return CommandResult(
        operation=outcome.operation.name,
        success=False,
        error=CommandError(
            kind=ErrorKind.VALIDATION_ERROR,
            code="INVALID_PARAMETERS",
            message="; ".join(error.render() for error in outcome.errors),
            details={
                "errors": [{"path": e.path, "message": e.message} for e in outcome.errors],
            },
        ),
    )


def transport_failure(
    envelope: CommandEnvelope,
    exc: TransportUnavailable | ReplyTimeout,
    operation: str | None = None,
) -> CommandResult:
    code = "TIMEOUT" if isinstance(exc, ReplyTimeout) else "TRANSPORT_UNAVAILABLE"
    return CommandResult(
        id=envelope.id,
        operation=operation or envelope.operation,
        success=False,
        error=CommandError(kind=ErrorKind.TRANSPORT_ERROR, code=code, message=str(exc)),
    )


def _remote_error(raw: Any) -> CommandError:
    # Older executors send the error as a bare string.
    if isinstance(raw, Mapping):
        message = raw.get("message")
        return CommandError(
            kind=ErrorKind.REMOTE_EXECUTION_ERROR,
            code=str(raw.get("code") or REMOTE_ERROR),
            message=str(message) if message is not None else "Remote execution failed",
            details=raw.get("details"),
        )
    return CommandError(
        kind=ErrorKind.REMOTE_EXECUTION_ERROR,
        code=REMOTE_ERROR,
        message=str(raw) if raw not in (None, "") else "Remote execution failed",
    )


def normalize_reply(envelope: CommandEnvelope, reply: Any, operation: str | None = None) -> CommandResult:
    """Map a raw executor reply correlated with *envelope*."""
    name = operation or envelope.operation
    if not isinstance(reply, Mapping) or not isinstance(reply.get("success"), bool):
        return CommandResult(
            id=envelope.id,
            operation=name,
            success=False,
            error=CommandError(
                kind=ErrorKind.REMOTE_EXECUTION_ERROR,
                code=MALFORMED_REPLY,
                message="Executor reply is missing a boolean 'success' field",
                details={"reply": reply},
            ),
        )
    if not reply["success"]:
        return CommandResult(id=envelope.id, operation=name, success=False, error=_remote_error(reply.get("error")))
    return CommandResult(id=envelope.id, operation=name, success=True, data=reply.get("data"))


def normalize(
    outcome: Any,
    envelope: CommandEnvelope | None = None,
    operation: str | None = None,
) -> CommandResult:
    """Single entry point over every pipeline outcome."""
    if isinstance(outcome, UnknownOperation):
        return unknown_operation(outcome)
    if isinstance(outcome, Invalid):
        return validation_failure(outcome)
    if envelope is None:
        raise ValueError("an envelope is required to normalize a transport outcome")
    if isinstance(outcome, (TransportUnavailable, ReplyTimeout)):
        return transport_failure(envelope, outcome, operation)
    return normalize_reply(envelope, outcome, operation)
