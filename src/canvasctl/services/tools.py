"""ToolService — the catalog and call surface offered to orchestrators.

``call`` runs the whole pipeline (validate -> build -> send -> normalize)
and never raises: every failure comes back as a CommandResult.
"""

from __future__ import annotations

from typing import Any

from canvasctl.domain.commands import envelope_for
from canvasctl.domain.operations import Category
from canvasctl.domain.registry import OperationNotFound, OperationRegistry, default_registry
from canvasctl.domain.validation import Invalid, UnknownOperation, validate
from canvasctl.infrastructure.transport import TransportUnavailable
from canvasctl.services.dispatch import Dispatcher
from canvasctl.services.normalizer import normalize, transport_failure
from canvasctl.services.result import CommandResult, ServiceError, ServiceResult


class ToolService:
    def __init__(
        self,
        dispatcher: Dispatcher | None = None,
        *,
        registry: OperationRegistry | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._registry = registry or default_registry()

    @property
    def registry(self) -> OperationRegistry:
        return self._registry

    def list_tools(self, category: Category | str | None = None) -> list[dict[str, Any]]:
        """Public shape ``{name, description, inputSchema}`` of each operation."""
        return [d.public_shape() for d in self._registry.definitions_for(category)]

    async def call(self, name: str, arguments: Any = None) -> CommandResult:
        outcome = validate(name, arguments, registry=self._registry)
        if isinstance(outcome, (UnknownOperation, Invalid)):
            return normalize(outcome)
        envelope = envelope_for(outcome.operation, outcome.params)
        if self._dispatcher is None:
            return transport_failure(envelope, TransportUnavailable("No dispatcher configured"), name)
        return await self._dispatcher.send(envelope, operation=name)

    # -- ServiceResult wrappers for the CLI --

    def catalog(self, category: Category | str | None = None) -> ServiceResult:
        tools = [
            {
                "name": d.name,
                "category": str(d.category),
                "command": d.command,
                "description": d.description,
            }
            for d in self._registry.definitions_for(category)
        ]
        return ServiceResult(ok=True, op="list_tools", data={"tools": tools, "count": len(tools)})

    def describe(self, name: str) -> ServiceResult:
        try:
            definition = self._registry.get(name)
        except OperationNotFound as exc:
            return _not_found("show_tool", exc)
        return ServiceResult(
            ok=True,
            op="show_tool",
            data={
                "name": definition.name,
                "category": str(definition.category),
                "command": definition.command,
                "description": definition.description,
                "fixed": dict(definition.fixed),
                "inputSchema": definition.input_schema(),
            },
        )

    def check(self, name: str, arguments: Any = None) -> ServiceResult:
        """Validate *arguments* and preview the envelope without sending it."""
        outcome = validate(name, arguments, registry=self._registry)
        if isinstance(outcome, (UnknownOperation, Invalid)):
            return from_command_result(normalize(outcome), op="validate_tool")
        envelope = envelope_for(outcome.operation, outcome.params)
        return ServiceResult(
            ok=True,
            op="validate_tool",
            data={"name": name, "params": outcome.params, "envelope": envelope.to_wire()},
        )


def _not_found(op: str, exc: OperationNotFound) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="UNKNOWN_OPERATION", message=str(exc), detail={"name": exc.name}),
    )


def from_command_result(result: CommandResult, *, op: str = "call_tool") -> ServiceResult:
    """Wrap a CommandResult for CLI output."""
    if result.success:
        return ServiceResult(ok=True, op=op, data=result.to_wire())
    assert result.error is not None
    detail: dict[str, Any] = {"kind": str(result.error.kind), "operation": result.operation}
    if result.id is not None:
        detail["id"] = result.id
    if result.error.details is not None:
        detail["details"] = result.error.details
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code=result.error.code or str(result.error.kind),
            message=result.error.message,
            detail=detail,
        ),
    )
