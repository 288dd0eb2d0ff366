"""Validate raw caller arguments against an operation's contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from canvasctl.domain.operations import OperationDefinition
from canvasctl.domain.registry import OperationNotFound, OperationRegistry, default_registry
from canvasctl.domain.schema import FieldError, check


@dataclass(frozen=True)
class Valid:
    operation: OperationDefinition
    params: dict[str, Any]


@dataclass(frozen=True)
class Invalid:
    operation: OperationDefinition
    errors: tuple[FieldError, ...]

    @property
    def message(self) -> str:
        """Every field error, one per line, in declaration order."""
        return "\n".join(error.render() for error in self.errors)


@dataclass(frozen=True)
class UnknownOperation:
    name: str


ValidationOutcome: TypeAlias = Valid | Invalid | UnknownOperation


def validate(
    name: str,
    raw: Any,
    *,
    registry: OperationRegistry | None = None,
) -> ValidationOutcome:
    """Check *raw* against the contract registered for *name*.

    Pure: no I/O, no mutation of *raw*. ``None`` is treated as ``{}``.
    """
    registry = registry or default_registry()
    try:
        definition = registry.get(name)
    except OperationNotFound:
        return UnknownOperation(name)

    params, errors = check(definition.parameters, {} if raw is None else raw)
    if errors:
        return Invalid(definition, tuple(errors))
    return Valid(definition, params)
