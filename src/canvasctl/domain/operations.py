"""Operation definitions — the immutable unit of the catalog."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from canvasctl.domain.schema import ObjectSchema, Property, obj, to_json_schema


class Category(StrEnum):
    """Operation families, spelled as the remote executor routes them."""

    NODE_CREATION = "node-creation"
    NODE_MODIFICATION = "node-modification"
    STYLE_MODIFICATION = "style-modification"
    TEXT_OPERATIONS = "text-operations"
    LAYOUT_OPERATIONS = "layout-operations"
    COMPONENT_OPERATIONS = "component-operations"
    BOOLEAN_OPERATIONS = "boolean-operations"
    HIERARCHY_OPERATIONS = "hierarchy-operations"
    SELECTION_NAVIGATION = "selection-navigation"
    EXPORT_OPERATIONS = "export-operations"


# Reply budgets, seconds.
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CATEGORY_TIMEOUTS: dict[str, float] = {
    Category.NODE_CREATION: 5.0,
    Category.NODE_MODIFICATION: 5.0,
    Category.STYLE_MODIFICATION: 5.0,
    Category.TEXT_OPERATIONS: 5.0,
}


def camel_case(name: str) -> str:
    """``create_rectangle`` -> ``createRectangle``."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True, eq=False)
class OperationDefinition:
    """One named operation: tool name, wire routing, and parameter contract.

    ``command`` is the operation name sent on the wire. ``fixed`` holds
    parameters merged into every envelope (layout ``action`` routing).
    """

    name: str
    category: Category
    description: str
    parameters: ObjectSchema
    command: str
    fixed: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def input_schema(self) -> dict[str, Any]:
        return to_json_schema(self.parameters)

    def public_shape(self) -> dict[str, Any]:
        """``{name, description, inputSchema}`` as advertised to orchestrators."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


def operation(
    name: str,
    description: str,
    *fields: Property,
    category: Category,
    command: str | None = None,
    fixed: Mapping[str, Any] | None = None,
) -> OperationDefinition:
    """Declare a catalog entry. The wire command defaults to camelCase *name*."""
    return OperationDefinition(
        name=name,
        category=category,
        description=description,
        parameters=obj(*fields, description=description),
        command=command or camel_case(name),
        fixed=MappingProxyType(dict(fixed or {})),
    )
