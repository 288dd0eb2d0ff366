"""component-operations: components, variants and instances."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import BOOLEAN, NODE_ID, OPTIONAL_POSITION, TEXT, node_ids
from canvasctl.domain.schema import ArraySchema, RecordSchema, UnionSchema, obj, optional, required

_op = partial(operation, category=Category.COMPONENT_OPERATIONS)

VARIANT = obj(
    required("name", TEXT, "Variant name"),
    required("properties", RecordSchema(values=TEXT), "Variant property values"),
)

PROPERTY_VALUE = UnionSchema(options=(TEXT, BOOLEAN))

OPERATIONS = (
    _op(
        "create_component",
        "Create a component, empty or from existing nodes",
        required("name", TEXT, "Component name"),
        optional("description", TEXT, "Component description"),
        optional("nodeIds", node_ids(1), "Nodes to convert into the component"),
        *OPTIONAL_POSITION,
    ),
    _op(
        "create_component_set",
        "Create a component set with variants",
        required("name", TEXT, "Component set name"),
        required("variants", ArraySchema(items=VARIANT, min_items=1), "Component variants"),
        *OPTIONAL_POSITION,
    ),
    _op(
        "create_instance",
        "Place an instance of a component",
        required("componentId", NODE_ID, "Component to instantiate"),
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Instance name"),
    ),
    _op(
        "detach_instance",
        "Detach an instance from its main component",
        required("nodeId", NODE_ID, "Instance node ID"),
    ),
    _op(
        "swap_component",
        "Point an instance at a different component",
        required("nodeId", NODE_ID, "Instance node ID"),
        required("componentId", NODE_ID, "Replacement component ID"),
    ),
    _op(
        "set_component_properties",
        "Set component property values on an instance",
        required("nodeId", NODE_ID, "Instance node ID"),
        required("properties", RecordSchema(values=PROPERTY_VALUE), "Property name to value"),
    ),
    _op(
        "reset_instance_overrides",
        "Discard all overrides on an instance",
        required("nodeId", NODE_ID, "Instance node ID"),
    ),
)
