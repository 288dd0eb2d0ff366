"""boolean-operations: shape algebra over existing nodes."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import OPTIONAL_POSITION, TEXT, enum, node_ids
from canvasctl.domain.schema import optional, required

_op = partial(operation, category=Category.BOOLEAN_OPERATIONS)

_OPERANDS = required("nodeIds", node_ids(2), "Nodes to combine (at least 2)")
_NAME = optional("name", TEXT, "Result node name")

OPERATIONS = (
    _op("boolean_union", "Union two or more shapes", _OPERANDS, _NAME),
    _op("boolean_subtract", "Subtract later shapes from the first", _OPERANDS, _NAME),
    _op("boolean_intersect", "Keep only the overlapping area", _OPERANDS, _NAME),
    _op("boolean_exclude", "Keep only the non-overlapping area", _OPERANDS, _NAME),
    _op(
        "create_boolean_operation",
        "Combine nodes with an explicit boolean operation",
        required("booleanOperation", enum("UNION", "INTERSECT", "SUBTRACT", "EXCLUDE")),
        required("children", node_ids(2), "Nodes to combine (at least 2)"),
        *OPTIONAL_POSITION,
        _NAME,
    ),
    _op(
        "flatten_nodes",
        "Flatten nodes into a single vector",
        required("nodeIds", node_ids(1), "Nodes to flatten"),
        _NAME,
    ),
)
