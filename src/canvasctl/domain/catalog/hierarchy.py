"""hierarchy-operations: grouping, parenting, duplication and z-order."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import NODE_ID, NUMBER, TEXT, enum, node_ids
from canvasctl.domain.schema import NumberSchema, optional, required

_op = partial(operation, category=Category.HIERARCHY_OPERATIONS)

OPERATIONS = (
    _op(
        "group_nodes",
        "Group nodes under a new group node",
        required("nodeIds", node_ids(1), "Nodes to group"),
        optional("name", TEXT, "Group name"),
    ),
    _op("ungroup_node", "Dissolve a group, keeping its children", required("nodeId", NODE_ID, "Group node ID")),
    _op(
        "append_child",
        "Move a node under a new parent",
        required("parentId", NODE_ID, "New parent node ID"),
        required("childId", NODE_ID, "Node to move"),
        optional("index", NumberSchema(integer=True, minimum=0), "Insert position among siblings"),
    ),
    _op(
        "duplicate_node",
        "Duplicate a node with an optional offset",
        required("nodeId", NODE_ID, "Node to duplicate"),
        optional("offsetX", NUMBER, "Horizontal offset of the copy", default=0),
        optional("offsetY", NUMBER, "Vertical offset of the copy", default=0),
    ),
    _op("delete_nodes", "Delete nodes", required("nodeIds", node_ids(1), "Nodes to delete")),
    _op(
        "reorder_node",
        "Change a node's z-order among its siblings",
        required("nodeId", NODE_ID, "Node to move"),
        required("position", enum("front", "back", "forward", "backward"), "Z-order move"),
    ),
)
