"""selection-navigation: selection, lookup and viewport."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import NODE_ID, TEXT, node_ids
from canvasctl.domain.schema import NumberSchema, optional, required

_op = partial(operation, category=Category.SELECTION_NAVIGATION)

OPERATIONS = (
    _op("get_selection", "Return the currently selected nodes"),
    _op("set_selection", "Replace the current selection", required("nodeIds", node_ids(0), "Nodes to select")),
    _op("get_node_info", "Describe a node and its properties", required("nodeId", NODE_ID, "Node to inspect")),
    _op(
        "find_nodes",
        "Search the current page by name and/or type",
        optional("name", TEXT, "Substring of the node name"),
        optional("type", TEXT, "Node type (FRAME, TEXT, RECTANGLE ...)"),
        optional("parentId", NODE_ID, "Restrict the search to this subtree"),
        optional("limit", NumberSchema(integer=True, minimum=1, maximum=500), "Maximum matches", default=50),
    ),
    _op("zoom_to_nodes", "Scroll and zoom the viewport to nodes", required("nodeIds", node_ids(1), "Nodes to frame")),
    _op("set_current_page", "Switch the current page", required("pageId", NODE_ID, "Page node ID")),
)
