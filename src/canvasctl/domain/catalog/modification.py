"""node-modification: geometry and node flags."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import (
    BLEND_MODE,
    BOOLEAN,
    NODE_ID,
    NUMBER,
    PAINTS,
    POSITION,
    SIZE,
    TEXT,
    UNIT_INTERVAL,
    node_ids,
)
from canvasctl.domain.schema import ArraySchema, obj, optional, required

_op = partial(operation, category=Category.NODE_MODIFICATION)

_NODE = required("nodeId", NODE_ID, "Target node ID")

POSITION_UPDATE = obj(_NODE, *POSITION)

OPERATIONS = (
    _op("set_position", "Move a node to an absolute position", _NODE, *POSITION),
    _op("resize", "Resize a node", _NODE, *SIZE),
    _op("set_rotation", "Rotate a node", _NODE, required("rotation", NUMBER, "Rotation in degrees")),
    _op(
        "set_opacity",
        "Set node opacity",
        _NODE,
        required("opacity", UNIT_INTERVAL, "Opacity value (0-1)"),
    ),
    _op("set_visible", "Show or hide a node", _NODE, required("visible", BOOLEAN, "Node visibility")),
    _op("set_locked", "Lock or unlock a node", _NODE, required("locked", BOOLEAN, "Node locked state")),
    _op("set_name", "Rename a node", _NODE, required("name", TEXT, "New node name")),
    _op("set_blend_mode", "Set node blend mode", _NODE, required("blendMode", BLEND_MODE)),
    _op(
        "batch_update_positions",
        "Move several nodes in one round trip",
        required(
            "updates",
            ArraySchema(items=POSITION_UPDATE, min_items=1, max_items=100),
            "Position updates",
        ),
    ),
    _op(
        "batch_update_styles",
        "Apply the same fills and opacity to several nodes",
        required("nodeIds", node_ids(1, 100), "Node IDs to update"),
        optional("fills", PAINTS, "Fills to apply to all nodes"),
        optional("opacity", UNIT_INTERVAL, "Opacity to apply to all nodes"),
    ),
)
