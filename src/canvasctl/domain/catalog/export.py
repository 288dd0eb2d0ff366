"""export-operations: rendering nodes to image and document formats."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import EXPORT_FORMAT, EXPORT_SETTINGS, NODE_ID, POSITIVE
from canvasctl.domain.schema import ArraySchema, optional, required

_op = partial(operation, category=Category.EXPORT_OPERATIONS)

OPERATIONS = (
    _op(
        "export_node",
        "Export a node and return the encoded bytes",
        required("nodeId", NODE_ID, "Node to export"),
        optional("format", EXPORT_FORMAT, "Export format", default="PNG"),
        optional("scale", POSITIVE, "Scale factor for raster formats"),
    ),
    _op(
        "set_export_settings",
        "Replace the export presets stored on a node",
        required("nodeId", NODE_ID, "Target node ID"),
        required("exportSettings", ArraySchema(items=EXPORT_SETTINGS), "Export presets"),
    ),
)
