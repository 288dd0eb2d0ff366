"""layout-operations: arrangement, alignment, stacking and grids.

Every layout tool travels as the single wire operation ``layoutOperations``
with the camelCase tool name in the ``action`` parameter.
"""

from __future__ import annotations

from canvasctl.domain.operations import Category, OperationDefinition, camel_case, operation
from canvasctl.domain.primitives import BOOLEAN, NUMBER, TEXT, enum, node_ids
from canvasctl.domain.schema import NumberSchema, Property, optional, required

LAYOUT_COMMAND = "layoutOperations"


def _layout(name: str, description: str, *fields: Property) -> OperationDefinition:
    return operation(
        name,
        description,
        *fields,
        category=Category.LAYOUT_OPERATIONS,
        command=LAYOUT_COMMAND,
        fixed={"action": camel_case(name)},
    )


def _ids(minimum: int, what: str) -> Property:
    return required("nodeIds", node_ids(minimum), f"Node IDs to {what}")


_SPACING_200 = NumberSchema(minimum=0, maximum=200)
_SPACING_500 = NumberSchema(minimum=0, maximum=500)
_GRID_SIZE = NumberSchema(minimum=1, maximum=32)
_CELLS = NumberSchema(minimum=1, maximum=20)
_CELL_SIZE = NumberSchema(minimum=10, maximum=2000)

OPERATIONS = (
    _layout(
        "auto_arrange_elements",
        "Arrange elements without overlaps using a placement strategy",
        _ids(1, "arrange"),
        optional("strategy", enum("flow", "grid", "circular", "compact"), "Arrangement strategy", default="flow"),
        optional("spacing", _SPACING_200, "Spacing between elements in pixels", default=16),
        optional("gridSize", _GRID_SIZE, "Grid size for snapping", default=8),
        optional("alignToGrid", BOOLEAN, "Snap positions to grid", default=True),
    ),
    _layout(
        "distribute_horizontally",
        "Distribute elements horizontally with equal spacing",
        _ids(2, "distribute"),
        required("spacing", _SPACING_500, "Spacing between elements in pixels"),
    ),
    _layout(
        "distribute_vertically",
        "Distribute elements vertically with equal spacing",
        _ids(2, "distribute"),
        required("spacing", _SPACING_500, "Spacing between elements in pixels"),
    ),
    _layout(
        "align_left",
        "Align elements to the left edge",
        _ids(1, "align"),
        optional("alignTo", enum("selection", "page", "artboard"), "Alignment reference", default="selection"),
    ),
    _layout("align_center", "Center elements horizontally", _ids(1, "align")),
    _layout("align_right", "Align elements to the right edge", _ids(1, "align")),
    _layout("align_top", "Align elements to the top edge", _ids(1, "align")),
    _layout("align_middle", "Center elements vertically", _ids(1, "align")),
    _layout("align_bottom", "Align elements to the bottom edge", _ids(1, "align")),
    _layout(
        "stack_horizontally",
        "Stack elements left to right",
        _ids(2, "stack"),
        optional("spacing", _SPACING_200, "Spacing between stacked elements", default=8),
        optional(
            "alignVertical",
            enum("top", "middle", "bottom", "none"),
            "Vertical alignment of stacked elements",
            default="top",
        ),
    ),
    _layout(
        "stack_vertically",
        "Stack elements top to bottom",
        _ids(2, "stack"),
        optional("spacing", _SPACING_200, "Spacing between stacked elements", default=8),
        optional(
            "alignHorizontal",
            enum("left", "center", "right", "none"),
            "Horizontal alignment of stacked elements",
            default="left",
        ),
    ),
    _layout(
        "create_grid",
        "Arrange elements in a grid",
        _ids(1, "arrange in a grid"),
        optional("cols", _CELLS, "Number of columns (derived when omitted)"),
        optional("rows", _CELLS, "Number of rows (derived when omitted)"),
        optional("cellWidth", _CELL_SIZE, "Grid cell width"),
        optional("cellHeight", _CELL_SIZE, "Grid cell height"),
        optional("spacingX", _SPACING_200, "Horizontal spacing between cells", default=8),
        optional("spacingY", _SPACING_200, "Vertical spacing between cells", default=8),
        optional("startX", NUMBER, "Starting X position"),
        optional("startY", NUMBER, "Starting Y position"),
    ),
    _layout(
        "snap_to_grid",
        "Snap element positions to a grid",
        _ids(1, "snap"),
        optional("gridSize", _GRID_SIZE, "Grid size in pixels", default=8),
    ),
    _layout(
        "equal_spacing",
        "Apply equal spacing between elements",
        _ids(2, "space"),
        optional("direction", enum("horizontal", "vertical"), "Spacing direction", default="horizontal"),
        required("spacing", _SPACING_500, "Spacing between elements in pixels"),
    ),
    _layout(
        "group_elements",
        "Wrap elements in a padded frame",
        _ids(1, "group"),
        optional("groupName", TEXT, "Name for the group frame", default="Group"),
        optional("padding", NumberSchema(minimum=0, maximum=100), "Padding inside the frame", default=16),
    ),
    _layout(
        "optimize_layout",
        "Remove overlaps and tidy spacing automatically",
        _ids(1, "optimize"),
        optional("strategy", enum("auto", "compact", "flow", "grid"), "Optimization strategy", default="auto"),
    ),
)
