"""node-creation: shapes, text, vectors and batch creation."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import (
    FILL_SHORTCUTS,
    FONT_NAME,
    NODE_ID,
    NON_NEGATIVE,
    NUMBER,
    OPTIONAL_POSITION,
    OPTIONAL_SIZE,
    PAINTS,
    POSITIVE,
    SIZE,
    TEXT,
    UNIT_INTERVAL,
    enum,
)
from canvasctl.domain.schema import ArraySchema, NumberSchema, obj, optional, required

_op = partial(operation, category=Category.NODE_CREATION)

POINT_COUNT = NumberSchema(integer=True, minimum=3, maximum=50)
GRID_DIMENSION = NumberSchema(integer=True, minimum=1, maximum=20)

SHAPE_CONFIG = obj(
    required("type", enum("rectangle", "ellipse", "text"), "Shape type to create"),
    required("x", NUMBER, "X position"),
    required("y", NUMBER, "Y position"),
    required("width", POSITIVE, "Shape width"),
    required("height", POSITIVE, "Shape height"),
    optional("name", TEXT, "Shape name"),
    *FILL_SHORTCUTS,
    optional("characters", TEXT, "Text content (text shapes)"),
    optional("fontSize", POSITIVE, "Font size for text"),
)

ELEMENT_CONFIG = obj(
    required("type", enum("frame", "rectangle", "ellipse", "text", "button"), "Element type"),
    required("x", NUMBER, "X position"),
    required("y", NUMBER, "Y position"),
    required("width", POSITIVE, "Element width"),
    required("height", POSITIVE, "Element height"),
    optional("name", TEXT, "Element name"),
    *FILL_SHORTCUTS,
    optional("characters", TEXT, "Text content"),
    optional("fontSize", POSITIVE, "Font size"),
    optional("buttonText", TEXT, "Button label"),
    optional("borderRadius", NON_NEGATIVE, "Corner radius for buttons"),
)

VECTOR_PATH = obj(
    required("windingRule", enum("EVENODD", "NONZERO")),
    required("data", TEXT, "SVG path data"),
)

OPERATIONS = (
    _op(
        "create_frame",
        "Create a new frame on the canvas",
        optional("name", TEXT, "Frame name"),
        *OPTIONAL_SIZE,
        *OPTIONAL_POSITION,
        *FILL_SHORTCUTS,
    ),
    _op(
        "create_rectangle",
        "Create a new rectangle on the canvas",
        *SIZE,
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Rectangle name"),
        *FILL_SHORTCUTS,
    ),
    _op(
        "create_ellipse",
        "Create a new ellipse on the canvas",
        *SIZE,
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Ellipse name"),
        *FILL_SHORTCUTS,
    ),
    _op(
        "create_polygon",
        "Create a new regular polygon on the canvas",
        required("pointCount", POINT_COUNT, "Number of polygon points"),
        *OPTIONAL_SIZE,
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Polygon name"),
        *FILL_SHORTCUTS,
    ),
    _op(
        "create_star",
        "Create a new star on the canvas",
        required("pointCount", POINT_COUNT, "Number of star points"),
        required("innerRadius", UNIT_INTERVAL, "Inner radius ratio (0-1)"),
        *OPTIONAL_SIZE,
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Star name"),
        *FILL_SHORTCUTS,
    ),
    _op(
        "create_line",
        "Create a straight line on the canvas",
        required("endX", NUMBER, "End X coordinate relative to start"),
        required("endY", NUMBER, "End Y coordinate relative to start"),
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Line name"),
    ),
    _op(
        "create_text",
        "Create a text node on the canvas",
        required("characters", TEXT, "Text content"),
        *OPTIONAL_POSITION,
        optional("fontSize", POSITIVE, "Font size in pixels", default=16),
        optional("fontName", FONT_NAME, "Font family and style"),
        *FILL_SHORTCUTS,
        optional("name", TEXT, "Text node name"),
    ),
    _op(
        "create_slice",
        "Create an export slice on the canvas",
        *SIZE,
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Slice name"),
    ),
    _op(
        "create_vector",
        "Create a vector node from SVG path data",
        required("vectorPaths", ArraySchema(items=VECTOR_PATH, min_items=1), "Vector paths"),
        *OPTIONAL_POSITION,
        optional("name", TEXT, "Vector name"),
    ),
    _op(
        "create_multiple_shapes",
        "Create several shapes in a single round trip",
        required(
            "shapes",
            ArraySchema(items=SHAPE_CONFIG, min_items=1, max_items=50),
            "Shapes to create",
        ),
        optional("parentId", NODE_ID, "Parent node ID"),
    ),
    _op(
        "create_shape_grid",
        "Create a rows x cols grid of identical shapes",
        required("rows", GRID_DIMENSION, "Number of rows"),
        required("cols", GRID_DIMENSION, "Number of columns"),
        required("shapeType", enum("rectangle", "ellipse"), "Type of shape to create"),
        required("cellWidth", POSITIVE, "Width of each cell"),
        required("cellHeight", POSITIVE, "Height of each cell"),
        required("spacing", NON_NEGATIVE, "Spacing between shapes"),
        optional("startX", NUMBER, "Starting X position", default=0),
        optional("startY", NUMBER, "Starting Y position", default=0),
        optional("fills", PAINTS, "Fills for all shapes"),
        optional("parentId", NODE_ID, "Parent node ID"),
    ),
    _op(
        "create_diagram_elements",
        "Create diagram or UI layout elements (frames, shapes, text, buttons)",
        required(
            "elements",
            ArraySchema(items=ELEMENT_CONFIG, min_items=1, max_items=100),
            "Elements to create",
        ),
        optional("title", TEXT, "Diagram title"),
        optional("parentId", NODE_ID, "Parent node ID"),
    ),
)
