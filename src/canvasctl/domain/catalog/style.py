"""style-modification: fills, strokes, corners, effects, constraints."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import (
    COLOR,
    CONSTRAINTS,
    EFFECT,
    NODE_ID,
    NON_NEGATIVE,
    PAINTS,
    UNIT_INTERVAL,
    enum,
)
from canvasctl.domain.schema import ArraySchema, UnionSchema, obj, optional, required

_op = partial(operation, category=Category.STYLE_MODIFICATION)

_NODE = required("nodeId", NODE_ID, "Target node ID")

CORNER_RADIUS = UnionSchema(
    options=(
        NON_NEGATIVE,
        obj(
            required("topLeft", NON_NEGATIVE),
            required("topRight", NON_NEGATIVE),
            required("bottomLeft", NON_NEGATIVE),
            required("bottomRight", NON_NEGATIVE),
        ),
    ),
    description="Uniform radius or per-corner radii",
)

OPERATIONS = (
    _op("set_fills", "Replace the fills of a node", _NODE, required("fills", PAINTS)),
    _op("set_strokes", "Replace the strokes of a node", _NODE, required("strokes", PAINTS)),
    _op(
        "set_stroke_weight",
        "Set stroke thickness",
        _NODE,
        required("weight", NON_NEGATIVE, "Stroke weight in pixels"),
    ),
    _op(
        "set_stroke_cap",
        "Set stroke end caps",
        _NODE,
        required("strokeCap", enum("NONE", "ROUND", "SQUARE", "LINE_ARROW", "TRIANGLE_ARROW")),
    ),
    _op(
        "set_stroke_join",
        "Set stroke corner joins",
        _NODE,
        required("strokeJoin", enum("MITER", "BEVEL", "ROUND")),
    ),
    _op(
        "set_stroke_align",
        "Set stroke alignment relative to the node outline",
        _NODE,
        required("strokeAlign", enum("CENTER", "INSIDE", "OUTSIDE")),
    ),
    _op(
        "set_stroke_dash_pattern",
        "Set a dashed stroke pattern",
        _NODE,
        required("dashPattern", ArraySchema(items=NON_NEGATIVE), "Alternating dash and gap lengths"),
    ),
    _op("set_corner_radius", "Round the corners of a node", _NODE, required("radius", CORNER_RADIUS)),
    _op("set_effects", "Replace shadows and blurs", _NODE, required("effects", ArraySchema(items=EFFECT))),
    _op(
        "set_constraints",
        "Set resize constraints relative to the parent",
        _NODE,
        required("constraints", CONSTRAINTS),
    ),
    _op(
        "set_fill_color",
        "Fill a node with a single solid hex color",
        _NODE,
        required("color", COLOR, "Fill color (#RRGGBB)"),
        optional("opacity", UNIT_INTERVAL, "Fill opacity (0-1)", default=1),
    ),
)
