"""Shared parameter shapes reused across the operation catalog.

Field groups (``POSITION``, ``OPTIONAL_SIZE`` ...) are tuples of
:class:`~canvasctl.domain.schema.Property` meant to be splatted into an
object schema; single schemas (``PAINT``, ``COLOR`` ...) are nested values.
"""

from __future__ import annotations

from canvasctl.domain.schema import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    NumberSchema,
    Property,
    StringSchema,
    UnionSchema,
    obj,
    optional,
    required,
)

# --- scalars ---------------------------------------------------------------

NUMBER = NumberSchema()
POSITIVE = NumberSchema(exclusive_minimum=0)
NON_NEGATIVE = NumberSchema(minimum=0)
UNIT_INTERVAL = NumberSchema(minimum=0, maximum=1)
TEXT = StringSchema()
BOOLEAN = BooleanSchema()

NODE_ID = StringSchema(description="Canvas node ID")

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
COLOR = StringSchema(
    pattern=COLOR_PATTERN,
    pattern_message="must be a valid hex color (#RRGGBB)",
    uppercase=True,
    description="Hex color value",
)


def node_ids(min_items: int = 1, max_items: int | None = None, description: str | None = None) -> ArraySchema:
    return ArraySchema(items=NODE_ID, min_items=min_items, max_items=max_items, description=description)


def enum(*values: str, description: str | None = None) -> EnumSchema:
    return EnumSchema(values=values, description=description)


# --- geometry --------------------------------------------------------------

POSITION: tuple[Property, ...] = (
    required("x", NUMBER, "X coordinate"),
    required("y", NUMBER, "Y coordinate"),
)
SIZE: tuple[Property, ...] = (
    required("width", POSITIVE, "Width in pixels"),
    required("height", POSITIVE, "Height in pixels"),
)
OPTIONAL_POSITION: tuple[Property, ...] = (
    optional("x", NUMBER, "X coordinate (optional)"),
    optional("y", NUMBER, "Y coordinate (optional)"),
)
OPTIONAL_SIZE: tuple[Property, ...] = (
    optional("width", POSITIVE, "Width in pixels (optional)"),
    optional("height", POSITIVE, "Height in pixels (optional)"),
)

# --- color -----------------------------------------------------------------

RGB = obj(
    required("r", UNIT_INTERVAL, "Red component (0-1)"),
    required("g", UNIT_INTERVAL, "Green component (0-1)"),
    required("b", UNIT_INTERVAL, "Blue component (0-1)"),
)
RGBA = RGB.extend(required("a", UNIT_INTERVAL, "Alpha component (0-1)"))

BLEND_MODE = enum(
    "NORMAL",
    "DARKEN",
    "MULTIPLY",
    "LINEAR_BURN",
    "COLOR_BURN",
    "LIGHTEN",
    "SCREEN",
    "LINEAR_DODGE",
    "COLOR_DODGE",
    "OVERLAY",
    "SOFT_LIGHT",
    "HARD_LIGHT",
    "DIFFERENCE",
    "EXCLUSION",
    "HUE",
    "SATURATION",
    "COLOR",
    "LUMINOSITY",
    description="Blend mode",
)

# --- paints and effects ----------------------------------------------------

GRADIENT_STOP = obj(
    required("color", RGBA),
    required("position", UNIT_INTERVAL),
)

PAINT = obj(
    required(
        "type",
        enum(
            "SOLID",
            "GRADIENT_LINEAR",
            "GRADIENT_RADIAL",
            "GRADIENT_ANGULAR",
            "GRADIENT_DIAMOND",
            "IMAGE",
        ),
    ),
    optional("visible", BOOLEAN, default=True),
    optional("opacity", UNIT_INTERVAL, default=1),
    optional("color", RGBA),
    optional("gradientStops", ArraySchema(items=GRADIENT_STOP)),
    optional("imageHash", TEXT),
    optional("scaleMode", enum("FILL", "TILE", "FIT", "CROP")),
    description="Paint (solid, gradient or image fill)",
)
PAINTS = ArraySchema(items=PAINT)

EFFECT = obj(
    required("type", enum("DROP_SHADOW", "INNER_SHADOW", "LAYER_BLUR", "BACKGROUND_BLUR")),
    optional("visible", BOOLEAN, default=True),
    optional("color", RGBA),
    optional("offset", obj(required("x", NUMBER), required("y", NUMBER))),
    optional("radius", NON_NEGATIVE),
    optional("spread", NUMBER),
    description="Shadow or blur effect",
)

# Shape creators accept either explicit paints or a hex shortcut.
FILL_SHORTCUTS: tuple[Property, ...] = (
    optional("fills", PAINTS, "Fills"),
    optional("fillColor", COLOR, "Solid fill color shortcut (#RRGGBB)"),
)

# --- text ------------------------------------------------------------------

FONT_NAME = obj(
    required("family", TEXT, "Font family name"),
    required("style", TEXT, "Font style (Regular, Bold, Italic, etc.)"),
)
TEXT_ALIGN_HORIZONTAL = enum("LEFT", "CENTER", "RIGHT", "JUSTIFIED", description="Horizontal text alignment")
TEXT_ALIGN_VERTICAL = enum("TOP", "CENTER", "BOTTOM", description="Vertical text alignment")
TEXT_CASE = enum("ORIGINAL", "UPPER", "LOWER", "TITLE", description="Text case transformation")
TEXT_DECORATION = enum("NONE", "UNDERLINE", "STRIKETHROUGH", description="Text decoration")

LINE_HEIGHT = UnionSchema(
    options=(
        obj(required("unit", enum("PIXELS")), required("value", POSITIVE)),
        obj(required("unit", enum("PERCENT")), required("value", POSITIVE)),
        obj(required("unit", enum("AUTO"))),
    ),
    discriminator="unit",
    description="Line height value and unit",
)
LETTER_SPACING = UnionSchema(
    options=(
        obj(required("unit", enum("PIXELS")), required("value", NUMBER)),
        obj(required("unit", enum("PERCENT")), required("value", NUMBER)),
    ),
    discriminator="unit",
    description="Letter spacing value and unit",
)
FONT_WEIGHT = UnionSchema(
    options=(
        NumberSchema(minimum=100, maximum=900),
        enum("100", "200", "300", "400", "500", "600", "700", "800", "900"),
    ),
    description="Font weight (100-900)",
)
TEXT_RANGE = obj(
    required("start", NON_NEGATIVE),
    required("end", NON_NEGATIVE),
    description="Character range for partial text styling",
)

# --- layout ----------------------------------------------------------------

CONSTRAINTS = obj(
    required("horizontal", enum("LEFT", "RIGHT", "CENTER", "LEFT_RIGHT", "SCALE")),
    required("vertical", enum("TOP", "BOTTOM", "CENTER", "TOP_BOTTOM", "SCALE")),
)

# --- export ----------------------------------------------------------------

EXPORT_FORMAT = enum("PNG", "JPG", "SVG", "PDF", description="Export format")
EXPORT_SETTINGS = obj(
    required("format", EXPORT_FORMAT),
    optional(
        "constraint",
        obj(required("type", enum("SCALE", "WIDTH", "HEIGHT")), required("value", POSITIVE)),
    ),
    optional("suffix", TEXT),
    optional("useAbsoluteBounds", BOOLEAN, default=False),
)
