"""text-operations: content, typography and ranges."""

from __future__ import annotations

from functools import partial

from canvasctl.domain.operations import Category, operation
from canvasctl.domain.primitives import (
    FONT_NAME,
    FONT_WEIGHT,
    LETTER_SPACING,
    LINE_HEIGHT,
    NODE_ID,
    NON_NEGATIVE,
    TEXT,
    TEXT_ALIGN_HORIZONTAL,
    TEXT_ALIGN_VERTICAL,
    TEXT_CASE,
    TEXT_DECORATION,
    TEXT_RANGE,
    enum,
)
from canvasctl.domain.schema import NumberSchema, optional, required

_op = partial(operation, category=Category.TEXT_OPERATIONS)

_NODE = required("nodeId", NODE_ID, "Target text node ID")
_RANGE = optional("range", TEXT_RANGE, "Apply to this character range only")

OPERATIONS = (
    _op("set_characters", "Replace text content", _NODE, required("characters", TEXT), _RANGE),
    _op(
        "set_font_size",
        "Set font size",
        _NODE,
        required("fontSize", NumberSchema(minimum=1, maximum=512), "Font size (1-512)"),
        _RANGE,
    ),
    _op("set_font_name", "Set font family and style", _NODE, required("fontName", FONT_NAME), _RANGE),
    _op("set_font_weight", "Set font weight", _NODE, required("fontWeight", FONT_WEIGHT), _RANGE),
    _op(
        "set_text_align_horizontal",
        "Set horizontal text alignment",
        _NODE,
        required("textAlignHorizontal", TEXT_ALIGN_HORIZONTAL),
    ),
    _op(
        "set_text_align_vertical",
        "Set vertical text alignment",
        _NODE,
        required("textAlignVertical", TEXT_ALIGN_VERTICAL),
    ),
    _op("set_text_case", "Set text case", _NODE, required("textCase", TEXT_CASE), _RANGE),
    _op(
        "set_text_decoration",
        "Underline or strike through text",
        _NODE,
        required("textDecoration", TEXT_DECORATION),
        _RANGE,
    ),
    _op("set_line_height", "Set line height", _NODE, required("lineHeight", LINE_HEIGHT), _RANGE),
    _op(
        "set_letter_spacing",
        "Set letter spacing",
        _NODE,
        required("letterSpacing", LETTER_SPACING),
        _RANGE,
    ),
    _op(
        "set_paragraph_spacing",
        "Set spacing between paragraphs",
        _NODE,
        required("paragraphSpacing", NON_NEGATIVE),
    ),
    _op(
        "set_paragraph_indent",
        "Set first-line paragraph indent",
        _NODE,
        required("paragraphIndent", NON_NEGATIVE),
    ),
    _op(
        "set_text_auto_resize",
        "Set how the text box resizes to its content",
        _NODE,
        required("textAutoResize", enum("NONE", "WIDTH_AND_HEIGHT", "HEIGHT", "TRUNCATE_TEXT")),
    ),
    _op(
        "set_text_truncation",
        "Truncate text after a number of lines",
        _NODE,
        optional("maxLines", NumberSchema(minimum=1), "Maximum visible lines"),
    ),
    _op(
        "insert_text",
        "Insert text at a character offset",
        _NODE,
        required("text", TEXT),
        required("position", NON_NEGATIVE, "Character offset"),
    ),
    _op("delete_text", "Delete a character range", _NODE, required("range", TEXT_RANGE)),
    _op("get_text_range", "Read the styling of a character range", _NODE, required("range", TEXT_RANGE)),
)
