"""Parameter contracts as a tagged-variant schema tree.

Every node carries a ``kind`` tag. :func:`check` walks a value depth-first
against a node and returns the canonical value together with *every*
:class:`FieldError` found, in declaration order. :func:`to_json_schema`
renders the same tree for tool catalogs.

Nodes are frozen dataclasses: pure data, shared freely between concurrent
validations.
"""

from __future__ import annotations

import copy
import logging
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


class _Missing(Enum):
    MISSING = "MISSING"


MISSING = _Missing.MISSING


@dataclass(frozen=True)
class FieldError:
    """One contract violation, addressed by dotted path (``fills.0.color.r``)."""

    path: str
    message: str

    def render(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


# ---------------------------------------------------------------------------
# Schema nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class Schema:
    """Base node. Subclasses set ``kind``."""

    kind: ClassVar[str] = ""
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class NumberSchema(Schema):
    """Number with inclusive bounds; ``exclusive_minimum`` expresses "positive"."""

    kind: ClassVar[str] = "number"
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: float | None = None
    integer: bool = False


@dataclass(frozen=True, kw_only=True)
class StringSchema(Schema):
    kind: ClassVar[str] = "string"
    pattern: str | None = None
    pattern_message: str | None = None
    min_length: int | None = None
    uppercase: bool = False


@dataclass(frozen=True, kw_only=True)
class EnumSchema(Schema):
    """Closed set of string values. A single value acts as a literal."""

    kind: ClassVar[str] = "enum"
    values: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class BooleanSchema(Schema):
    kind: ClassVar[str] = "boolean"


@dataclass(frozen=True)
class Property:
    """A named object field with its optionality and default policy."""

    name: str
    schema: Schema
    required: bool = True
    default: Any = MISSING
    description: str | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


@dataclass(frozen=True, kw_only=True)
class ObjectSchema(Schema):
    """Ordered fields. Unknown keys are dropped from canonical output."""

    kind: ClassVar[str] = "object"
    fields: tuple[Property, ...] = ()

    def __post_init__(self) -> None:
        names = [prop.name for prop in self.fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate field(s) in object schema: {', '.join(duplicates)}"
            raise ValueError(msg)

    def extend(self, *fields: Property, description: str | None = None) -> ObjectSchema:
        """Return a copy with *fields* appended."""
        return replace(
            self,
            fields=self.fields + fields,
            description=description if description is not None else self.description,
        )

    def field_names(self) -> tuple[str, ...]:
        return tuple(prop.name for prop in self.fields)


@dataclass(frozen=True, kw_only=True)
class ArraySchema(Schema):
    kind: ClassVar[str] = "array"
    items: Schema = field(default_factory=lambda: StringSchema())
    min_items: int | None = None
    max_items: int | None = None


@dataclass(frozen=True, kw_only=True)
class RecordSchema(Schema):
    """String-keyed mapping whose values share one schema."""

    kind: ClassVar[str] = "record"
    values: Schema = field(default_factory=lambda: StringSchema())


@dataclass(frozen=True, kw_only=True)
class UnionSchema(Schema):
    """First matching option wins.

    With a ``discriminator`` the option is chosen by the value of that key,
    so errors come from the intended shape rather than from every option.
    """

    kind: ClassVar[str] = "union"
    options: tuple[Schema, ...] = ()
    discriminator: str | None = None


# ---------------------------------------------------------------------------
# Field helpers for declarative catalog modules
# ---------------------------------------------------------------------------


def required(name: str, schema: Schema, description: str | None = None) -> Property:
    return Property(name, schema, required=True, description=description)


def optional(
    name: str,
    schema: Schema,
    description: str | None = None,
    *,
    default: Any = MISSING,
) -> Property:
    return Property(name, schema, required=False, default=default, description=description)


def obj(*fields: Property, description: str | None = None) -> ObjectSchema:
    return ObjectSchema(fields=fields, description=description)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

_Checker = Callable[[Any, Any, str, list[FieldError]], Any]


def check(schema: Schema, value: Any, path: str = "") -> tuple[Any, list[FieldError]]:
    """Validate *value* against *schema*.

    Returns ``(canonical, errors)``. The canonical value is only meaningful
    when *errors* is empty.
    """
    errors: list[FieldError] = []
    canonical = _check(schema, value, path, errors)
    return canonical, errors


def _check(schema: Schema, value: Any, path: str, errors: list[FieldError]) -> Any:
    return _CHECKERS[schema.kind](schema, value, path, errors)


def _join(path: str, key: str | int) -> str:
    return f"{path}.{key}" if path else str(key)


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_number(schema: NumberSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not _is_number(value):
        errors.append(FieldError(path, "expected a number"))
        return None
    if isinstance(value, float) and not math.isfinite(value):
        errors.append(FieldError(path, "must be a finite number"))
        return None
    if schema.integer:
        if isinstance(value, float) and not value.is_integer():
            errors.append(FieldError(path, "expected an integer"))
            return None
        value = int(value)

    before = len(errors)
    if schema.exclusive_minimum is not None and value <= schema.exclusive_minimum:
        errors.append(FieldError(path, f"must be greater than {_fmt(schema.exclusive_minimum)}"))
    if schema.minimum is not None and value < schema.minimum:
        errors.append(FieldError(path, f"must be >= {_fmt(schema.minimum)}"))
    if schema.maximum is not None and value > schema.maximum:
        errors.append(FieldError(path, f"must be <= {_fmt(schema.maximum)}"))
    return value if len(errors) == before else None


def _check_string(schema: StringSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not isinstance(value, str):
        errors.append(FieldError(path, "expected a string"))
        return None
    if schema.min_length is not None and len(value) < schema.min_length:
        errors.append(FieldError(path, f"must be at least {schema.min_length} characters"))
        return None
    if schema.pattern is not None and re.fullmatch(schema.pattern, value) is None:
        errors.append(FieldError(path, schema.pattern_message or f"must match {schema.pattern}"))
        return None
    return value.upper() if schema.uppercase else value


def _check_enum(schema: EnumSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not isinstance(value, str) or value not in schema.values:
        if len(schema.values) == 1:
            errors.append(FieldError(path, f"must be '{schema.values[0]}'"))
        else:
            errors.append(FieldError(path, f"must be one of: {', '.join(schema.values)}"))
        return None
    return value


def _check_boolean(schema: BooleanSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not isinstance(value, bool):
        errors.append(FieldError(path, "expected a boolean"))
        return None
    return value


def _check_object(schema: ObjectSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not isinstance(value, Mapping):
        errors.append(FieldError(path, "expected an object"))
        return None

    canonical: dict[str, Any] = {}
    for prop in schema.fields:
        sub_path = _join(path, prop.name)
        raw = value.get(prop.name)
        # null is treated as "not supplied" so callers can send explicit nulls
        if raw is None:
            if prop.required:
                errors.append(FieldError(sub_path, "field is required"))
            elif prop.has_default:
                canonical[prop.name] = copy.deepcopy(prop.default)
            continue
        before = len(errors)
        checked = _check(prop.schema, raw, sub_path, errors)
        if len(errors) == before:
            canonical[prop.name] = checked

    known = set(schema.field_names())
    dropped = [key for key in value if key not in known]
    if dropped:
        logger.debug("Dropping unknown field(s) at %s: %s", path or "<root>", dropped)
    return canonical


def _check_array(schema: ArraySchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not isinstance(value, (list, tuple)):
        errors.append(FieldError(path, "expected an array"))
        return None
    if schema.min_items is not None and len(value) < schema.min_items:
        noun = "item" if schema.min_items == 1 else "items"
        errors.append(FieldError(path, f"must contain at least {schema.min_items} {noun}"))
    if schema.max_items is not None and len(value) > schema.max_items:
        errors.append(FieldError(path, f"must contain at most {schema.max_items} items"))
    return [_check(schema.items, item, _join(path, index), errors) for index, item in enumerate(value)]


def _check_record(schema: RecordSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if not isinstance(value, Mapping):
        errors.append(FieldError(path, "expected an object"))
        return None
    canonical: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            errors.append(FieldError(path, f"keys must be strings, got {key!r}"))
            continue
        canonical[key] = _check(schema.values, item, _join(path, key), errors)
    return canonical


# Python types each kind can possibly accept; used to pick the intended union option.
_KIND_ACCEPTS: dict[str, Callable[[Any], bool]] = {
    "number": _is_number,
    "string": lambda v: isinstance(v, str),
    "enum": lambda v: isinstance(v, str),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, Mapping),
    "record": lambda v: isinstance(v, Mapping),
    "array": lambda v: isinstance(v, (list, tuple)),
}


def _discriminator_values(option: Schema, key: str) -> tuple[str, ...]:
    if not isinstance(option, ObjectSchema):
        return ()
    for prop in option.fields:
        if prop.name == key and isinstance(prop.schema, EnumSchema):
            return prop.schema.values
    return ()


def _check_union(schema: UnionSchema, value: Any, path: str, errors: list[FieldError]) -> Any:
    if schema.discriminator is not None and isinstance(value, Mapping):
        tag = value.get(schema.discriminator)
        allowed: list[str] = []
        for option in schema.options:
            values = _discriminator_values(option, schema.discriminator)
            if tag in values:
                return _check(option, value, path, errors)
            allowed.extend(values)
        if allowed:
            errors.append(
                FieldError(
                    _join(path, schema.discriminator),
                    f"must be one of: {', '.join(allowed)}",
                )
            )
            return None

    for option in schema.options:
        trial: list[FieldError] = []
        result = _check(option, value, path, trial)
        if not trial:
            return result

    candidates = [
        option for option in schema.options if _KIND_ACCEPTS.get(option.kind, bool)(value)
    ]
    if len(candidates) == 1:
        return _check(candidates[0], value, path, errors)
    kinds = ", ".join(dict.fromkeys(option.kind for option in schema.options))
    errors.append(FieldError(path, f"expected one of: {kinds}"))
    return None


_CHECKERS: dict[str, _Checker] = {
    "number": _check_number,
    "string": _check_string,
    "enum": _check_enum,
    "boolean": _check_boolean,
    "object": _check_object,
    "array": _check_array,
    "record": _check_record,
    "union": _check_union,
}


# ---------------------------------------------------------------------------
# JSON Schema rendering
# ---------------------------------------------------------------------------


def to_json_schema(schema: Schema) -> dict[str, Any]:
    """Render *schema* as a JSON Schema fragment (draft 2020-12 vocabulary)."""
    rendered = _RENDERERS[schema.kind](schema)
    if schema.description and "description" not in rendered:
        rendered["description"] = schema.description
    return rendered


def _render_number(schema: NumberSchema) -> dict[str, Any]:
    out: dict[str, Any] = {"type": "integer" if schema.integer else "number"}
    if schema.minimum is not None:
        out["minimum"] = schema.minimum
    if schema.maximum is not None:
        out["maximum"] = schema.maximum
    if schema.exclusive_minimum is not None:
        out["exclusiveMinimum"] = schema.exclusive_minimum
    return out


def _render_string(schema: StringSchema) -> dict[str, Any]:
    out: dict[str, Any] = {"type": "string"}
    if schema.pattern is not None:
        out["pattern"] = schema.pattern
    if schema.min_length is not None:
        out["minLength"] = schema.min_length
    return out


def _render_enum(schema: EnumSchema) -> dict[str, Any]:
    if len(schema.values) == 1:
        return {"type": "string", "const": schema.values[0]}
    return {"type": "string", "enum": list(schema.values)}


def _render_boolean(schema: BooleanSchema) -> dict[str, Any]:
    return {"type": "boolean"}


def _render_object(schema: ObjectSchema) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required_names: list[str] = []
    for prop in schema.fields:
        rendered = to_json_schema(prop.schema)
        if prop.description:
            rendered["description"] = prop.description
        if prop.has_default:
            rendered["default"] = prop.default
        properties[prop.name] = rendered
        if prop.required:
            required_names.append(prop.name)
    out: dict[str, Any] = {"type": "object", "properties": properties}
    if required_names:
        out["required"] = required_names
    return out


def _render_array(schema: ArraySchema) -> dict[str, Any]:
    out: dict[str, Any] = {"type": "array", "items": to_json_schema(schema.items)}
    if schema.min_items is not None:
        out["minItems"] = schema.min_items
    if schema.max_items is not None:
        out["maxItems"] = schema.max_items
    return out


def _render_record(schema: RecordSchema) -> dict[str, Any]:
    return {"type": "object", "additionalProperties": to_json_schema(schema.values)}


def _render_union(schema: UnionSchema) -> dict[str, Any]:
    return {"anyOf": [to_json_schema(option) for option in schema.options]}


_RENDERERS: dict[str, Callable[[Any], dict[str, Any]]] = {
    "number": _render_number,
    "string": _render_string,
    "enum": _render_enum,
    "boolean": _render_boolean,
    "object": _render_object,
    "array": _render_array,
    "record": _render_record,
    "union": _render_union,
}
