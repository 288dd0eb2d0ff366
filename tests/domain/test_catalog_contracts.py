"""Every catalog operation honours its own contract under validate()."""

from __future__ import annotations

import math
from typing import Any

import pytest

from canvasctl.domain.catalog import CATALOG
from canvasctl.domain.operations import OperationDefinition
from canvasctl.domain.primitives import COLOR_PATTERN
from canvasctl.domain.schema import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    FieldError,
    NumberSchema,
    ObjectSchema,
    RecordSchema,
    Schema,
    StringSchema,
    UnionSchema,
)
from canvasctl.domain.validation import Invalid, Valid, validate

PATTERN_SAMPLES = {COLOR_PATTERN: "#000000"}


def _lowest_number(schema: NumberSchema) -> float:
    if schema.minimum is not None:
        value = schema.minimum
    elif schema.exclusive_minimum is not None:
        value = schema.exclusive_minimum + 1
    else:
        value = 0
    if schema.maximum is not None and value > schema.maximum:
        value = schema.maximum
    return math.ceil(value) if schema.integer else value


def _sample(schema: Schema) -> Any:
    """Smallest legal value for *schema*: required fields only."""
    if isinstance(schema, NumberSchema):
        return _lowest_number(schema)
    if isinstance(schema, StringSchema):
        if schema.pattern is not None:
            assert schema.pattern in PATTERN_SAMPLES, f"no sample for pattern {schema.pattern}"
            return PATTERN_SAMPLES[schema.pattern]
        return "x" * max(schema.min_length or 0, 1)
    if isinstance(schema, EnumSchema):
        return schema.values[0]
    if isinstance(schema, BooleanSchema):
        return False
    if isinstance(schema, ObjectSchema):
        return {prop.name: _sample(prop.schema) for prop in schema.fields if prop.required}
    if isinstance(schema, ArraySchema):
        return [_sample(schema.items) for _ in range(schema.min_items or 0)]
    if isinstance(schema, RecordSchema):
        return {}
    if isinstance(schema, UnionSchema):
        first = schema.options[0]
        value = _sample(first)
        if schema.discriminator is not None and isinstance(first, ObjectSchema):
            for prop in first.fields:
                if prop.name == schema.discriminator and isinstance(prop.schema, EnumSchema):
                    value[prop.name] = prop.schema.values[0]
        return value
    raise AssertionError(f"unhandled schema kind: {schema.kind}")


def _ids(definition: OperationDefinition) -> str:
    return definition.name


@pytest.mark.parametrize("definition", CATALOG, ids=_ids)
class TestEveryOperation:
    def test_required_fields_only_is_valid(self, definition: OperationDefinition) -> None:
        outcome = validate(definition.name, _sample(definition.parameters))
        assert isinstance(outcome, Valid), getattr(outcome, "message", outcome)

    def test_declared_defaults_reach_params(self, definition: OperationDefinition) -> None:
        outcome = validate(definition.name, _sample(definition.parameters))
        assert isinstance(outcome, Valid)
        for prop in definition.parameters.fields:
            if prop.required:
                assert prop.name in outcome.params
            elif prop.has_default:
                assert outcome.params[prop.name] == prop.default, prop.name
            else:
                assert prop.name not in outcome.params, prop.name

    def test_each_missing_required_field_is_named(self, definition: OperationDefinition) -> None:
        minimal = _sample(definition.parameters)
        for prop in definition.parameters.fields:
            if not prop.required:
                continue
            arguments = {k: v for k, v in minimal.items() if k != prop.name}
            outcome = validate(definition.name, arguments)
            assert isinstance(outcome, Invalid), prop.name
            assert outcome.errors == (FieldError(prop.name, "field is required"),)
