"""The fixed operation catalog, in advertisement order."""

from __future__ import annotations

from canvasctl.domain.catalog import (
    boolean,
    component,
    creation,
    export,
    hierarchy,
    layout,
    modification,
    selection,
    style,
    text,
)
from canvasctl.domain.operations import OperationDefinition

CATALOG: tuple[OperationDefinition, ...] = (
    *creation.OPERATIONS,
    *modification.OPERATIONS,
    *style.OPERATIONS,
    *text.OPERATIONS,
    *layout.OPERATIONS,
    *component.OPERATIONS,
    *boolean.OPERATIONS,
    *hierarchy.OPERATIONS,
    *selection.OPERATIONS,
    *export.OPERATIONS,
)

__all__ = ["CATALOG"]
