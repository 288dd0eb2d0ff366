"""Read-only lookup of operation definitions."""

from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from canvasctl.domain.operations import Category, OperationDefinition
from canvasctl.domain.schema import ObjectSchema


class OperationNotFound(KeyError):
    """Raised when looking up a name that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown operation: {self.name}"


class OperationRegistry:
    """Operation name -> definition, frozen at construction.

    Definitions keep their registration order, which is the order tools are
    advertised in.
    """

    def __init__(self, definitions: Iterable[OperationDefinition]) -> None:
        by_name: dict[str, OperationDefinition] = {}
        for definition in definitions:
            if definition.name in by_name:
                msg = f"Duplicate operation registered: {definition.name}"
                raise ValueError(msg)
            by_name[definition.name] = definition
        self._by_name = MappingProxyType(by_name)
        self._ordered = tuple(by_name.values())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[OperationDefinition]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def get(self, name: str) -> OperationDefinition:
        try:
            return self._by_name[name]
        except KeyError:
            raise OperationNotFound(name) from None

    def schema_for(self, name: str) -> ObjectSchema:
        return self.get(name).parameters

    def definitions_for(self, category: Category | str | None = None) -> tuple[OperationDefinition, ...]:
        """All definitions, or those of one *category*, in catalog order."""
        if category is None:
            return self._ordered
        wanted = Category(category)
        return tuple(d for d in self._ordered if d.category == wanted)

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(dict.fromkeys(d.category for d in self._ordered))


@functools.cache
def default_registry() -> OperationRegistry:
    """The process-wide registry built from the fixed catalog."""
    from canvasctl.domain.catalog import CATALOG

    return OperationRegistry(CATALOG)
