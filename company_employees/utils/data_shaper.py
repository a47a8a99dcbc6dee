"""
Data Shaping

Projects transfer models onto the subset of fields a client asked for.
The field table of a model class (declared names, in declaration order,
with a getter for each) is built once per class and reused; the client's
field list is resolved against it once per call, not once per record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, ClassVar, Generic, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ShapedEntity = dict[str, Any]


@dataclass(frozen=True)
class FieldAccessor:
    name: str
    get: Callable[[Any], Any]


class FieldRegistry:
    """Declared fields of one model class, looked up case-insensitively."""

    _cache: ClassVar[dict[type, FieldRegistry]] = {}

    def __init__(self, model: type[BaseModel]):
        self.model = model
        self.accessors: tuple[FieldAccessor, ...] = tuple(
            FieldAccessor(name=name, get=attrgetter(name)) for name in model.model_fields
        )
        self._by_key = {accessor.name.casefold(): accessor for accessor in self.accessors}

    @classmethod
    def for_model(cls, model: type[BaseModel]) -> FieldRegistry:
        registry = cls._cache.get(model)
        if registry is None:
            registry = cls._cache[model] = cls(model)
        return registry

    def resolve(self, fields: Iterable[str]) -> tuple[FieldAccessor, ...]:
        """
        Match requested names against the declared fields.

        Unknown names are dropped. The result follows declaration order,
        and falls back to every declared field when nothing matched.
        """
        wanted = {name.strip().casefold() for name in fields if name and name.strip()}
        resolved = tuple(accessor for accessor in self.accessors if accessor.name.casefold() in wanted)
        if wanted and len(resolved) < len(wanted):
            unknown = sorted(wanted - {accessor.name.casefold() for accessor in resolved})
            logger.debug(f"Ignoring unknown fields for {self.model.__name__}: {unknown}")
        return resolved or self.accessors


class DataShaper(Generic[T]):
    """
    Shapes instances of a single transfer model.

    Usage::

        shaper = DataShaper(EmployeeDto)
        shaper.shape_data(employees, ("name", "age"))
    """

    def __init__(self, model: type[T]):
        self.model = model
        self.registry = FieldRegistry.for_model(model)

    @property
    def default_fields(self) -> tuple[str, ...]:
        return tuple(accessor.name for accessor in self.registry.accessors)

    def shape_data(self, records: Iterable[T], fields: Sequence[str] = ()) -> list[ShapedEntity]:
        accessors = self.registry.resolve(fields)
        return [self._fetch(record, accessors) for record in records]

    def shape_one(self, record: T, fields: Sequence[str] = ()) -> ShapedEntity:
        return self.shape_data([record], fields)[0]

    @staticmethod
    def _fetch(record: T, accessors: tuple[FieldAccessor, ...]) -> ShapedEntity:
        return {accessor.name: accessor.get(record) for accessor in accessors}
