"""Field registry for sortable entity types.

An `EntitySchema` is built once per entity type and maps each declared field to
its `FieldInfo`: the declared name, the value type, an accessor used for
in-memory ordering and, for SQLAlchemy mapped classes, the column expression
used for SQL ordering.

Supported declarations, checked in this order:

- SQLAlchemy mapped classes (column attributes of the mapper)
- pydantic models (`model_fields` and `model_computed_fields`)
- dataclasses (`dataclasses.fields`)
- plain classes (public annotations)

Public properties declared on the entity or its own base classes are added
after the declared fields for every kind. They have no column expression, so
they order in memory only.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from operator import attrgetter
from typing import Any

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper

from sorting.core.exceptions import SchemaError
from sorting.logging import get_logger

__all__ = ["EntitySchema", "FieldInfo"]

logger = get_logger(__name__)

# base classes whose members never count as entity fields
_LIBRARY_MODULES = frozenset({"builtins", "pydantic", "sqlalchemy"})

# least recently used entity types are evicted and reflected again on demand
SCHEMA_CACHE_SIZE = 256


@dataclass(frozen=True)
class FieldInfo:
    name: str
    value_type: Any
    accessor: Callable[[Any], Any] = dataclasses.field(compare=False, repr=False)
    # SQLAlchemy column attribute; None for non-mapped entities
    expression: Any = dataclasses.field(default=None, compare=False, repr=False)


def _type_hints(entity_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(entity_type)
    except (NameError, TypeError):
        # unresolved forward references: fall back to the raw annotations
        hints: dict[str, Any] = {}
        for klass in reversed(entity_type.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def _is_class_var(hint: Any) -> bool:
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


def _return_hint(fget: Callable[..., Any] | None) -> Any:
    if fget is None:
        return object
    try:
        return typing.get_type_hints(fget).get("return", object)
    except (NameError, TypeError):
        return fget.__annotations__.get("return", object)


def _mapped_fields(entity_type: type, mapper: Mapper) -> list[FieldInfo]:
    out: list[FieldInfo] = []
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        try:
            value_type = column.type.python_type
        except NotImplementedError:
            value_type = object
        out.append(
            FieldInfo(
                name=attr.key,
                value_type=value_type,
                accessor=attrgetter(attr.key),
                expression=getattr(entity_type, attr.key),
            )
        )
    return out


def _property_fields(entity_type: type, seen: set[str]) -> list[FieldInfo]:
    # computed getters declared on the entity and its own bases
    out: list[FieldInfo] = []
    for klass in reversed(entity_type.__mro__):
        if klass.__module__.partition(".")[0] in _LIBRARY_MODULES:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") or name in seen or not isinstance(member, property):
                continue
            hint = _return_hint(member.fget)
            out.append(FieldInfo(name=name, value_type=hint, accessor=attrgetter(name)))
            seen.add(name)
    return out


def _with_properties(entity_type: type, fields: list[FieldInfo]) -> list[FieldInfo]:
    return fields + _property_fields(entity_type, {f.name for f in fields})


def _pydantic_fields(entity_type: type[BaseModel]) -> list[FieldInfo]:
    fields = [
        FieldInfo(name=name, value_type=info.annotation, accessor=attrgetter(name))
        for name, info in entity_type.model_fields.items()
    ]
    fields += [
        FieldInfo(name=name, value_type=info.return_type, accessor=attrgetter(name))
        for name, info in entity_type.model_computed_fields.items()
    ]
    return fields


def _dataclass_fields(entity_type: type) -> list[FieldInfo]:
    hints = _type_hints(entity_type)
    return [
        FieldInfo(name=f.name, value_type=hints.get(f.name, f.type), accessor=attrgetter(f.name))
        for f in dataclasses.fields(entity_type)
    ]


def _plain_fields(entity_type: type) -> list[FieldInfo]:
    return [
        FieldInfo(name=name, value_type=hint, accessor=attrgetter(name))
        for name, hint in _type_hints(entity_type).items()
        if not name.startswith("_") and not _is_class_var(hint)
    ]


def _reflect(entity_type: type) -> list[FieldInfo]:
    mapper = sa_inspect(entity_type, raiseerr=False)
    if isinstance(mapper, Mapper):
        fields = _mapped_fields(entity_type, mapper)
    elif issubclass(entity_type, BaseModel):
        fields = _pydantic_fields(entity_type)
    elif dataclasses.is_dataclass(entity_type):
        fields = _dataclass_fields(entity_type)
    else:
        fields = _plain_fields(entity_type)
    return _with_properties(entity_type, fields)


class EntitySchema:
    """Case-insensitive lookup of sortable fields for one entity type."""

    def __init__(self, entity_type: type, fields: list[FieldInfo]) -> None:
        self.entity_type = entity_type
        self._fields: tuple[FieldInfo, ...] = tuple(fields)
        self._by_name: dict[str, FieldInfo] = {}
        for info in self._fields:
            # first declaration wins when two names differ only by case
            self._by_name.setdefault(info.name.lower(), info)

    @classmethod
    def for_type(cls, entity_type: type) -> EntitySchema:
        """Reflect `entity_type`, reusing the cached schema of the last
        SCHEMA_CACHE_SIZE types; the cache holds strong references to them."""
        if not isinstance(entity_type, type):
            raise SchemaError(f"entity type must be a class, got {entity_type!r}")
        return _schema_for(entity_type)

    @property
    def fields(self) -> tuple[FieldInfo, ...]:
        return self._fields

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self._fields]

    def resolve(self, name: str) -> FieldInfo | None:
        """Return the field whose name matches `name` ignoring case, or None."""
        if not name:
            return None
        return self._by_name.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __repr__(self) -> str:
        return f"EntitySchema({self.entity_type.__name__}, fields={self.field_names})"


@lru_cache(maxsize=SCHEMA_CACHE_SIZE)
def _schema_for(entity_type: type) -> EntitySchema:
    fields = _reflect(entity_type)
    if not fields:
        raise SchemaError(f"{entity_type.__name__} declares no sortable fields")
    logger.debug("schema_reflected", entity=entity_type.__name__, fields=len(fields))
    return EntitySchema(entity_type, fields)
