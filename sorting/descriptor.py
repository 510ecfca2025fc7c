"""Sort descriptors: parse, serialize, apply and edit `"-Id,CreatedAt"` strings.

A descriptor is bound to one entity type. Tokens naming fields the type does
not declare are dropped while parsing, so stale or hand-edited descriptors
(old bookmarks, typos in a URL) degrade to "ignore the bad part".

`add_or_update` and `remove` compute the *next* descriptor string, e.g. for a
column header link; they work on a fresh copy parsed from `str(self)` and never
change the receiver.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from sorting.applier import apply_ordering
from sorting.core.config import DuplicatePolicy, settings
from sorting.core.exceptions import DuplicateSortFieldError
from sorting.keys import DESCENDING_PREFIX, SortDirection, SortKey
from sorting.logging import get_logger
from sorting.query import OrderableQuery
from sorting.schema import EntitySchema

__all__ = ["SEPARATOR", "RawSort", "SortDescriptor"]

logger = get_logger(__name__)

SEPARATOR = ","

T = TypeVar("T")
Q = TypeVar("Q", bound=OrderableQuery)

RawSort = str | Iterable[str] | None


def _split(raw: RawSort) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [segment for segment in raw.split(SEPARATOR) if segment]
    return list(raw)


class SortDescriptor(Generic[T]):
    """Ordered sort keys for `entity_type`; the first key is the primary one."""

    def __init__(
        self,
        entity_type: type[T],
        raw: RawSort = None,
        *,
        duplicate_policy: DuplicatePolicy | None = None,
    ) -> None:
        self.entity_type = entity_type
        self._schema = EntitySchema.for_type(entity_type)
        self._policy: DuplicatePolicy = duplicate_policy or settings.duplicate_policy
        self._keys: list[SortKey] = []
        for token in _split(raw):
            key = self._parse_token(token)
            if key is None:
                # garbage property name, skip it
                logger.debug("sort_token_dropped", entity=entity_type.__name__, token=token)
                continue
            self._append_parsed(key)

    @classmethod
    def parse(
        cls,
        entity_type: type[T],
        raw: RawSort,
        *,
        duplicate_policy: DuplicatePolicy | None = None,
    ) -> SortDescriptor[T]:
        return cls(entity_type, raw, duplicate_policy=duplicate_policy)

    @property
    def schema(self) -> EntitySchema:
        return self._schema

    @property
    def sorts(self) -> tuple[SortKey, ...]:
        return tuple(self._keys)

    def _parse_token(self, token: str) -> SortKey | None:
        name = token.strip()
        direction = SortDirection.ASCENDING
        if name.startswith(DESCENDING_PREFIX):
            direction = SortDirection.DESCENDING
            name = name[len(DESCENDING_PREFIX):]
        field = self._schema.resolve(name)
        if field is None:
            return None
        return SortKey(field, direction)

    def _append_parsed(self, key: SortKey) -> None:
        if self._find(key.name) is not None:
            if self._policy == "error":
                raise DuplicateSortFieldError(key.name)
            if self._policy == "drop":
                logger.debug("sort_duplicate_dropped", entity=self.entity_type.__name__, field=key.name)
                return
        self._keys.append(key)

    def _find(self, name: str) -> SortKey | None:
        for key in self._keys:
            if key.name == name:
                return key
        return None

    def _working_copy(self) -> SortDescriptor[T]:
        return type(self)(self.entity_type, str(self), duplicate_policy=self._policy)

    def direction_of(self, name: str) -> SortDirection | None:
        """Direction of the key for field `name` (any casing), or None."""
        field = self._schema.resolve(name.strip())
        if field is None:
            return None
        key = self._find(field.name)
        return key.direction if key is not None else None

    def apply(self, query: Q) -> Q:
        return apply_ordering(query, self._keys)

    def add_or_update(self, token: str) -> str:
        """Next descriptor string with `token` appended, or its field's direction flipped."""
        candidate = self._parse_token(token)
        if candidate is None:
            return str(self)

        working = self._working_copy()
        existing = working._find(candidate.name)
        if existing is None:
            working._keys.append(candidate)
        else:
            existing.toggle_direction()
        return str(working)

    def remove(self, token: str) -> str:
        """Next descriptor string without `token`'s field."""
        candidate = self._parse_token(token)
        if candidate is None:
            return str(self)

        working = self._working_copy()
        existing = working._find(candidate.name)
        if existing is not None:
            working._keys.remove(existing)
        return str(working)

    def to_string(self) -> str:
        return SEPARATOR.join(key.render() for key in self._keys)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"SortDescriptor({self.entity_type.__name__}, {self.to_string()!r})"

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[SortKey]:
        return iter(self.sorts)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortDescriptor):
            return NotImplemented
        return self.entity_type is other.entity_type and str(self) == str(other)

    __hash__ = None  # type: ignore[assignment]
