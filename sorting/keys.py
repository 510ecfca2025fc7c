from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from sorting.query import OrderableQuery
from sorting.schema import FieldInfo

__all__ = ["DESCENDING_PREFIX", "SortDirection", "SortKey"]

DESCENDING_PREFIX = "-"

Q = TypeVar("Q", bound=OrderableQuery)


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def flipped(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


class SortKey:
    """One field of a sort descriptor together with its direction.

    The field and its accessor are fixed at construction; only the direction
    changes afterwards, through `toggle_direction`.
    """

    __slots__ = ("_field", "_accessor", "direction")

    def __init__(self, field: FieldInfo, direction: SortDirection = SortDirection.ASCENDING) -> None:
        self._field = field
        self._accessor = field.accessor
        self.direction = direction

    @property
    def field(self) -> FieldInfo:
        return self._field

    @property
    def name(self) -> str:
        return self._field.name

    @property
    def accessor(self) -> Callable[[Any], Any]:
        return self._accessor

    @property
    def is_descending(self) -> bool:
        return self.direction is SortDirection.DESCENDING

    def toggle_direction(self) -> None:
        self.direction = self.direction.flipped()

    def render(self) -> str:
        return f"{DESCENDING_PREFIX}{self.name}" if self.is_descending else self.name

    def extend(self, query: Q, is_first: bool) -> Q:
        """Order `query` by this key.

        `is_first` starts a new ordering; otherwise the key breaks ties left by
        the orderings already on the query.
        """
        if is_first:
            return query.order_by(self._field, descending=self.is_descending)
        return query.then_by(self._field, descending=self.is_descending)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"SortKey({self.render()!r})"
