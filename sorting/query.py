"""Query handles that can be ordered and asked whether they already are.

A handle is an immutable value: `order_by` and `then_by` return new handles and
never touch the receiver. The ordering state is tracked explicitly so callers
decide between a primary and a secondary ordering by reading `is_ordered`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar, Union, runtime_checkable

from sorting.core.exceptions import PreconditionError
from sorting.schema import FieldInfo

__all__ = ["OrderState", "OrderableQuery", "Query", "Selector"]

T = TypeVar("T")
Q = TypeVar("Q", bound="OrderableQuery")

Selector = Union[FieldInfo, Callable[[Any], Any]]


class OrderState(str, Enum):
    UNORDERED = "unordered"
    ORDERED = "ordered"


@runtime_checkable
class OrderableQuery(Protocol):
    """The one capability sort keys need from a query engine."""

    @property
    def is_ordered(self) -> bool: ...

    def order_by(self: Q, field: FieldInfo, descending: bool = False) -> Q: ...

    def then_by(self: Q, field: FieldInfo, descending: bool = False) -> Q: ...


def _null_first(value: Any) -> tuple[bool, Any]:
    # None sorts before everything else ascending, after everything descending
    return (value is not None, value)


@dataclass(frozen=True)
class _Ordering:
    accessor: Callable[[Any], Any]
    descending: bool

    def key(self, row: Any) -> tuple[bool, Any]:
        return _null_first(self.accessor(row))


def _accessor_of(selector: Selector) -> Callable[[Any], Any]:
    if isinstance(selector, FieldInfo):
        return selector.accessor
    if callable(selector):
        return selector
    raise PreconditionError(f"cannot order by {selector!r}")


class Query(Generic[T]):
    """In-memory query over a snapshot of `source`.

    Rows are evaluated lazily on iteration; orderings compose like a stable
    multi-key sort where the first ordering is the coarsest.
    """

    def __init__(self, source: Iterable[T], _orderings: tuple[_Ordering, ...] = ()) -> None:
        self._source: tuple[T, ...] = tuple(source)
        self._orderings = _orderings

    @property
    def state(self) -> OrderState:
        return OrderState.ORDERED if self._orderings else OrderState.UNORDERED

    @property
    def is_ordered(self) -> bool:
        return self.state is OrderState.ORDERED

    def order_by(self, field: Selector, descending: bool = False) -> Query[T]:
        """Start a new ordering; any ordering already on this handle is replaced."""
        return Query(self._source, (_Ordering(_accessor_of(field), descending),))

    def then_by(self, field: Selector, descending: bool = False) -> Query[T]:
        """Break ties left by the existing ordering."""
        if not self.is_ordered:
            raise PreconditionError("then_by requires an ordered query; call order_by first")
        return Query(self._source, self._orderings + (_Ordering(_accessor_of(field), descending),))

    def to_list(self) -> list[T]:
        rows = list(self._source)
        # least significant key first; list.sort is stable, reverse included
        for ordering in reversed(self._orderings):
            rows.sort(key=ordering.key, reverse=ordering.descending)
        return rows

    def first(self, default: T | None = None) -> T | None:
        rows = self.to_list()
        return rows[0] if rows else default

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._source)

    def __repr__(self) -> str:
        return f"Query(rows={len(self._source)}, state={self.state.value}, orderings={len(self._orderings)})"
