"""One-call helpers: parse a descriptor and order a query with it."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from sorting.core.exceptions import PreconditionError
from sorting.descriptor import SortDescriptor
from sorting.query import OrderableQuery, Query

__all__ = ["as_query", "order_by"]

T = TypeVar("T")


def as_query(source: OrderableQuery | Iterable[T]) -> OrderableQuery:
    """Wrap a plain iterable in an in-memory `Query`; handles pass through."""
    if source is None:
        raise PreconditionError("order_by requires a query or iterable, got None")
    if isinstance(source, OrderableQuery):
        return source
    return Query(source)


def order_by(source: OrderableQuery | Iterable[T], entity_type: type[T], *sorts: str) -> Any:
    """Order `source` by a descriptor string or by several tokens.

    order_by(rows, Thing, "-Id,CreatedAt")
    order_by(rows, Thing, "-Id", "CreatedAt")
    """
    raw: str | tuple[str, ...] = sorts[0] if len(sorts) == 1 else sorts
    return SortDescriptor(entity_type, raw).apply(as_query(source))
