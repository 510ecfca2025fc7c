from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from sorting.core.exceptions import PreconditionError
from sorting.keys import SortKey
from sorting.logging import get_logger
from sorting.query import OrderableQuery

__all__ = ["apply_ordering"]

logger = get_logger(__name__)

Q = TypeVar("Q", bound=OrderableQuery)


def apply_ordering(query: Q, keys: Iterable[SortKey]) -> Q:
    """Apply `keys` to `query` in order, primary first.

    The ordering state is read from the query before every key. A query that
    arrives already ordered is extended, so its existing ordering stays the
    coarsest one instead of being replaced.
    """
    if query is None:
        raise PreconditionError("apply_ordering requires a query handle, got None")
    if not isinstance(query, OrderableQuery):
        raise PreconditionError(f"{type(query).__name__} does not support ordering")

    for key in keys:
        is_first = not query.is_ordered
        logger.debug("sort_key_applied", key=key.render(), primary=is_first)
        query = key.extend(query, is_first=is_first)
    return query
