"""Sort descriptors (`"-Id,CreatedAt"`) for in-memory and SQLAlchemy queries."""

from sorting.applier import apply_ordering
from sorting.descriptor import SortDescriptor
from sorting.extensions import as_query, order_by
from sorting.keys import SortDirection, SortKey
from sorting.query import OrderableQuery, OrderState, Query
from sorting.schema import EntitySchema, FieldInfo

__all__ = [
    "EntitySchema",
    "FieldInfo",
    "OrderState",
    "OrderableQuery",
    "Query",
    "SortDescriptor",
    "SortDirection",
    "SortKey",
    "apply_ordering",
    "as_query",
    "order_by",
]
