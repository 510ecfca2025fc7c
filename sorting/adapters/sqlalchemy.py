"""SQLAlchemy `Select` as an orderable query handle."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select

from sorting.core.exceptions import PreconditionError
from sorting.query import OrderState
from sorting.schema import FieldInfo

__all__ = ["SelectQuery"]


def _has_order_by(statement: Select) -> bool:
    # no public accessor for the ORDER BY list of a Select
    return bool(getattr(statement, "_order_by_clauses", ()))


class SelectQuery:
    """Immutable wrapper that tracks whether the statement is ordered.

    A primary ordering clears any ORDER BY already on the statement, matching
    `Query.order_by`; secondary orderings append to it.
    """

    def __init__(self, statement: Select, *, ordered: bool | None = None) -> None:
        self._statement = statement
        if ordered is None:
            ordered = _has_order_by(statement)
        self._state = OrderState.ORDERED if ordered else OrderState.UNORDERED

    @classmethod
    def for_entity(cls, entity_type: type) -> SelectQuery:
        return cls(select(entity_type))

    @property
    def statement(self) -> Select:
        return self._statement

    @property
    def state(self) -> OrderState:
        return self._state

    @property
    def is_ordered(self) -> bool:
        return self._state is OrderState.ORDERED

    @staticmethod
    def _clause(field: FieldInfo, descending: bool) -> Any:
        if field.expression is None:
            raise PreconditionError(f"field {field.name!r} has no SQL column to order by")
        return field.expression.desc() if descending else field.expression.asc()

    def order_by(self, field: FieldInfo, descending: bool = False) -> SelectQuery:
        clause = self._clause(field, descending)
        return SelectQuery(self._statement.order_by(None).order_by(clause), ordered=True)

    def then_by(self, field: FieldInfo, descending: bool = False) -> SelectQuery:
        if not self.is_ordered:
            raise PreconditionError("then_by requires an ordered statement; call order_by first")
        return SelectQuery(self._statement.order_by(self._clause(field, descending)), ordered=True)

    def __repr__(self) -> str:
        return f"SelectQuery(state={self._state.value})"
