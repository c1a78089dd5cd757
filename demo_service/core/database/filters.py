"""Small composable transforms for ``select()`` statements.

Each filter takes a statement and hands back a narrowed copy, so callers can
build a query step by step and still see plain SQLAlchemy:

    stmt = LimitOffset(20, 40).apply(OrderBy(User.username).apply(select(User)))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from sqlalchemy import Select, false, true

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

Direction: TypeAlias = Literal["asc", "desc"]

_DIRECTIONS = ("asc", "desc")


class StatementFilter(ABC):
    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Return ``statement`` with this filter's clause added."""


class OrderBy(StatementFilter):
    """ORDER BY one or more columns.

    A single direction applies to every column; a sequence pairs up with
    ``fields`` one to one.

        OrderBy([User.username, User.id], ["asc", "desc"])
    """

    def __init__(
        self,
        fields: InstrumentedAttribute[Any] | Sequence[InstrumentedAttribute[Any]],
        sort_order: Direction | Sequence[Direction] = "asc",
    ):
        columns = list(fields) if isinstance(fields, Sequence) else [fields]
        directions = [sort_order] * len(columns) if isinstance(sort_order, str) else list(sort_order)

        if len(directions) != len(columns):
            msg = f"got {len(directions)} sort directions for {len(columns)} fields; length must match"
            raise ValueError(msg)
        bad = [d for d in directions if d not in _DIRECTIONS]
        if bad:
            msg = f"sort direction must be 'asc' or 'desc', not {bad[0]!r}"
            raise ValueError(msg)

        self.fields = columns
        self.sort_orders = directions

    def apply(self, statement: Select[Any]) -> Select[Any]:
        clauses = [
            column.desc() if direction == "desc" else column.asc()
            for column, direction in zip(self.fields, self.sort_orders, strict=True)
        ]
        return statement.order_by(*clauses)


class LimitOffset(StatementFilter):
    """LIMIT/OFFSET paging; ``LimitOffset(50, 50)`` is the second page of 50."""

    def __init__(self, limit: int, offset: int = 0):
        if min(limit, offset) < 0:
            msg = f"limit and offset cannot be negative (limit={limit}, offset={offset})"
            raise ValueError(msg)
        self.limit = limit
        self.offset = offset

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.limit(self.limit).offset(self.offset)


class CollectionFilter(StatementFilter):
    """``field IN (values)``, or ``NOT IN`` with ``invert=True``.

    With no values the clause becomes a constant: false for IN and true for
    NOT IN.
    """

    def __init__(
        self,
        field: InstrumentedAttribute[Any],
        values: Sequence[Any],
        *,
        invert: bool = False,
    ):
        self.field = field
        self.values = list(values)
        self.invert = invert

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.values:
            clause = self.field.not_in(self.values) if self.invert else self.field.in_(self.values)
        else:
            clause = true() if self.invert else false()
        return statement.where(clause)


__all__ = [
    "CollectionFilter",
    "LimitOffset",
    "OrderBy",
    "StatementFilter",
]
