from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import Select, and_
from sqlalchemy.sql.elements import ColumnElement


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class ClauseBuilder:
    """Collects WHERE predicates for a select statement.

    Every value is attached as a bound parameter by SQLAlchemy; nothing is
    formatted into the SQL text. Empty values are skipped so an absent filter
    never turns into a predicate.
    """

    def __init__(self) -> None:
        self._clauses: list[ColumnElement[bool]] = []

    def __len__(self) -> int:
        return len(self._clauses)

    @property
    def clauses(self) -> list[ColumnElement[bool]]:
        return list(self._clauses)

    def where(self, clause: ColumnElement[bool]) -> "ClauseBuilder":
        self._clauses.append(clause)
        return self

    def equals(self, column, value: Any) -> "ClauseBuilder":
        if not is_empty(value):
            self._clauses.append(column == value)
        return self

    def contains(self, column, value: str | None) -> "ClauseBuilder":
        if not is_empty(value):
            self._clauses.append(column.icontains(value.strip(), autoescape=True))
        return self

    def is_true(self, column, enabled: bool) -> "ClauseBuilder":
        if enabled:
            self._clauses.append(column.is_(True))
        return self

    def between(self, column, low: date, high: date) -> "ClauseBuilder":
        self._clauses.append(column.between(low, high))
        return self

    def apply(self, stmt: Select) -> Select:
        if not self._clauses:
            return stmt
        return stmt.where(and_(*self._clauses))
