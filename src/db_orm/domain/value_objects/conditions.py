"""Query conditions and pagination.

Conditions are written as a mapping of column name to value. A name may carry
a trailing comparator separated by a space:

    {"id": 1}               -> id = 1
    {"id <=": 2}            -> id <= 2
    {"id IN": [1, 2, 3]}    -> id IN (1, 2, 3)
    {"id IN": 1}            -> id IN (1)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from db_orm.domain.exceptions import OrmError


class Comparator(Enum):
    """Comparators accepted in a condition name."""

    EQ = "="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    IN = "IN"


@dataclass(frozen=True, slots=True)
class Condition:
    """A single `column <comparator> value` predicate."""

    column: str
    comparator: Comparator
    value: Any

    @classmethod
    def parse(cls, name: str, value: Any) -> Condition:
        """Build a condition from a `"column [comparator]"` key.

        Raises:
            OrmError: If the comparator is not one of Comparator.
        """
        column, _, token = name.strip().partition(" ")
        token = token.strip().upper() or Comparator.EQ.value

        try:
            comparator = Comparator(token)
        except ValueError:
            raise OrmError(f"unknown comparator {token} for {column}") from None

        if comparator is Comparator.IN and not isinstance(value, (list, tuple, set, frozenset)):
            value = [value]
        elif comparator is Comparator.IN:
            value = list(value)

        return cls(column=column, comparator=comparator, value=value)


def parse_conditions(conditions: Mapping[str, Any] | None) -> list[Condition]:
    """Parse a conditions mapping into Condition objects, preserving order."""
    if not conditions:
        return []
    return [Condition.parse(name, value) for name, value in conditions.items()]


@dataclass(frozen=True, slots=True)
class Pagination:
    """A 1-based page window. per_page of None means unlimited."""

    page: int = 1
    per_page: int | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise OrmError(f"page must be >= 1, got {self.page}")
        if self.per_page is not None and self.per_page < 1:
            raise OrmError(f"per_page must be >= 1, got {self.per_page}")

    @classmethod
    def from_mapping(cls, pagination: Mapping[str, Any] | Pagination | None) -> Pagination:
        """Build from a `{"page": .., "per_page": ..}` mapping."""
        if isinstance(pagination, Pagination):
            return pagination
        if not pagination:
            return cls()

        page = pagination.get("page")
        per_page = pagination.get("per_page")
        return cls(
            page=int(page) if page is not None else 1,
            per_page=int(per_page) if per_page is not None else None,
        )

    @property
    def limit(self) -> int | None:
        return self.per_page

    @property
    def offset(self) -> int:
        if self.per_page is None:
            return 0
        return (self.page - 1) * self.per_page
