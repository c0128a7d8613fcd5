"""Query - a lazy, restartable cursor over the rows of one table.

Rows are read one at a time and each becomes a new Model:

    for post in Query(driver, "posts", {"author_id": 1}, {"page": 2, "per_page": 10}):
        print(post.get("title"))

The explicit cursor protocol is also available:

    query.rewind()
    while query.valid():
        model = query.current()
        query.next()
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from db_orm.application.driver import Driver
from db_orm.application.model import Model
from db_orm.domain.entities import TableMeta
from db_orm.domain.value_objects import Pagination, parse_conditions
from db_orm.ports.outbound import RowCursor


class Query:
    """Forward-only iteration over a filtered, paginated table read."""

    def __init__(
        self,
        driver: Driver,
        table_name: str,
        conditions: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> None:
        self.driver = driver
        self.table: TableMeta = driver.table_meta(table_name)
        self.conditions = dict(conditions or {})
        self.pagination = Pagination.from_mapping(pagination)

        self.table.guard_has_columns(c.column for c in parse_conditions(self.conditions))

        self._cursor: RowCursor | None = None
        self._current: Model | None = None
        self._position = 0

    def rewind(self) -> None:
        """Reissue the read and position on the first row."""
        self._position = 0
        self._reset()
        self._current = self._fetch_model()

    def current(self) -> Model | None:
        return self._current

    def key(self) -> int:
        return self._position

    def next(self) -> Model | None:
        self._position += 1
        self._current = self._fetch_model()
        return self._current

    def valid(self) -> bool:
        return self._current is not None

    def count(self) -> int:
        """Total rows in the current result set, opening one if needed."""
        return self._ensure_cursor().row_count()

    def close(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None

    def items(self) -> Iterator[tuple[int, Model]]:
        self.rewind()
        while self._current is not None:
            yield self._position, self._current
            self.next()

    def __iter__(self) -> Iterator[Model]:
        for _, model in self.items():
            yield model

    def __len__(self) -> int:
        return self.count()

    def _reset(self) -> None:
        self.close()
        self._cursor = self.driver.executor.fetch_all(
            self.table.database_name,
            self.table.table_name,
            self.conditions,
            self.pagination,
        )

    def _ensure_cursor(self) -> RowCursor:
        if self._cursor is None:
            self._reset()
        return self._cursor

    def _fetch_model(self) -> Model | None:
        row = self._ensure_cursor().fetch_row()
        if row is None:
            return None
        return Model.hydrate(self.driver, self.table.table_name, row, self.table.database_name)

    def __repr__(self) -> str:
        return f"Query({self.table.qualified_name}, {self.conditions!r}, {self.pagination!r})"
