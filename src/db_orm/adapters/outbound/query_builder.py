"""SQL statement builder using sqlglot.

This module renders the four statements the ORM issues from condition
mappings, building sqlglot expression trees and generating dialect-specific
SQL with every identifier quoted and every value bound to a named placeholder.

    builder = QueryBuilder("sqlite")
    builder.select("main", "users", {"id <=": 10}, Pagination(page=2, per_page=5))
    # Statement(sql='SELECT * FROM "main"."users" WHERE "id" <= :p0 LIMIT 5 OFFSET 5',
    #           params={'p0': 10})

Supported dialects: sqlite, mysql.

References:
    - sqlglot documentation: https://sqlglot.com/
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlglot import exp

from db_orm.domain.exceptions import OrmError
from db_orm.domain.value_objects import Comparator, Pagination, parse_conditions

SUPPORTED_DIALECTS = ("sqlite", "mysql")

_COMPARISONS: dict[Comparator, type[exp.Binary]] = {
    Comparator.EQ: exp.EQ,
    Comparator.LT: exp.LT,
    Comparator.LE: exp.LTE,
    Comparator.GT: exp.GT,
    Comparator.GE: exp.GTE,
}


@dataclass(frozen=True)
class Statement:
    """Rendered SQL with its named parameters."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)


class _Params:
    """Allocates placeholder names p0, p1, ... for one statement."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}

    def bind(self, value: Any) -> exp.Placeholder:
        name = f"p{len(self.values)}"
        self.values[name] = value
        return exp.Placeholder(this=name)


class QueryBuilder:
    """Builds SELECT, INSERT, UPDATE and DELETE statements for one dialect."""

    def __init__(self, dialect: str = "sqlite") -> None:
        """Initialize the builder.

        Args:
            dialect: SQL dialect to render.

        Raises:
            OrmError: If the dialect is not supported.
        """
        if dialect not in SUPPORTED_DIALECTS:
            raise OrmError(f"unhandled driver {dialect}")
        self._dialect = dialect

    @property
    def dialect(self) -> str:
        return self._dialect

    def select(
        self,
        database: str,
        table: str,
        conditions: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> Statement:
        """Build `SELECT * FROM table WHERE ... LIMIT ... OFFSET ...`."""
        params = _Params()
        query = exp.select("*").from_(self._table(database, table))

        where = self._where(conditions, params)
        if where is not None:
            query = query.where(where)

        window = Pagination.from_mapping(pagination)
        if window.limit is not None:
            query = query.limit(window.limit)
            if window.offset:
                query = query.offset(window.offset)

        return self._render(query, params)

    def select_first(
        self, database: str, table: str, conditions: Mapping[str, Any] | None = None
    ) -> Statement:
        return self.select(database, table, conditions, Pagination(page=1, per_page=1))

    def insert(self, database: str, table: str, values: Mapping[str, Any]) -> Statement:
        """Build `INSERT INTO table (cols) VALUES (...)`.

        An empty mapping inserts a row of column defaults.
        """
        target = self._table(database, table)

        if not values:
            target_sql = target.sql(dialect=self._dialect, identify=True)
            if self._dialect == "mysql":
                return Statement(f"INSERT INTO {target_sql} () VALUES ()")
            return Statement(f"INSERT INTO {target_sql} DEFAULT VALUES")

        params = _Params()
        statement = exp.Insert(
            this=exp.Schema(
                this=target,
                expressions=[exp.to_identifier(column) for column in values],
            ),
            expression=exp.Values(
                expressions=[
                    exp.Tuple(expressions=[params.bind(value) for value in values.values()])
                ]
            ),
        )
        return self._render(statement, params)

    def update(
        self,
        database: str,
        table: str,
        values: Mapping[str, Any],
        conditions: Mapping[str, Any],
    ) -> Statement:
        """Build `UPDATE table SET col = ... WHERE ...`.

        Raises:
            OrmError: If there is nothing to set.
        """
        if not values:
            raise OrmError(f"no values to update in {database}.{table}")

        params = _Params()
        assignments = [
            exp.EQ(this=exp.column(column), expression=params.bind(value))
            for column, value in values.items()
        ]
        statement = exp.Update(this=self._table(database, table), expressions=assignments)

        where = self._where(conditions, params)
        if where is not None:
            statement.set("where", exp.Where(this=where))

        return self._render(statement, params)

    def delete(self, database: str, table: str, conditions: Mapping[str, Any]) -> Statement:
        """Build `DELETE FROM table WHERE ...`."""
        params = _Params()
        statement = exp.Delete(this=self._table(database, table))

        where = self._where(conditions, params)
        if where is not None:
            statement.set("where", exp.Where(this=where))

        return self._render(statement, params)

    def _table(self, database: str, table: str) -> exp.Table:
        return exp.table_(table, db=database or None)

    def _where(
        self, conditions: Mapping[str, Any] | None, params: _Params
    ) -> exp.Expression | None:
        predicates: list[exp.Expression] = []

        for condition in parse_conditions(conditions):
            column = exp.column(condition.column)
            if condition.comparator is Comparator.IN:
                predicates.append(
                    exp.In(
                        this=column,
                        expressions=[params.bind(value) for value in condition.value],
                    )
                )
            else:
                comparison = _COMPARISONS[condition.comparator]
                predicates.append(comparison(this=column, expression=params.bind(condition.value)))

        if not predicates:
            return None
        return exp.and_(*predicates)

    def _render(self, expression: exp.Expression, params: _Params) -> Statement:
        return Statement(
            sql=expression.sql(dialect=self._dialect, identify=True),
            params=params.values,
        )
