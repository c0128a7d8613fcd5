"""Model - one (possibly unsaved) row of a table.

A Model binds a Driver and a TableMeta to a Values store. It is created
empty, populated with set() or one of the fetch methods, and persisted with
save(), which writes the whole graph of nested parents and children in one
transaction:

    post = Model(driver, "posts")
    post.set({
        "title": "hello",
        "author_id": {"name": "ann", "password": "secret"},   # new parent
        "comments": [{"body": "first"}],                       # new children
    })
    post.save()

    post.get("author_id")             # -> 1, the parent's generated key
    post.fetch_parent("author_id")    # -> the users Model
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping

from db_orm.application.driver import Driver
from db_orm.application.values import Snapshot, Values
from db_orm.domain.entities import TableMeta
from db_orm.domain.entities.column_meta import is_scalar
from db_orm.domain.exceptions import InvariantViolation, OrmError
from db_orm.domain.value_objects import Pagination, parse_conditions
from db_orm.infrastructure.logging import get_logger
from db_orm.infrastructure.tracing import trace_function, trace_span

if TYPE_CHECKING:
    from db_orm.application.query import Query

logger = get_logger(__name__)


class Model:
    """A row of a table, with its parents and children."""

    def __init__(self, driver: Driver, table_name: str, database_name: str | None = None) -> None:
        self.driver = driver
        self.table: TableMeta = driver.table_meta(table_name, database_name)
        self._values = Values(driver, self.table, Model)
        self._log = logger.bind(table=self.table.qualified_name)

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def set(self, name: str | Mapping[str, Any], value: Any = None) -> Model:
        """Set one value, or several atomically from a mapping.

        A parent foreign key column accepts a scalar key (checked against the
        parent table), a parent Model, or a mapping describing a new parent.
        A child table name accepts a list of child Models or mappings.

        Raises:
            OrmError: If a name is unknown or a value is rejected.
        """
        self._values.set(name, value)
        return self

    def get(self, name: str | Iterable[str] = ()) -> Any:
        """Get one value, or a dict of values (every column when empty)."""
        return self._values.get(name)

    def has(self, name: str) -> bool:
        return self._values.has(name)

    def remove(self, name: str) -> Model:
        self._values.remove(name)
        return self

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetch_by(self, conditions: Mapping[str, Any]) -> Model:
        """Fetch the first row matching the conditions into a new Model.

        Raises:
            OrmError: If a condition names an unknown column or no row matches.
        """
        self.table.guard_has_columns(c.column for c in parse_conditions(conditions))

        row = self.driver.executor.fetch_first(
            self.table.database_name, self.table.table_name, conditions
        )
        if row is None:
            raise OrmError(f"{self.table.qualified_name} record not found")

        return self.hydrate(self.driver, self.table.table_name, row, self.table.database_name)

    def fetch_by_pk(self, value: Any) -> Model:
        """Fetch a row by primary key.

        Args:
            value: The key value for a single-column key, or a mapping holding
                every key column.

        Raises:
            OrmError: If the table has no key, the value's shape does not
                match the key, or no row matches.
        """
        self.table.guard_has_primary_key()
        pk_columns = self.table.pk_columns

        if not isinstance(value, Mapping):
            if len(pk_columns) != 1:
                raise OrmError(f"{self.table.qualified_name}: array expected")
            value = {pk_columns[0]: value}

        conditions: dict[str, Any] = {}
        for column in pk_columns:
            if column not in value:
                raise OrmError(f"missing pk column {column}")
            if not is_scalar(value[column]):
                raise OrmError(f"{self.table.qualified_name}: scalar expected")
            conditions[column] = value[column]

        return self.fetch_by(conditions)

    def get_pk(self) -> dict[str, Any]:
        """Return the primary key as {column: value}, even for one column."""
        self.table.guard_has_primary_key()
        return {column: self._values.get(column) for column in self.table.pk_columns}

    def is_pk_null(self) -> bool:
        return all(self._values.get(column) is None for column in self.table.pk_columns)

    def fetch_parent(self, column: str) -> Model:
        """Fetch the row a foreign key column points at.

        Raises:
            OrmError: If the column is not a foreign key, is null, or the
                referenced row is missing.
        """
        self.table.guard_is_foreign_key(column)

        value = self._values.get(column)
        if value is None:
            raise OrmError(f"{self.table.qualified_name}.{column} is null")
        if isinstance(value, Model):
            return value

        link = self.table.parents[column]
        parent = type(self)(self.driver, link.referenced_table, link.referenced_database)
        return parent.fetch_by({link.referenced_column: value})

    def fetch_children(
        self,
        child_table: str,
        conditions: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> Query:
        """Return a lazy cursor over this row's children in a child table.

        Raises:
            OrmError: If child_table is not a child, the key is unset, or the
                key spans more than one column.
        """
        from db_orm.application.query import Query

        self.table.guard_has_child(child_table)
        self._guard_pk_set()
        if self.table.has_composite_pk:
            raise OrmError(
                f"{self.table.qualified_name}: multi-column foreign keys are not supported"
            )

        link = self.table.children[child_table]
        merged = dict(conditions or {})
        merged[link.referenced_column] = self._values.get(self.table.pk_columns[0])

        return Query(self.driver, child_table, merged, pagination)

    @classmethod
    def hydrate(
        cls,
        driver: Driver,
        table_name: str,
        row: Mapping[str, Any],
        database_name: str | None = None,
    ) -> Model:
        """Build a Model from a row read from the database."""
        model = cls(driver, table_name, database_name)
        model._values.load(row)
        return model

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def save(self) -> Model:
        """Persist this row with its nested parents and children.

        Parents are written before this row and children after it, all in one
        transaction. On failure the transaction is rolled back and every
        Model in the graph gets its values back as they were before the call.

        Raises:
            OrmError: If a value is rejected or a statement fails.
            InvariantViolation: If an update by primary key hits several rows.
        """
        snapshots = self._snapshot_graph(set())
        executor = self.driver.executor
        metrics = self.driver.metrics

        with trace_span("orm.save", {"db.sql.table": self.table.qualified_name}):
            executor.begin_transaction()
            try:
                self._save()
                executor.commit()
            except Exception as e:
                for values, snapshot in snapshots:
                    values.restore(snapshot)
                executor.rollback()
                metrics.saves_total.labels(status="error").inc()
                self._log.warning("save_rolled_back", error=str(e))
                raise

        metrics.saves_total.labels(status="success").inc()
        self._log.debug("saved", pk=self.get_pk() if self.table.pk_columns else None)
        return self

    def _snapshot_graph(self, seen: set[int]) -> list[tuple[Values, Snapshot]]:
        if id(self) in seen:
            return []
        seen.add(id(self))

        snapshot = self._values.snapshot()
        snapshots = [(self._values, snapshot)]
        for value in snapshot.values():
            related = value if isinstance(value, list) else [value]
            for item in related:
                if isinstance(item, Model):
                    snapshots.extend(item._snapshot_graph(seen))
        return snapshots

    def _save(self) -> None:
        table = self.table
        executor = self.driver.executor

        for column, link in table.parents.items():
            parent = self._values.get(column)
            if isinstance(parent, Model):
                parent._save()
                self._values.store(column, parent.get(link.referenced_column))

        values = {
            name: table.columns[name].to_storage(value)
            for name, value in self._values.get_column_values().items()
        }

        if self.is_pk_null():
            key = executor.insert(table.database_name, table.table_name, values)
            if table.pk_columns:
                self._values.store(table.pk_columns[0], key)
            self._log.debug("row_inserted", key=key)
        else:
            conditions = {
                column: table.columns[column].to_storage(self._values.get(column))
                for column in table.pk_columns
            }
            affected = executor.update(table.database_name, table.table_name, values, conditions)
            if affected == 0:
                executor.insert(table.database_name, table.table_name, values)
                self._log.debug("row_inserted", key=conditions)
            elif affected != 1:
                raise InvariantViolation(
                    f"{table.qualified_name}: update by primary key matched {affected} rows"
                )
            else:
                self._log.debug("row_updated", key=conditions)

        for child_table, children in self._values.children().items():
            self._guard_pk_set()
            if table.has_composite_pk:
                raise OrmError(
                    f"{table.qualified_name}: multi-column foreign keys are not supported"
                )

            fk_column = table.children[child_table].referenced_column
            pk_value = self._values.get(table.pk_columns[0])
            for child in children:
                child._values.store(fk_column, pk_value)
                child._save()

            self._values.remove(child_table)

    @trace_function("orm.delete")
    def delete(self) -> None:
        """Delete this row by primary key.

        Raises:
            OrmError: If the table has no key, the key is unset, or the
                statement fails.
        """
        self._guard_pk_set()
        table = self.table
        conditions = {
            column: table.columns[column].to_storage(self._values.get(column))
            for column in table.pk_columns
        }
        self.driver.executor.delete(table.database_name, table.table_name, conditions)
        self._log.debug("row_deleted", key=conditions)

    def _guard_pk_set(self) -> None:
        self.table.guard_has_primary_key()
        if self.is_pk_null():
            raise OrmError(f"{self.table.qualified_name} primary key not set")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Model({self.table.qualified_name}, {self._values.get()!r})"
