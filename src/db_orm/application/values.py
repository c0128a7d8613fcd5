"""Value store - the validated values of one Model.

Slots are keyed by column name or child table name. A slot holds one of:

    COLUMN  - a coerced native value
    PARENT  - a coerced foreign key value, or an unsaved/loaded parent Model
    CHILD   - a list of child Models, persisted after their parent

Stored values are never mutated in place: set() always replaces the slot.
That makes a shallow dict copy a complete snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping

from db_orm.domain.entities import SlotKind, TableMeta
from db_orm.domain.entities.column_meta import type_name
from db_orm.domain.exceptions import OrmError

if TYPE_CHECKING:
    from db_orm.application.driver import Driver
    from db_orm.application.model import Model

Snapshot = dict[str, Any]


class Values:
    """Per-entity mapping from slot name to validated value."""

    def __init__(self, driver: Driver, table: TableMeta, model_cls: type[Model]) -> None:
        self._driver = driver
        self._table = table
        self._model_cls = model_cls
        self._values: dict[str, Any] = {}

    def set(self, name: str | Mapping[str, Any], value: Any = None) -> Values:
        """Validate and store one value, or a mapping of values atomically.

        Raises:
            OrmError: If a name is unknown or a value is rejected. In the
                mapping form no value from the call remains stored.
        """
        if isinstance(name, Mapping):
            return self._set_many(name)

        kind = self._table.slot(name)
        if kind is SlotKind.CHILD:
            return self.set_children(name, value)
        if kind is SlotKind.PARENT:
            return self._set_parent(name, value)

        self._values[name] = self._table.columns[name].to_python(value)
        return self

    def _set_many(self, values: Mapping[str, Any]) -> Values:
        snapshot = self.snapshot()
        try:
            for name, value in values.items():
                self.set(name, value)
        except Exception:
            self.restore(snapshot)
            raise
        return self

    def set_children(self, child_table: str, children: Any) -> Values:
        """Store the children to persist under a child table slot.

        Each child is a Model of the child table (used as-is) or a mapping
        materialized into a new, validated Model.
        """
        self._table.guard_has_child(child_table)

        if not isinstance(children, (list, tuple)):
            raise OrmError(
                f"{self._table.qualified_name}.{child_table}: "
                f"expected list, got {type_name(children)}"
            )

        models: list[Model] = []
        for child in children:
            if isinstance(child, self._model_cls):
                model = child
            else:
                model = self._model_cls(self._driver, child_table)
                model.set(child)

            if model.table.table_name != child_table:
                raise OrmError(
                    f"{self._table.qualified_name}: "
                    f"expected {child_table}, got {model.table.table_name}"
                )
            models.append(model)

        self._values[child_table] = models
        return self

    def _set_parent(self, column: str, value: Any) -> Values:
        link = self._table.parents[column]
        prefix = f"{self._table.qualified_name}.{column}"

        if isinstance(value, Mapping):
            parent = self._model_cls(self._driver, link.referenced_table)
            parent.set(value)
            self._values[column] = parent
            return self

        if isinstance(value, self._model_cls):
            if value.table.table_name != link.referenced_table:
                raise OrmError(
                    f"{prefix}: expected {link.referenced_table}, got {value.table.table_name}"
                )
            self._values[column] = value
            return self

        value = self._table.columns[column].to_python(value)
        if value is not None:
            parent = self._model_cls(self._driver, link.referenced_table)
            try:
                parent.fetch_by({link.referenced_column: value})
            except OrmError as e:
                raise OrmError(f"{prefix}: {e}") from e

        self._values[column] = value
        return self

    def store(self, column: str, value: Any) -> Values:
        """Coerce and store a column value without referential checks.

        Used during save() for keys the same transaction just wrote.
        """
        self._values[column] = self._table.columns[column].to_python(value)
        return self

    def get(self, name: str | Iterable[str] = ()) -> Any:
        """Return one stored value (None if unset) or a dict of several.

        An empty iterable returns every declared column.
        """
        if isinstance(name, str):
            self._table.guard_has_column(name)
            return self._values.get(name)

        names = list(name) or list(self._table.columns)
        return {n: self.get(n) for n in names}

    def get_column_values(self) -> dict[str, Any]:
        """Stored values without child slots, in storage order."""
        return {
            name: value
            for name, value in self._values.items()
            if name not in self._table.children
        }

    def children(self) -> dict[str, list[Model]]:
        """Populated child slots."""
        return {
            name: value
            for name, value in self._values.items()
            if name in self._table.children
        }

    def has(self, name: str) -> bool:
        return self._values.get(name) is not None

    def remove(self, name: str) -> Values:
        self._values.pop(name, None)
        return self

    def load(self, row: Mapping[str, Any]) -> Values:
        """Hydrate from a row read from the database.

        Values are coerced but foreign keys are not checked against their
        parent tables; the row is already persisted.
        """
        values: dict[str, Any] = {}
        for name, value in row.items():
            column = self._table.columns.get(name)
            if column is None:
                raise OrmError(f"unknown column {name} in {self._table.qualified_name}")
            values[name] = column.to_python(value)

        self._values = values
        return self

    def snapshot(self) -> Snapshot:
        return dict(self._values)

    def restore(self, snapshot: Snapshot) -> None:
        self._values = dict(snapshot)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Values):
            return NotImplemented
        return (
            self._table.qualified_name == other._table.qualified_name
            and self.get() == other.get()
        )

    def __repr__(self) -> str:
        return f"Values({self._table.qualified_name}, {self._values!r})"
