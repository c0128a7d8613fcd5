"""Table descriptor.

TableMeta holds a table's columns, primary key, and foreign key links in both
directions. Names that a Model accepts in set()/get() resolve to exactly one
slot kind:

    COLUMN  - a declared column that is not a foreign key
    PARENT  - a declared column that references another table
    CHILD   - the name of a table holding a foreign key back to this one

A child table whose name is also a column of this table would make a name
resolve two ways, so such a descriptor is rejected when it is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable

from db_orm.domain.entities.column_meta import ColumnMeta
from db_orm.domain.exceptions import InvariantViolation, OrmError


@dataclass(frozen=True, slots=True)
class ForeignKeyLink:
    """One end of a single-column foreign key.

    For a parent link this is the column referenced by this table's FK column.
    For a child link it is the child table and its FK column pointing back here.
    """

    referenced_database: str
    referenced_table: str
    referenced_column: str


class SlotKind(Enum):
    """How a value-store name is interpreted."""

    COLUMN = auto()
    PARENT = auto()
    CHILD = auto()


@dataclass(frozen=True)
class TableMeta:
    """Meta information about one table.

    Attributes:
        database_name: Schema the table lives in
        table_name: Table name
        columns: Column name -> ColumnMeta, in declaration order
        pk_columns: Primary key columns in key order, empty when there is none
        parents: FK column name -> link to the referenced table
        children: Child table name -> link to the child's FK column
    """

    database_name: str
    table_name: str
    columns: dict[str, ColumnMeta] = field(default_factory=dict)
    pk_columns: tuple[str, ...] = ()
    parents: dict[str, ForeignKeyLink] = field(default_factory=dict)
    children: dict[str, ForeignKeyLink] = field(default_factory=dict)
    _slots: dict[str, SlotKind] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for name in self.pk_columns:
            if name not in self.columns:
                raise InvariantViolation(
                    f"primary key column {name} is not a column of {self.qualified_name}"
                )

        slots: dict[str, SlotKind] = {}
        for name in self.columns:
            slots[name] = SlotKind.PARENT if name in self.parents else SlotKind.COLUMN

        for child in self.children:
            if child in slots:
                raise OrmError(
                    f"ambiguous name {child} in {self.qualified_name}: "
                    "child table and column share a name"
                )
            slots[child] = SlotKind.CHILD

        object.__setattr__(self, "_slots", slots)

    @property
    def qualified_name(self) -> str:
        return f"{self.database_name}.{self.table_name}"

    @property
    def has_composite_pk(self) -> bool:
        return len(self.pk_columns) > 1

    def slot(self, name: str) -> SlotKind:
        """Classify a name as a column, parent FK column, or child table.

        Raises:
            OrmError: If the name is neither a column nor a child table.
        """
        kind = self._slots.get(name)
        if kind is None:
            raise OrmError(f"unknown column {name} in {self.qualified_name}")
        return kind

    def guard_has_column(self, name: str) -> None:
        """Child table names count as columns here."""
        self.slot(name)

    def guard_has_columns(self, names: Iterable[str]) -> None:
        for name in names:
            self.guard_has_column(name)

    def guard_has_primary_key(self) -> None:
        if not self.pk_columns:
            raise OrmError(f"{self.qualified_name} has no primary key")

    def guard_has_child(self, name: str) -> None:
        if name not in self.children:
            raise OrmError(f"{name} is not a child of {self.qualified_name}")

    def guard_is_foreign_key(self, name: str) -> None:
        if name not in self.parents:
            raise OrmError(f"{self.qualified_name}.{name} is not a foreign key column")
