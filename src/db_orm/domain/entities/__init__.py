"""Domain entities for the ORM.

Entities describe the schema the ORM works against. They are built by a
metadata source and memoized by the driver for its lifetime.

Exports:
    Columns:
        - ColumnMeta: Column descriptor, value coercion and serialization
        - JsonString: A string value decoded from a json column

    Tables:
        - TableMeta: Columns, primary key and foreign key links of a table
        - ForeignKeyLink: One end of a single-column foreign key
        - SlotKind: COLUMN, PARENT or CHILD
"""

from db_orm.domain.entities.column_meta import ColumnMeta, JsonString
from db_orm.domain.entities.table_meta import ForeignKeyLink, SlotKind, TableMeta

__all__ = [
    # Columns
    "ColumnMeta",
    "JsonString",
    # Tables
    "TableMeta",
    "ForeignKeyLink",
    "SlotKind",
]
