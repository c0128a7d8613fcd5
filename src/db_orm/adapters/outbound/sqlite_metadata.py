"""SQLite metadata source.

This adapter implements the MetadataSource protocol with SQLite's table-valued
pragma functions:

    pragma_table_info(t)          columns, declared types, nullability, key order
    pragma_foreign_key_list(t)    foreign keys declared by t

Children are found by scanning every table's foreign keys for references to
the described table. Only single-column foreign keys become parent or child
links; composite foreign keys are left to the database to enforce.

SQLite stores declared types verbatim, so MySQL-style declarations keep their
meaning:

    VARCHAR(45)       -> varchar, max_length 45
    INT UNSIGNED      -> int, unsigned
    TINYINT(1), BOOL  -> boolean
    DECIMAL(5,2)      -> decimal, precision 5, scale 2
    INTEGER           -> bigint (SQLite integers are 64-bit)
    REAL              -> double
    (no type)         -> text
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from typing import Any

from db_orm.adapters.outbound.sqlite_executor import DATABASE_NAME
from db_orm.domain.entities import ColumnMeta, ForeignKeyLink, TableMeta
from db_orm.domain.exceptions import OrmError
from db_orm.domain.value_objects import DEFAULT_MAX_LENGTHS, DataType, max_value, min_value
from db_orm.infrastructure.logging import get_logger

logger = get_logger(__name__)

_DECLARED_TYPE = re.compile(r"^\s*(?P<name>[a-z_][a-z0-9_ ]*?)\s*(?:\((?P<args>.*)\))?\s*$", re.S)
_OPTION = re.compile(r"'((?:[^']|'')*)'")

_ALIASES: dict[str, str] = {
    "integer": DataType.BIGINT,
    "int": DataType.INT,
    "tinyint": DataType.TINYINT,
    "smallint": DataType.SMALLINT,
    "mediumint": DataType.MEDIUMINT,
    "bigint": DataType.BIGINT,
    "big int": DataType.BIGINT,
    "int2": DataType.SMALLINT,
    "int8": DataType.BIGINT,
    "bit": DataType.BIT,
    "year": DataType.YEAR,
    "bool": DataType.BOOLEAN,
    "boolean": DataType.BOOLEAN,
    "char": DataType.CHAR,
    "character": DataType.CHAR,
    "nchar": DataType.CHAR,
    "native character": DataType.CHAR,
    "varchar": DataType.VARCHAR,
    "nvarchar": DataType.VARCHAR,
    "varying character": DataType.VARCHAR,
    "character varying": DataType.VARCHAR,
    "tinytext": DataType.TINYTEXT,
    "text": DataType.TEXT,
    "clob": DataType.TEXT,
    "mediumtext": DataType.MEDIUMTEXT,
    "longtext": DataType.LONGTEXT,
    "binary": DataType.BINARY,
    "varbinary": DataType.VARBINARY,
    "tinyblob": DataType.TINYBLOB,
    "blob": DataType.BLOB,
    "mediumblob": DataType.MEDIUMBLOB,
    "longblob": DataType.LONGBLOB,
    "date": DataType.DATE,
    "datetime": DataType.DATETIME,
    "timestamp": DataType.TIMESTAMP,
    "time": DataType.TIME,
    "decimal": DataType.DECIMAL,
    "numeric": DataType.DECIMAL,
    "float": DataType.FLOAT,
    "double": DataType.DOUBLE,
    "double precision": DataType.DOUBLE,
    "real": DataType.DOUBLE,
    "enum": DataType.ENUM,
    "set": DataType.SET,
    "json": DataType.JSON,
}

# (precision, scale) when the declaration gives none
_DEFAULT_PRECISION: dict[str, tuple[int, int]] = {
    DataType.DECIMAL: (10, 0),
    DataType.DOUBLE: (22, 0),
    DataType.FLOAT: (12, 0),
    DataType.BIT: (1, 0),
}


@dataclass(frozen=True)
class DeclaredType:
    """A declared column type broken into the parts ColumnMeta needs."""

    data_type: str
    column_type: str
    is_signed: bool = True
    max_length: int = 0
    precision: int = 0
    scale: int = 0
    options: tuple[str, ...] = ()


def parse_declared_type(declared: str | None) -> DeclaredType:
    """Map a declared column type onto a logical kind.

    Unrecognised type names are kept as their own kind, which ColumnMeta
    refuses to coerce.
    """
    column_type = " ".join((declared or "").lower().split())
    if not column_type:
        return DeclaredType(
            data_type=DataType.TEXT,
            column_type="text",
            max_length=DEFAULT_MAX_LENGTHS[DataType.TEXT],
        )

    is_signed = True
    base = column_type
    if re.search(r"\bunsigned\b", base):
        is_signed = False
        base = " ".join(re.sub(r"\bunsigned\b", " ", base).split())
    base = " ".join(re.sub(r"\b(signed|zerofill)\b", " ", base).split())

    match = _DECLARED_TYPE.match(base)
    name = match.group("name").strip() if match else base
    args = (match.group("args") or "") if match else ""

    data_type = _ALIASES.get(name, name)

    if data_type in (DataType.ENUM, DataType.SET):
        options = tuple(o.replace("''", "'") for o in _OPTION.findall(args))
        return DeclaredType(data_type=data_type, column_type=column_type, options=options)

    numbers = [int(n) for n in re.findall(r"\d+", args)]

    if data_type == DataType.TINYINT and numbers[:1] == [1]:
        data_type = DataType.BOOLEAN

    max_length = 0
    precision, scale = _DEFAULT_PRECISION.get(data_type, (0, 0))

    if data_type in DEFAULT_MAX_LENGTHS:
        max_length = numbers[0] if numbers else DEFAULT_MAX_LENGTHS[data_type]
    elif data_type in _DEFAULT_PRECISION and numbers:
        precision = numbers[0]
        scale = numbers[1] if len(numbers) > 1 else 0

    return DeclaredType(
        data_type=data_type,
        column_type=column_type,
        is_signed=is_signed,
        max_length=max_length,
        precision=precision,
        scale=scale,
    )


class SqliteMetadataSource:
    """MetadataSource reading SQLite's schema pragmas."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    @property
    def database_name(self) -> str:
        return DATABASE_NAME

    def fetch_table_meta(self, table_name: str) -> TableMeta:
        column_rows = self._query("SELECT * FROM pragma_table_info(?)", table_name)
        if not column_rows:
            raise OrmError(f"table {table_name} not found in {self.database_name}")

        columns: dict[str, ColumnMeta] = {}
        keyed: list[tuple[int, str]] = []

        for row in column_rows:
            declared = parse_declared_type(row["type"])
            columns[row["name"]] = ColumnMeta(
                database_name=self.database_name,
                table_name=table_name,
                column_name=row["name"],
                data_type=declared.data_type,
                column_type=declared.column_type,
                is_signed=declared.is_signed,
                allow_null=not row["notnull"],
                max_length=declared.max_length,
                precision=declared.precision,
                scale=declared.scale,
                min_value=min_value(declared.data_type, declared.is_signed),
                max_value=max_value(declared.data_type, declared.is_signed, declared.precision),
                options=declared.options,
            )
            if row["pk"]:
                keyed.append((row["pk"], row["name"]))

        return TableMeta(
            database_name=self.database_name,
            table_name=table_name,
            columns=columns,
            pk_columns=tuple(name for _, name in sorted(keyed)),
            parents=self._parents(table_name),
            children=self._children(table_name),
        )

    def _parents(self, table_name: str) -> dict[str, ForeignKeyLink]:
        parents: dict[str, ForeignKeyLink] = {}
        for fk in self._single_column_foreign_keys(table_name):
            parents[fk["from"]] = ForeignKeyLink(
                referenced_database=self.database_name,
                referenced_table=fk["table"],
                referenced_column=fk["to"] or self._primary_key_of(fk["table"]),
            )
        return parents

    def _children(self, table_name: str) -> dict[str, ForeignKeyLink]:
        children: dict[str, ForeignKeyLink] = {}
        tables = self._query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
            "ORDER BY name"
        )

        for row in tables:
            child_table = row["name"]
            for fk in self._single_column_foreign_keys(child_table):
                if fk["table"].lower() != table_name.lower():
                    continue
                if child_table in children:
                    logger.debug(
                        "extra_child_link_ignored",
                        table=table_name,
                        child=child_table,
                        column=fk["from"],
                    )
                    continue
                children[child_table] = ForeignKeyLink(
                    referenced_database=self.database_name,
                    referenced_table=child_table,
                    referenced_column=fk["from"],
                )
        return children

    def _single_column_foreign_keys(self, table_name: str) -> list[sqlite3.Row]:
        groups: dict[int, list[sqlite3.Row]] = {}
        for fk in self._query("SELECT * FROM pragma_foreign_key_list(?)", table_name):
            groups.setdefault(fk["id"], []).append(fk)
        return [rows[0] for _, rows in sorted(groups.items()) if len(rows) == 1]

    def _primary_key_of(self, table_name: str) -> str:
        keyed = [
            (row["pk"], row["name"])
            for row in self._query("SELECT * FROM pragma_table_info(?)", table_name)
            if row["pk"]
        ]
        if len(keyed) != 1:
            raise OrmError(f"{self.database_name}.{table_name} has no single-column primary key")
        return keyed[0][1]

    def _query(self, sql: str, *params: Any) -> list[sqlite3.Row]:
        try:
            cursor = self._connection.cursor()
            cursor.row_factory = sqlite3.Row
            try:
                return cursor.execute(sql, params).fetchall()
            finally:
                cursor.close()
        except sqlite3.Error as e:
            raise OrmError(str(e)) from e
