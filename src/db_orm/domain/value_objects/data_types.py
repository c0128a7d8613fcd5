"""Logical column data types.

A column's logical kind decides how ColumnMeta coerces and serializes its
values. Metadata sources map whatever their catalog reports (MySQL's
DATA_TYPE, SQLite's declared type) onto these names.
"""

from __future__ import annotations

from enum import Enum


class DataType(str, Enum):
    """Logical kinds understood by the coercion engine."""

    # Integers
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    MEDIUMINT = "mediumint"
    INT = "int"
    BIGINT = "bigint"
    BIT = "bit"
    YEAR = "year"
    BOOLEAN = "boolean"

    # Strings
    CHAR = "char"
    VARCHAR = "varchar"
    TINYTEXT = "tinytext"
    TEXT = "text"
    MEDIUMTEXT = "mediumtext"
    LONGTEXT = "longtext"

    # Binary
    BINARY = "binary"
    VARBINARY = "varbinary"
    TINYBLOB = "tinyblob"
    BLOB = "blob"
    MEDIUMBLOB = "mediumblob"
    LONGBLOB = "longblob"

    # Temporal
    DATE = "date"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    TIME = "time"

    # Numeric
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"

    # Structured
    ENUM = "enum"
    SET = "set"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


INTEGER_TYPES = frozenset({
    DataType.TINYINT,
    DataType.SMALLINT,
    DataType.MEDIUMINT,
    DataType.INT,
    DataType.BIGINT,
    DataType.BIT,
    DataType.YEAR,
})

TEXT_TYPES = frozenset({
    DataType.CHAR,
    DataType.VARCHAR,
    DataType.TINYTEXT,
    DataType.TEXT,
    DataType.MEDIUMTEXT,
    DataType.LONGTEXT,
})

BINARY_TYPES = frozenset({
    DataType.BINARY,
    DataType.VARBINARY,
    DataType.TINYBLOB,
    DataType.BLOB,
    DataType.MEDIUMBLOB,
    DataType.LONGBLOB,
})

STRING_TYPES = TEXT_TYPES | BINARY_TYPES

DATETIME_TYPES = frozenset({DataType.DATETIME, DataType.TIMESTAMP})

# Default CHARACTER_MAXIMUM_LENGTH for kinds whose declaration carries no length
DEFAULT_MAX_LENGTHS: dict[DataType, int] = {
    DataType.CHAR: 1,
    DataType.BINARY: 1,
    DataType.TINYTEXT: 255,
    DataType.TINYBLOB: 255,
    DataType.TEXT: 65535,
    DataType.BLOB: 65535,
    DataType.MEDIUMTEXT: 16777215,
    DataType.MEDIUMBLOB: 16777215,
    DataType.LONGTEXT: 4294967295,
    DataType.LONGBLOB: 4294967295,
    DataType.VARCHAR: 65535,
    DataType.VARBINARY: 65535,
}
