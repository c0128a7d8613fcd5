"""Value ranges for bounded column kinds.

Bounds follow MySQL's documented storage ranges. Text, binary, decimal,
enum, set and JSON columns are unbounded here (their limits are a length or
a pattern, not a range) and get None.

Lookups are always two-branch: a signed table and an unsigned table. Kinds
that have no unsigned variant (bit, year, temporal kinds) fall back to the
signed table.
"""

from __future__ import annotations

import sys
from datetime import date, datetime
from typing import Any

from db_orm.domain.value_objects.data_types import DataType

FLOAT_MAX = 3.402823466e38
DOUBLE_MAX = sys.float_info.max

_SIGNED_MIN: dict[str, Any] = {
    DataType.BOOLEAN: 0,
    DataType.BIT: 0,
    DataType.TINYINT: -128,
    DataType.SMALLINT: -32768,
    DataType.MEDIUMINT: -8388608,
    DataType.INT: -2147483648,
    DataType.BIGINT: -9223372036854775808,
    DataType.YEAR: 0,
    DataType.DATE: date(1000, 1, 1),
    DataType.DATETIME: datetime(1000, 1, 1, 0, 0, 0),
    DataType.TIMESTAMP: datetime(1000, 1, 1, 0, 0, 0),
    DataType.TIME: "00:00:00",
    DataType.FLOAT: -FLOAT_MAX,
    DataType.DOUBLE: -DOUBLE_MAX,
}

_SIGNED_MAX: dict[str, Any] = {
    DataType.BOOLEAN: 1,
    DataType.TINYINT: 127,
    DataType.SMALLINT: 32767,
    DataType.MEDIUMINT: 8388607,
    DataType.INT: 2147483647,
    DataType.BIGINT: 9223372036854775807,
    DataType.YEAR: 9999,
    DataType.DATE: date(9999, 12, 31),
    DataType.DATETIME: datetime(9999, 12, 31, 23, 59, 59),
    DataType.TIMESTAMP: datetime(9999, 12, 31, 23, 59, 59),
    DataType.TIME: "23:59:59",
    DataType.FLOAT: FLOAT_MAX,
    DataType.DOUBLE: DOUBLE_MAX,
}

_UNSIGNED_MAX: dict[str, Any] = {
    DataType.TINYINT: 255,
    DataType.SMALLINT: 65535,
    DataType.MEDIUMINT: 16777215,
    DataType.INT: 4294967295,
    DataType.BIGINT: 18446744073709551615,
    DataType.FLOAT: FLOAT_MAX,
    DataType.DOUBLE: DOUBLE_MAX,
}


def min_value(data_type: str, is_signed: bool) -> Any:
    """Return the smallest value a column of this kind can hold, or None."""
    if not is_signed and data_type in _UNSIGNED_MAX:
        return 0
    return _SIGNED_MIN.get(data_type)


def max_value(data_type: str, is_signed: bool, precision: int = 0) -> Any:
    """Return the largest value a column of this kind can hold, or None.

    Args:
        data_type: Logical kind (see DataType).
        is_signed: Whether the column was declared without UNSIGNED.
        precision: Bit width, only used for BIT columns.
    """
    if data_type == DataType.BIT:
        return 2 ** max(precision, 1) - 1
    if not is_signed and data_type in _UNSIGNED_MAX:
        return _UNSIGNED_MAX[data_type]
    return _SIGNED_MAX.get(data_type)
