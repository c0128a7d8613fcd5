"""Unit tests for column kind bounds."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from db_orm.domain.value_objects import DataType, max_value, min_value
from db_orm.domain.value_objects.bounds import DOUBLE_MAX, FLOAT_MAX


@pytest.mark.unit
class TestIntegerBounds:
    """Tests for integer storage ranges."""

    @pytest.mark.parametrize(
        "data_type,signed_min,signed_max,unsigned_max",
        [
            (DataType.TINYINT, -128, 127, 255),
            (DataType.SMALLINT, -32768, 32767, 65535),
            (DataType.MEDIUMINT, -8388608, 8388607, 16777215),
            (DataType.INT, -2147483648, 2147483647, 4294967295),
            (DataType.BIGINT, -(2**63), 2**63 - 1, 2**64 - 1),
        ],
    )
    def test_ranges(
        self, data_type: DataType, signed_min: int, signed_max: int, unsigned_max: int
    ) -> None:
        assert min_value(data_type, True) == signed_min
        assert max_value(data_type, True) == signed_max
        assert min_value(data_type, False) == 0
        assert max_value(data_type, False) == unsigned_max

    def test_plain_strings_are_accepted(self) -> None:
        """Kinds read from metadata arrive as plain strings."""
        assert max_value("int", True) == 2147483647

    def test_boolean(self) -> None:
        assert min_value(DataType.BOOLEAN, True) == 0
        assert max_value(DataType.BOOLEAN, True) == 1

    @pytest.mark.parametrize("precision,expected", [(0, 1), (1, 1), (8, 255), (64, 2**64 - 1)])
    def test_bit_width(self, precision: int, expected: int) -> None:
        assert min_value(DataType.BIT, True) == 0
        assert max_value(DataType.BIT, True, precision) == expected

    def test_year(self) -> None:
        assert min_value(DataType.YEAR, True) == 0
        assert max_value(DataType.YEAR, True) == 9999


@pytest.mark.unit
class TestOtherBounds:
    """Tests for real and temporal ranges."""

    def test_real_ranges(self) -> None:
        assert max_value(DataType.FLOAT, True) == FLOAT_MAX
        assert min_value(DataType.FLOAT, True) == -FLOAT_MAX
        assert max_value(DataType.DOUBLE, True) == DOUBLE_MAX
        assert min_value(DataType.DOUBLE, False) == 0

    def test_temporal_ranges(self) -> None:
        assert min_value(DataType.DATE, True) == date(1000, 1, 1)
        assert max_value(DataType.DATE, True) == date(9999, 12, 31)
        assert max_value(DataType.DATETIME, True) == datetime(9999, 12, 31, 23, 59, 59)
        assert min_value(DataType.TIMESTAMP, True) == datetime(1000, 1, 1)

    @pytest.mark.parametrize(
        "data_type",
        [DataType.VARCHAR, DataType.BLOB, DataType.DECIMAL, DataType.ENUM, DataType.JSON],
    )
    def test_unbounded_kinds(self, data_type: DataType) -> None:
        assert min_value(data_type, True) is None
        assert max_value(data_type, True) is None
