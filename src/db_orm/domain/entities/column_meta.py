"""Column type descriptor and value coercion.

ColumnMeta describes one column as reported by a metadata source and converts
arbitrary caller input into the native value for that column. Every failure is
an OrmError whose message is prefixed with the column's qualified name:

    db.users.name: too long for varchar(45)

Native values per kind:
    integer kinds, boolean  -> int
    text kinds, time        -> str
    binary kinds            -> bytes (str input is kept as str)
    date                    -> datetime.date
    datetime, timestamp     -> datetime.datetime
    decimal, double         -> str
    float                   -> float
    enum                    -> str
    set                     -> list[str]
    json                    -> dict | list | JsonString | int | float | bool

to_storage() turns a native value back into what the statement executor
binds. Coercing a stored value yields the same native value again.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, ClassVar

from db_orm.domain.exceptions import OrmError, UnhandledTypeError
from db_orm.domain.value_objects.data_types import (
    BINARY_TYPES,
    DATETIME_TYPES,
    INTEGER_TYPES,
    TEXT_TYPES,
    DataType,
)

_SCALAR_TYPES = (str, int, float, bool, Decimal, bytes)

_INTEGER_PATTERN = re.compile(r"-?\d+", re.ASCII)
_SIGNED_NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?", re.ASCII)
_UNSIGNED_NUMBER_PATTERN = re.compile(r"\d+(\.\d+)?", re.ASCII)
_TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):[0-5]\d:[0-5]\d", re.ASCII)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonString(str):
    """A string decoded from JSON text. Coercing it again keeps it as is."""


def is_scalar(value: Any) -> bool:
    """Check if a value is a single primitive (not None, not a container)."""
    return isinstance(value, _SCALAR_TYPES)


def type_name(value: Any) -> str:
    return type(value).__name__


def scalar_to_str(value: Any) -> str:
    """String form of a scalar, matching how the database would render it."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


@dataclass(frozen=True)
class ColumnMeta:
    """Meta information about one database column.

    Attributes:
        database_name: Schema the table lives in
        table_name: Owning table
        column_name: Column name
        data_type: Logical kind (see DataType)
        column_type: Declared type as written in the schema, e.g. "int unsigned"
        is_signed: False when declared UNSIGNED
        allow_null: Whether NULL is accepted
        max_length: Maximum length for text and binary kinds
        precision: Total digits for numeric kinds, bit width for bit
        scale: Fraction digits for numeric kinds
        min_value: Smallest accepted value, None when unbounded
        max_value: Largest accepted value, None when unbounded
        options: Allowed members for enum and set
    """

    database_name: str
    table_name: str
    column_name: str
    data_type: str
    column_type: str
    is_signed: bool = True
    allow_null: bool = True
    max_length: int = 0
    precision: int = 0
    scale: int = 0
    min_value: Any = None
    max_value: Any = None
    options: tuple[str, ...] = ()

    _COERCERS: ClassVar[dict[str, str]] = {
        **{kind: "_to_int" for kind in INTEGER_TYPES},
        **{kind: "_to_string" for kind in TEXT_TYPES | BINARY_TYPES},
        **{kind: "_to_datetime" for kind in DATETIME_TYPES},
        DataType.BOOLEAN: "_to_boolean",
        DataType.DATE: "_to_date",
        DataType.DECIMAL: "_to_decimal",
        DataType.DOUBLE: "_to_double",
        DataType.FLOAT: "_to_float",
        DataType.ENUM: "_to_enum",
        DataType.SET: "_to_set",
        DataType.TIME: "_to_time",
        DataType.JSON: "_to_json",
    }

    @property
    def qualified_name(self) -> str:
        return f"{self.database_name}.{self.table_name}.{self.column_name}"

    @property
    def signedness(self) -> str:
        return "signed" if self.is_signed else "unsigned"

    def to_python(self, value: Any) -> Any:
        """Coerce and validate a value for this column.

        Args:
            value: Caller input or a value read back from the database.

        Returns:
            The native value for this column's kind, or None.

        Raises:
            OrmError: If the value cannot be represented in this column.
            UnhandledTypeError: If the column's kind is not recognised.
        """
        try:
            if value is None:
                if not self.allow_null:
                    raise OrmError("cannot be null")
                return None

            coercer = self._COERCERS.get(self.data_type)
            if coercer is None:
                raise UnhandledTypeError(self.data_type)

            return getattr(self, coercer)(value)
        except OrmError as e:
            raise OrmError(f"{self.qualified_name}: {e}") from e

    def to_storage(self, value: Any) -> Any:
        """Coerce a value and serialize it for binding in a statement."""
        value = self.to_python(value)
        if value is None:
            return None

        kind = self.data_type
        if kind == DataType.DATE:
            return value.isoformat()
        if kind in DATETIME_TYPES:
            return value.strftime(DATETIME_FORMAT)
        if kind == DataType.JSON:
            return json.dumps(value)
        if kind == DataType.SET:
            return ",".join(value)
        if kind == DataType.FLOAT:
            return float(value)
        if kind in INTEGER_TYPES or kind == DataType.BOOLEAN:
            return int(value)
        if isinstance(value, bytes):
            return value
        return str(value)

    def humanize(self) -> str:
        """Display label for this column: author_id -> "Author ID"."""
        words = [word for word in self.column_name.split("_") if word]
        return " ".join(
            "ID" if word.lower() == "id" else word[:1].upper() + word[1:]
            for word in words
        )

    def _in_range(self, value: Any) -> bool:
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True

    def _to_int(self, value: Any) -> int:
        kind = f"{self.signedness} {self.data_type}"

        if not is_scalar(value) or not _INTEGER_PATTERN.fullmatch(scalar_to_str(value)):
            raise OrmError(f"expected {kind}, got {type_name(value)}")

        number = int(scalar_to_str(value))
        if not self._in_range(number):
            raise OrmError(f"out of range for {kind}")

        return number

    def _to_boolean(self, value: Any) -> int:
        if not is_scalar(value):
            raise OrmError(f"expected {self.data_type}, got {type_name(value)}")

        if isinstance(value, (str, bytes)):
            return 0 if value in ("", "0", b"", b"0") else 1
        return 1 if value else 0

    def _to_string(self, value: Any) -> str | bytes:
        kind = f"{self.data_type}({self.max_length})"

        if not is_scalar(value):
            raise OrmError(f"expected {kind}, got {type_name(value)}")

        if not (isinstance(value, bytes) and self.data_type in BINARY_TYPES):
            value = scalar_to_str(value)

        if self.max_length and len(value) > self.max_length:
            raise OrmError(f"too long for {kind}")

        return value

    def _to_date(self, value: Any) -> date:
        if isinstance(value, datetime):
            value = value.date()
        elif isinstance(value, date):
            pass
        elif is_scalar(value) and not isinstance(value, bool):
            try:
                value = datetime.fromisoformat(scalar_to_str(value).strip()).date()
            except ValueError:
                raise OrmError("could not convert to date") from None
        else:
            raise OrmError(f"expected {self.data_type}, got {type_name(value)}")

        if not self._in_range(value):
            raise OrmError(f"out of range for {self.data_type}")

        return value

    def _to_datetime(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            # Storage has no zone; compare and keep wall-clock time.
            value = value.replace(tzinfo=None)
        elif isinstance(value, date):
            value = datetime.combine(value, time())
        elif is_scalar(value) and not isinstance(value, bool):
            try:
                value = datetime.fromisoformat(scalar_to_str(value).strip())
            except ValueError:
                raise OrmError(f"could not convert to {self.data_type}") from None
            value = value.replace(tzinfo=None)
        else:
            raise OrmError(f"expected {self.data_type}, got {type_name(value)}")

        if not self._in_range(value):
            raise OrmError(f"out of range for {self.data_type}")

        return value

    def _to_decimal(self, value: Any) -> str:
        kind = f"{self.signedness} {self.data_type}({self.precision},{self.scale})"

        if not is_scalar(value):
            raise OrmError(f"expected {kind}, got {type_name(value)}")

        text = scalar_to_str(value).strip()
        sign = "-?" if self.is_signed else ""
        # decimal(p,p) has no integer digits besides a leading zero
        digits = self.precision - self.scale
        whole = rf"\d{{1,{digits}}}" if digits > 0 else "0"
        fraction = rf"(\.\d{{1,{self.scale}}})?" if self.scale > 0 else ""

        if not re.fullmatch(rf"{sign}{whole}{fraction}", text, re.ASCII):
            raise OrmError(f"out of range for {kind}")

        return text

    def _check_real(self, value: Any) -> tuple[str, float]:
        """Validate a double/float input, returning its text and numeric forms."""
        kind = f"{self.signedness} {self.data_type}({self.precision},{self.scale})"

        if isinstance(value, bool) or not is_scalar(value):
            raise OrmError(f"expected {kind}, got {type_name(value)}")

        text = scalar_to_str(value).strip()
        try:
            number = float(text)
        except ValueError:
            raise OrmError(f"expected {kind}, got {type_name(value)}") from None

        if isinstance(value, (str, bytes)):
            pattern = _SIGNED_NUMBER_PATTERN if self.is_signed else _UNSIGNED_NUMBER_PATTERN
            if not pattern.fullmatch(text):
                raise OrmError(f"out of range for {kind}")
        elif not math.isfinite(number) or (not self.is_signed and number < 0):
            raise OrmError(f"out of range for {kind}")

        if not self._in_range(number):
            raise OrmError(f"out of range for {kind}")

        return text, number

    def _to_double(self, value: Any) -> str:
        text, _ = self._check_real(value)
        return text

    def _to_float(self, value: Any) -> float:
        _, number = self._check_real(value)
        return number

    def _to_enum(self, value: Any) -> str:
        if not is_scalar(value):
            raise OrmError(f"expected {self.column_type}, got {type_name(value)}")

        text = scalar_to_str(value)
        if text not in self.options:
            raise OrmError(f"invalid {self.column_type} value")

        return text

    def _to_set(self, value: Any) -> list[str]:
        if is_scalar(value):
            text = scalar_to_str(value)
            members = text.split(",") if text else []
        elif isinstance(value, (list, tuple, set, frozenset)):
            members = list(value)
        else:
            raise OrmError(f"expected {self.column_type}, got {type_name(value)}")

        for member in members:
            if member not in self.options:
                raise OrmError(f"invalid value for {self.column_type}")

        return members

    def _to_time(self, value: Any) -> str:
        if isinstance(value, time):
            return value.strftime("%H:%M:%S")

        if not is_scalar(value):
            raise OrmError(f"expected {self.data_type}, got {type_name(value)}")

        text = scalar_to_str(value).strip()
        if not _TIME_PATTERN.fullmatch(text):
            raise OrmError("invalid time format")

        return text

    def _to_json(self, value: Any) -> Any:
        if isinstance(value, (dict, list, bool, JsonString)):
            return value
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                raise OrmError("invalid json")
            return value

        if not is_scalar(value):
            raise OrmError(f"expected {self.data_type}, got {type_name(value)}")

        try:
            decoded = json.loads(scalar_to_str(value))
        except json.JSONDecodeError:
            raise OrmError("invalid json") from None

        if decoded is None or (isinstance(decoded, float) and not math.isfinite(decoded)):
            raise OrmError("invalid json")
        if isinstance(decoded, str):
            return JsonString(decoded)

        return decoded
