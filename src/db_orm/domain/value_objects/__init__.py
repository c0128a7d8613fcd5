"""Value objects for the ORM domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Data Types:
        - DataType: Logical column kinds understood by the coercion engine
        - INTEGER_TYPES, STRING_TYPES, ...: Kind groups

    Bounds:
        - min_value, max_value: Storage range of a bounded kind

    Conditions:
        - Comparator: Comparators accepted in a condition key
        - Condition: One `column <comparator> value` predicate
        - parse_conditions: Parse a conditions mapping
        - Pagination: 1-based page window

    Transaction Types:
        - TransactionState: Statement executor transaction states
"""

from db_orm.domain.value_objects.bounds import max_value, min_value
from db_orm.domain.value_objects.conditions import (
    Comparator,
    Condition,
    Pagination,
    parse_conditions,
)
from db_orm.domain.value_objects.data_types import (
    BINARY_TYPES,
    DATETIME_TYPES,
    DEFAULT_MAX_LENGTHS,
    INTEGER_TYPES,
    STRING_TYPES,
    TEXT_TYPES,
    DataType,
)
from db_orm.domain.value_objects.transaction_types import TransactionState

__all__ = [
    # Data types
    "DataType",
    "INTEGER_TYPES",
    "TEXT_TYPES",
    "BINARY_TYPES",
    "STRING_TYPES",
    "DATETIME_TYPES",
    "DEFAULT_MAX_LENGTHS",
    # Bounds
    "min_value",
    "max_value",
    # Conditions
    "Comparator",
    "Condition",
    "Pagination",
    "parse_conditions",
    # Transaction types
    "TransactionState",
]
