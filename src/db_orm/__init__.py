"""
db_orm - Object-relational mapping over a generic statement interface

Schema introspection, typed value coercion with range validation, and
graph-aware persistence: nested parents are saved before the rows that
reference them, children after, all in one transaction.
"""

__version__ = "0.1.0"

from db_orm.application import Driver, Model, Orm, Query
from db_orm.domain.exceptions import InvariantViolation, OrmError, UnhandledTypeError

__all__ = [
    "__version__",
    "Driver",
    "Model",
    "Orm",
    "Query",
    "OrmError",
    "InvariantViolation",
    "UnhandledTypeError",
]
