"""Application layer for the ORM.

The application layer orchestrates the domain entities against the outbound
ports to fulfill the ORM's use cases: reading, validating and persisting rows.

Exports:
    Driver:
        - Driver: Statement executor plus memoized table metadata
    Entities:
        - Model: One row with its parents and children
        - Values: Validated values of one Model
    Queries:
        - Query: Lazy cursor over a filtered, paginated read
    Entry point:
        - Orm: Builds a Driver from configuration
"""

from db_orm.application.driver import Driver
from db_orm.application.values import Values
from db_orm.application.model import Model
from db_orm.application.query import Query
from db_orm.application.orm import Orm

__all__ = [
    "Driver",
    "Values",
    "Model",
    "Query",
    "Orm",
]
