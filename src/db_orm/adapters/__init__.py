"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: SQLite statement execution, SQLite schema introspection,
  and SQL rendering with sqlglot
"""

from db_orm.adapters.outbound import (
    QueryBuilder,
    SqliteMetadataSource,
    SqliteStatementExecutor,
)

__all__ = [
    # Outbound adapters
    "QueryBuilder",
    "SqliteMetadataSource",
    "SqliteStatementExecutor",
]
