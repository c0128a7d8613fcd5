"""Outbound adapters - implementations of outbound ports.

These adapters implement the ORM's external dependencies on SQLite: running
statements, reading the schema, and rendering SQL.
"""

from db_orm.adapters.outbound.query_builder import QueryBuilder, Statement
from db_orm.adapters.outbound.sqlite_executor import SqliteRowCursor, SqliteStatementExecutor
from db_orm.adapters.outbound.sqlite_metadata import (
    DeclaredType,
    SqliteMetadataSource,
    parse_declared_type,
)

__all__ = [
    "QueryBuilder",
    "Statement",
    "SqliteRowCursor",
    "SqliteStatementExecutor",
    "SqliteMetadataSource",
    "DeclaredType",
    "parse_declared_type",
]
