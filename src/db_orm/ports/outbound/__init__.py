"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the systems the ORM depends on: a
catalog to read table descriptors from and a connection to run statements on.
"""

from db_orm.ports.outbound.metadata_source import MetadataSource
from db_orm.ports.outbound.statement_executor import RowCursor, StatementExecutor

__all__ = [
    "MetadataSource",
    "RowCursor",
    "StatementExecutor",
]
