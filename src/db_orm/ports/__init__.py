"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts. The ORM only
has outbound ports: the metadata source it reads schemas from and the
statement executor it runs reads and writes on.

Adapters implement these ports with concrete functionality.
"""

from db_orm.ports.outbound import MetadataSource, RowCursor, StatementExecutor

__all__ = [
    # Outbound ports
    "MetadataSource",
    "RowCursor",
    "StatementExecutor",
]
