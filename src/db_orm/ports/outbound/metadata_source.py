"""Metadata source port for schema introspection.

A metadata source reads a database catalog and describes one table at a time.
The driver memoizes what it returns, so implementations do not cache.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from db_orm.domain.entities import TableMeta


class MetadataSource(Protocol):
    """Protocol for reading table descriptors from a catalog."""

    @property
    @abstractmethod
    def database_name(self) -> str:
        """Return the name of the database this source reads."""
        ...

    @abstractmethod
    def fetch_table_meta(self, table_name: str) -> TableMeta:
        """Describe a table.

        The descriptor includes the table's columns with their bounds, its
        primary key in key order, the foreign keys it declares (parents) and
        the single-column foreign keys other tables declare against it
        (children).

        Args:
            table_name: Table to describe.

        Returns:
            The table's descriptor.

        Raises:
            OrmError: If the table does not exist
                ("table <t> not found in <db>") or the catalog read fails.
        """
        ...
