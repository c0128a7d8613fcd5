"""Statement executor port for reads, writes and transactions.

The executor owns the connection. It turns condition mappings into SQL,
binds values, and reports results as plain dicts keyed by column name.

Conditions map a column name, optionally followed by a comparator, to a value:

    {"id": 1, "created <=": "2024-01-01", "status IN": ["a", "b"]}

Values handed to insert() and update() are already serialized with
ColumnMeta.to_storage().
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Mapping, Protocol

from db_orm.domain.value_objects import Pagination


class RowCursor(Protocol):
    """Forward-only cursor over the rows of one read."""

    @abstractmethod
    def fetch_row(self) -> dict[str, Any] | None:
        """Return the next row, or None when the result set is exhausted."""
        ...

    @abstractmethod
    def row_count(self) -> int:
        """Return the total number of rows in the result set.

        Counting must not disturb fetch_row(): rows not yet fetched are still
        returned afterwards.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the cursor. Safe to call more than once."""
        ...


class StatementExecutor(Protocol):
    """Protocol for executing statements against one connection.

    Thread Safety:
        Not thread-safe. One executor serves one thread.
    """

    @abstractmethod
    def fetch_first(
        self, database: str, table: str, conditions: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        """Fetch the first row matching the conditions.

        Args:
            database: Database name.
            table: Table name.
            conditions: Condition mapping (see module docstring).

        Returns:
            The row, or None if nothing matches.

        Raises:
            OrmError: If the statement fails.
        """
        ...

    @abstractmethod
    def fetch_all(
        self,
        database: str,
        table: str,
        conditions: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> RowCursor:
        """Open a cursor over every row matching the conditions.

        Args:
            database: Database name.
            table: Table name.
            conditions: Condition mapping, None or empty for all rows.
            pagination: Page window, None for unlimited.

        Returns:
            A cursor positioned before the first row.

        Raises:
            OrmError: If the statement fails.
        """
        ...

    @abstractmethod
    def insert(self, database: str, table: str, values: Mapping[str, Any]) -> Any:
        """Insert one row.

        Returns:
            The generated key, or the database's last insert id when the key
            was supplied explicitly.

        Raises:
            OrmError: If the statement fails (constraint violation, etc.).
        """
        ...

    @abstractmethod
    def update(
        self,
        database: str,
        table: str,
        values: Mapping[str, Any],
        conditions: Mapping[str, Any],
    ) -> int:
        """Update matching rows.

        Returns:
            Number of rows matched, not rows changed. A row whose values
            already equal the new ones still counts; save() inserts when
            this is 0.

        Raises:
            OrmError: If the statement fails.
        """
        ...

    @abstractmethod
    def delete(self, database: str, table: str, conditions: Mapping[str, Any]) -> None:
        """Delete matching rows.

        Raises:
            OrmError: If the statement fails.
        """
        ...

    @abstractmethod
    def begin_transaction(self) -> None:
        """Open a transaction.

        Raises:
            OrmError: If a transaction is already open.
        """
        ...

    @abstractmethod
    def commit(self) -> None:
        """Commit the open transaction.

        Raises:
            OrmError: If no transaction is open or the commit fails.
        """
        ...

    @abstractmethod
    def rollback(self) -> None:
        """Roll back the open transaction.

        Raises:
            OrmError: If no transaction is open.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the connection."""
        ...
