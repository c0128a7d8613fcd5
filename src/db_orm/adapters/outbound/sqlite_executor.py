"""SQLite statement executor.

This adapter implements the StatementExecutor protocol on the standard
library's sqlite3 module. The connection runs in autocommit mode
(isolation_level=None) and transactions are opened and closed explicitly with
BEGIN/COMMIT/ROLLBACK, so a transaction spans exactly what Model.save()
writes.

Every sqlite3.Error is re-raised as OrmError carrying the driver's message
unchanged, e.g. "FOREIGN KEY constraint failed".
"""

from __future__ import annotations

import sqlite3
import time
from collections import deque
from typing import Any, Mapping

from db_orm.adapters.outbound.query_builder import QueryBuilder, Statement
from db_orm.domain.exceptions import OrmError
from db_orm.domain.value_objects import Pagination, TransactionState
from db_orm.infrastructure.config import DatabaseConfig
from db_orm.infrastructure.logging import get_logger
from db_orm.infrastructure.metrics import MetricsRegistry, get_metrics

logger = get_logger(__name__)

DATABASE_NAME = "main"


class SqliteRowCursor:
    """RowCursor over a sqlite3 cursor.

    SQLite does not report the size of a result set up front, so row_count()
    buffers the rows not yet fetched and counts them.
    """

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor
        self._buffer: deque[sqlite3.Row] | None = None
        self._consumed = 0

    def fetch_row(self) -> dict[str, Any] | None:
        if self._buffer is not None:
            row = self._buffer.popleft() if self._buffer else None
        else:
            try:
                row = self._cursor.fetchone()
            except sqlite3.Error as e:
                raise OrmError(str(e)) from e

        if row is None:
            return None

        self._consumed += 1
        return dict(row)

    def row_count(self) -> int:
        if self._buffer is None:
            try:
                self._buffer = deque(self._cursor.fetchall())
            except sqlite3.Error as e:
                raise OrmError(str(e)) from e
        return self._consumed + len(self._buffer)

    def close(self) -> None:
        self._cursor.close()
        self._buffer = deque()


class SqliteStatementExecutor:
    """StatementExecutor for one sqlite3 connection.

    Thread Safety:
        Not thread-safe. One executor serves one thread.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Wrap an open connection.

        The connection's row_factory is set to sqlite3.Row and it must be in
        autocommit mode (isolation_level=None).
        """
        connection.row_factory = sqlite3.Row
        self.connection = connection
        self._builder = QueryBuilder("sqlite")
        self._metrics = metrics or get_metrics()
        self._state = TransactionState.IDLE

    @classmethod
    def connect(
        cls,
        config: DatabaseConfig | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> SqliteStatementExecutor:
        """Open the database file named by the configuration."""
        config = config or DatabaseConfig()
        try:
            connection = sqlite3.connect(
                config.path,
                timeout=config.timeout_seconds,
                isolation_level=None,
            )
            if config.foreign_keys:
                connection.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise OrmError(str(e)) from e

        return cls(connection, metrics=metrics)

    @property
    def state(self) -> TransactionState:
        return self._state

    def fetch_first(
        self, database: str, table: str, conditions: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        cursor = self._execute("select", self._builder.select_first(database, table, conditions))
        try:
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise OrmError(str(e)) from e
        finally:
            cursor.close()
        return dict(row) if row is not None else None

    def fetch_all(
        self,
        database: str,
        table: str,
        conditions: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> SqliteRowCursor:
        statement = self._builder.select(database, table, conditions, pagination)
        return SqliteRowCursor(self._execute("select", statement))

    def insert(self, database: str, table: str, values: Mapping[str, Any]) -> int | None:
        cursor = self._execute("insert", self._builder.insert(database, table, values))
        key = cursor.lastrowid
        cursor.close()
        return key

    def update(
        self,
        database: str,
        table: str,
        values: Mapping[str, Any],
        conditions: Mapping[str, Any],
    ) -> int:
        cursor = self._execute("update", self._builder.update(database, table, values, conditions))
        affected = cursor.rowcount
        cursor.close()
        return affected

    def delete(self, database: str, table: str, conditions: Mapping[str, Any]) -> None:
        cursor = self._execute("delete", self._builder.delete(database, table, conditions))
        cursor.close()

    def begin_transaction(self) -> None:
        if not self._state.can_begin():
            raise OrmError("transaction already active")
        self._execute_raw("BEGIN")
        self._state = TransactionState.ACTIVE

    def commit(self) -> None:
        if not self._state.can_commit():
            raise OrmError("no active transaction to commit")
        self._execute_raw("COMMIT")
        self._state = TransactionState.COMMITTED
        self._metrics.transactions_total.labels(status="commit").inc()

    def rollback(self) -> None:
        if not self._state.can_rollback():
            raise OrmError("no active transaction to roll back")
        # SQLite ends the transaction itself after some errors.
        if self.connection.in_transaction:
            self._execute_raw("ROLLBACK")
        self._state = TransactionState.ROLLED_BACK
        self._metrics.transactions_total.labels(status="rollback").inc()

    def close(self) -> None:
        if self._state.is_active():
            self.rollback()
        self.connection.close()

    def _execute(self, kind: str, statement: Statement) -> sqlite3.Cursor:
        start = time.perf_counter()
        try:
            cursor = self.connection.execute(statement.sql, statement.params)
        except (sqlite3.Error, OverflowError) as e:
            self._metrics.statements_total.labels(statement=kind, status="error").inc()
            logger.debug("statement_failed", sql=statement.sql, error=str(e))
            raise OrmError(str(e)) from e
        finally:
            self._metrics.statement_latency_seconds.labels(statement=kind).observe(
                time.perf_counter() - start
            )

        self._metrics.statements_total.labels(statement=kind, status="success").inc()
        logger.debug("statement_executed", sql=statement.sql)
        return cursor

    def _execute_raw(self, sql: str) -> None:
        try:
            self.connection.execute(sql)
        except sqlite3.Error as e:
            raise OrmError(str(e)) from e
