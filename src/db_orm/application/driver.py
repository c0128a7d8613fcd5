"""Driver - a statement executor paired with memoized table metadata.

Every Model and Query created from the same Driver shares its connection and
its metadata cache. Table descriptors are read once per (database, table) for
the driver's lifetime; a schema change needs a new driver.
"""

from __future__ import annotations

from db_orm.domain.entities import TableMeta
from db_orm.domain.exceptions import OrmError
from db_orm.infrastructure.logging import get_logger
from db_orm.infrastructure.metrics import MetricsRegistry, get_metrics
from db_orm.infrastructure.tracing import trace_span
from db_orm.ports.outbound import MetadataSource, StatementExecutor

logger = get_logger(__name__)


class Driver:
    """Binds a statement executor to the metadata source of its database."""

    def __init__(
        self,
        executor: StatementExecutor,
        metadata: MetadataSource,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self.executor = executor
        self.metrics = metrics or get_metrics()
        self._metadata = metadata
        self._cache: dict[tuple[str, str], TableMeta] = {}

    @property
    def database_name(self) -> str:
        return self._metadata.database_name

    def table_meta(self, table_name: str, database_name: str | None = None) -> TableMeta:
        """Return the descriptor of a table, reading the catalog on first use.

        Raises:
            OrmError: If the table does not exist or lives in another database.
        """
        database_name = database_name or self.database_name
        key = (database_name, table_name)

        cached = self._cache.get(key)
        if cached is not None:
            self.metrics.metadata_cache_hits_total.inc()
            return cached

        if database_name != self.database_name:
            raise OrmError(f"table {table_name} not found in {database_name}")

        self.metrics.metadata_cache_misses_total.inc()
        with trace_span(
            "orm.fetch_table_meta",
            {"db.name": database_name, "db.sql.table": table_name},
        ):
            table = self._metadata.fetch_table_meta(table_name)

        logger.debug(
            "table_meta_loaded",
            table=table.qualified_name,
            columns=len(table.columns),
            parents=len(table.parents),
            children=len(table.children),
        )
        self._cache[key] = table
        return table

    def close(self) -> None:
        self.executor.close()
