"""Orm - entry point that wires adapters into a Driver.

Usage:
    from db_orm import Orm

    with Orm.sqlite("app.db") as orm:
        user = orm.model("users").set({"name": "ann", "password": "secret"}).save()
        for post in orm.query("posts", {"author_id": user.get("id")}):
            ...
"""

from __future__ import annotations

from typing import Any, Mapping

from db_orm.adapters.outbound.sqlite_executor import SqliteStatementExecutor
from db_orm.adapters.outbound.sqlite_metadata import SqliteMetadataSource
from db_orm.application.driver import Driver
from db_orm.application.model import Model
from db_orm.application.query import Query
from db_orm.domain.exceptions import OrmError
from db_orm.domain.value_objects import Pagination
from db_orm.infrastructure.config import Config, DatabaseConfig, get_config
from db_orm.infrastructure.logging import get_logger
from db_orm.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)


class Orm:
    """Creates Models and Queries bound to one Driver."""

    def __init__(self, driver: Driver) -> None:
        self.driver = driver

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> Orm:
        """Open the database described by the configuration.

        Raises:
            OrmError: If the configured dialect has no adapter.
        """
        database = (config or get_config()).database

        if database.dialect != "sqlite":
            raise OrmError(f"unhandled driver {database.dialect}")

        executor = SqliteStatementExecutor.connect(database, metrics=metrics)
        driver = Driver(executor, SqliteMetadataSource(executor.connection), metrics=metrics)

        logger.info("orm_opened", dialect=database.dialect, path=database.path)
        return cls(driver)

    @classmethod
    def sqlite(cls, path: str = ":memory:", metrics: MetricsRegistry | None = None) -> Orm:
        return cls.from_config(Config(database=DatabaseConfig(path=path)), metrics=metrics)

    def model(self, table_name: str) -> Model:
        return Model(self.driver, table_name)

    def query(
        self,
        table_name: str,
        conditions: Mapping[str, Any] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> Query:
        return Query(self.driver, table_name, conditions, pagination)

    def close(self) -> None:
        self.driver.close()

    def __enter__(self) -> Orm:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
