"""Pytest configuration and fixtures for db_orm tests."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from db_orm.adapters.outbound.sqlite_executor import SqliteStatementExecutor
from db_orm.adapters.outbound.sqlite_metadata import SqliteMetadataSource
from db_orm.application import Driver, Orm
from db_orm.infrastructure.metrics import MetricsRegistry

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    name VARCHAR(45) NOT NULL,
    password VARCHAR(45) NOT NULL
);

CREATE TABLE posts (
    id INTEGER PRIMARY KEY,
    title VARCHAR(100),
    author_id INTEGER REFERENCES users(id)
);

CREATE TABLE comments (
    id INTEGER PRIMARY KEY,
    post_id INTEGER NOT NULL REFERENCES posts(id),
    body VARCHAR(255) NOT NULL
);

CREATE TABLE composite_pk (
    f1 INTEGER NOT NULL,
    f2 INTEGER NOT NULL,
    label VARCHAR(20),
    PRIMARY KEY (f1, f2)
);

CREATE TABLE no_pk (
    label VARCHAR(20)
);

CREATE TABLE datatypes (
    id INTEGER PRIMARY KEY,
    f_int INT,
    f_uint INT UNSIGNED,
    f_bool TINYINT(1),
    f_varchar VARCHAR(8),
    f_decimal DECIMAL(5,2),
    f_double DOUBLE,
    f_float FLOAT,
    f_date DATE,
    f_datetime DATETIME,
    f_time TIME,
    f_json JSON,
    f_blob BLOB
);
"""


@pytest.fixture
def collector_registry() -> CollectorRegistry:
    """Provide an isolated Prometheus registry."""
    # Use a separate registry to avoid conflicts between tests
    return CollectorRegistry(auto_describe=True)


@pytest.fixture
def metrics_registry(collector_registry: CollectorRegistry) -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    return MetricsRegistry(registry=collector_registry)


@pytest.fixture
def connection() -> Generator[sqlite3.Connection, None, None]:
    """Provide an in-memory database holding the test schema."""
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    """Provide a database file holding the test schema."""
    path = tmp_path / "orm.sqlite"
    conn = sqlite3.connect(path)
    conn.executescript(SCHEMA)
    conn.close()
    return path


@pytest.fixture
def executor(
    connection: sqlite3.Connection, metrics_registry: MetricsRegistry
) -> SqliteStatementExecutor:
    """Provide a statement executor on the test database."""
    return SqliteStatementExecutor(connection, metrics=metrics_registry)


@pytest.fixture
def driver(
    connection: sqlite3.Connection,
    executor: SqliteStatementExecutor,
    metrics_registry: MetricsRegistry,
) -> Driver:
    """Provide a driver on the test database."""
    return Driver(executor, SqliteMetadataSource(connection), metrics=metrics_registry)


@pytest.fixture
def orm(driver: Driver) -> Orm:
    """Provide an Orm on the test database."""
    return Orm(driver)


@pytest.fixture
def count_rows(connection: sqlite3.Connection) -> Callable[[str], int]:
    """Provide a row counter that bypasses the ORM."""

    def count(table: str) -> int:
        return connection.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]

    return count


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
