"""Unit tests for Model against in-memory port implementations."""

from __future__ import annotations

from typing import Any, Mapping

import pytest
from prometheus_client import CollectorRegistry

from db_orm.application import Driver, Model
from db_orm.domain.entities import ColumnMeta, ForeignKeyLink, TableMeta
from db_orm.domain.exceptions import InvariantViolation, OrmError, UnhandledTypeError
from db_orm.infrastructure.metrics import MetricsRegistry


def int_column(table: str, name: str) -> ColumnMeta:
    return ColumnMeta(
        database_name="db",
        table_name=table,
        column_name=name,
        data_type="int",
        column_type="int",
        min_value=-2147483648,
        max_value=2147483647,
    )


TABLES = {
    "pair": TableMeta(
        "db",
        "pair",
        columns={"a": int_column("pair", "a"), "b": int_column("pair", "b")},
        pk_columns=("a", "b"),
        children={"item": ForeignKeyLink("db", "item", "pair_a")},
    ),
    "item": TableMeta(
        "db",
        "item",
        columns={"id": int_column("item", "id"), "pair_a": int_column("item", "pair_a")},
        pk_columns=("id",),
    ),
    "shape": TableMeta(
        "db",
        "shape",
        columns={
            "id": int_column("shape", "id"),
            "area": ColumnMeta("db", "shape", "area", "geometry", "geometry"),
        },
        pk_columns=("id",),
    ),
}


class FakeMetadata:
    """MetadataSource over a fixed set of descriptors."""

    database_name = "db"

    def __init__(self) -> None:
        self.fetched: list[str] = []

    def fetch_table_meta(self, table_name: str) -> TableMeta:
        self.fetched.append(table_name)
        if table_name not in TABLES:
            raise OrmError(f"table {table_name} not found in db")
        return TABLES[table_name]


class FakeExecutor:
    """StatementExecutor that records calls and returns canned results."""

    def __init__(self, affected: int = 1) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.affected = affected

    def fetch_first(self, database: str, table: str, conditions: Mapping[str, Any]) -> None:
        self.calls.append(("fetch_first", dict(conditions)))
        return None

    def fetch_all(self, database, table, conditions=None, pagination=None):
        self.calls.append(("fetch_all", dict(conditions or {})))
        raise AssertionError("unexpected read")

    def insert(self, database: str, table: str, values: Mapping[str, Any]) -> int:
        self.calls.append(("insert", dict(values)))
        return 10

    def update(self, database, table, values, conditions) -> int:
        self.calls.append(("update", dict(conditions)))
        return self.affected

    def delete(self, database, table, conditions) -> None:
        self.calls.append(("delete", dict(conditions)))

    def begin_transaction(self) -> None:
        self.calls.append(("begin", None))

    def commit(self) -> None:
        self.calls.append(("commit", None))

    def rollback(self) -> None:
        self.calls.append(("rollback", None))

    def close(self) -> None:
        self.calls.append(("close", None))


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def driver(executor: FakeExecutor) -> Driver:
    metrics = MetricsRegistry(registry=CollectorRegistry(auto_describe=True))
    return Driver(executor, FakeMetadata(), metrics=metrics)


@pytest.mark.unit
class TestCompositeKeyChildren:
    """A composite-key row cannot own children."""

    def test_fetch_children_rejected_before_any_read(
        self, driver: Driver, executor: FakeExecutor
    ) -> None:
        pair = Model(driver, "pair").set({"a": 1, "b": 2})

        with pytest.raises(OrmError, match="db.pair: multi-column foreign keys are not supported"):
            pair.fetch_children("item")

        assert executor.calls == []

    def test_save_with_children_rolls_back(
        self, driver: Driver, executor: FakeExecutor
    ) -> None:
        pair = Model(driver, "pair").set({"a": 1, "b": 2, "item": [{"id": 5}]})

        with pytest.raises(OrmError, match="multi-column foreign keys are not supported"):
            pair.save()

        assert [name for name, _ in executor.calls] == ["begin", "update", "rollback"]
        assert len(pair.get("item")) == 1


@pytest.mark.unit
class TestSaveContract:
    """Tests for the update-then-insert contract of save()."""

    def test_update_of_existing_row(self, driver: Driver, executor: FakeExecutor) -> None:
        Model(driver, "item").set("id", 3).save()

        assert [name for name, _ in executor.calls] == ["begin", "update", "commit"]

    def test_missing_row_is_inserted(self, driver: Driver, executor: FakeExecutor) -> None:
        executor.affected = 0

        Model(driver, "item").set("id", 3).save()

        assert [name for name, _ in executor.calls] == ["begin", "update", "insert", "commit"]
        assert executor.calls[2][1] == {"id": 3}

    def test_several_rows_updated_is_an_invariant_violation(
        self, driver: Driver, executor: FakeExecutor
    ) -> None:
        executor.affected = 2
        item = Model(driver, "item").set("id", 3)

        with pytest.raises(InvariantViolation, match="matched 2 rows"):
            item.save()

        assert executor.calls[-1] == ("rollback", None)

    def test_generated_key_is_stored(self, driver: Driver, executor: FakeExecutor) -> None:
        item = Model(driver, "item").set("pair_a", 1).save()

        assert item.get("id") == 10
        assert executor.calls[1] == ("insert", {"pair_a": 1})


@pytest.mark.unit
class TestDriverCache:
    """Descriptors are read once per table."""

    def test_metadata_is_memoized(self, driver: Driver) -> None:
        Model(driver, "item")
        Model(driver, "item")

        assert driver.table_meta("item") is TABLES["item"]
        assert driver._metadata.fetched == ["item"]

    def test_other_database(self, driver: Driver) -> None:
        with pytest.raises(OrmError, match="table item not found in other"):
            driver.table_meta("item", "other")


@pytest.mark.unit
class TestSetMany:
    """A batch set() keeps nothing from the call when any value fails."""

    def test_unhandled_type_restores_earlier_values(self, driver: Driver) -> None:
        shape = Model(driver, "shape").set("id", 1)

        with pytest.raises(UnhandledTypeError, match="geometry"):
            shape.set({"id": 2, "area": "POINT(0 0)"})

        assert shape.get("id") == 1
        assert shape.get("area") is None
