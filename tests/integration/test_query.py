"""Integration tests for the lazy Query cursor."""

from __future__ import annotations

import sqlite3

import pytest

from db_orm.application import Orm, Query
from db_orm.domain.exceptions import OrmError


@pytest.fixture
def users(connection: sqlite3.Connection) -> sqlite3.Connection:
    connection.executemany(
        "INSERT INTO users (id, name, password) VALUES (?, ?, 'pw')",
        [(i, f"user{i}") for i in range(1, 6)],
    )
    return connection


@pytest.mark.integration
class TestQueryIteration:
    """Tests for iterating query results."""

    def test_iterates_models(self, orm: Orm, users: sqlite3.Connection) -> None:
        names = [user.get("name") for user in orm.query("users")]

        assert names == ["user1", "user2", "user3", "user4", "user5"]

    def test_conditions(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users", {"id >=": 2, "id <": 4})

        assert [u.get("id") for u in query] == [2, 3]

    def test_in_condition(self, orm: Orm, users: sqlite3.Connection) -> None:
        assert [u.get("id") for u in orm.query("users", {"id IN": [1, 5]})] == [1, 5]

    def test_pagination(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users", None, {"page": 2, "per_page": 2})

        assert [u.get("id") for u in query] == [3, 4]

    def test_last_partial_page(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users", None, {"page": 3, "per_page": 2})

        assert [u.get("id") for u in query] == [5]

    def test_iteration_is_restartable(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users", {"id <=": 2})

        assert [u.get("id") for u in query] == [1, 2]
        assert [u.get("id") for u in query] == [1, 2]

    def test_items_yield_positions(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users", {"id >": 3})

        assert [(k, m.get("id")) for k, m in query.items()] == [(0, 4), (1, 5)]

    def test_unknown_column(self, orm: Orm) -> None:
        with pytest.raises(OrmError, match="unknown column nope in main.users"):
            orm.query("users", {"nope": 1})

    def test_invalid_pagination(self, orm: Orm) -> None:
        with pytest.raises(OrmError, match="page must be >= 1"):
            orm.query("users", None, {"page": 0, "per_page": 2})


@pytest.mark.integration
class TestQueryCursor:
    """Tests for the explicit cursor protocol."""

    def test_manual_cursor(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = Query(orm.driver, "users", {"id <=": 2})

        query.rewind()
        assert query.valid()
        assert query.key() == 0
        assert query.current().get("id") == 1

        query.next()
        assert query.key() == 1
        assert query.current().get("id") == 2

        query.next()
        assert not query.valid()
        assert query.current() is None

    def test_empty_result(self, orm: Orm) -> None:
        query = orm.query("users")

        query.rewind()

        assert not query.valid()
        assert query.count() == 0
        assert list(query) == []

    def test_count(self, orm: Orm, users: sqlite3.Connection) -> None:
        assert orm.query("users").count() == 5
        assert len(orm.query("users", {"id >": 3})) == 2

    def test_count_respects_pagination(self, orm: Orm, users: sqlite3.Connection) -> None:
        assert orm.query("users", None, {"page": 2, "per_page": 2}).count() == 2

    def test_count_mid_iteration(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users")
        query.rewind()
        query.next()

        assert query.count() == 5
        assert query.next().get("id") == 3

    def test_close(self, orm: Orm, users: sqlite3.Connection) -> None:
        query = orm.query("users")
        query.rewind()

        query.close()
        query.close()

        assert [u.get("id") for u in query] == [1, 2, 3, 4, 5]
