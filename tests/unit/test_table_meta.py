"""Unit tests for TableMeta."""

from __future__ import annotations

import pytest

from db_orm.domain.entities import ColumnMeta, ForeignKeyLink, SlotKind, TableMeta
from db_orm.domain.exceptions import InvariantViolation, OrmError


def column(name: str, data_type: str = "int") -> ColumnMeta:
    return ColumnMeta(
        database_name="db",
        table_name="posts",
        column_name=name,
        data_type=data_type,
        column_type=data_type,
    )


@pytest.fixture
def posts() -> TableMeta:
    return TableMeta(
        database_name="db",
        table_name="posts",
        columns={"id": column("id"), "author_id": column("author_id"), "title": column("title", "varchar")},
        pk_columns=("id",),
        parents={"author_id": ForeignKeyLink("db", "users", "id")},
        children={"comments": ForeignKeyLink("db", "comments", "post_id")},
    )


@pytest.mark.unit
class TestTableMeta:
    """Tests for name resolution and guards."""

    def test_slots(self, posts: TableMeta) -> None:
        assert posts.slot("id") is SlotKind.COLUMN
        assert posts.slot("title") is SlotKind.COLUMN
        assert posts.slot("author_id") is SlotKind.PARENT
        assert posts.slot("comments") is SlotKind.CHILD

    def test_unknown_name(self, posts: TableMeta) -> None:
        with pytest.raises(OrmError, match="unknown column nope in db.posts"):
            posts.slot("nope")

    def test_guard_has_columns(self, posts: TableMeta) -> None:
        posts.guard_has_columns(["id", "comments"])
        with pytest.raises(OrmError, match="unknown column missing"):
            posts.guard_has_columns(["id", "missing"])

    def test_guard_has_child(self, posts: TableMeta) -> None:
        posts.guard_has_child("comments")
        with pytest.raises(OrmError, match="title is not a child of db.posts"):
            posts.guard_has_child("title")

    def test_guard_is_foreign_key(self, posts: TableMeta) -> None:
        posts.guard_is_foreign_key("author_id")
        with pytest.raises(OrmError, match="db.posts.title is not a foreign key column"):
            posts.guard_is_foreign_key("title")

    def test_primary_key(self, posts: TableMeta) -> None:
        posts.guard_has_primary_key()
        assert not posts.has_composite_pk
        assert posts.qualified_name == "db.posts"

    def test_no_primary_key(self) -> None:
        table = TableMeta("db", "log", columns={"line": column("line")})
        with pytest.raises(OrmError, match="db.log has no primary key"):
            table.guard_has_primary_key()

    def test_composite_primary_key(self) -> None:
        table = TableMeta(
            "db", "pair", columns={"a": column("a"), "b": column("b")}, pk_columns=("a", "b")
        )
        assert table.has_composite_pk

    def test_primary_key_must_be_a_column(self) -> None:
        with pytest.raises(InvariantViolation):
            TableMeta("db", "t", columns={"a": column("a")}, pk_columns=("b",))

    def test_child_name_colliding_with_column(self) -> None:
        with pytest.raises(OrmError, match="ambiguous name title in db.posts"):
            TableMeta(
                "db",
                "posts",
                columns={"id": column("id"), "title": column("title")},
                pk_columns=("id",),
                children={"title": ForeignKeyLink("db", "title", "post_id")},
            )
