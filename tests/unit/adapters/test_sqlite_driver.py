"""End-to-end tests of the query builder on SQLite."""

import sqlite3

import pytest

from sqlsplit import ConnectionError, ConnectionRouter, QueryError, SqliteConfig
from sqlsplit.adapters.sqlite import SqliteDriver


def test_get_returns_dict_rows(sqlite_router: ConnectionRouter) -> None:
    rows = sqlite_router.table("users").select("id", "name").where("status", "active").order_by("id").get()

    assert rows == [{"id": 1, "name": "John Doe"}, {"id": 2, "name": "Jane Roe"}]


def test_listing_with_limit_and_offset(sqlite_router: ConnectionRouter) -> None:
    rows = sqlite_router.table("users").order_by("created_at", "desc").limit(2).offset(1).get()

    assert [row["name"] for row in rows] == ["Jane Roe", "John Doe"]


def test_or_where_and_where_in(sqlite_router: ConnectionRouter) -> None:
    rows = (
        sqlite_router.table("users")
        .select("id")
        .where("status", "banned")
        .or_where_in("id", [1])
        .order_by("id")
        .get()
    )

    assert [row["id"] for row in rows] == [1, 3]


def test_where_not_in(sqlite_router: ConnectionRouter) -> None:
    rows = sqlite_router.table("users").select("id").where_not_in("id", [1, 3]).get()

    assert rows == [{"id": 2}]


def test_empty_where_in_returns_unfiltered(sqlite_router: ConnectionRouter) -> None:
    assert sqlite_router.table("users").where_in("id", []).count() == 3


def test_join_and_group_by(sqlite_router: ConnectionRouter) -> None:
    rows = (
        sqlite_router.table("users")
        .select("users.name", "COUNT(posts.id) AS post_count")
        .left_join("posts", "posts.user_id", "=", "users.id")
        .group_by("users.id", "users.name")
        .order_by("post_count", "desc")
        .order_by("users.id")
        .get()
    )

    assert rows == [
        {"name": "John Doe", "post_count": 2},
        {"name": "Jane Roe", "post_count": 1},
        {"name": "Max Mustermann", "post_count": 0},
    ]


def test_first_and_find(sqlite_router: ConnectionRouter) -> None:
    assert sqlite_router.table("users").where("email", "jane@example.com").first()["id"] == 2  # type: ignore[index]
    assert sqlite_router.table("users").find(3)["name"] == "Max Mustermann"  # type: ignore[index]
    assert sqlite_router.table("users").find(99) is None


def test_aggregates(sqlite_router: ConnectionRouter) -> None:
    assert sqlite_router.table("users").count() == 3
    assert sqlite_router.table("users").where("status", "active").count("id") == 2
    assert sqlite_router.table("users").sum("score") == 60
    assert sqlite_router.table("users").avg("score") == 20
    assert sqlite_router.table("users").min("score") == 10
    assert sqlite_router.table("users").max("score") == 30


def test_aggregates_over_empty_set(sqlite_router: ConnectionRouter) -> None:
    empty = {"status": "missing"}

    assert sqlite_router.table("users").where("status", empty["status"]).count() == 0
    assert sqlite_router.table("users").where("status", empty["status"]).sum("score") is None
    assert sqlite_router.table("users").where("status", empty["status"]).avg("score") is None
    assert sqlite_router.table("users").where("status", empty["status"]).min("score") is None
    assert sqlite_router.table("users").where("status", empty["status"]).max("score") is None


def test_insert_update_delete_round(sqlite_router: ConnectionRouter) -> None:
    new_id = sqlite_router.table("users").insert({"name": "Alice", "email": "alice@example.com", "score": 5})

    assert new_id == "4"
    assert sqlite_router.table("users").use_write_connection().find(new_id)["name"] == "Alice"  # type: ignore[index]

    updated = sqlite_router.table("users").where("id", "=", new_id).update({"name": "Alice Wonder"})
    assert updated == 1
    assert sqlite_router.table("users").find(new_id)["name"] == "Alice Wonder"  # type: ignore[index]

    deleted = sqlite_router.table("users").where("id", "=", new_id).delete()
    assert deleted == 1
    assert sqlite_router.table("users").count() == 3


def test_update_without_where_touches_every_row(sqlite_router: ConnectionRouter) -> None:
    assert sqlite_router.table("users").update({"status": "archived"}) == 3
    assert sqlite_router.table("users").where("status", "archived").count() == 3


def test_delete_without_where_removes_every_row(sqlite_router: ConnectionRouter) -> None:
    assert sqlite_router.table("posts").delete() == 3
    assert sqlite_router.table("posts").count() == 0


def test_cursor_streams_and_can_stop_early(sqlite_router: ConnectionRouter) -> None:
    rows = sqlite_router.table("users").select("id").order_by("id").cursor()

    assert next(rows) == {"id": 1}
    rows.close()  # type: ignore[attr-defined]

    assert [row["id"] for row in sqlite_router.table("users").select("id").order_by("id").cursor()] == [1, 2, 3]


def test_transaction_rollback(sqlite_router: ConnectionRouter) -> None:
    with pytest.raises(RuntimeError), sqlite_router.transaction():
        sqlite_router.table("posts").insert({"user_id": 3, "title": "draft"})
        raise RuntimeError("abort")

    assert sqlite_router.table("posts").count() == 3


def test_transaction_commit(sqlite_router: ConnectionRouter) -> None:
    with sqlite_router.transaction():
        sqlite_router.table("posts").insert({"user_id": 3, "title": "first"})
        sqlite_router.table("posts").insert({"user_id": 3, "title": "second"})

    assert sqlite_router.table("posts").where("user_id", 3).count() == 2


def test_constraint_violation_raises_query_error(sqlite_router: ConnectionRouter) -> None:
    with pytest.raises(QueryError) as exc_info:
        sqlite_router.table("users").insert({"name": "Dup", "email": "john@example.com"})

    assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)
    assert "UNIQUE" in str(exc_info.value)


def test_malformed_sql_raises_query_error(sqlite_router: ConnectionRouter) -> None:
    with pytest.raises(QueryError):
        sqlite_router.table("missing_table").get()


def test_closed_connection_raises_connection_error() -> None:
    driver = SqliteConfig({"dbname": ":memory:"}).create_driver()
    driver.close()

    with pytest.raises(ConnectionError):
        driver.select("SELECT 1")


def test_unreachable_database_raises_connection_error() -> None:
    with pytest.raises(ConnectionError):
        SqliteConfig({"dbname": "/nonexistent-dir/sub/app.db"}).create_connection()


def test_driver_type() -> None:
    with SqliteConfig({"dbname": ":memory:"}).provide_session() as driver:
        assert isinstance(driver, SqliteDriver)
        assert driver.select_one("SELECT 1 AS one") == {"one": 1}
