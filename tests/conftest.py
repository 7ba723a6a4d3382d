from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, ClassVar

import pytest

from sqlsplit import ConnectionRouter, SqliteConfig
from sqlsplit.config import SyncDatabaseConfig
from sqlsplit.driver import ExecutionResult, SyncDriverAdapterBase

here = Path(__file__).parent
root_path = here.parent
pytest_plugins = ["pytest_databases.docker.mysql"]


class RecordingDriver(SyncDriverAdapterBase[str]):
    """Driver double that records statements instead of executing them.

    ``connection`` is the host name it was "connected" to, so tests can tell the
    write and read drivers apart.
    """

    dialect = "recording"

    def __init__(self, connection: str) -> None:
        super().__init__(connection)
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.rows: list[dict[str, Any]] = []
        self.result = ExecutionResult(rows_affected=0, last_insert_id=None)
        self.closed = False

    def with_cursor(self, connection: str, *, unbuffered: bool = False) -> Any:
        raise NotImplementedError

    @contextmanager
    def handle_database_exceptions(self) -> Generator[None, None, None]:
        yield

    def begin(self) -> None:
        self.calls.append(("begin", "", ()))

    def commit(self) -> None:
        self.calls.append(("commit", "", ()))

    def rollback(self) -> None:
        self.calls.append(("rollback", "", ()))

    def close(self) -> None:
        self.closed = True

    def select(self, sql: str, parameters: Any = ()) -> list[dict[str, Any]]:
        self.calls.append(("select", sql, tuple(parameters)))
        return list(self.rows)

    def select_one(self, sql: str, parameters: Any = ()) -> dict[str, Any] | None:
        self.calls.append(("select_one", sql, tuple(parameters)))
        return self.rows[0] if self.rows else None

    def select_iter(self, sql: str, parameters: Any = ()) -> Generator[dict[str, Any], None, None]:
        self.calls.append(("select_iter", sql, tuple(parameters)))
        yield from self.rows

    def execute(self, sql: str, parameters: Any = ()) -> ExecutionResult:
        self.calls.append(("execute", sql, tuple(parameters)))
        return self.result


class RecordingConfig(SyncDatabaseConfig[str, RecordingDriver]):
    driver_type: ClassVar[type[RecordingDriver]] = RecordingDriver
    required_keys: ClassVar[tuple[str, ...]] = ("host",)

    def create_connection(self) -> str:
        return self.connection_config["host"]


@pytest.fixture
def split_router() -> Generator[ConnectionRouter, None, None]:
    """Router with distinct primary and replica recording drivers."""
    router = ConnectionRouter(RecordingConfig)
    router.connect({"write": {"host": "primary"}, "read": {"host": "replica"}})
    yield router
    router.close()


@pytest.fixture
def single_router() -> Generator[ConnectionRouter, None, None]:
    router = ConnectionRouter(RecordingConfig)
    router.connect({"host": "primary"})
    yield router
    router.close()


@pytest.fixture
def sqlite_router(tmp_path: Path) -> Generator[ConnectionRouter, None, None]:
    """Router on a SQLite file, with separate write and read connections and a seeded users table."""
    database = str(tmp_path / "app.db")
    router = ConnectionRouter(SqliteConfig)
    router.connect({"write": {"dbname": database}, "read": {"dbname": database}})
    router.write.execute(
        "CREATE TABLE users ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, email TEXT NOT NULL UNIQUE, "
        "status TEXT NOT NULL DEFAULT 'active', score INTEGER, created_at TEXT)"
    )
    router.write.execute(
        "CREATE TABLE posts (id INTEGER PRIMARY KEY AUTOINCREMENT, user_id INTEGER NOT NULL, title TEXT NOT NULL)"
    )
    seed = [
        ("John Doe", "john@example.com", "active", 10, "2024-01-01"),
        ("Jane Roe", "jane@example.com", "active", 20, "2024-02-01"),
        ("Max Mustermann", "max@example.com", "banned", 30, "2024-03-01"),
    ]
    for row in seed:
        router.write.execute("INSERT INTO users (name, email, status, score, created_at) VALUES (?, ?, ?, ?, ?)", row)
    router.write.execute("INSERT INTO posts (user_id, title) VALUES (?, ?)", (1, "Hello"))
    router.write.execute("INSERT INTO posts (user_id, title) VALUES (?, ?)", (1, "Again"))
    router.write.execute("INSERT INTO posts (user_id, title) VALUES (?, ?)", (2, "Hi"))
    yield router
    router.close()
