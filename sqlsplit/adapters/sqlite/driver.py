import contextlib
import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlsplit.driver import SyncDriverAdapterBase
from sqlsplit.exceptions import ConnectionError, QueryError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("SqliteCursor", "SqliteDriver")


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "sqlite3.Connection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteDriver(SyncDriverAdapterBase["sqlite3.Connection"]):
    """Synchronous SQLite driver.

    SQLite accepts qmark placeholders natively, so statements run unchanged.
    Rows are always fetched incrementally, so ``unbuffered`` has no effect.
    """

    dialect = "sqlite"

    def with_cursor(self, connection: "sqlite3.Connection", *, unbuffered: bool = False) -> SqliteCursor:
        return SqliteCursor(connection)

    def handle_database_exceptions(self) -> "contextlib.AbstractContextManager[None]":
        return self._handle_database_exceptions_impl()

    @contextmanager
    def _handle_database_exceptions_impl(self) -> "Generator[None, None, None]":
        try:
            yield
        except sqlite3.ProgrammingError as e:
            if "closed" in str(e).lower():
                msg = f"SQLite connection error: {e}"
                raise ConnectionError(msg, code=getattr(e, "sqlite_errorname", None)) from e
            msg = f"SQLite database error: {e}"
            raise QueryError(msg, code=getattr(e, "sqlite_errorname", None)) from e
        except sqlite3.Error as e:
            msg = f"SQLite database error: {e}"
            raise QueryError(msg, code=getattr(e, "sqlite_errorname", None)) from e

    def begin(self) -> None:
        with self.handle_database_exceptions():
            self.connection.execute("BEGIN")
