import contextlib
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Final, Optional

import pymysql
from pymysql.connections import Connection
from pymysql.cursors import DictCursor, SSDictCursor

from sqlsplit.driver import SyncDriverAdapterBase
from sqlsplit.exceptions import ConnectionError, QueryError
from sqlsplit.parameters import convert_qmark_to_pyformat

if TYPE_CHECKING:
    from collections.abc import Generator

    from typing_extensions import TypeAlias

__all__ = ("CONNECTION_ERROR_CODES", "PyMysqlConnection", "PyMysqlCursor", "PyMysqlDriver", "map_mysql_error")

PyMysqlConnection: "TypeAlias" = Connection

# CR_CONNECTION_ERROR, CR_CONN_HOST_ERROR, CR_SERVER_GONE_ERROR, CR_SERVER_LOST, CR_SERVER_LOST_EXTENDED
CONNECTION_ERROR_CODES: Final = frozenset({2002, 2003, 2006, 2013, 2055})


def _error_code(error: "pymysql.MySQLError") -> Optional[int]:
    if error.args and isinstance(error.args[0], int):
        return error.args[0]
    return None


def _error_message(error: "pymysql.MySQLError") -> str:
    if len(error.args) > 1:
        return str(error.args[1])
    return str(error)


def map_mysql_error(error: "pymysql.MySQLError", *, connecting: bool = False) -> "ConnectionError | QueryError":
    """Translate a PyMySQL error, keeping its MySQL error code and message.

    Every error raised while opening a connection, including rejected
    credentials, is a connection error.
    """
    code = _error_code(error)
    message = _error_message(error)
    if connecting or isinstance(error, pymysql.err.InterfaceError) or (
        isinstance(error, pymysql.err.OperationalError) and code in CONNECTION_ERROR_CODES
    ):
        return ConnectionError(f"MySQL connection error: {message}", code=code)
    return QueryError(f"MySQL database error: {message}", code=code)


class PyMysqlCursor:
    """Context manager for PyMySQL cursor management."""

    __slots__ = ("connection", "cursor", "unbuffered")

    def __init__(self, connection: "PyMysqlConnection", unbuffered: bool = False) -> None:
        self.connection = connection
        self.unbuffered = unbuffered
        self.cursor: Optional[Any] = None

    def __enter__(self) -> Any:
        self.cursor = self.connection.cursor(SSDictCursor if self.unbuffered else DictCursor)
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            # an unbuffered cursor drains the pending result set on close
            with contextlib.suppress(pymysql.MySQLError):
                self.cursor.close()


class PyMysqlDriver(SyncDriverAdapterBase["PyMysqlConnection"]):
    """Synchronous MySQL driver built on PyMySQL."""

    dialect = "mysql"

    def with_cursor(self, connection: "PyMysqlConnection", *, unbuffered: bool = False) -> PyMysqlCursor:
        return PyMysqlCursor(connection, unbuffered=unbuffered)

    def handle_database_exceptions(self) -> "contextlib.AbstractContextManager[None]":
        return self._handle_database_exceptions_impl()

    @contextmanager
    def _handle_database_exceptions_impl(self) -> "Generator[None, None, None]":
        try:
            yield
        except pymysql.MySQLError as e:
            raise map_mysql_error(e) from e

    def prepare_sql(self, sql: str) -> str:
        return convert_qmark_to_pyformat(sql)

    def begin(self) -> None:
        with self.handle_database_exceptions():
            self.connection.begin()

    def close(self) -> None:
        if self.connection.open:
            self.connection.close()
