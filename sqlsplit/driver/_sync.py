"""Synchronous driver base for DB-API 2.0 connections."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from sqlsplit.driver._common import ExecutionResult, column_names_from_cursor, to_dict_row
from sqlsplit.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from contextlib import AbstractContextManager

    from sqlsplit.typing import DictRow

__all__ = ("SyncDriverAdapterBase",)

ConnectionT = TypeVar("ConnectionT")

logger = get_logger("driver")


class SyncDriverAdapterBase(ABC, Generic[ConnectionT]):
    """Base class for synchronous database drivers.

    A driver wraps exactly one connection. It prepares and executes statements
    with positional parameters and returns rows as dictionaries. Driver errors are
    translated by :meth:`handle_database_exceptions` and never retried.
    """

    __slots__ = ("connection",)

    dialect: ClassVar[str] = ""

    def __init__(self, connection: ConnectionT) -> None:
        self.connection = connection

    def __repr__(self) -> str:
        return f"{type(self).__name__}(connection={self.connection!r})"

    @abstractmethod
    def with_cursor(self, connection: ConnectionT, *, unbuffered: bool = False) -> "AbstractContextManager[Any]":
        """Return a context manager yielding a cursor that is closed on exit.

        Args:
            connection: The connection to open the cursor on
            unbuffered: Request a cursor that streams rows from the server
        """

    @abstractmethod
    def handle_database_exceptions(self) -> "AbstractContextManager[None]":
        """Return a context manager translating native errors to sqlsplit errors."""

    @abstractmethod
    def begin(self) -> None:
        """Begin a database transaction."""

    def prepare_sql(self, sql: str) -> str:
        """Convert builder SQL (qmark placeholders) to the driver's paramstyle."""
        return sql

    def _log_statement(self, sql: str, parameters: "Sequence[Any]") -> None:
        log_with_context(
            logger, logging.DEBUG, "Executing statement", dialect=self.dialect, sql=sql, parameter_count=len(parameters)
        )

    def select(self, sql: str, parameters: "Sequence[Any]" = ()) -> "list[DictRow]":
        """Execute a row-returning statement and fetch every row."""
        self._log_statement(sql, parameters)
        with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            cursor.execute(self.prepare_sql(sql), tuple(parameters))
            column_names = column_names_from_cursor(cursor)
            return [to_dict_row(row, column_names) for row in cursor.fetchall()]

    def select_one(self, sql: str, parameters: "Sequence[Any]" = ()) -> "Optional[DictRow]":
        """Execute a row-returning statement and fetch the first row, if any."""
        self._log_statement(sql, parameters)
        with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            cursor.execute(self.prepare_sql(sql), tuple(parameters))
            row = cursor.fetchone()
            if row is None:
                return None
            return to_dict_row(row, column_names_from_cursor(cursor))

    def select_iter(self, sql: str, parameters: "Sequence[Any]" = ()) -> "Iterator[DictRow]":
        """Execute a row-returning statement and yield rows one fetch at a time.

        Nothing is executed until the first row is requested. Closing the iterator
        early closes the underlying cursor.
        """
        self._log_statement(sql, parameters)
        with self.handle_database_exceptions(), self.with_cursor(self.connection, unbuffered=True) as cursor:
            cursor.execute(self.prepare_sql(sql), tuple(parameters))
            column_names = column_names_from_cursor(cursor)
            while (row := cursor.fetchone()) is not None:
                yield to_dict_row(row, column_names)

    def execute(self, sql: str, parameters: "Sequence[Any]" = ()) -> ExecutionResult:
        """Execute a statement that modifies data."""
        self._log_statement(sql, parameters)
        with self.handle_database_exceptions(), self.with_cursor(self.connection) as cursor:
            cursor.execute(self.prepare_sql(sql), tuple(parameters))
            return ExecutionResult(rows_affected=max(cursor.rowcount or 0, 0), last_insert_id=cursor.lastrowid)

    def commit(self) -> None:
        """Commit the current transaction."""
        with self.handle_database_exceptions():
            self.connection.commit()  # type: ignore[attr-defined]

    def rollback(self) -> None:
        """Rollback the current transaction."""
        with self.handle_database_exceptions():
            self.connection.rollback()  # type: ignore[attr-defined]

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()  # type: ignore[attr-defined]
