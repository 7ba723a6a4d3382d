"""Fluent SQL query builder with parameter binding and read/write routing.

Each fragment method mutates the builder and returns it for chaining. A terminal
method (``get``, ``first``, ``insert``, ...) assembles the statement, asks the
router for a driver and executes it. Builders are not thread-safe and are meant
for a single query chain.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from typing_extensions import Self

from sqlsplit.builder._clauses import (
    Predicate,
    normalize_boolean,
    normalize_direction,
    placeholders,
    render_join,
    render_where,
)
from sqlsplit.exceptions import NotConnectedError, SQLBuilderError
from sqlsplit.statement import Statement
from sqlsplit.typing import Empty

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlsplit.driver import SyncDriverAdapterBase
    from sqlsplit.router import ConnectionRouter
    from sqlsplit.typing import DictRow, EmptyType

__all__ = ("QueryBuilder",)


class QueryBuilder:
    """Builds and runs one query against a single table."""

    __slots__ = (
        "_bindings",
        "_columns",
        "_force_write",
        "_group_by",
        "_joins",
        "_limit",
        "_offset",
        "_order_by",
        "_predicates",
        "_router",
        "_table",
    )

    def __init__(self, router: "ConnectionRouter", table: str) -> None:
        """Start a query chain on ``table``.

        Args:
            router: The connection router used by terminal methods.
            table: The table to query.

        Raises:
            NotConnectedError: If the router has not been connected.
            SQLBuilderError: If the table name is empty.
        """
        if not router.is_connected:
            raise NotConnectedError
        if not table or not table.strip():
            msg = "A table name is required to build a query."
            raise SQLBuilderError(msg)
        self._router = router
        self._table = table
        self._columns: list[str] = ["*"]
        self._joins: list[str] = []
        self._predicates: list[Predicate] = []
        self._order_by: list[str] = []
        self._group_by: list[str] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        self._bindings: list[Any] = []
        self._force_write = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self._table!r}, sql={self.to_sql()!r})"

    def __str__(self) -> str:
        return self.to_sql()

    @property
    def table(self) -> str:
        return self._table

    # --- Fragment building ---

    def select(self, *columns: Union[str, "Iterable[str]"]) -> Self:
        """Replace the selected columns.

        Accepts either column names as arguments or a single iterable of names
        (list, tuple, generator, ...).
        Calling without columns selects ``*``.

        Returns:
            The builder, for chaining.
        """
        if len(columns) == 1 and not isinstance(columns[0], str):
            selected = [str(column) for column in columns[0]]
        else:
            selected = [str(column) for column in columns]
        self._columns = selected or ["*"]
        return self

    @overload
    def where(self, column: str, operator: str, value: Any) -> Self: ...

    @overload
    def where(self, column: str, operator: Any) -> Self: ...

    def where(self, column: str, operator: Any, value: "Union[Any, EmptyType]" = Empty) -> Self:
        """Add an ``AND`` condition.

        ``where("status", "active")`` is shorthand for ``where("status", "=", "active")``.

        Args:
            column: The column to compare.
            operator: The comparison operator, or the value for the two-argument form.
            value: The value to compare against. Always bound as a parameter.

        Returns:
            The builder, for chaining.
        """
        return self._add_comparison(column, operator, value, "AND")

    @overload
    def or_where(self, column: str, operator: str, value: Any) -> Self: ...

    @overload
    def or_where(self, column: str, operator: Any) -> Self: ...

    def or_where(self, column: str, operator: Any, value: "Union[Any, EmptyType]" = Empty) -> Self:
        """Add an ``OR`` condition. See :meth:`where`."""
        return self._add_comparison(column, operator, value, "OR")

    def _add_comparison(self, column: str, operator: Any, value: Any, boolean: str) -> Self:
        if value is Empty:
            operator, value = "=", operator
        self._predicates.append(Predicate(f"{column} {operator} ?", boolean))
        self._bindings.append(value)
        return self

    def where_in(self, column: str, values: "Iterable[Any]", boolean: str = "AND", negate: bool = False) -> Self:
        """Add an ``IN`` (or ``NOT IN``) condition with one bound parameter per value.

        An empty ``values`` leaves the builder unchanged: the query then behaves as
        if this filter was never added, whereas a literal SQL ``IN ()`` would match
        no rows at all. Check for an empty list first if "no rows" is what you need.

        Args:
            column: The column to test.
            values: The candidate values, bound in iteration order.
            boolean: ``"AND"`` or ``"OR"``, joining this condition to the previous one.
            negate: Render ``NOT IN`` instead of ``IN``.

        Raises:
            SQLBuilderError: If ``values`` is a bare string, or ``boolean`` is
                neither ``AND`` nor ``OR`` for a non-empty ``values``.

        Returns:
            The builder, for chaining.
        """
        if isinstance(values, (str, bytes)):
            msg = f"where_in() expects a collection of values, got a bare {type(values).__name__}."
            raise SQLBuilderError(msg)
        values = list(values)
        if not values:
            return self
        boolean = normalize_boolean(boolean)
        operator = "NOT IN" if negate else "IN"
        self._predicates.append(Predicate(f"{column} {operator} ({placeholders(len(values))})", boolean))
        self._bindings.extend(values)
        return self

    def where_not_in(self, column: str, values: "Iterable[Any]", boolean: str = "AND") -> Self:
        return self.where_in(column, values, boolean=boolean, negate=True)

    def or_where_in(self, column: str, values: "Iterable[Any]") -> Self:
        return self.where_in(column, values, boolean="OR")

    def join(self, table: str, first: str, operator: str, second: str, join_type: str = "INNER") -> Self:
        """Add a JOIN clause.

        The condition compares two column identifiers and is rendered as-is, not
        bound. Never pass untrusted input as ``first``, ``operator`` or ``second``.

        Returns:
            The builder, for chaining.
        """
        self._joins.append(render_join(table, first, operator, second, join_type))
        return self

    def left_join(self, table: str, first: str, operator: str, second: str) -> Self:
        return self.join(table, first, operator, second, "LEFT")

    def order_by(self, column: str, direction: str = "ASC") -> Self:
        """Add a sort key. Repeated calls produce a multi-column sort.

        Any direction other than ``desc`` (case-insensitive) becomes ``ASC``.

        Returns:
            The builder, for chaining.
        """
        self._order_by.append(f"{column} {normalize_direction(direction)}")
        return self

    def group_by(self, *columns: str) -> Self:
        self._group_by.extend(columns)
        return self

    def limit(self, value: int) -> Self:
        self._limit = self._validate_count(value, "limit")
        return self

    def offset(self, value: int) -> Self:
        self._offset = self._validate_count(value, "offset")
        return self

    @staticmethod
    def _validate_count(value: Any, name: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = f"{name} must be a non-negative integer, got {value!r}."
            raise SQLBuilderError(msg)
        return value

    def use_write_connection(self) -> Self:
        """Run the next read on the write connection.

        Use it to read rows right after writing them, when a replica may not
        have caught up yet. The flag is consumed by the next read terminal call.

        Returns:
            The builder, for chaining.
        """
        self._force_write = True
        return self

    # --- SQL generation ---

    def to_sql(self) -> str:
        """Assemble the SELECT statement for the current state.

        Clause order is fixed: joins, WHERE, GROUP BY, ORDER BY, LIMIT, OFFSET.
        Nothing is executed.

        Returns:
            The SQL text with ``?`` placeholders.
        """
        sql = f"SELECT {', '.join(self._columns)} FROM {self._table}"
        if self._joins:
            sql += " " + " ".join(self._joins)
        sql += render_where(self._predicates)
        if self._group_by:
            sql += " GROUP BY " + ", ".join(self._group_by)
        if self._order_by:
            sql += " ORDER BY " + ", ".join(self._order_by)
        if self._limit is not None:
            sql += f" LIMIT {self._limit}"
        if self._offset is not None:
            sql += f" OFFSET {self._offset}"
        return sql

    def get_bindings(self) -> "list[Any]":
        """Return the bound values in placeholder order."""
        return list(self._bindings)

    def build(self) -> Statement:
        return Statement(self.to_sql(), tuple(self._bindings))

    def compile_insert(self, data: "Mapping[str, Any]") -> Statement:
        """Build the INSERT statement :meth:`insert` would run, without running it.

        Raises:
            SQLBuilderError: If ``data`` is empty.
        """
        if not data:
            msg = "insert() requires at least one column value."
            raise SQLBuilderError(msg)
        columns = ", ".join(data)
        sql = f"INSERT INTO {self._table} ({columns}) VALUES ({placeholders(len(data))})"
        return Statement(sql, tuple(data.values()))

    def compile_update(self, data: "Mapping[str, Any]") -> Statement:
        """Build the UPDATE statement :meth:`update` would run, without running it.

        SET values are bound before the WHERE values.

        Raises:
            SQLBuilderError: If ``data`` is empty.
        """
        if not data:
            msg = "update() requires at least one column value."
            raise SQLBuilderError(msg)
        set_clauses = ", ".join(f"{column} = ?" for column in data)
        sql = f"UPDATE {self._table} SET {set_clauses}" + render_where(self._predicates)
        return Statement(sql, (*data.values(), *self._bindings))

    def compile_delete(self) -> Statement:
        return Statement(f"DELETE FROM {self._table}" + render_where(self._predicates), tuple(self._bindings))

    # --- Execution ---

    def _read_driver(self) -> "SyncDriverAdapterBase[Any]":
        driver = self._router.resolve(force_write=self._force_write)
        self._force_write = False
        return driver

    def _write_driver(self) -> "SyncDriverAdapterBase[Any]":
        return self._router.resolve(is_write=True)

    def get(self) -> "list[DictRow]":
        """Run the SELECT and return every row."""
        return self._read_driver().select(self.to_sql(), self._bindings)

    def first(self) -> "Optional[DictRow]":
        """Run the SELECT with ``LIMIT 1``.

        Returns:
            The first row, or ``None`` when nothing matches.
        """
        self.limit(1)
        return self._read_driver().select_one(self.to_sql(), self._bindings)

    def find(self, id: Any) -> "Optional[DictRow]":  # noqa: A002
        """Shorthand for ``where("id", "=", id).first()``."""
        return self.where("id", "=", id).first()

    def cursor(self) -> "Iterator[DictRow]":
        """Return a lazy iterator over the rows.

        The connection is chosen and the SQL frozen now, but the statement runs
        when the first row is requested. Rows are fetched one at a time; stopping
        early is safe. The iterator cannot be restarted.
        """
        driver = self._read_driver()
        return driver.select_iter(self.to_sql(), tuple(self._bindings))

    def _aggregate(self, function: str, column: str = "*") -> Any:
        # replaces the selected columns; the builder keeps only the aggregate afterwards
        self._columns = [f"{function}({column}) AS aggregate"]
        row = self._read_driver().select_one(self.to_sql(), self._bindings)
        return row["aggregate"] if row else None

    def count(self, column: str = "*") -> int:
        return int(self._aggregate("COUNT", column) or 0)

    def sum(self, column: str) -> Any:
        """``SUM(column)``; ``None`` when no rows match."""
        return self._aggregate("SUM", column)

    def avg(self, column: str) -> Any:
        return self._aggregate("AVG", column)

    def min(self, column: str) -> Any:
        return self._aggregate("MIN", column)

    def max(self, column: str) -> Any:
        return self._aggregate("MAX", column)

    def insert(self, data: "Mapping[str, Any]") -> str:
        """Insert one row on the write connection.

        Columns are taken from ``data`` in iteration order.

        Returns:
            The generated identifier as a string (``"0"`` when the driver reports none).
        """
        statement = self.compile_insert(data)
        result = self._write_driver().execute(statement.sql, statement.parameters)
        return "0" if result.last_insert_id is None else str(result.last_insert_id)

    def update(self, data: "Mapping[str, Any]") -> int:
        """Update rows on the write connection.

        Without any WHERE condition every row in the table is updated.

        Returns:
            The number of affected rows.
        """
        statement = self.compile_update(data)
        return self._write_driver().execute(statement.sql, statement.parameters).rows_affected

    def delete(self) -> int:
        """Delete rows on the write connection.

        Without any WHERE condition every row in the table is deleted.

        Returns:
            The number of affected rows.
        """
        statement = self.compile_delete()
        return self._write_driver().execute(statement.sql, statement.parameters).rows_affected
