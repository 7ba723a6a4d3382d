"""Common driver types and helpers shared by the adapters."""

from typing import TYPE_CHECKING, Any, NamedTuple, Optional

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlsplit.typing import DictRow

__all__ = ("ExecutionResult", "column_names_from_cursor", "to_dict_row")


class ExecutionResult(NamedTuple):
    """Outcome of a statement that does not return rows.

    Attributes:
        rows_affected: Number of rows the driver reports as affected
        last_insert_id: The identifier generated by the last INSERT, if any
    """

    rows_affected: int
    last_insert_id: Optional[Any] = None


def column_names_from_cursor(cursor: Any) -> "list[str]":
    return [col[0] for col in cursor.description or []]


def to_dict_row(row: Any, column_names: "Sequence[str]") -> "DictRow":
    """Return ``row`` keyed by column name.

    Rows that are already mappings (dict cursors) are copied as-is.
    """
    if isinstance(row, dict):
        return dict(row)
    return dict(zip(column_names, row))
