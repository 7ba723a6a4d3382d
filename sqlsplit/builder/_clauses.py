"""Rendering helpers for individual query fragments."""

from typing import TYPE_CHECKING, Final, NamedTuple

from sqlsplit.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = (
    "Predicate",
    "normalize_boolean",
    "normalize_direction",
    "placeholders",
    "render_join",
    "render_where",
)

BOOLEANS: Final = frozenset({"AND", "OR"})


class Predicate(NamedTuple):
    """One WHERE condition.

    ``boolean`` joins this predicate to the one before it and is not rendered
    for the first predicate.
    """

    clause: str
    boolean: str = "AND"


def normalize_boolean(boolean: str) -> str:
    normalized = boolean.strip().upper()
    if normalized not in BOOLEANS:
        msg = f"Invalid boolean connector {boolean!r}; expected 'AND' or 'OR'."
        raise SQLBuilderError(msg)
    return normalized


def normalize_direction(direction: str) -> str:
    """Anything other than a case-insensitive ``desc`` sorts ascending."""
    return "DESC" if str(direction).strip().upper() == "DESC" else "ASC"


def placeholders(count: int) -> str:
    return ", ".join("?" * count)


def render_join(table: str, first: str, operator: str, second: str, join_type: str = "INNER") -> str:
    return f"{join_type.strip().upper()} JOIN {table} ON {first} {operator} {second}"


def render_where(predicates: "Sequence[Predicate]") -> str:
    """Render the WHERE clause, with a leading space.

    Returns:
        An empty string when there are no predicates.
    """
    if not predicates:
        return ""
    sql = " WHERE "
    for index, predicate in enumerate(predicates):
        if index:
            sql += f" {predicate.boolean} "
        sql += predicate.clause
    return sql
