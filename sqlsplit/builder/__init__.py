"""Fluent query builder bound to a connection router."""

from sqlsplit.builder._clauses import Predicate
from sqlsplit.builder._query import QueryBuilder

__all__ = ("Predicate", "QueryBuilder")
