"""Fluent SQL query builder with read/write connection splitting."""

from sqlsplit.adapters.pymysql import PyMysqlConfig
from sqlsplit.adapters.sqlite import SqliteConfig
from sqlsplit.builder import QueryBuilder
from sqlsplit.config import SyncDatabaseConfig
from sqlsplit.driver import ExecutionResult, SyncDriverAdapterBase
from sqlsplit.exceptions import (
    ConnectionError,
    ImproperConfigurationError,
    NotConnectedError,
    QueryError,
    SQLBuilderError,
    SQLSplitError,
)
from sqlsplit.router import ConnectionRouter
from sqlsplit.statement import Statement
from sqlsplit.typing import ConnectionParams, DictRow, RouterConfig

__all__ = (
    "ConnectionError",
    "ConnectionParams",
    "ConnectionRouter",
    "DictRow",
    "ExecutionResult",
    "ImproperConfigurationError",
    "NotConnectedError",
    "PyMysqlConfig",
    "QueryBuilder",
    "QueryError",
    "RouterConfig",
    "SQLBuilderError",
    "SQLSplitError",
    "SqliteConfig",
    "Statement",
    "SyncDatabaseConfig",
    "SyncDriverAdapterBase",
)
