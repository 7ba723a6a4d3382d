"""SQLite database configuration."""

import sqlite3
from typing import ClassVar

from sqlsplit.adapters.sqlite.driver import SqliteDriver
from sqlsplit.config import SyncDatabaseConfig
from sqlsplit.exceptions import ConnectionError
from sqlsplit.utils.logging import get_logger

__all__ = ("SqliteConfig",)

logger = get_logger("adapters.sqlite")


class SqliteConfig(SyncDatabaseConfig[sqlite3.Connection, SqliteDriver]):
    """Configuration for a SQLite database file.

    ``dbname`` is the database path (``":memory:"`` for a private in-memory
    database). Connections run in autocommit mode; :meth:`SqliteDriver.begin`
    opens an explicit transaction.
    """

    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    required_keys: "ClassVar[tuple[str, ...]]" = ("dbname",)

    def create_connection(self) -> sqlite3.Connection:
        database = self.connection_config["dbname"]
        try:
            connection = sqlite3.connect(database, isolation_level=None, check_same_thread=False)
        except sqlite3.Error as e:
            msg = f"SQLite connection error: {e}"
            raise ConnectionError(msg, code=getattr(e, "sqlite_errorname", None)) from e
        logger.debug("Opened SQLite database %s", database)
        return connection
