from sqlsplit.adapters.sqlite.config import SqliteConfig
from sqlsplit.adapters.sqlite.driver import SqliteCursor, SqliteDriver

__all__ = ("SqliteConfig", "SqliteCursor", "SqliteDriver")
