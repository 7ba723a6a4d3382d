"""PyMySQL database configuration."""

from typing import Any, ClassVar, TypedDict

import pymysql
from pymysql.cursors import DictCursor
from typing_extensions import NotRequired

from sqlsplit.adapters.pymysql.driver import PyMysqlConnection, PyMysqlDriver, map_mysql_error
from sqlsplit.config import SyncDatabaseConfig
from sqlsplit.utils.logging import get_logger

__all__ = ("DEFAULT_CHARSET", "PyMysqlConfig", "PyMysqlConnectionParams")

logger = get_logger("adapters.pymysql")

DEFAULT_CHARSET = "utf8mb4"


class PyMysqlConnectionParams(TypedDict, total=False):
    """Keyword arguments passed to ``pymysql.connect()``."""

    host: NotRequired[str]
    user: NotRequired[str]
    password: NotRequired[str]
    database: NotRequired[str]
    port: NotRequired[int]
    charset: NotRequired[str]
    autocommit: NotRequired[bool]
    cursorclass: NotRequired[type[Any]]


class PyMysqlConfig(SyncDatabaseConfig[PyMysqlConnection, PyMysqlDriver]):
    """Configuration for a single MySQL server accessed through PyMySQL.

    Connections run in autocommit mode, so each write is committed on its own
    unless the caller opens an explicit transaction.
    """

    driver_type: "ClassVar[type[PyMysqlDriver]]" = PyMysqlDriver
    required_keys: "ClassVar[tuple[str, ...]]" = ("host", "dbname", "user")

    def connect_kwargs(self) -> PyMysqlConnectionParams:
        """Translate the connection parameters to ``pymysql.connect()`` keyword arguments."""
        config = self.connection_config
        kwargs: PyMysqlConnectionParams = {
            "host": config["host"],
            "user": config["user"],
            "password": config.get("password", ""),
            "database": config["dbname"],
            "charset": config.get("charset") or DEFAULT_CHARSET,
            "autocommit": True,
            "cursorclass": DictCursor,
        }
        if config.get("port") is not None:
            kwargs["port"] = int(config["port"])
        return kwargs

    def create_connection(self) -> PyMysqlConnection:
        kwargs = self.connect_kwargs()
        try:
            connection = pymysql.connect(**kwargs)
        except pymysql.MySQLError as e:
            logger.error("Failed to connect to MySQL at %s/%s", kwargs["host"], kwargs["database"])
            raise map_mysql_error(e, connecting=True) from e
        logger.debug("Connected to MySQL at %s/%s", kwargs["host"], kwargs["database"])
        return connection
