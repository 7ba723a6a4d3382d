from sqlsplit.adapters.pymysql.config import PyMysqlConfig, PyMysqlConnectionParams
from sqlsplit.adapters.pymysql.driver import PyMysqlConnection, PyMysqlCursor, PyMysqlDriver

__all__ = ("PyMysqlConfig", "PyMysqlConnection", "PyMysqlConnectionParams", "PyMysqlCursor", "PyMysqlDriver")
