"""Driver layer: executes prepared statements on one database connection."""

from sqlsplit.driver._common import ExecutionResult
from sqlsplit.driver._sync import SyncDriverAdapterBase

__all__ = ("ExecutionResult", "SyncDriverAdapterBase")
