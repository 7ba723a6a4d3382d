"""Read/write connection routing.

A :class:`ConnectionRouter` owns two drivers: the write driver (primary) and the
read driver (replica). Without a replica both names refer to the same driver.
Reads go to the read driver unless a write is forced; inserts, updates, deletes
and transactions always use the write driver.
"""

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlsplit.adapters.pymysql import PyMysqlConfig
from sqlsplit.builder import QueryBuilder
from sqlsplit.config import split_router_config
from sqlsplit.exceptions import NotConnectedError
from sqlsplit.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlsplit.config import SyncDatabaseConfig
    from sqlsplit.driver import SyncDriverAdapterBase
    from sqlsplit.typing import AnyRouterConfig

__all__ = ("ConnectionRouter",)

logger = get_logger("router")


class ConnectionRouter:
    """Holds the write and read drivers and decides which one a query uses.

    Example:
        Read/write split with a replica::

            db = ConnectionRouter()
            db.connect({"write": {...}, "read": {...}})
            users = db.table("users").where("status", "active").get()
    """

    __slots__ = ("_read", "_write", "config_class")

    def __init__(self, config_class: "type[SyncDatabaseConfig[Any, Any]]" = PyMysqlConfig) -> None:
        """Create an unconnected router.

        Args:
            config_class: The adapter configuration used to open each connection.
        """
        self.config_class = config_class
        self._write: Optional[SyncDriverAdapterBase[Any]] = None
        self._read: Optional[SyncDriverAdapterBase[Any]] = None

    def __repr__(self) -> str:
        state = "connected" if self.is_connected else "disconnected"
        return f"{type(self).__name__}(config_class={self.config_class.__name__}, {state}, replica={self.has_replica})"

    def __enter__(self) -> "ConnectionRouter":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def is_connected(self) -> bool:
        return self._write is not None and self._read is not None

    @property
    def has_replica(self) -> bool:
        """Whether reads use a connection distinct from the write connection."""
        return self.is_connected and self._read is not self._write

    @property
    def write(self) -> "SyncDriverAdapterBase[Any]":
        if self._write is None:
            raise NotConnectedError
        return self._write

    @property
    def read(self) -> "SyncDriverAdapterBase[Any]":
        if self._read is None:
            raise NotConnectedError
        return self._read

    def connect(self, config: "AnyRouterConfig") -> "ConnectionRouter":
        """Open the write connection and, when configured, the read connection.

        ``config`` is either ``{"write": {...}, "read": {...}}`` (``read`` optional)
        or a single flat connection mapping used for both reads and writes.
        Connecting an already connected router closes the previous connections.

        Raises:
            ImproperConfigurationError: If the configuration is malformed or misses
                a required key. Raised before any connection is opened.
            ConnectionError: If a server cannot be reached or rejects the credentials.

        Returns:
            The router, connected.
        """
        write_params, read_params = split_router_config(config)
        write_config = self.config_class(write_params)
        read_config = self.config_class(read_params) if read_params is not None else None

        if self.is_connected:
            self.close()

        write = write_config.create_driver()
        if read_config is None:
            read = write
        else:
            try:
                read = read_config.create_driver()
            except Exception:
                write.close()
                raise

        self._write, self._read = write, read
        log_with_context(
            logger, logging.INFO, "Database connected", adapter=self.config_class.__name__, replica=read is not write
        )
        return self

    def resolve(self, is_write: bool = False, force_write: bool = False) -> "SyncDriverAdapterBase[Any]":
        """Return the driver an operation must use.

        Args:
            is_write: The operation modifies data.
            force_write: The caller asked for the write connection explicitly.

        Raises:
            NotConnectedError: If :meth:`connect` has not been called.

        Returns:
            The write driver if either flag is set, otherwise the read driver.
        """
        if is_write or force_write:
            return self.write
        return self.read

    def table(self, name: str) -> QueryBuilder:
        """Start a query chain on ``name``."""
        return QueryBuilder(self, name)

    def close(self) -> None:
        """Close both connections. Safe to call more than once.

        The write connection is closed even if closing the read connection fails;
        the read error then propagates.
        """
        write, read = self._write, self._read
        self._write = self._read = None
        try:
            if read is not None and read is not write:
                read.close()
        finally:
            if write is not None:
                write.close()
                logger.debug("Database disconnected")

    disconnect = close

    def begin_transaction(self) -> None:
        self.write.begin()

    def commit(self) -> None:
        self.write.commit()

    def rollback(self) -> None:
        self.write.rollback()

    @contextmanager
    def transaction(self) -> "Generator[ConnectionRouter, None, None]":
        """Run a block inside a transaction on the write connection.

        Commits when the block succeeds; rolls back and re-raises when it fails.
        Transactions do not nest.

        Yields:
            The router.
        """
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()
