from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from sqlsplit.exceptions import ImproperConfigurationError
from sqlsplit.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlsplit.driver import SyncDriverAdapterBase
    from sqlsplit.typing import AnyRouterConfig, ConnectionParams


__all__ = ("SyncDatabaseConfig", "split_router_config")

ConnectionT = TypeVar("ConnectionT")
DriverT = TypeVar("DriverT", bound="SyncDriverAdapterBase[Any]")

logger = get_logger("config")

CONNECTION_KEYS = frozenset({"host", "dbname", "user", "password", "charset", "port"})


def split_router_config(config: "AnyRouterConfig") -> "tuple[ConnectionParams, Optional[ConnectionParams]]":
    """Split a router configuration into write and read connection parameters.

    A configuration with a ``write`` key is a read/write split; ``read`` is then
    optional. Any other mapping is a single connection used for both.

    Args:
        config: Split or flat configuration mapping.

    Raises:
        ImproperConfigurationError: If the configuration is not a mapping, is empty,
            or names ``read`` without ``write``.

    Returns:
        The write parameters and the read parameters (``None`` when reads share
        the write connection).
    """
    if not isinstance(config, Mapping) or not config:
        msg = "Database configuration must be a non-empty mapping."
        raise ImproperConfigurationError(msg)

    if "write" in config:
        write = _as_params(config["write"], "write")
        read = _as_params(config["read"], "read") if config.get("read") is not None else None
        return write, read

    if "read" in config:
        msg = "A 'read' connection was configured without a 'write' connection."
        raise ImproperConfigurationError(msg)

    return _as_params(config, "default"), None


def _as_params(value: Any, role: str) -> "ConnectionParams":
    if not isinstance(value, Mapping) or not value:
        msg = f"The {role!r} connection configuration must be a non-empty mapping."
        raise ImproperConfigurationError(msg)
    unknown = sorted(set(value) - CONNECTION_KEYS)
    if unknown:
        logger.warning("Ignoring unknown %s connection keys: %s", role, ", ".join(unknown))
    return {k: v for k, v in value.items() if k in CONNECTION_KEYS}  # type: ignore[return-value]


class SyncDatabaseConfig(ABC, Generic[ConnectionT, DriverT]):
    """Connection settings for one database server and the driver used to talk to it."""

    __slots__ = ("connection_config",)

    driver_type: "ClassVar[type[Any]]"
    required_keys: "ClassVar[tuple[str, ...]]" = ()

    def __init__(self, connection_config: "Optional[ConnectionParams]" = None) -> None:
        self.connection_config: ConnectionParams = dict(connection_config or {})  # type: ignore[assignment]
        missing = [key for key in self.required_keys if not self.connection_config.get(key)]
        if missing:
            msg = f"{type(self).__name__} is missing required connection keys: {', '.join(missing)}"
            raise ImproperConfigurationError(msg)

    def __repr__(self) -> str:
        safe = {k: ("***" if k == "password" else v) for k, v in self.connection_config.items()}
        return f"{type(self).__name__}(connection_config={safe!r})"

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Create and return a new database connection.

        Raises:
            ConnectionError: If the server cannot be reached or rejects the credentials.
        """
        raise NotImplementedError

    def create_driver(self) -> DriverT:
        """Open a connection and wrap it in this configuration's driver."""
        return self.driver_type(self.create_connection())  # type: ignore[no-any-return]

    @contextmanager
    def provide_session(self) -> "Generator[DriverT, None, None]":
        """Provide a driver whose connection is closed when the block exits.

        Yields:
            A driver bound to a fresh connection.
        """
        driver = self.create_driver()
        try:
            yield driver
        finally:
            driver.close()
