from collections.abc import Mapping
from enum import Enum
from typing import Any, Final, Literal, TypedDict, Union

from typing_extensions import NotRequired, TypeAlias

__all__ = (
    "AnyRouterConfig",
    "ConnectionParams",
    "DictRow",
    "Empty",
    "EmptyEnum",
    "EmptyType",
    "RouterConfig",
    "StatementParameters",
)


class EmptyEnum(Enum):
    """A sentinel enum used as placeholder."""

    EMPTY = 0


EmptyType: TypeAlias = Literal[EmptyEnum.EMPTY]
Empty: Final = EmptyEnum.EMPTY

DictRow: TypeAlias = "dict[str, Any]"
"""A result row keyed by column name."""

StatementParameters: TypeAlias = "tuple[Any, ...]"
"""Positional parameters aligned with the ``?`` placeholders of a statement."""


class ConnectionParams(TypedDict, total=False):
    """Connection parameters for a single database server."""

    host: NotRequired[str]
    """Host where the database server is located."""

    dbname: NotRequired[str]
    """The database name to use (the file path for SQLite)."""

    user: NotRequired[str]
    """The username used to authenticate with the database."""

    password: NotRequired[str]
    """The password used to authenticate with the database."""

    charset: NotRequired[str]
    """The character set to use for the connection."""

    port: NotRequired[int]
    """The TCP/IP port of the database server."""


class RouterConfig(TypedDict):
    """Read/write split configuration.

    ``read`` is optional; when omitted, reads use the write connection.
    """

    write: ConnectionParams
    read: NotRequired[ConnectionParams]


AnyRouterConfig: TypeAlias = Union[RouterConfig, ConnectionParams, Mapping[str, Any]]
