from typing import Any, Optional, Union

__all__ = (
    "ConnectionError",
    "ImproperConfigurationError",
    "NotConnectedError",
    "QueryError",
    "SQLBuilderError",
    "SQLSplitError",
)


class SQLSplitError(Exception):
    """Base exception class from which all sqlsplit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLSplitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLSplitError):
    """Improper Configuration error.

    Raised when a required configuration key is missing, or when the router is used
    before it has been connected.
    """


class NotConnectedError(ImproperConfigurationError):
    """The connection router was used before ``connect()`` was called."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Database not connected. Call ConnectionRouter.connect() first."
        super().__init__(message)


class SQLBuilderError(SQLSplitError):
    """Issues Building or Generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class _DriverError(SQLSplitError):
    """Error reported by the database driver, keeping the native error code."""

    code: Optional[Union[int, str]]

    def __init__(self, message: str, code: Optional[Union[int, str]] = None) -> None:
        super().__init__(detail=message)
        self.code = code


class ConnectionError(_DriverError):  # noqa: A001
    """The driver could not establish or maintain a connection."""


class QueryError(_DriverError):
    """The driver reported a failure while preparing or executing a statement."""
