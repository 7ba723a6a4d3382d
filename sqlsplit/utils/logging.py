"""Logging helpers for sqlsplit.

The library only ever attaches a ``NullHandler`` to the ``sqlsplit`` logger.
Statement and connection records carry their details (``sql``, ``dialect``,
``parameter_count``, ``adapter``, ``replica``) in an ``extra_fields`` mapping,
never the bound values. :func:`configure_logging` is the application-side hook
that renders those fields, either as ``key=value`` text or as JSON lines.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from sqlsplit._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord
    from typing import TextIO

__all__ = (
    "ROOT_LOGGER_NAME",
    "JSONFormatter",
    "KeyValueFormatter",
    "configure_logging",
    "get_logger",
    "log_with_context",
)

ROOT_LOGGER_NAME = "sqlsplit"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def _fields(record: LogRecord) -> dict[str, Any]:
    return dict(getattr(record, "extra_fields", None) or {})


class KeyValueFormatter(logging.Formatter):
    """Plain text with the record's fields appended as ``key=value`` pairs.

    ``INFO sqlsplit.router: Database connected adapter=PyMysqlConfig replica=True``
    """

    def __init__(self) -> None:
        super().__init__("%(levelname)s %(name)s: %(message)s")

    def format(self, record: LogRecord) -> str:
        line = super().format(record)
        if fields := _fields(record):
            # strings are quoted so SQL text stays one token
            pairs = " ".join(
                f"{key}={value!r}" if isinstance(value, str) else f"{key}={value}" for key, value in fields.items()
            )
            head, sep, tail = line.partition("\n")
            line = f"{head} {pairs}{sep}{tail}"
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the record's fields at the top level."""

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``sqlsplit`` namespace.

    ``get_logger("driver")`` and ``get_logger("sqlsplit.driver")`` are the same logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: int | str = "INFO", *, json: bool = False, stream: TextIO | None = None
) -> logging.Handler:
    """Send sqlsplit records to ``stream`` (stdout by default).

    Calling it again replaces the handler installed by the previous call and
    leaves any other handler on the ``sqlsplit`` logger alone.

    Args:
        level: Minimum level, as a name (``"debug"``) or a number. ``DEBUG``
            shows every executed statement.
        json: Emit JSON lines instead of ``key=value`` text.
        stream: Where to write. Defaults to ``sys.stdout``.

    Returns:
        The installed handler.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    for previous in [h for h in root_logger.handlers if getattr(h, "_sqlsplit_handler", False)]:
        root_logger.removeHandler(previous)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if json else KeyValueFormatter())
    handler._sqlsplit_handler = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)
    return handler


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for the formatters above.

    Nothing is built when ``level`` is disabled on ``logger``.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
