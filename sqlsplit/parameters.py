"""Placeholder handling for statements produced by the query builder.

The builder always emits ``?`` (qmark) placeholders. Drivers whose native
paramstyle differs convert the statement text before execution.
"""

import re
from typing import Final

__all__ = ("convert_qmark_to_pyformat", "count_placeholders")

# Literals and comments are matched first so that a "?" or "%" inside them is never
# treated as a placeholder.
_PARAMETER_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.)*") |
    (?P<squote>'(?:[^'\\]|\\.)*') |
    (?P<backtick>`[^`]*`) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    (?P<qmark>\?) |
    (?P<percent>%)
    """,
    re.VERBOSE,
)


def _percent_escaped(text: str) -> str:
    return text.replace("%", "%%")


def convert_qmark_to_pyformat(sql: str) -> str:
    """Convert ``?`` placeholders to ``%s`` for pyformat drivers such as PyMySQL.

    Every literal ``%`` is doubled, including inside string literals, because
    pyformat drivers interpolate the whole statement text.

    Args:
        sql: Statement text with qmark placeholders.

    Returns:
        The statement text in positional pyformat style.
    """
    result_parts: list[str] = []
    current_pos = 0

    for match in _PARAMETER_REGEX.finditer(sql):
        result_parts.append(sql[current_pos : match.start()])
        if match.group("qmark"):
            result_parts.append("%s")
        else:
            result_parts.append(_percent_escaped(match.group(0)))
        current_pos = match.end()

    result_parts.append(sql[current_pos:])
    return "".join(result_parts)


def count_placeholders(sql: str) -> int:
    """Count the ``?`` placeholders outside literals and comments.

    Returns:
        Number of positional placeholders in ``sql``.
    """
    return sum(1 for match in _PARAMETER_REGEX.finditer(sql) if match.group("qmark"))
