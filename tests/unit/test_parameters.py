import pytest

from sqlsplit.parameters import convert_qmark_to_pyformat, count_placeholders


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT * FROM users WHERE id = ?", "SELECT * FROM users WHERE id = %s"),
        ("SELECT * FROM t WHERE a IN (?, ?, ?)", "SELECT * FROM t WHERE a IN (%s, %s, %s)"),
        ("SELECT * FROM t WHERE a LIKE 'x%' AND b = ?", "SELECT * FROM t WHERE a LIKE 'x%%' AND b = %s"),
        ("SELECT '?' AS q, \"?\" AS d, `?` AS b FROM t WHERE c = ?", "SELECT '?' AS q, \"?\" AS d, `?` AS b FROM t WHERE c = %s"),
        ("SELECT a % 2 FROM t -- why?\nWHERE b = ?", "SELECT a %% 2 FROM t -- why?\nWHERE b = %s"),
        ("SELECT 1 /* ? */", "SELECT 1 /* ? */"),
        ("SELECT 'it\\'s ?' FROM t", "SELECT 'it\\'s ?' FROM t"),
    ],
)
def test_convert_qmark_to_pyformat(sql: str, expected: str) -> None:
    assert convert_qmark_to_pyformat(sql) == expected


@pytest.mark.parametrize(
    ("sql", "count"),
    [
        ("SELECT * FROM users", 0),
        ("UPDATE users SET a = ?, b = ? WHERE id IN (?, ?)", 4),
        ("SELECT '?' FROM t WHERE x = ? -- ?", 1),
    ],
)
def test_count_placeholders(sql: str, count: int) -> None:
    assert count_placeholders(sql) == count
