from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlsplit.typing import StatementParameters

__all__ = ("Statement",)


@dataclass(frozen=True)
class Statement:
    """SQL text with its positional parameters, ready for execution."""

    sql: str
    parameters: "StatementParameters" = field(default_factory=tuple)

    def __str__(self) -> str:
        return self.sql
