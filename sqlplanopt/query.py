"""Parsed form of a query."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class OperandType(Enum):
    """What an operand of a condition refers to."""

    IDENTIFIER = auto()
    NUMBER = auto()
    STRING_LITERAL = auto()


@dataclass(frozen=True)
class Operand:
    """One side of a condition."""

    value: str
    type: OperandType


@dataclass(frozen=True)
class Condition:
    """A binary comparison between two operands."""

    left: Operand
    op: str
    right: Operand

    def __str__(self) -> str:
        return f"{self.left.value} {self.op} {self.right.value}"


@dataclass(frozen=True)
class JoinClause:
    """A joined table and the condition it is joined on."""

    table_name: str
    condition: Condition


@dataclass
class Query:
    """A SELECT ... FROM ... [JOIN ...] [WHERE ...] query."""

    select_fields: list[str] = field(default_factory=list)
    from_table: str = ""
    joins: list[JoinClause] = field(default_factory=list)
    where_conditions: list[Condition] = field(default_factory=list)

    def add_select_field(self, field: str) -> None:
        self.select_fields.append(field)

    def add_join(self, join: JoinClause) -> None:
        self.joins.append(join)

    def add_where_condition(self, condition: Condition) -> None:
        self.where_conditions.append(condition)

    def has_joins(self) -> bool:
        return bool(self.joins)

    def has_where_conditions(self) -> bool:
        return bool(self.where_conditions)

    def tables(self) -> list[str]:
        """The FROM table followed by every joined table, in query order."""
        return [self.from_table, *(join.table_name for join in self.joins)]