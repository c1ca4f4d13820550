"""Checks a parsed query against the metadata catalog."""

from __future__ import annotations

from .metadata import ColumnType, MetadataCatalog
from .query import Condition, Operand, OperandType, Query
from .strutils import split_qualified


class SemanticError(ValueError):
    """Raised when a query refers to unknown names or mixes types."""


_NUMERIC = frozenset({ColumnType.INTEGER, ColumnType.DECIMAL})
_ORDERED = _NUMERIC | {ColumnType.DATETIME}
_EQUALITY_OPERATORS = frozenset({"=", "<>"})
_ORDERING_OPERATORS = frozenset({">", "<", ">=", "<="})


def _compatible(left: ColumnType, right: ColumnType) -> bool:
    return (left in _NUMERIC and right in _NUMERIC) or left == right


def _is_qualified(name: str) -> bool:
    return "." in name


class SemanticValidator:
    """Validates tables, columns and condition types of a query."""

    def __init__(self, catalog: MetadataCatalog | None = None) -> None:
        self._catalog = catalog if catalog is not None else MetadataCatalog()

    def validate(self, query: Query) -> Query:
        """Validate ``query``, raising SemanticError; return it unchanged."""
        self._require_table(query.from_table)
        for join in query.joins:
            self._require_table(join.table_name)
            self._validate_condition(join.condition, query)
        for field in query.select_fields:
            self._validate_field(field, query)
        for condition in query.where_conditions:
            self._validate_condition(condition, query)
        return query

    def _require_table(self, table: str) -> None:
        if not self._catalog.table_exists(table):
            raise SemanticError(f"a tabela '{table}' nao existe no banco.")

    def _validate_field(self, field: str, query: Query) -> None:
        if _is_qualified(field):
            self._validate_qualified(field)
        else:
            self._owning_table(field, query)

    def _validate_qualified(self, field: str) -> tuple[str, str]:
        parts = split_qualified(field)
        if len(parts) != 2:
            raise SemanticError(f"o campo '{field}' nao esta no formato tabela.coluna.")
        table, column = parts
        self._require_table(table)
        if not self._catalog.column_exists(table, column):
            raise SemanticError(f"a coluna '{column}' nao existe na tabela '{table}'.")
        return table, column

    def _owning_table(self, column: str, query: Query) -> str:
        owners = [t for t in query.tables() if self._catalog.column_exists(t, column)]
        if not owners:
            raise SemanticError(
                f"a coluna '{column}' nao existe em nenhuma tabela da consulta."
            )
        if len(owners) > 1:
            raise SemanticError(f"a coluna '{column}' esta ambigua na consulta.")
        return owners[0]

    def _validate_condition(self, condition: Condition, query: Query) -> None:
        self._validate_operand(condition.left, query)
        self._validate_operand(condition.right, query)
        self._validate_types(condition, query)

    def _validate_operand(self, operand: Operand, query: Query) -> None:
        if not operand.value:
            raise SemanticError("operando vazio em condicao.")
        if operand.type is OperandType.IDENTIFIER:
            self._validate_field(operand.value, query)

    def _validate_types(self, condition: Condition, query: Query) -> None:
        left = self._operand_type(condition.left, query)
        right = self._operand_type(condition.right, query)

        if condition.op in _EQUALITY_OPERATORS:
            if not _compatible(left, right):
                raise SemanticError(f"tipos incompativeis na condicao: {condition}")
            return

        if condition.op in _ORDERING_OPERATORS:
            if left not in _ORDERED or right not in _ORDERED:
                raise SemanticError(
                    f"operacao relacional invalida na condicao: {condition}"
                )
            if not _compatible(left, right):
                raise SemanticError(f"tipos incompativeis na condicao: {condition}")
            return

        raise SemanticError("operador relacional invalido na condicao.")

    def _operand_type(self, operand: Operand, query: Query) -> ColumnType:
        if operand.type is OperandType.NUMBER:
            return ColumnType.DECIMAL if "." in operand.value else ColumnType.INTEGER
        if operand.type is OperandType.STRING_LITERAL:
            return ColumnType.STRING
        if _is_qualified(operand.value):
            table, column = split_qualified(operand.value)
            return self._catalog.column_type(table, column)
        table = self._owning_table(operand.value, query)
        return self._catalog.column_type(table, operand.value)