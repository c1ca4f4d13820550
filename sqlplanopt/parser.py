"""Recursive-descent parser that turns tokens into a Query."""

from __future__ import annotations

from collections.abc import Sequence

from .lexer import Token, TokenType, tokenize
from .query import Condition, JoinClause, Operand, OperandType, Query


class ParseError(ValueError):
    """Raised when the tokens do not form a supported query."""


_EOF = Token(TokenType.END_OF_FILE, "")

_RELATIONAL_OPERATORS = (
    TokenType.EQUAL,
    TokenType.GREATER,
    TokenType.LESS,
    TokenType.GREATER_EQUAL,
    TokenType.LESS_EQUAL,
    TokenType.NOT_EQUAL,
)

_OPERAND_TYPES = {
    TokenType.IDENTIFIER: OperandType.IDENTIFIER,
    TokenType.NUMBER: OperandType.NUMBER,
    TokenType.STRING_LITERAL: OperandType.STRING_LITERAL,
}


class Parser:
    """Parses ``SELECT ... FROM ... [JOIN ... ON ...]* [WHERE ... [AND ...]*] [;]``."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = list(tokens)
        self._pos = 0

    def parse(self) -> Query:
        """Parse the tokens into a Query, raising ParseError on bad syntax."""
        self._pos = 0
        query = Query()

        self._consume(TokenType.SELECT, "esperado SELECT no inicio da consulta")
        self._parse_select_list(query)
        self._consume(TokenType.FROM, "esperado FROM apos a lista de campos")
        table = self._consume(TokenType.IDENTIFIER, "esperado nome da tabela apos FROM")
        query.from_table = table.lexeme

        while self._match(TokenType.JOIN):
            self._parse_join(query)

        if self._match(TokenType.WHERE):
            self._parse_where(query)

        self._match(TokenType.SEMICOLON)
        self._consume(TokenType.END_OF_FILE, "tokens inesperados no final da consulta")
        return query

    def _parse_select_list(self, query: Query) -> None:
        field = self._consume(TokenType.IDENTIFIER, "esperado um campo apos SELECT")
        query.add_select_field(field.lexeme)
        while self._match(TokenType.COMMA):
            field = self._consume(TokenType.IDENTIFIER, "esperado um campo apos virgula")
            query.add_select_field(field.lexeme)

    def _parse_join(self, query: Query) -> None:
        table = self._consume(TokenType.IDENTIFIER, "esperado nome da tabela apos JOIN")
        self._consume(TokenType.ON, "esperado ON apos a tabela do JOIN")
        query.add_join(JoinClause(table.lexeme, self._parse_condition()))

    def _parse_where(self, query: Query) -> None:
        query.add_where_condition(self._parse_condition())
        while self._match(TokenType.AND):
            query.add_where_condition(self._parse_condition())

    def _parse_condition(self) -> Condition:
        has_paren = self._match(TokenType.LEFT_PAREN) is not None
        left = self._parse_operand()
        op = self._match(*_RELATIONAL_OPERATORS)
        if op is None:
            raise ParseError("esperado operador relacional na condicao")
        right = self._parse_operand()
        if has_paren:
            self._consume(TokenType.RIGHT_PAREN, "esperado ')' ao final da condicao")
        return Condition(left, op.lexeme, right)

    def _parse_operand(self) -> Operand:
        token = self._match(*_OPERAND_TYPES)
        if token is None:
            raise ParseError("esperado operando na condicao")
        return Operand(token.lexeme, _OPERAND_TYPES[token.type])

    def _peek(self) -> Token:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else _EOF

    def _at_end(self) -> bool:
        return self._peek().type is TokenType.END_OF_FILE

    def _check(self, token_type: TokenType) -> bool:
        if self._at_end():
            return token_type is TokenType.END_OF_FILE
        return self._peek().type is token_type

    def _advance(self) -> Token:
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        return token

    def _match(self, *token_types: TokenType) -> Token | None:
        for token_type in token_types:
            if self._check(token_type):
                return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise ParseError(message)


def parse(tokens: Sequence[Token]) -> Query:
    """Parse a token sequence into a Query."""
    return Parser(tokens).parse()


def parse_sql(sql: str) -> Query:
    """Tokenize and parse an SQL string."""
    return parse(tokenize(sql))