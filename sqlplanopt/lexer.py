"""Tokenizer for the supported SQL subset."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    SELECT = auto()
    FROM = auto()
    WHERE = auto()
    JOIN = auto()
    ON = auto()
    AND = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING_LITERAL = auto()
    EQUAL = auto()
    GREATER = auto()
    LESS = auto()
    GREATER_EQUAL = auto()
    LESS_EQUAL = auto()
    NOT_EQUAL = auto()
    COMMA = auto()
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    SEMICOLON = auto()
    END_OF_FILE = auto()
    INVALID = auto()


@dataclass(frozen=True)
class Token:
    """A token and the text it was read from."""

    type: TokenType
    lexeme: str


class LexicalError(ValueError):
    """Raised when the source text cannot be split into tokens."""


_KEYWORDS = {
    "select": TokenType.SELECT,
    "from": TokenType.FROM,
    "where": TokenType.WHERE,
    "join": TokenType.JOIN,
    "on": TokenType.ON,
    "and": TokenType.AND,
}

_PUNCTUATION = {
    ",": TokenType.COMMA,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ";": TokenType.SEMICOLON,
}

_WHITESPACE = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset(string.digits)
_IDENTIFIER_START = frozenset(string.ascii_letters + "_")
_IDENTIFIER_PART = _IDENTIFIER_START | _DIGITS | {"."}


class Lexer:
    """Splits an SQL string into tokens."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def tokenize(self) -> list[Token]:
        """Return all tokens of the source, ending with an end-of-file token."""
        self._pos = 0
        tokens = list(self._scan())
        tokens.append(Token(TokenType.END_OF_FILE, ""))
        return tokens

    def _peek(self, offset: int = 0) -> str:
        index = self._pos + offset
        return self._source[index] if index < len(self._source) else ""

    def _advance(self) -> str:
        char = self._source[self._pos]
        self._pos += 1
        return char

    def _scan(self):
        while self._pos < len(self._source):
            char = self._advance()
            if char in _WHITESPACE:
                continue
            if char in _IDENTIFIER_START:
                yield self._identifier(char)
            elif char in _DIGITS:
                yield self._number(char)
            elif char in ("<", ">", "="):
                yield self._operator(char)
            elif char == "'":
                yield self._string()
            elif char in _PUNCTUATION:
                yield Token(_PUNCTUATION[char], char)
            else:
                raise LexicalError(f"Erro lexico: caractere invalido: {char}")

    def _identifier(self, first: str) -> Token:
        chars = [first]
        while self._peek() in _IDENTIFIER_PART:
            chars.append(self._advance())
        lexeme = "".join(chars)
        lowered = lexeme.lower()
        keyword = _KEYWORDS.get(lowered)
        if keyword is not None:
            return Token(keyword, lexeme)
        return Token(TokenType.IDENTIFIER, lowered)

    def _digits(self) -> str:
        chars = []
        while self._peek() in _DIGITS:
            chars.append(self._advance())
        return "".join(chars)

    def _number(self, first: str) -> Token:
        lexeme = first + self._digits()
        if self._peek() == "." and self._peek(1) in _DIGITS:
            lexeme += self._advance() + self._digits()
        return Token(TokenType.NUMBER, lexeme)

    def _operator(self, first: str) -> Token:
        if first == "=":
            return Token(TokenType.EQUAL, "=")
        nxt = self._peek()
        if first == ">":
            if nxt == "=":
                self._advance()
                return Token(TokenType.GREATER_EQUAL, ">=")
            return Token(TokenType.GREATER, ">")
        if nxt == "=":
            self._advance()
            return Token(TokenType.LESS_EQUAL, "<=")
        if nxt == ">":
            self._advance()
            return Token(TokenType.NOT_EQUAL, "<>")
        return Token(TokenType.LESS, "<")

    def _string(self) -> Token:
        end = self._source.find("'", self._pos)
        if end == -1:
            raise LexicalError("Erro lexico: string literal nao terminada.")
        lexeme = self._source[self._pos:end]
        self._pos = end + 1
        return Token(TokenType.STRING_LITERAL, lexeme)


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source``."""
    return Lexer(source).tokenize()