"""Lexing, parsing, validation, planning and optimisation of simple SQL SELECT queries."""

__version__ = "0.1.0"