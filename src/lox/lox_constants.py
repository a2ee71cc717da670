"""
Static token tables for the Lox front end.

Everything in this module is read-only after import. The lexer consults the
character and keyword maps, the parser consults the statement keywords and the
arity limit.

Exports:
    - TokenType
    - SINGLE_CHAR_TOKENS
    - TWO_CHAR_TOKENS
    - KEYWORDS
    - LITERAL_KEYWORDS
    - STATEMENT_KEYWORDS
    - MAX_ARITY
"""

import string
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping


class TokenType(Enum):
    """Closed set of lexical categories."""

    # Single-character punctuation and operators
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character operators
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


SINGLE_CHAR_TOKENS: Mapping[str, TokenType] = MappingProxyType(
    {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
        "/": TokenType.SLASH,
        "!": TokenType.BANG,
        "=": TokenType.EQUAL,
        "<": TokenType.LESS,
        ">": TokenType.GREATER,
    }
)

# Each two-character operator is a one-character operator followed by "=".
TWO_CHAR_TOKENS: Mapping[str, TokenType] = MappingProxyType(
    {
        "!=": TokenType.BANG_EQUAL,
        "==": TokenType.EQUAL_EQUAL,
        "<=": TokenType.LESS_EQUAL,
        ">=": TokenType.GREATER_EQUAL,
    }
)

KEYWORDS: Mapping[str, TokenType] = MappingProxyType(
    {
        "and": TokenType.AND,
        "class": TokenType.CLASS,
        "else": TokenType.ELSE,
        "false": TokenType.FALSE,
        "for": TokenType.FOR,
        "fun": TokenType.FUN,
        "if": TokenType.IF,
        "nil": TokenType.NIL,
        "or": TokenType.OR,
        "print": TokenType.PRINT,
        "return": TokenType.RETURN,
        "super": TokenType.SUPER,
        "this": TokenType.THIS,
        "true": TokenType.TRUE,
        "var": TokenType.VAR,
        "while": TokenType.WHILE,
    }
)

LITERAL_KEYWORDS: Mapping[TokenType, object] = MappingProxyType(
    {
        TokenType.TRUE: True,
        TokenType.FALSE: False,
        TokenType.NIL: None,
    }
)

# Kinds that can begin a new statement; panic-mode recovery stops in front of them.
STATEMENT_KEYWORDS: frozenset[TokenType] = frozenset(
    {
        TokenType.CLASS,
        TokenType.FOR,
        TokenType.FUN,
        TokenType.IF,
        TokenType.PRINT,
        TokenType.RETURN,
        TokenType.WHILE,
    }
)

MAX_ARITY = 255

# ASCII only: str.isdigit() accepts characters float() cannot decode.
DIGITS = frozenset(string.digits)
IDENTIFIER_START = frozenset(string.ascii_letters + "_")
IDENTIFIER_CHARS = IDENTIFIER_START | DIGITS
WHITESPACE = frozenset(" \t\r")

__all__ = [
    "DIGITS",
    "IDENTIFIER_CHARS",
    "IDENTIFIER_START",
    "KEYWORDS",
    "LITERAL_KEYWORDS",
    "MAX_ARITY",
    "SINGLE_CHAR_TOKENS",
    "STATEMENT_KEYWORDS",
    "TWO_CHAR_TOKENS",
    "TokenType",
    "WHITESPACE",
]
