import pytest

from lox.lox_constants import (
    KEYWORDS,
    LITERAL_KEYWORDS,
    MAX_ARITY,
    SINGLE_CHAR_TOKENS,
    STATEMENT_KEYWORDS,
    TWO_CHAR_TOKENS,
    TokenType,
)


def test_keyword_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        KEYWORDS["let"] = TokenType.VAR  # type: ignore[index]
    with pytest.raises(TypeError):
        SINGLE_CHAR_TOKENS["%"] = TokenType.STAR  # type: ignore[index]


def test_keyword_table_contents() -> None:
    assert sorted(KEYWORDS) == [
        "and", "class", "else", "false", "for", "fun", "if", "nil",
        "or", "print", "return", "super", "this", "true", "var", "while",
    ]
    for word, kind in KEYWORDS.items():
        assert kind.name == word.upper()


def test_two_char_tokens_extend_single_char_tokens() -> None:
    for lexeme in TWO_CHAR_TOKENS:
        assert lexeme[0] in SINGLE_CHAR_TOKENS
        assert lexeme[1] == "="


def test_statement_keywords() -> None:
    assert STATEMENT_KEYWORDS == {
        TokenType.CLASS,
        TokenType.FOR,
        TokenType.FUN,
        TokenType.IF,
        TokenType.PRINT,
        TokenType.RETURN,
        TokenType.WHILE,
    }


def test_literal_keywords_and_limit() -> None:
    assert LITERAL_KEYWORDS[TokenType.TRUE] is True
    assert LITERAL_KEYWORDS[TokenType.FALSE] is False
    assert LITERAL_KEYWORDS[TokenType.NIL] is None
    assert MAX_ARITY == 255
