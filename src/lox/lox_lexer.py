"""
Lexical analyzer for the Lox scripting language.

This module converts raw source text into a materialized list of tokens:

Classes:
    CharacterStream: Cursor over the source with a lexeme start mark and line tracking.
    Token: Immutable record of one lexeme.
    Lexer: Converts source text into a list of tokens ending in a single EOF token.

Features:
    - Skips spaces, tabs, carriage returns and newlines (counting lines)
    - Skips `//` line comments and nestable `/* ... */` block comments
    - Maximal munch for `!=`, `==`, `<=`, `>=`
    - Recognizes:
        * Identifiers and keywords
        * Numbers (decoded to float)
        * Strings (may span lines, no escape sequences)
        * Punctuation and operators

Errors:
    Unexpected characters, unterminated strings and unterminated block comments
    are reported to a `DiagnosticSink` and scanning continues to the end of the
    input. The lexer itself never raises for malformed source.

Example:
    >>> [tok.type.name for tok in scan("var x = 1;")]
    ['VAR', 'IDENTIFIER', 'EQUAL', 'NUMBER', 'SEMICOLON', 'EOF']

Exports:
    - CharacterStream
    - Token
    - Lexer
    - scan
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lox.lox_constants import (
    DIGITS,
    IDENTIFIER_CHARS,
    IDENTIFIER_START,
    KEYWORDS,
    SINGLE_CHAR_TOKENS,
    TWO_CHAR_TOKENS,
    WHITESPACE,
    TokenType,
)
from lox.lox_diagnostics import DiagnosticCollector, DiagnosticSink

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    A utility for reading characters from a string source with line tracking.

    The stream keeps two cursors: `start`, the first character of the lexeme
    being scanned, and `position`, the next character to read. The text between
    them is the current lexeme.

    Attributes:
        source (str): The input source string.
        start (int): Index where the current lexeme begins.
        position (int): Index of the next unread character.
        line (int): Current line number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1):
        self.source = source
        self.start = position
        self.position = position
        self.line = line

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Newlines bump the line counter as they are consumed.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def match(self, expected: str) -> bool:
        """Consumes the next character only if it equals `expected`."""
        if self.peek() != expected:
            return False
        self.next()
        return True

    def mark(self) -> None:
        """Starts a new lexeme at the current position."""
        self.start = self.position

    def lexeme(self) -> str:
        return self.source[self.start : self.position]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token.

    Attributes:
        type (TokenType): The lexical category.
        lexeme (str): The exact source text of the token.
        literal (object): Decoded value for NUMBER (float) and STRING (str)
            tokens, None for everything else.
        line (int): The 1-based line number where the token ends.
    """

    type: TokenType
    lexeme: str
    literal: object = None
    line: int = 0

    def __repr__(self) -> str:
        if self.literal is None:
            return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"
        return f"Token({self.type.name}, {self.lexeme!r}, {self.literal!r}, line={self.line})"


class Lexer:
    """Lexical analyzer for the Lox language.

    A Lexer is built for one source text, scanned once and discarded.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        sink (DiagnosticSink): Receiver for lexical errors.
    """

    def __init__(self, source: str | CharacterStream, sink: DiagnosticSink | None = None) -> None:
        """Initializes the Lexer.

        Args:
            source (str | CharacterStream): Raw source text or a prepared stream.
            sink (DiagnosticSink | None): Error receiver. A fresh
                `DiagnosticCollector` is used when omitted.
        """
        self.stream = source if isinstance(source, CharacterStream) else CharacterStream(source)
        self.sink: DiagnosticSink = sink if sink is not None else DiagnosticCollector()

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def make_token(self, type_: TokenType, literal: object = None) -> Token:
        return Token(type_, self.stream.lexeme(), literal, self.stream.line)

    def skip_whitespace(self) -> None:
        """Skips whitespace and comments, reporting unterminated block comments."""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch in WHITESPACE or ch == "\n":
                self.advance()
            elif ch == "/" and self.peek(1) == "/":
                self.skip_line_comment()
            elif ch == "/" and self.peek(1) == "*":
                self.skip_block_comment()
            else:
                break

    def skip_line_comment(self) -> None:
        """Advances up to, but not over, the end of the line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        """Skips a `/* ... */` comment. Nested pairs must balance."""
        start_line = self.stream.line
        self.advance()
        self.advance()
        depth = 1
        while depth > 0:
            if self.stream.end_of_file():
                self.sink.lexical_error(start_line, "Unterminated block comment.")
                return
            if self.peek() == "/" and self.peek(1) == "*":
                self.advance()
                self.advance()
                depth += 1
            elif self.peek() == "*" and self.peek(1) == "/":
                self.advance()
                self.advance()
                depth -= 1
            else:
                self.advance()

    def scan_string(self) -> Token | None:
        """Scans the rest of a string literal; the opening quote is already consumed.

        Returns:
            Token | None: The STRING token, or None if the input ended first.
        """
        while not self.stream.end_of_file() and self.peek() != '"':
            self.advance()

        if self.stream.end_of_file():
            self.sink.lexical_error(self.stream.line, "Unterminated string.")
            return None

        self.advance()
        lexeme = self.stream.lexeme()
        return self.make_token(TokenType.STRING, lexeme[1:-1])

    def scan_number(self) -> Token:
        """Scans a number; a trailing `.` is only consumed when a digit follows it."""
        while self.peek() in DIGITS:
            self.advance()

        if self.peek() == "." and self.peek(1) in DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()

        return self.make_token(TokenType.NUMBER, float(self.stream.lexeme()))

    def scan_identifier(self) -> Token:
        while self.peek() in IDENTIFIER_CHARS:
            self.advance()
        text = self.stream.lexeme()
        return self.make_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Characters that cannot start a token and unterminated strings are
        reported to the sink and skipped, so this always yields a real token
        or the EOF token.
        """
        while True:
            self.skip_whitespace()
            self.stream.mark()
            if self.stream.end_of_file():
                return Token(TokenType.EOF, "", None, self.stream.line)

            ch = self.advance()

            # 1. Identifier or keyword
            if ch in IDENTIFIER_START:
                return self.scan_identifier()

            # 2. Number
            if ch in DIGITS:
                return self.scan_number()

            # 3. String
            if ch == '"':
                token = self.scan_string()
                if token is not None:
                    return token
                continue

            # 4. Operators, longest match first
            if ch + "=" in TWO_CHAR_TOKENS and self.stream.match("="):
                return self.make_token(TWO_CHAR_TOKENS[self.stream.lexeme()])
            if ch in SINGLE_CHAR_TOKENS:
                return self.make_token(SINGLE_CHAR_TOKENS[ch])

            # 5. Unknown character
            self.sink.lexical_error(self.stream.line, f"Unexpected character: {ch!r}.")

    def scan(self) -> list[Token]:
        """Scans the whole source.

        Returns:
            list[Token]: Every token in source order, ending with exactly one EOF token.
        """
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == TokenType.EOF:
                break
        logger.debug("scanned %d tokens over %d lines", len(tokens), tokens[-1].line)
        return tokens


def scan(source: str, sink: DiagnosticSink | None = None) -> list[Token]:
    """Tokenize `source` in one pass. See `Lexer.scan`."""
    return Lexer(source, sink).scan()


__all__ = ["CharacterStream", "Lexer", "Token", "scan"]
