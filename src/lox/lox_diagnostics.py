"""
Diagnostic reporting for the Lox front end.

Both the lexer and the parser keep going after an error, so errors are never
raised at the user. They are handed to a sink instead:

Classes:
    Diagnostic: One reported error with its source line.
    DiagnosticSink: Protocol every sink implements.
    DiagnosticCollector: Default sink that keeps diagnostics in report order.

Example:
    >>> sink = DiagnosticCollector()
    >>> sink.lexical_error(3, "Unexpected character: '@'.")
    >>> str(sink.diagnostics[0])
    "[line 3] Error: Unexpected character: '@'."
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Protocol

from lox.lox_constants import TokenType

if TYPE_CHECKING:
    from lox.lox_lexer import Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A single lexical or syntactic error.

    Attributes:
        line (int): 1-based source line the error is attributed to.
        message (str): Human readable description.
        where (str): Location suffix, empty for lexical errors, `" at end"` for
            errors on the EOF token, `" at '<lexeme>'"` otherwise.
    """

    line: int
    message: str
    where: str = ""

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class DiagnosticSink(Protocol):  # pragma: no cover
    """Receiver for front-end errors. Implementations must not raise."""

    def lexical_error(self, line: int, message: str) -> None: ...

    def parse_error(self, token: Token, message: str) -> None: ...


class DiagnosticCollector:
    """Sink that records every diagnostic in the order it was reported."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def lexical_error(self, line: int, message: str) -> None:
        self._record(Diagnostic(line, message))

    def parse_error(self, token: Token, message: str) -> None:
        if token.type == TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        self._record(Diagnostic(token.line, message, where))

    def _record(self, diagnostic: Diagnostic) -> None:
        logger.debug("diagnostic reported: %s", diagnostic)
        self.diagnostics.append(diagnostic)

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)


__all__ = ["Diagnostic", "DiagnosticCollector", "DiagnosticSink"]
