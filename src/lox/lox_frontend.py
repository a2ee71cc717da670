"""
Lox front-end pipeline: source text -> tokens -> statements.

Functions:
    parse_source(source, sink=None) -> Program:
        Scans and parses one compilation unit, sharing one diagnostic sink
        between the lexer and the parser.

Classes:
    Program: The parsed statements together with every diagnostic reported
        while producing them.

Malformed programs never raise, with one exception: nesting deep enough to
exhaust the interpreter recursion limit raises `RecursionError`.

A caller that executes the result must check `Program.has_errors` first: an
invalid assignment target or an over-long argument list is reported without
removing the offending statement, so a program with diagnostics may still
contain nodes the front end rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from lox.lox_ast import Block, Function, If, InvalidStmt, Stmt, While
from lox.lox_diagnostics import Diagnostic, DiagnosticCollector
from lox.lox_lexer import Lexer
from lox.lox_parser import Parser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Program:
    """Result of running the front end over one source text.

    Attributes:
        statements (tuple[Stmt, ...]): Top-level statements in source order,
            with `InvalidStmt` placeholders where recovery dropped a statement.
            Placeholders can also sit inside blocks and function bodies;
            `invalid_statements` collects them from every depth.
        diagnostics (tuple[Diagnostic, ...]): Lexical and syntax errors in
            report order.
    """

    statements: tuple[Stmt, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    @property
    def invalid_statements(self) -> tuple[InvalidStmt, ...]:
        """Every recovery placeholder in the program, nested ones included, in source order."""
        return tuple(_find_invalid(self.statements))


def _find_invalid(statements: Iterable[Stmt | None]) -> Iterator[InvalidStmt]:
    for stmt in statements:
        match stmt:
            case InvalidStmt():
                yield stmt
            case Block(body) | Function(_, _, body):
                yield from _find_invalid(body)
            case If(_, then_branch, else_branch):
                yield from _find_invalid((then_branch, else_branch))
            case While(_, body):
                yield from _find_invalid((body,))


def parse_source(source: str, sink: DiagnosticCollector | None = None) -> Program:
    """
    Run the Lox front end over `source`.

    Args:
        source (str): Lox source code.
        sink (DiagnosticCollector | None): Collector to report into. Pass one
            to accumulate diagnostics across several sources; a fresh
            collector is used otherwise.

    Returns:
        Program: Statements plus the diagnostics reported for this source.
    """
    if sink is None:
        sink = DiagnosticCollector()
    already_reported = len(sink)

    # 1. Lexing
    tokens = Lexer(source, sink).scan()

    # 2. Parsing
    statements = Parser(tokens, sink).parse()

    diagnostics = tuple(sink.diagnostics[already_reported:])
    if diagnostics:
        logger.debug("front end reported %d diagnostics", len(diagnostics))
    return Program(tuple(statements), diagnostics)


__all__ = ["Program", "parse_source"]
