"""
Lox Language Parser

Parses the token list produced by `lox.lox_lexer` into a list of statement nodes.

This is a recursive-descent parser with one token of lookahead. Each
expression precedence level has its own method, from loosest to tightest:

    assignment -> or -> and -> equality -> comparison -> term -> factor
               -> unary -> call -> primary

Every level except assignment loops over operators of its own level and
builds left-associative nodes; assignment recurses into itself for its
right-hand side, which makes it right-associative.

Grammar
-------
    program     -> declaration* EOF
    declaration -> "fun" function | "var" varDecl | statement
    statement   -> forStmt | ifStmt | printStmt | returnStmt | whileStmt
                 | block | exprStmt

`for` loops are rewritten into `Block`/`While` nodes while parsing; no for
node ever reaches a consumer.

Error Handling
--------------
Grammar methods return either a node or a `ParseFailure`. A failure is
reported to the diagnostic sink when it is created and then handed straight
back up by every caller until the nearest `parse_declaration`, which skips
tokens up to a likely statement boundary and records an `InvalidStmt` in the
statement's place. One bad statement therefore never hides the next one.

Invalid assignment targets and more than 255 parameters or arguments are
reported but do not abandon the statement.

Parsing is recursive and each nested parenthesis or block costs several stack
frames, so a few hundred levels of nesting can exhaust the interpreter
recursion limit. That raises `RecursionError` instead of producing a
diagnostic.

Entry Points
------------
- `Parser(tokens).parse()`: Parse a full program.
- `parse(tokens)`: Same, as a function.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar, Union

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expr,
    Expression,
    Function,
    Grouping,
    If,
    InvalidStmt,
    Literal,
    Logical,
    Print,
    Return,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from lox.lox_constants import LITERAL_KEYWORDS, MAX_ARITY, STATEMENT_KEYWORDS, TokenType
from lox.lox_diagnostics import DiagnosticCollector, DiagnosticSink
from lox.lox_lexer import Token

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ParseFailure:
    """A recoverable syntax error travelling back to the enclosing declaration."""

    token: Token
    message: str


ParseResult = Union[T, ParseFailure]


class Parser:
    """
    Lox Parser Class

    Built for one token list, run once with `parse()`, then discarded.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream; must end with exactly one EOF token.
    position : int
        Index of the next unconsumed token.
    sink : DiagnosticSink
        Receiver for syntax errors.
    had_error : bool
        True once any syntax error has been reported.
    """

    def __init__(self, tokens: list[Token], sink: DiagnosticSink | None = None) -> None:
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("Token stream must end with an EOF token")
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.sink: DiagnosticSink = sink if sink is not None else DiagnosticCollector()
        self.had_error: bool = False

    # Token cursor

    def current(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        return self.current().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def check(self, type_: TokenType) -> bool:
        return self.current().type == type_

    def match(self, *types: TokenType) -> Token | None:
        """Consumes the current token if it is one of `types`."""
        if self.current().type in types:
            return self.advance()
        return None

    def expect(self, type_: TokenType, message: str) -> ParseResult[Token]:
        """Consumes a required token, or fails with `message`."""
        if self.check(type_):
            return self.advance()
        return self.fail(self.current(), message)

    # Error reporting

    def report(self, token: Token, message: str) -> None:
        """Reports an error without abandoning the current statement."""
        self.had_error = True
        self.sink.parse_error(token, message)

    def fail(self, token: Token, message: str) -> ParseFailure:
        self.report(token, message)
        return ParseFailure(token, message)

    def synchronize(self) -> None:
        """Discards tokens until just past a `;` or just before a statement keyword."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.current().type in STATEMENT_KEYWORDS:
                return
            self.advance()

    # Declarations and statements

    def parse(self) -> list[Stmt]:
        """Parse a full Lox program and return its top-level statements.

        Malformed input is reported to the sink, never raised. The exception is
        pathologically deep nesting, which raises `RecursionError`.
        """
        statements: list[Stmt] = []
        while not self.is_at_end():
            statements.append(self.parse_declaration())
        logger.debug(
            "parsed %d statements (%d abandoned)",
            len(statements),
            sum(isinstance(s, InvalidStmt) for s in statements),
        )
        return statements

    def parse_declaration(self) -> Stmt:
        """Parse one declaration; a failed one becomes an `InvalidStmt`."""
        result: ParseResult[Stmt]
        if self.match(TokenType.FUN):
            result = self.parse_function("function")
        elif self.match(TokenType.VAR):
            result = self.parse_var()
        else:
            result = self.parse_statement()

        if isinstance(result, ParseFailure):
            self.synchronize()
            return InvalidStmt(result.token, result.message)
        return result

    def parse_statement(self) -> ParseResult[Stmt]:
        if self.match(TokenType.FOR):
            return self.parse_for()
        if self.match(TokenType.IF):
            return self.parse_if()
        if self.match(TokenType.PRINT):
            return self.parse_print()
        if self.match(TokenType.RETURN):
            return self.parse_return()
        if self.match(TokenType.WHILE):
            return self.parse_while()
        if self.match(TokenType.LEFT_BRACE):
            statements = self.parse_block()
            if isinstance(statements, ParseFailure):
                return statements
            return Block(tuple(statements))
        return self.parse_expression_statement()

    def parse_for(self) -> ParseResult[Stmt]:
        """Parse a `for` loop and desugar it into a block around a `while` loop."""
        paren = self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
        if isinstance(paren, ParseFailure):
            return paren

        initializer: ParseResult[Stmt] | None
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.parse_var()
        else:
            initializer = self.parse_expression_statement()
        if isinstance(initializer, ParseFailure):
            return initializer

        condition: ParseResult[Expr] = Literal(True)
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
            if isinstance(condition, ParseFailure):
                return condition
        semicolon = self.expect(TokenType.SEMICOLON, "Expect ';' after loop condition.")
        if isinstance(semicolon, ParseFailure):
            return semicolon

        increment: ParseResult[Expr] | None = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
            if isinstance(increment, ParseFailure):
                return increment
        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")
        if isinstance(paren, ParseFailure):
            return paren

        body = self.parse_statement()
        if isinstance(body, ParseFailure):
            return body

        loop_body: list[Stmt] = [body]
        if increment is not None:
            loop_body.append(Expression(increment))
        loop = While(condition, Block(tuple(loop_body)))

        if initializer is None:
            return Block((loop,))
        return Block((initializer, loop))

    def parse_if(self) -> ParseResult[Stmt]:
        paren = self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        if isinstance(paren, ParseFailure):
            return paren
        condition = self.parse_expression()
        if isinstance(condition, ParseFailure):
            return condition
        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        if isinstance(paren, ParseFailure):
            return paren

        then_branch = self.parse_statement()
        if isinstance(then_branch, ParseFailure):
            return then_branch

        else_branch: ParseResult[Stmt] | None = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
            if isinstance(else_branch, ParseFailure):
                return else_branch

        return If(condition, then_branch, else_branch)

    def parse_print(self) -> ParseResult[Stmt]:
        value = self.parse_expression()
        if isinstance(value, ParseFailure):
            return value
        semicolon = self.expect(TokenType.SEMICOLON, "Expect ';' after value.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Print(value)

    def parse_return(self) -> ParseResult[Stmt]:
        keyword = self.previous()
        value: ParseResult[Expr] | None = None
        if not self.check(TokenType.SEMICOLON):
            value = self.parse_expression()
            if isinstance(value, ParseFailure):
                return value
        semicolon = self.expect(TokenType.SEMICOLON, "Expect ';' after return value.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Return(keyword, value)

    def parse_while(self) -> ParseResult[Stmt]:
        paren = self.expect(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        if isinstance(paren, ParseFailure):
            return paren
        condition = self.parse_expression()
        if isinstance(condition, ParseFailure):
            return condition
        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        if isinstance(paren, ParseFailure):
            return paren
        body = self.parse_statement()
        if isinstance(body, ParseFailure):
            return body
        return While(condition, body)

    def parse_block(self) -> ParseResult[list[Stmt]]:
        """Parse declarations up to the closing `}`; the `{` is already consumed."""
        statements: list[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            statements.append(self.parse_declaration())

        brace = self.expect(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        if isinstance(brace, ParseFailure):
            return brace
        return statements

    def parse_expression_statement(self) -> ParseResult[Stmt]:
        expr = self.parse_expression()
        if isinstance(expr, ParseFailure):
            return expr
        semicolon = self.expect(TokenType.SEMICOLON, "Expect ';' after expression.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Expression(expr)

    def parse_var(self) -> ParseResult[Stmt]:
        name = self.expect(TokenType.IDENTIFIER, "Expect variable name.")
        if isinstance(name, ParseFailure):
            return name

        initializer: ParseResult[Expr] | None = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
            if isinstance(initializer, ParseFailure):
                return initializer

        semicolon = self.expect(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Var(name, initializer)

    def parse_function(self, kind: str) -> ParseResult[Stmt]:
        """Parse a function name, parameter list and body; `fun` is already consumed."""
        name = self.expect(TokenType.IDENTIFIER, f"Expect {kind} name.")
        if isinstance(name, ParseFailure):
            return name
        paren = self.expect(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        if isinstance(paren, ParseFailure):
            return paren

        params: list[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARITY:
                    self.report(self.current(), f"Can't have more than {MAX_ARITY} parameters.")
                param = self.expect(TokenType.IDENTIFIER, "Expect parameter name.")
                if isinstance(param, ParseFailure):
                    return param
                params.append(param)
                if not self.match(TokenType.COMMA):
                    break

        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        if isinstance(paren, ParseFailure):
            return paren
        brace = self.expect(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        if isinstance(brace, ParseFailure):
            return brace

        body = self.parse_block()
        if isinstance(body, ParseFailure):
            return body
        return Function(name, tuple(params), tuple(body))

    # Expressions

    def parse_expression(self) -> ParseResult[Expr]:
        return self.parse_assignment()

    def parse_assignment(self) -> ParseResult[Expr]:
        """Parse `name = value`, right-associative; anything else falls through to `or`."""
        expr = self.parse_or()
        if isinstance(expr, ParseFailure):
            return expr

        equals = self.match(TokenType.EQUAL)
        if equals is None:
            return expr

        value = self.parse_assignment()
        if isinstance(value, ParseFailure):
            return value

        if isinstance(expr, Variable):
            return Assign(expr.name, value)

        # Reported but not abandoned: the statement keeps the left operand.
        self.report(equals, "Invalid assignment target.")
        return expr

    def _parse_left_assoc(
        self,
        operand: Callable[[], ParseResult[Expr]],
        operators: tuple[TokenType, ...],
        node: type[Binary] | type[Logical],
    ) -> ParseResult[Expr]:
        expr = operand()
        if isinstance(expr, ParseFailure):
            return expr
        while True:
            operator = self.match(*operators)
            if operator is None:
                return expr
            right = operand()
            if isinstance(right, ParseFailure):
                return right
            expr = node(expr, operator, right)

    def parse_or(self) -> ParseResult[Expr]:
        return self._parse_left_assoc(self.parse_and, (TokenType.OR,), Logical)

    def parse_and(self) -> ParseResult[Expr]:
        return self._parse_left_assoc(self.parse_equality, (TokenType.AND,), Logical)

    def parse_equality(self) -> ParseResult[Expr]:
        return self._parse_left_assoc(
            self.parse_comparison, (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL), Binary
        )

    def parse_comparison(self) -> ParseResult[Expr]:
        return self._parse_left_assoc(
            self.parse_term,
            (
                TokenType.GREATER,
                TokenType.GREATER_EQUAL,
                TokenType.LESS,
                TokenType.LESS_EQUAL,
            ),
            Binary,
        )

    def parse_term(self) -> ParseResult[Expr]:
        return self._parse_left_assoc(
            self.parse_factor, (TokenType.MINUS, TokenType.PLUS), Binary
        )

    def parse_factor(self) -> ParseResult[Expr]:
        return self._parse_left_assoc(
            self.parse_unary, (TokenType.SLASH, TokenType.STAR), Binary
        )

    def parse_unary(self) -> ParseResult[Expr]:
        operator = self.match(TokenType.BANG, TokenType.MINUS)
        if operator is None:
            return self.parse_call()
        right = self.parse_unary()
        if isinstance(right, ParseFailure):
            return right
        return Unary(operator, right)

    def parse_call(self) -> ParseResult[Expr]:
        """Parse a primary followed by any number of `(...)` argument groups."""
        expr = self.parse_primary()
        while not isinstance(expr, ParseFailure) and self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> ParseResult[Expr]:
        arguments: list[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARITY:
                    self.report(self.current(), f"Can't have more than {MAX_ARITY} arguments.")
                argument = self.parse_expression()
                if isinstance(argument, ParseFailure):
                    return argument
                arguments.append(argument)
                if not self.match(TokenType.COMMA):
                    break

        paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        if isinstance(paren, ParseFailure):
            return paren
        return Call(callee, paren, tuple(arguments))

    def parse_primary(self) -> ParseResult[Expr]:
        tok = self.match(TokenType.FALSE, TokenType.TRUE, TokenType.NIL)
        if tok is not None:
            return Literal(LITERAL_KEYWORDS[tok.type])

        tok = self.match(TokenType.NUMBER, TokenType.STRING)
        if tok is not None:
            return Literal(tok.literal)

        tok = self.match(TokenType.IDENTIFIER)
        if tok is not None:
            return Variable(tok)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            if isinstance(expr, ParseFailure):
                return expr
            paren = self.expect(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            if isinstance(paren, ParseFailure):
                return paren
            return Grouping(expr)

        return self.fail(self.current(), "Expect expression.")


def parse(tokens: list[Token], sink: DiagnosticSink | None = None) -> list[Stmt]:
    """Parse a token list into statements. See `Parser.parse`."""
    return Parser(tokens, sink).parse()


__all__ = ["ParseFailure", "ParseResult", "Parser", "parse"]
