"""
Translates Lox AST nodes back into Lox source text.

This module defines the `LoxEmitter` class, which walks a statement list and
writes equivalent Lox code with four-space indentation. It is the inverse of
the parser for every tree the parser can produce: `Grouping` nodes keep their
parentheses and operators are written in the order the parser nested them, so
emitting a parsed program and parsing the result again gives a structurally
equal tree (token line numbers aside).

Desugared `for` loops come back out as the `{ ... while (...) { ... } }`
blocks the parser built for them.

Raises:
    - `ValueError`: If an `InvalidStmt` placeholder is encountered.
    - `TypeError`: If an object that is not an AST node is encountered.
"""

import math
from decimal import Decimal
from typing import Sequence

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


def format_number(value: float) -> str:
    """Writes a number the lexer reads back as the same float (no exponent, no sign)."""
    if math.isinf(value):
        # Any digit run past the float range decodes back to infinity.
        return "1" + "0" * 400
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


class LoxEmitter:
    """Emits Lox code from Lox AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted code.
        indent (int): Current indentation level.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return "    " * self.indent

    def get_output(self) -> str:
        """
        Returns the emitted program as a single string.

        Returns
        -------
        str
            The joined lines, newline terminated when non-empty.
        """
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"

    def emit_program(self, statements: Sequence[Stmt]) -> str:
        for stmt in statements:
            self.emit_stmt(stmt)
        return self.get_output()

    def write(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}")

    def emit_stmt(self, stmt: Stmt) -> None:
        """
        Emits one statement and everything nested in it.

        Parameters
        ----------
        stmt : Stmt
            The statement node to emit.

        Raises
        ------
        ValueError
            If `stmt` is a recovery placeholder.
        TypeError
            If `stmt` is not a statement node.
        """
        match stmt:
            case Expression(expression):
                self.write(f"{self.emit_expr(expression)};")
            case Print(expression):
                self.write(f"print {self.emit_expr(expression)};")
            case Var(name, None):
                self.write(f"var {name.lexeme};")
            case Var(name, initializer):
                self.write(f"var {name.lexeme} = {self.emit_expr(initializer)};")
            case Block(statements):
                self.emit_braced("", statements)
            case If(condition, then_branch, else_branch):
                self.emit_branch(f"if ({self.emit_expr(condition)})", then_branch)
                if else_branch is not None:
                    self.emit_branch("else", else_branch)
            case While(condition, body):
                self.emit_branch(f"while ({self.emit_expr(condition)})", body)
            case Function(name, params, body):
                names = ", ".join(p.lexeme for p in params)
                self.emit_braced(f"fun {name.lexeme}({names}) ", body)
            case Return(_, None):
                self.write("return;")
            case Return(_, value):
                self.write(f"return {self.emit_expr(value)};")
            case InvalidStmt(token, message):
                raise ValueError(
                    f"Cannot emit invalid statement (line {token.line}): {message}"
                )
            case _:
                raise TypeError(f"Expected a statement node, got {stmt!r}")

    def emit_braced(self, header: str, statements: Sequence[Stmt]) -> None:
        self.write(f"{header}{{")
        self.indent += 1
        for stmt in statements:
            self.emit_stmt(stmt)
        self.indent -= 1
        self.write("}")

    def emit_branch(self, header: str, body: Stmt) -> None:
        """Emits a control-flow header followed by its body statement."""
        if isinstance(body, Block):
            self.emit_braced(f"{header} ", body.statements)
            return
        self.write(header)
        self.indent += 1
        self.emit_stmt(body)
        self.indent -= 1

    def emit_expr(self, expr: Expr) -> str:
        """
        Emits an expression as a single line of Lox.

        Parameters
        ----------
        expr : Expr
            The expression node.

        Returns
        -------
        str
            Lox source for the expression.
        """
        match expr:
            case Literal(value):
                return self.emit_literal(value)
            case Grouping(inner):
                return f"({self.emit_expr(inner)})"
            case Unary(operator, right):
                return f"{operator.lexeme}{self.emit_expr(right)}"
            case Binary(left, operator, right) | Logical(left, operator, right):
                return f"{self.emit_expr(left)} {operator.lexeme} {self.emit_expr(right)}"
            case Variable(name):
                return name.lexeme
            case Assign(name, value):
                return f"{name.lexeme} = {self.emit_expr(value)}"
            case Call(callee, _, arguments):
                args = ", ".join(self.emit_expr(a) for a in arguments)
                return f"{self.emit_expr(callee)}({args})"
        raise TypeError(f"Expected an expression node, got {expr!r}")

    def emit_literal(self, value: object) -> str:
        if value is True:
            return "true"
        if value is False:
            return "false"
        if value is None:
            return "nil"
        if isinstance(value, float):
            return format_number(value)
        if isinstance(value, str):
            return f'"{value}"'
        raise TypeError(f"Unknown literal: {value!r}")


def to_source(statements: Sequence[Stmt]) -> str:
    """Emits a whole program. See `LoxEmitter`."""
    return LoxEmitter().emit_program(statements)


__all__ = ["LoxEmitter", "format_number", "to_source"]
