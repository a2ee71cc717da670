"""
Defines the abstract syntax tree (AST) node structure for the Lox language.

Nodes are frozen dataclasses; child sequences are tuples, so a tree never
changes after the parser builds it. Consumers walk the tree with structural
pattern matching over the closed set of variants below.

Expression variants:
    Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call

Statement variants:
    Expression, Print, Var, Block, If, While, Function, Return,
    InvalidStmt (placeholder for a statement lost to error recovery)

Nodes that a runtime may need to blame keep their originating token: the name
token of Variable/Assign/Var/Function, the operator of Unary/Binary/Logical,
the closing parenthesis of Call and the keyword of Return.

Functions:
    to_dict(node): Converts a node, or a list of statements, into plain
        dictionaries for JSON output or structural comparison.

Example:
    node = Binary(Literal(1.0), Token(TokenType.PLUS, "+", None, 1), Literal(2.0))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from lox.lox_lexer import Token

ASTDict = dict[str, Any]


@dataclass(frozen=True)
class Expr:
    """Base class of every expression node."""


@dataclass(frozen=True)
class Literal(Expr):
    value: object


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """Short-circuiting `and` / `or`."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    """A call expression.

    Attributes:
        callee (Expr): The expression being called.
        paren (Token): The closing `)`, used to attribute runtime errors.
        arguments (tuple[Expr, ...]): Arguments in source order.
    """

    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Stmt:
    """Base class of every statement node."""


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: tuple[Token, ...] = ()
    body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Expr | None = None


@dataclass(frozen=True)
class InvalidStmt(Stmt):
    """Stands in for a statement the parser abandoned after a syntax error.

    Attributes:
        token (Token): The token the error was reported at.
        message (str): The reported message.
    """

    token: Token
    message: str


Node = Union[Expr, Stmt]


def _token_dict(token: Token) -> ASTDict:
    return {"lexeme": token.lexeme, "line": token.line}


def to_dict(node: Node | Sequence[Stmt] | None) -> Any:
    """Serializes a node (recursively) into plain Python data.

    Statement lists become lists; `None` children stay `None`. Every node
    dictionary carries a `kind` key naming its variant, and tokens become
    `{"lexeme": ..., "line": ...}` dictionaries.

    Raises:
        TypeError: If `node` is not an AST node, a list of nodes or None.
    """
    match node:
        case None:
            return None
        case list() | tuple():
            return [to_dict(n) for n in node]
        case Literal(value):
            return {"kind": "literal", "value": value}
        case Grouping(expression):
            return {"kind": "grouping", "expression": to_dict(expression)}
        case Unary(operator, right):
            return {"kind": "unary", "operator": _token_dict(operator), "right": to_dict(right)}
        case Binary(left, operator, right) | Logical(left, operator, right):
            return {
                "kind": "binary" if isinstance(node, Binary) else "logical",
                "left": to_dict(left),
                "operator": _token_dict(operator),
                "right": to_dict(right),
            }
        case Variable(name):
            return {"kind": "variable", "name": _token_dict(name)}
        case Assign(name, value):
            return {"kind": "assign", "name": _token_dict(name), "value": to_dict(value)}
        case Call(callee, paren, arguments):
            return {
                "kind": "call",
                "callee": to_dict(callee),
                "paren": _token_dict(paren),
                "arguments": to_dict(arguments),
            }
        case Expression(expression):
            return {"kind": "expression", "expression": to_dict(expression)}
        case Print(expression):
            return {"kind": "print", "expression": to_dict(expression)}
        case Var(name, initializer):
            return {"kind": "var", "name": _token_dict(name), "initializer": to_dict(initializer)}
        case Block(statements):
            return {"kind": "block", "statements": to_dict(statements)}
        case If(condition, then_branch, else_branch):
            return {
                "kind": "if",
                "condition": to_dict(condition),
                "then_branch": to_dict(then_branch),
                "else_branch": to_dict(else_branch),
            }
        case While(condition, body):
            return {"kind": "while", "condition": to_dict(condition), "body": to_dict(body)}
        case Function(name, params, body):
            return {
                "kind": "function",
                "name": _token_dict(name),
                "params": [_token_dict(p) for p in params],
                "body": to_dict(body),
            }
        case Return(keyword, value):
            return {"kind": "return", "keyword": _token_dict(keyword), "value": to_dict(value)}
        case InvalidStmt(token, message):
            return {"kind": "invalid", "token": _token_dict(token), "message": message}
    raise TypeError(f"Cannot serialize non-AST object: {node!r}")


__all__ = [
    "ASTDict",
    "Assign",
    "Binary",
    "Block",
    "Call",
    "Expr",
    "Expression",
    "Function",
    "Grouping",
    "If",
    "InvalidStmt",
    "Literal",
    "Logical",
    "Node",
    "Print",
    "Return",
    "Stmt",
    "Unary",
    "Var",
    "Variable",
    "While",
    "to_dict",
]
