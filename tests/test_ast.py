import dataclasses
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expression,
    Function,
    Grouping,
    If,
    InvalidStmt,
    Literal,
    Logical,
    Print,
    Return,
    Unary,
    Var,
    Variable,
    While,
    to_dict,
)
from lox.lox_constants import TokenType
from lox.lox_lexer import Token


def tok(type_: TokenType, lexeme: str, line: int = 1) -> Token:
    return Token(type_, lexeme, None, line)


X = tok(TokenType.IDENTIFIER, "x")
PLUS = tok(TokenType.PLUS, "+")


def test_nodes_compare_structurally() -> None:
    n1 = Binary(Literal(1.0), PLUS, Variable(X))
    n2 = Binary(Literal(1.0), PLUS, Variable(X))
    assert n1 == n2
    assert n1 != Binary(Literal(2.0), PLUS, Variable(X))


def test_nodes_are_immutable() -> None:
    node = Var(X, Literal(1.0))
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.initializer = None  # type: ignore[misc]


def test_nodes_are_hashable() -> None:
    block = Block((Print(Literal("a")), Expression(Call(Variable(X), tok(TokenType.RIGHT_PAREN, ")"), ()))))
    assert block in {block}


def test_optional_children_default_to_none() -> None:
    assert Var(X).initializer is None
    assert If(Literal(True), Print(Literal(1.0))).else_branch is None
    assert Return(tok(TokenType.RETURN, "return")).value is None
    assert Block().statements == ()


def test_expression_and_statement_nodes_differ() -> None:
    assert Expression(Literal(1.0)) != Print(Literal(1.0))


def test_to_dict_basic() -> None:
    node = Var(tok(TokenType.IDENTIFIER, "x", 3), Literal(1.0))
    assert to_dict(node) == {
        "kind": "var",
        "name": {"lexeme": "x", "line": 3},
        "initializer": {"kind": "literal", "value": 1.0},
    }


def test_to_dict_statement_list() -> None:
    program = [Print(Literal("hi")), Var(X)]
    d = to_dict(program)
    assert isinstance(d, list)
    assert [s["kind"] for s in d] == ["print", "var"]
    assert d[1]["initializer"] is None


def test_to_dict_covers_every_variant() -> None:
    paren = tok(TokenType.RIGHT_PAREN, ")")
    body = (
        Expression(Assign(X, Logical(Literal(True), tok(TokenType.OR, "or"), Literal(None)))),
        Expression(Unary(tok(TokenType.MINUS, "-"), Grouping(Literal(2.0)))),
        Expression(Call(Variable(X), paren, (Literal(1.0),))),
        If(Variable(X), Block(), Print(Literal("no"))),
        While(Literal(False), Block()),
        Return(tok(TokenType.RETURN, "return"), Variable(X)),
    )
    program = [
        Function(tok(TokenType.IDENTIFIER, "f"), (X,), body),
        InvalidStmt(tok(TokenType.SEMICOLON, ";"), "Expect expression."),
    ]
    d = to_dict(program)
    kinds = json.dumps(d)
    for kind in (
        "function",
        "assign",
        "logical",
        "unary",
        "grouping",
        "call",
        "if",
        "block",
        "while",
        "return",
        "invalid",
    ):
        assert f'"kind": "{kind}"' in kinds
    assert d[0]["params"] == [{"lexeme": "x", "line": 1}]
    assert d[1]["message"] == "Expect expression."


def test_to_dict_rejects_non_nodes() -> None:
    with pytest.raises(TypeError):
        to_dict("not an ast")  # type: ignore[arg-type]


def test_pattern_matching_over_variants() -> None:
    def describe(node: object) -> str:
        match node:
            case Binary(Literal(left), operator, Literal(right)):
                return f"{left} {operator.lexeme} {right}"
            case Variable(name):
                return name.lexeme
        return "?"

    assert describe(Binary(Literal(1.0), PLUS, Literal(2.0))) == "1.0 + 2.0"
    assert describe(Variable(X)) == "x"
    assert describe(Literal(1.0)) == "?"


@given(st.one_of(st.none(), st.booleans(), st.floats(allow_nan=False), st.text()))  # type: ignore[misc]
def test_literal_to_dict_keeps_value(value: object) -> None:
    assert to_dict(Literal(value)) == {"kind": "literal", "value": value}


@given(st.text(min_size=1), st.integers(min_value=1, max_value=10_000))  # type: ignore[misc]
def test_variable_to_dict_keeps_token(name: str, line: int) -> None:
    d = to_dict(Variable(Token(TokenType.IDENTIFIER, name, None, line)))
    assert d == {"kind": "variable", "name": {"lexeme": name, "line": line}}
