import pytest

from lox.lox_ast import Function, InvalidStmt, Print, Var
from lox.lox_diagnostics import DiagnosticCollector
from lox.lox_frontend import Program, parse_source


def test_clean_program() -> None:
    program = parse_source("var x = 1;\nprint x;")
    assert isinstance(program, Program)
    assert not program.has_errors
    assert program.diagnostics == ()
    assert [type(s) for s in program.statements] == [Var, Print]
    assert program.invalid_statements == ()


def test_lexical_and_syntax_errors_share_one_sink() -> None:
    program = parse_source("var a = 1 @;\nprint ;\nprint a;")
    assert program.has_errors
    messages = [d.message for d in program.diagnostics]
    assert messages == [
        "Unexpected character: '@'.",
        "Expect expression.",
    ]
    assert [type(s) for s in program.statements] == [Var, InvalidStmt, Print]
    assert len(program.invalid_statements) == 1


def test_non_fatal_errors_still_mark_program() -> None:
    params = ", ".join(f"p{i}" for i in range(300))
    program = parse_source(f"fun f({params}) {{ print p0; }}")
    assert program.has_errors
    assert program.invalid_statements == ()
    assert isinstance(program.statements[0], Function)
    assert len(program.statements[0].params) == 300


def test_unterminated_string_does_not_stop_parsing() -> None:
    program = parse_source('print 1;\nprint "oops;\n')
    assert [d.message for d in program.diagnostics] == [
        "Unterminated string.",
        "Expect expression.",
    ]
    assert isinstance(program.statements[0], Print)


def test_shared_collector_only_reports_new_diagnostics() -> None:
    sink = DiagnosticCollector()
    first = parse_source("print ;", sink)
    second = parse_source("print 1;", sink)
    third = parse_source("var;", sink)
    assert len(first.diagnostics) == 1
    assert second.diagnostics == ()
    assert [d.message for d in third.diagnostics] == ["Expect variable name."]
    assert len(sink) == 2


def test_program_is_immutable() -> None:
    program = parse_source("print 1;")
    with pytest.raises(AttributeError):
        program.statements = ()  # type: ignore[misc]


@pytest.mark.parametrize(
    "source",
    [
        "{ var = 1; }",
        "{ { print ; } }",
        "if (true) { print ; }",
        "if (true) print 1; else { var = 2; }",
        "while (false) { print ; }",
        "for (;;) { print ; }",
        "fun f() { return 1 +; }",
    ],
)  # type: ignore[misc]
def test_invalid_statements_include_nested_placeholders(source: str) -> None:
    program = parse_source(source)
    assert program.has_errors
    assert len(program.invalid_statements) == 1
    assert len(program.diagnostics) == 1
    assert not any(isinstance(s, InvalidStmt) for s in program.statements)


def test_invalid_statements_keep_source_order() -> None:
    program = parse_source("print ;\n{ var = 1; fun f() { print ; } }\nprint 1 +;")
    assert [s.token.line for s in program.invalid_statements] == [1, 2, 2, 3]
