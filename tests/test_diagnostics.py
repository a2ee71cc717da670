from hypothesis import given
from hypothesis import strategies as st

from lox.lox_constants import TokenType
from lox.lox_diagnostics import Diagnostic, DiagnosticCollector
from lox.lox_lexer import Token


def test_lexical_error_has_no_location_suffix() -> None:
    sink = DiagnosticCollector()
    sink.lexical_error(7, "Unterminated string.")
    assert sink.diagnostics == [Diagnostic(7, "Unterminated string.")]
    assert str(sink.diagnostics[0]) == "[line 7] Error: Unterminated string."


def test_parse_error_names_the_token() -> None:
    sink = DiagnosticCollector()
    sink.parse_error(Token(TokenType.IDENTIFIER, "foo", None, 2), "Expect ';' after value.")
    assert str(sink.diagnostics[0]) == "[line 2] Error at 'foo': Expect ';' after value."


def test_parse_error_at_end_of_input() -> None:
    sink = DiagnosticCollector()
    sink.parse_error(Token(TokenType.EOF, "", None, 9), "Expect expression.")
    assert sink.diagnostics[0].where == " at end"
    assert str(sink.diagnostics[0]) == "[line 9] Error at end: Expect expression."


def test_collector_protocol_helpers() -> None:
    sink = DiagnosticCollector()
    assert not sink.had_error
    assert len(sink) == 0

    sink.lexical_error(1, "a")
    sink.lexical_error(2, "b")
    assert sink.had_error
    assert len(sink) == 2
    assert [d.message for d in sink] == ["a", "b"]

    sink.clear()
    assert not sink.had_error
    assert list(sink) == []


def test_collector_logs_each_report(caplog) -> None:  # type: ignore[no-untyped-def]
    sink = DiagnosticCollector()
    with caplog.at_level("DEBUG", logger="lox.lox_diagnostics"):
        sink.lexical_error(3, "Unexpected character: '#'.")
    assert "[line 3] Error: Unexpected character: '#'." in caplog.text


@given(st.lists(st.tuples(st.integers(min_value=1), st.text()), max_size=20))  # type: ignore[misc]
def test_collector_keeps_report_order(reports: list[tuple[int, str]]) -> None:
    sink = DiagnosticCollector()
    for line, message in reports:
        sink.lexical_error(line, message)
    assert [(d.line, d.message) for d in sink] == reports
