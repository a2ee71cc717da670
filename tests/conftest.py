import pytest

from lox.lox_diagnostics import DiagnosticCollector


@pytest.fixture
def sink() -> DiagnosticCollector:
    return DiagnosticCollector()
