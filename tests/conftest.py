"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from loxexpr.ast import Expr
from loxexpr.errors import Diagnostics
from loxexpr.parser import ParseResult, parse
from loxexpr.scanner import scan
from loxexpr.tokens import Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _lex(source: str, diagnostics: Diagnostics | None = None) -> list[Token]:
        tokens = scan(source, diagnostics)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.kind != TokenKind.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns the expression, asserting success."""

    def _parse(source: str) -> Expr:
        result = parse(source)
        assert result.ok, [str(d) for d in result.diagnostics]
        assert result.expression is not None
        return result.expression

    return _parse


@pytest.fixture
def parse_failure():
    """Return a helper that parses source and asserts that it failed."""

    def _parse(source: str) -> ParseResult:
        result = parse(source)
        assert result.expression is None
        assert result.diagnostics.had_error
        return result

    return _parse


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [t.lexeme for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def tok(kind: TokenKind, lexeme: str, line: int = 1) -> Token:
    """Build an operator token for hand-constructed trees."""
    return Token(kind, lexeme, None, line)
