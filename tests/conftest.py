"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lispexer.ast import EndMarker, Leaf, ListNode, Node
from lispexer.builder import build
from lispexer.classify import tokenize
from lispexer.diagnostics import Diagnostic
from lispexer.lexer import Lexer
from lispexer.tokens import Token, TokenType

END = "<end>"


@pytest.fixture
def lex():
    """Return a helper that scans source and returns the raw lexemes."""

    def _lex(source: str) -> list[str]:
        return [lexeme for lexeme, _ in Lexer(source)]

    return _lex


@pytest.fixture
def tokens():
    """Return a helper that tokenizes source and returns typed tokens."""

    def _tokens(source: str) -> list[Token]:
        return tokenize(source)

    return _tokens


@pytest.fixture
def build_source():
    """Return a helper that builds a tree and collects its diagnostics."""

    def _build(source: str, filename: str = "test.lisp") -> tuple[ListNode, list[Diagnostic]]:
        diagnostics: list[Diagnostic] = []
        root = build(source, filename, diagnostics)
        return root, diagnostics

    return _build


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[object]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def shape(node: Node) -> object:
    """Collapse a tree into plain values: leaves become their value, lists become lists."""
    if isinstance(node, ListNode):
        return [shape(child) for child in node.children]
    if isinstance(node, Leaf):
        return node.value
    assert isinstance(node, EndMarker)
    return END
