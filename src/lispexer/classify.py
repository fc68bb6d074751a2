"""Token classifier — turns raw lexemes into typed tokens."""

from __future__ import annotations

import re

from lispexer.diagnostics import Diagnostic, Severity, report
from lispexer.lexer import Lexer
from lispexer.strings import is_closed_string, unescape
from lispexer.tokens import Span, Syntax, Token, TokenType, is_digit

_LEADING_DIGITS = re.compile(r"[0-9]+")


def _parse_int(text: str) -> int:
    """Parse the leading digit run, ignoring whatever follows (``12ab`` -> 12)."""
    match = _LEADING_DIGITS.match(text)
    return int(match.group()) if match else 0


def classify(
    lexeme: str,
    span: Span,
    diagnostics: list[Diagnostic] | None = None,
) -> Token:
    """Classify one raw lexeme into a Token."""
    if not lexeme:
        return Token(TokenType.MALFORMED, None, lexeme, span)

    first = lexeme[0]

    if first == '"':
        if len(lexeme) < 2:
            report(
                diagnostics,
                "string literal should be at least 2 characters long",
                span,
                Severity.ERROR,
            )
            return Token(TokenType.MALFORMED, None, lexeme, span)
        if not is_closed_string(lexeme):
            report(diagnostics, "unterminated string literal", span)
        # An unterminated literal loses its last character, same as a closed one
        return Token(TokenType.STRING, unescape(lexeme[1:-1]), lexeme, span)

    if is_digit(first):
        return Token(TokenType.INT, _parse_int(lexeme), lexeme, span)

    if lexeme == "(":
        return Token(TokenType.SYNTAX, Syntax.OPEN_PAREN, lexeme, span)

    if lexeme == ")":
        return Token(TokenType.SYNTAX, Syntax.CLOSE_PAREN, lexeme, span)

    return Token(TokenType.IDENT, lexeme, lexeme, span)


def tokenize(
    source: str,
    filename: str = "input.lisp",
    diagnostics: list[Diagnostic] | None = None,
) -> list[Token]:
    """Convenience function: lex and classify source text into a token list."""
    return [classify(lexeme, span, diagnostics) for lexeme, span in Lexer(source, filename)]
