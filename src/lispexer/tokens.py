"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    INT = auto()  # leading ASCII digit, permissive decimal parse
    IDENT = auto()  # any other non-whitespace, non-paren run
    STRING = auto()  # "..." — value excludes delimiters, escapes resolved
    SYNTAX = auto()  # ( or )
    MALFORMED = auto()  # empty lexeme or too-short string literal


class Syntax(Enum):
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A classified token with its payload and original lexeme text.

    ``value`` depends on ``type``: ``int`` for INT, ``str`` for IDENT and
    STRING, a ``Syntax`` member for SYNTAX and ``None`` for MALFORMED.
    """

    type: TokenType
    value: int | str | Syntax | None
    raw: str
    span: Span

    def is_syntax(self, syntax: Syntax) -> bool:
        return self.type == TokenType.SYNTAX and self.value is syntax


WHITESPACE = frozenset(" \n\r")


def is_whitespace(ch: str) -> bool:
    """Return True for the three separator characters: space, LF and CR."""
    return ch in WHITESPACE


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII digit (unicode digits do not count)."""
    return "0" <= ch <= "9"
