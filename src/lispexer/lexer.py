"""Incremental lexer — scans source text one raw lexeme per call."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum, auto

from lispexer.tokens import Position, Span, is_whitespace


class _State(Enum):
    NORMAL = auto()
    IN_STRING = auto()
    ESCAPING = auto()


class Lexer:
    """Split source text into raw lexemes, tracking line and column.

    Each call to :meth:`next` returns the text of one lexeme, or ``""`` once
    the input is exhausted. The lexer never classifies anything; that is the
    job of :func:`lispexer.classify.classify`.
    """

    def __init__(self, source: str, filename: str = "input.lisp") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._lexeme: list[str] = []
        self._previous = self.position
        self._start = self.position
        self._terminated = True

    @property
    def source(self) -> str:
        return self._source

    @property
    def filename(self) -> str:
        return self._filename

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    @property
    def position(self) -> Position:
        """Current cursor position."""
        return Position(self._line, self._col, self._pos)

    @property
    def previous(self) -> Position:
        """Cursor position snapshotted at the start of the last ``next()`` call."""
        return self._previous

    @property
    def start(self) -> Position:
        """Position of the first character of the last lexeme."""
        return self._start

    @property
    def span(self) -> Span:
        """Span of the last lexeme."""
        return Span(self._start, self.position)

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._source)

    @property
    def terminated(self) -> bool:
        """False if the last lexeme was a string cut short by end of input."""
        return self._terminated

    def _peek(self) -> str:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _take(self) -> None:
        """Consume the current character into the lexeme."""
        if not self._lexeme:
            self._start = self.position
        self._lexeme.append(self._advance())

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Rewind to the start of the buffer."""
        self._pos = 0
        self._line = 1
        self._col = 1
        self._lexeme.clear()
        self._previous = self.position
        self._start = self.position
        self._terminated = True

    def next(self) -> str:
        """Scan and return the next lexeme, or ``""`` at end of input."""
        self._lexeme.clear()
        self._previous = self.position
        self._start = self.position
        self._terminated = True
        state = _State.NORMAL

        while self._pos < len(self._source):
            ch = self._peek()

            if state == _State.ESCAPING:
                self._take()
                state = _State.IN_STRING
                continue

            if state == _State.IN_STRING:
                self._take()
                if ch == "\\":
                    state = _State.ESCAPING
                elif ch == '"':
                    state = _State.NORMAL
                    break
                continue

            if is_whitespace(ch):
                self._advance()
                if self._lexeme:
                    break
                continue

            if ch == '"':
                if self._lexeme:
                    break
                self._take()
                state = _State.IN_STRING
                continue

            if ch in "()":
                # A paren directly after other text is left for the next call
                if not self._lexeme:
                    self._take()
                break

            self._take()

        if state != _State.NORMAL:
            self._terminated = False
        return "".join(self._lexeme)

    def __iter__(self) -> Iterator[tuple[str, Span]]:
        while True:
            lexeme = self.next()
            if not lexeme:
                return
            yield lexeme, self.span


def lexemes(source: str, filename: str = "input.lisp") -> list[tuple[str, Span]]:
    """Convenience function: scan source text into (lexeme, span) pairs."""
    return list(Lexer(source, filename))
