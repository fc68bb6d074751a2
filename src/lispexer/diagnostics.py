"""Diagnostics with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lispexer.tokens import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recoverable problem found while tokenizing, building or evaluating."""

    message: str
    span: Span
    severity: Severity = Severity.WARNING

    def format(self, source: str, filename: str = "input.lisp") -> str:
        """Render the message with the offending source line underlined."""
        start, end = self.span.start, self.span.end
        # Only LF starts a new line, matching the lexer's line count
        lines = source.split("\n")
        text = lines[start.line - 1].rstrip("\r") if 0 < start.line <= len(lines) else ""
        # A span running past its first line is underlined to the end of that line
        stop = end.column if end.line == start.line else len(text) + 1
        carets = "^" * max(1, stop - start.column)
        num = str(start.line)
        gutter = " " * len(num)
        return "\n".join(
            [
                f"{self.severity.value}: {self.message}",
                f"{gutter} --> {filename}:{start.line}:{start.column}",
                f"{gutter} |",
                f"{num} | {text}",
                f"{gutter} | {' ' * (start.column - 1)}{carets}",
            ]
        )


def report(
    diagnostics: list[Diagnostic] | None,
    message: str,
    span: Span,
    severity: Severity = Severity.WARNING,
) -> None:
    """Append a diagnostic to *diagnostics* unless the caller passed None."""
    if diagnostics is not None:
        diagnostics.append(Diagnostic(message, span, severity))
