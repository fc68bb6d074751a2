"""Escape resolution for string literals."""

from __future__ import annotations


def unescape(content: str) -> str:
    """Resolve backslash escapes in string literal content.

    A backslash makes the following character literal: ``\\"`` becomes ``"``
    and ``\\\\`` becomes ``\\``. There are no named escapes, so ``\\n`` is
    just ``n``. A lone trailing backslash is kept as is.
    """
    if "\\" not in content:
        return content

    chars: list[str] = []
    escaping = False
    for ch in content:
        if escaping:
            chars.append(ch)
            escaping = False
        elif ch == "\\":
            escaping = True
        else:
            chars.append(ch)
    if escaping:
        chars.append("\\")
    return "".join(chars)


def is_closed_string(lexeme: str) -> bool:
    """Return True if a string lexeme ends with an unescaped closing quote."""
    if len(lexeme) < 2 or not lexeme.endswith('"'):
        return False
    backslashes = 0
    idx = len(lexeme) - 2
    # The opening quote at index 0 cannot be escaped
    while idx > 0 and lexeme[idx] == "\\":
        backslashes += 1
        idx -= 1
    return backslashes % 2 == 0
