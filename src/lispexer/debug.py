"""--tokens and --debug dumps to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import TextIO

from lispexer.ast import EndMarker, Leaf, ListNode, Node
from lispexer.tokens import Syntax, Token, TokenType

_RED = "\x1b[31m"
_RESET = "\x1b[0m"


def display_kind(tt: TokenType, *, color: bool = False) -> str:
    """Lower-case kind name used in dumps; MALFORMED is shouted, in red if asked."""
    if tt == TokenType.MALFORMED:
        return f"{_RED}MALFORMED{_RESET}" if color else "MALFORMED"
    return {
        TokenType.INT: "int",
        TokenType.IDENT: "ident",
        TokenType.STRING: "string",
        TokenType.SYNTAX: "syntax",
    }[tt]


def format_token(tok: Token, *, color: bool = False) -> str:
    kind = display_kind(tok.type, color=color)
    if tok.type == TokenType.MALFORMED:
        return kind
    if isinstance(tok.value, Syntax):
        return f"{kind}: {tok.value.value}"
    return f"{kind}: {tok.value}"


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr, color: bool = False) -> None:
    """Print one token per line, prefixed with its line:column."""
    for tok in tokens:
        pos = tok.span.start
        file.write(f"{pos.line}:{pos.column} {format_token(tok, color=color)}\n")


def dump_tree(root: ListNode, *, file: TextIO = sys.stderr, color: bool = False) -> None:
    """Print a human-readable tree to *file*, one line per node."""
    # (remaining children, depth) per open list; no recursion
    stack: list[tuple[Iterator[Node], int]] = [(iter(root.children), 0)]
    while stack:
        children, depth = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
        elif isinstance(child, ListNode):
            file.write(f"{_marker(depth)}list\n")
            stack.append((iter(child.children), depth + 1))
        elif isinstance(child, Leaf):
            file.write(f"{_marker(depth)}{format_token(child.token, color=color)}\n")
        elif isinstance(child, EndMarker):
            file.write(f"{_marker(depth)}end\n")


def _marker(depth: int) -> str:
    return "| " * depth
