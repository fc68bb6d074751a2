"""Tree node types built from a token stream."""

from __future__ import annotations

from dataclasses import dataclass, field

from lispexer.tokens import Span, Token, TokenType


@dataclass(frozen=True, slots=True)
class Leaf:
    """An INT, IDENT or STRING token placed in the tree."""

    token: Token

    @property
    def type(self) -> TokenType:
        return self.token.type

    @property
    def value(self) -> int | str:
        return self.token.value  # type: ignore[return-value]

    @property
    def span(self) -> Span:
        return self.token.span


@dataclass(frozen=True, slots=True)
class EndMarker:
    """The closing paren of a list; always the last child of a closed list."""

    span: Span


@dataclass(slots=True)
class ListNode:
    """A parenthesized form. The root of a tree is a ListNode that never closes."""

    span: Span
    children: list[Node] = field(default_factory=list)

    @property
    def closed(self) -> bool:
        return bool(self.children) and isinstance(self.children[-1], EndMarker)

    @property
    def items(self) -> list[Node]:
        """Children without the trailing end marker."""
        if self.closed:
            return self.children[:-1]
        return list(self.children)


Node = Leaf | ListNode | EndMarker
