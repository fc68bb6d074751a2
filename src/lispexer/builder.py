"""Tree builder — assembles a token stream into nested lists."""

from __future__ import annotations

from lispexer.ast import EndMarker, Leaf, ListNode
from lispexer.classify import classify
from lispexer.diagnostics import Diagnostic, report
from lispexer.lexer import Lexer
from lispexer.tokens import Position, Span, Syntax, Token, TokenType

_ORIGIN = Position(1, 1, 0)


class TreeBuilder:
    """Append tokens one at a time to a growing tree.

    The insertion point is found by walking down from the root through the
    last child of each list for as long as that child is an unclosed list.
    No recursion is involved, and no extra stack is kept: a closed list
    (one whose last child is an EndMarker) stops the walk.
    """

    def __init__(self, diagnostics: list[Diagnostic] | None = None) -> None:
        self._root = ListNode(Span(_ORIGIN, _ORIGIN))
        self._diagnostics = diagnostics

    @property
    def root(self) -> ListNode:
        return self._root

    def _target(self) -> ListNode:
        target = self._root
        while target.children:
            last = target.children[-1]
            if isinstance(last, ListNode) and not last.closed:
                target = last
            else:
                break
        return target

    def _open_lists(self) -> list[ListNode]:
        """Every unclosed list below the root, outermost first."""
        chain: list[ListNode] = []
        target = self._root
        while target.children:
            last = target.children[-1]
            if not isinstance(last, ListNode) or last.closed:
                break
            chain.append(last)
            target = last
        return chain

    def append(self, token: Token) -> None:
        """Add one token to the tree."""
        if token.type == TokenType.MALFORMED:
            return

        target = self._target()

        if token.type in (TokenType.INT, TokenType.IDENT, TokenType.STRING):
            target.children.append(Leaf(token))
        elif token.is_syntax(Syntax.OPEN_PAREN):
            target.children.append(ListNode(token.span))
        elif token.is_syntax(Syntax.CLOSE_PAREN):
            if target is self._root:
                report(self._diagnostics, "unexpected ')' with no open list", token.span)
                return
            target.children.append(EndMarker(token.span))
            target.span = Span(target.span.start, token.span.end)

    def finish(self) -> ListNode:
        """Return the root, reporting any list left open at end of input."""
        for node in self._open_lists():
            report(self._diagnostics, "unclosed '(' at end of input", node.span)
        return self._root


def build(
    source: str,
    filename: str = "input.lisp",
    diagnostics: list[Diagnostic] | None = None,
) -> ListNode:
    """Lex, classify and assemble source text into a tree rooted at a ListNode."""
    lexer = Lexer(source, filename)
    builder = TreeBuilder(diagnostics)
    while True:
        lexeme = lexer.next()
        if not lexeme:
            break
        builder.append(classify(lexeme, lexer.span, diagnostics))
    root = builder.finish()
    root.span = Span(_ORIGIN, lexer.position)
    return root
