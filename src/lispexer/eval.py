"""Tree evaluator for the two-operator arithmetic forms ``(+ ...)`` and ``(- a b)``."""

from __future__ import annotations

from dataclasses import dataclass, field

from lispexer.ast import EndMarker, Leaf, ListNode, Node
from lispexer.diagnostics import Diagnostic, report
from lispexer.tokens import Token, TokenType

OPERATORS = frozenset({"+", "-"})


class _NotAValue(Exception):
    """Internal: abandons evaluation of a form once one operand fails."""


@dataclass(slots=True)
class _Frame:
    """One form being evaluated: its operator, operand nodes and values so far."""

    op: str
    operands: list[Node]
    values: list[int] = field(default_factory=list)

    def next_operand(self) -> Node | None:
        if len(self.values) < len(self.operands):
            return self.operands[len(self.values)]
        return None

    def result(self) -> int:
        if self.op == "+":
            return sum(self.values)
        a, b = self.values
        return a - b


def evaluate(node: ListNode, diagnostics: list[Diagnostic] | None = None) -> Leaf | None:
    """Evaluate one list form, returning an INT leaf or None if it has no value.

    The tree is never modified. Invalid shapes (too few children, an unknown
    operator, the wrong operand count or a non-integer operand) are not
    errors: they yield None and, when *diagnostics* is given, a warning.
    Nested forms are walked with an explicit stack, so depth is unbounded.
    """
    try:
        total = _evaluate(node, diagnostics)
    except _NotAValue:
        return None
    return Leaf(Token(TokenType.INT, total, str(total), node.span))


def _evaluate(node: ListNode, diagnostics: list[Diagnostic] | None) -> int:
    stack = [_open_form(node, diagnostics)]
    finished: int | None = None
    while stack:
        frame = stack[-1]
        if finished is not None:
            frame.values.append(finished)
            finished = None
        child = frame.next_operand()
        if child is None:
            stack.pop()
            finished = frame.result()
        elif isinstance(child, ListNode):
            stack.append(_open_form(child, diagnostics))
        else:
            frame.values.append(_leaf_value(child, diagnostics))
    assert finished is not None
    return finished


def _open_form(node: ListNode, diagnostics: list[Diagnostic] | None) -> _Frame:
    """Check a form's operator and arity and return a frame for its operands."""
    children = node.children
    if len(children) < 3:
        report(diagnostics, "form needs an operator and at least one operand", node.span)
        raise _NotAValue

    op = children[0]
    if not (isinstance(op, Leaf) and op.type == TokenType.IDENT):
        report(diagnostics, "form must start with an operator", op.span)
        raise _NotAValue
    if op.value not in OPERATORS:
        report(diagnostics, f"unsupported operator '{op.value}'", op.span)
        raise _NotAValue

    if op.value == "+":
        operands = [c for c in children[1:] if not isinstance(c, EndMarker)]
        return _Frame("+", operands)

    # Operator, two operands and the end marker
    if len(children) != 4 or not isinstance(children[3], EndMarker):
        if node.closed:
            message = f"operator '-' expects 2 operands, got {len(children) - 2}"
        else:
            message = "operator '-' needs a closed form"
        report(diagnostics, message, node.span)
        raise _NotAValue
    return _Frame("-", children[1:3])


def _leaf_value(child: Node, diagnostics: list[Diagnostic] | None) -> int:
    if isinstance(child, Leaf) and child.type == TokenType.INT:
        return child.value  # type: ignore[return-value]
    if isinstance(child, Leaf):
        report(
            diagnostics,
            f"operand must be an integer, got {child.type.name.lower()}",
            child.span,
        )
    else:
        report(diagnostics, "missing operand", child.span)
    raise _NotAValue


def evaluate_tree(root: ListNode, diagnostics: list[Diagnostic] | None = None) -> Leaf | None:
    """Evaluate the first top-level form of a tree."""
    if not root.children:
        report(diagnostics, "no expression to evaluate", root.span)
        return None
    first = root.children[0]
    if not isinstance(first, ListNode):
        report(diagnostics, "expected a list at top level", first.span)
        return None
    return evaluate(first, diagnostics)


def evaluate_all(root: ListNode, diagnostics: list[Diagnostic] | None = None) -> list[Leaf | None]:
    """Evaluate every top-level list form in source order."""
    results: list[Leaf | None] = []
    for child in root.children:
        if isinstance(child, ListNode):
            results.append(evaluate(child, diagnostics))
        else:
            report(diagnostics, "expected a list at top level", child.span)
            results.append(None)
    if not results:
        report(diagnostics, "no expression to evaluate", root.span)
    return results
