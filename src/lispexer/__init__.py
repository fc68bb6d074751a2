"""Lispexer: a tiny Lisp-notation lexer, tree builder and arithmetic evaluator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lispexer.diagnostics import Diagnostic

__version__ = "0.1.0"


def run(
    source: str,
    filename: str = "input.lisp",
    diagnostics: list[Diagnostic] | None = None,
) -> list[int | None]:
    """Build and evaluate source text, returning one result per top-level form."""
    from lispexer.builder import build
    from lispexer.eval import evaluate_all

    root = build(source, filename, diagnostics)
    return [None if leaf is None else leaf.value for leaf in evaluate_all(root, diagnostics)]
