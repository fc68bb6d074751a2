"""Minimal LSP server for lispexer — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lispexer import __version__
from lispexer.builder import build
from lispexer.diagnostics import Diagnostic as SourceDiagnostic
from lispexer.diagnostics import Severity
from lispexer.eval import evaluate_all

server = LanguageServer("lispexer-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)

_SEVERITY = {
    Severity.ERROR: DiagnosticSeverity.Error,
    Severity.WARNING: DiagnosticSeverity.Warning,
}


def _to_lsp(diag: SourceDiagnostic) -> Diagnostic:
    start = diag.span.start
    end = diag.span.end
    end_col = end.column - 1
    # Zero-width spans still get one highlighted character
    if end.line == start.line and end_col <= start.column - 1:
        end_col = start.column
    return Diagnostic(
        range=Range(
            start=Position(line=start.line - 1, character=start.column - 1),
            end=Position(line=end.line - 1, character=end_col),
        ),
        message=diag.message,
        severity=_SEVERITY[diag.severity],
        source="lispexer",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the lispexer pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    found: list[SourceDiagnostic] = []

    root = build(source, filename, found)
    if root.children:
        evaluate_all(root, found)

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=[_to_lsp(d) for d in found])
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
