"""Minimal LSP server for Lox expressions: publishes diagnostics only."""

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

from loxexpr import __version__
from loxexpr.errors import Diagnostic as LoxDiagnostic
from loxexpr.parser import parse

server = LanguageServer(
    "loxexpr-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def to_lsp_diagnostic(diagnostic: LoxDiagnostic, lines: list[str]) -> Diagnostic:
    """Convert a 1-based line diagnostic into an LSP diagnostic covering the line."""
    line = max(diagnostic.line - 1, 0)
    width = len(lines[line]) if line < len(lines) else 0
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=0),
            end=Position(line=line, character=width),
        ),
        message=f"Error{diagnostic.where}: {diagnostic.message}",
        severity=DiagnosticSeverity.Error,
        source="loxexpr",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Scan and parse the document and publish its diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    lines = source.splitlines()

    result = parse(source)
    diagnostics = [to_lsp_diagnostic(d, lines) for d in result.diagnostics]

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
