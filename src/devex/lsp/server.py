#!/usr/bin/env python3
"""mill Language Server.

Provides diagnostics, document symbols, hover and code completion for
.mill files by reusing the interpreter's lexer and parser.
"""

import sys
import logging

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from devex.lsp.diagnostics import AnalysisResult, compute_diagnostics
from devex.lsp.symbols import get_document_symbols
from devex.lsp.hover import get_hover_info
from devex.lsp.completion import get_completions

logger = logging.getLogger("mill-lsp")

server = LanguageServer("mill-lsp", "0.1.0")

# Cache: uri -> AnalysisResult (latest, may have errors)
_analysis_cache: dict[str, AnalysisResult] = {}

# Cache: uri -> AnalysisResult (last one that parsed cleanly)
_good_analysis_cache: dict[str, AnalysisResult] = {}


def _validate_document(uri: str, source: str):
    """Run the front end and publish diagnostics."""
    result = compute_diagnostics(uri, source)
    _analysis_cache[uri] = result
    if result.ast:
        _good_analysis_cache[uri] = result
    logger.info("%s: %d diagnostic(s)", uri, len(result.diagnostics))
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=result.diagnostics)
    )


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams):
    _validate_document(
        params.text_document.uri,
        params.text_document.text,
    )


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    _validate_document(params.text_document.uri, doc.source)


@server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
def did_save(params: lsp.DidSaveTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    _validate_document(params.text_document.uri, doc.source)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    _analysis_cache.pop(uri, None)
    _good_analysis_cache.pop(uri, None)
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams):
    result = _analysis_cache.get(params.text_document.uri)
    if result and result.ast:
        return get_document_symbols(result)
    return []


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams):
    result = _analysis_cache.get(params.text_document.uri)
    if result:
        return get_hover_info(result, params.position)
    return None


@server.feature(lsp.TEXT_DOCUMENT_COMPLETION)
def completion(params: lsp.CompletionParams):
    uri = params.text_document.uri

    doc = server.workspace.get_text_document(uri)
    current_source = doc.source if doc else None

    # While typing the buffer rarely parses; fall back to the last good AST
    result = _analysis_cache.get(uri)
    if result and not result.ast:
        good = _good_analysis_cache.get(uri)
        if good:
            result = good

    if not result and current_source:
        result = compute_diagnostics(uri, current_source)
        _analysis_cache[uri] = result

    if result:
        # Cursor context always comes from the live buffer
        if current_source and result.source != current_source:
            result = AnalysisResult(
                uri=result.uri,
                source=current_source,
                diagnostics=result.diagnostics,
                tokens=result.tokens,
                ast=result.ast,
            )
        return get_completions(result, params.position)
    return []


def main():
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    server.start_io()


if __name__ == "__main__":
    main()
