"""Diagnostic computation for mill documents.

Runs the front end (lexer -> parser) on source text and converts the
first error into an LSP Diagnostic.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse, unquote

from lsprotocol import types as lsp

from mill.ast_nodes import Program
from mill.lexer import Lexer, LexerError
from mill.parser import Parser, ParseError
from mill.tokens import Token

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Cached result of analyzing a document."""

    uri: str
    source: str
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    tokens: Optional[list[Token]] = None
    ast: Optional[Program] = None


def uri_to_path(uri: str) -> str:
    """Convert file:// URI to filesystem path."""
    parsed = urlparse(uri)
    return unquote(parsed.path)


def _make_diagnostic(
    line: int,
    col: int,
    message: str,
    severity: lsp.DiagnosticSeverity = lsp.DiagnosticSeverity.Error,
    source: str = "mill",
) -> lsp.Diagnostic:
    """Create an LSP Diagnostic.

    mill uses 1-based line/col; LSP uses 0-based.
    """
    line_0 = max(0, line - 1)
    col_0 = max(0, col - 1)
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=line_0, character=col_0),
            end=lsp.Position(line=line_0, character=col_0 + 1),
        ),
        message=message,
        severity=severity,
        source=source,
    )


def compute_diagnostics(uri: str, source: str) -> AnalysisResult:
    """Lex and parse the document and return diagnostics."""
    result = AnalysisResult(uri=uri, source=source)
    filename = os.path.basename(uri_to_path(uri))

    # Lexing
    try:
        result.tokens = Lexer(source, filename).tokenize()
    except LexerError as e:
        result.diagnostics.append(_make_diagnostic(e.line, e.col, e.message))
        return result

    # Parsing
    try:
        result.ast = Parser(Lexer(source, filename)).parse()
    except ParseError as e:
        result.diagnostics.append(_make_diagnostic(e.line, e.col, e.message))
        return result

    logger.debug("%s: %d tokens, %d statements", filename,
                 len(result.tokens), len(result.ast.statements))
    return result
