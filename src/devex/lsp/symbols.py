"""Document symbol provider for mill.

Walks the AST to produce a DocumentSymbol hierarchy for the Outline view:
`let` bindings at each level, functions with their bodies as children.
"""

from __future__ import annotations

from lsprotocol import types as lsp

from mill.ast_nodes import (
    Block,
    ForInStmt,
    FunctionLiteral,
    IfStmt,
    LetStmt,
    LoopStmt,
    WhileStmt,
)
from devex.lsp.diagnostics import AnalysisResult
from devex.lsp.utils import (
    find_closing_brace,
    find_token_after,
    function_signature,
    to_position,
)


def _selection_range(stmt: LetStmt, tokens) -> lsp.Range:
    """Selection range: the declared name (the token after `let`)."""
    name_tok = find_token_after(tokens, stmt.line, stmt.col) if tokens else None
    start = to_position(name_tok.line, name_tok.col) if name_tok else to_position(stmt.line, stmt.col)
    end = lsp.Position(line=start.line, character=start.character + len(stmt.name))
    return lsp.Range(start=start, end=end)


def _range_from_stmt(stmt: LetStmt, tokens, source_lines: list[str]) -> lsp.Range:
    start = to_position(stmt.line, stmt.col)

    if isinstance(stmt.initializer, FunctionLiteral) and tokens:
        closing = find_closing_brace(tokens, stmt.initializer.line, stmt.initializer.col)
        if closing is not None:
            return lsp.Range(start=start, end=to_position(closing.line, closing.col + 1))

    line_idx = max(0, stmt.line - 1)
    end_col = len(source_lines[line_idx]) if line_idx < len(source_lines) else 0
    return lsp.Range(start=start, end=lsp.Position(line=line_idx, character=end_col))


def _nested_bodies(stmt) -> list[list]:
    if isinstance(stmt, Block):
        return [stmt.statements]
    if isinstance(stmt, IfStmt):
        return [branch.body for branch in stmt.branches]
    if isinstance(stmt, (LoopStmt, WhileStmt, ForInStmt)):
        return [stmt.body]
    return []


def _symbols_for(statements, tokens, source_lines) -> list[lsp.DocumentSymbol]:
    symbols: list[lsp.DocumentSymbol] = []

    for stmt in statements:
        if isinstance(stmt, LetStmt):
            init = stmt.initializer
            if isinstance(init, FunctionLiteral):
                symbols.append(
                    lsp.DocumentSymbol(
                        name=stmt.name,
                        kind=lsp.SymbolKind.Function,
                        range=_range_from_stmt(stmt, tokens, source_lines),
                        selection_range=_selection_range(stmt, tokens),
                        detail=function_signature(init),
                        children=_symbols_for(init.body, tokens, source_lines),
                    )
                )
            else:
                symbols.append(
                    lsp.DocumentSymbol(
                        name=stmt.name,
                        kind=lsp.SymbolKind.Variable,
                        range=_range_from_stmt(stmt, tokens, source_lines),
                        selection_range=_selection_range(stmt, tokens),
                    )
                )
            continue

        # Bindings inside blocks and loops surface at the enclosing level
        for body in _nested_bodies(stmt):
            symbols.extend(_symbols_for(body, tokens, source_lines))

    return symbols


def get_document_symbols(result: AnalysisResult) -> list[lsp.DocumentSymbol]:
    """Extract document symbols from the parsed AST."""
    if not result.ast:
        return []
    source_lines = result.source.split("\n")
    return _symbols_for(result.ast.statements, result.tokens, source_lines)
