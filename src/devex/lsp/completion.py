"""Code completion provider for mill.

Provides keyword completions and identifiers declared before the cursor.
"""

import re

from lsprotocol import types as lsp

from devex.lsp.diagnostics import AnalysisResult
from devex.lsp.utils import KEYWORD_DOCS, declarations_before, get_text_before_cursor

_KIND_MAP = {
    "function": lsp.CompletionItemKind.Function,
    "variable": lsp.CompletionItemKind.Variable,
    "parameter": lsp.CompletionItemKind.Variable,
    "loop variable": lsp.CompletionItemKind.Variable,
}


def _keyword_completions() -> list[lsp.CompletionItem]:
    items = []
    for kw, doc in KEYWORD_DOCS.items():
        items.append(
            lsp.CompletionItem(
                label=kw,
                kind=lsp.CompletionItemKind.Keyword,
                detail=doc,
                insert_text=kw,
            )
        )
    return items


def _identifier_completions(result: AnalysisResult, position: lsp.Position) -> list[lsp.CompletionItem]:
    if not result.ast:
        return []
    items = []
    for name, decl in declarations_before(result.ast, position.line + 1).items():
        items.append(
            lsp.CompletionItem(
                label=name,
                kind=_KIND_MAP[decl.kind],
                detail=decl.detail or decl.kind,
            )
        )
    return items


def get_completions(
    result: AnalysisResult,
    position: lsp.Position,
) -> list[lsp.CompletionItem]:
    """Compute completion items for the given cursor position."""
    text_before = get_text_before_cursor(result.source, position)

    # Member access has no static information to offer
    if re.search(r"\.\s*\w*$", text_before):
        return []

    prefix_match = re.search(r"(\w+)$", text_before)
    prefix = prefix_match.group(1) if prefix_match else ""

    items = _keyword_completions() + _identifier_completions(result, position)
    if prefix:
        items = [item for item in items if item.label.startswith(prefix)]
    return items
