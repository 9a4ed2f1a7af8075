"""Hover provider for mill.

Shows keyword documentation and where an identifier was declared.
"""

from typing import Optional

from lsprotocol import types as lsp

from mill.tokens import TokenType
from devex.lsp.diagnostics import AnalysisResult
from devex.lsp.utils import (
    KEYWORD_DOCS,
    declarations_before,
    find_token_at_position,
    to_position,
)


def _identifier_hover(result: AnalysisResult, name: str, line: int) -> Optional[str]:
    if not result.ast:
        return None
    decl = declarations_before(result.ast, line).get(name)
    if decl is None:
        return None
    if decl.kind == "function":
        header = f"let {name} = {decl.detail}"
    elif decl.kind == "parameter":
        header = f"{name}  // parameter of {decl.detail}"
    else:
        header = f"{name}  // {decl.kind}"
    return f"```mill\n{header}\n```\nDeclared at line {decl.line}"


def get_hover_info(
    result: AnalysisResult, position: lsp.Position
) -> Optional[lsp.Hover]:
    """Return hover information for the token at the given position."""
    if not result.tokens:
        return None

    token = find_token_at_position(result.tokens, position)
    if token is None:
        return None

    content: Optional[str] = None
    if token.type != TokenType.STRING_LIT and token.text in KEYWORD_DOCS:
        content = f"**`{token.text}`**: {KEYWORD_DOCS[token.text]}"
    elif token.type == TokenType.IDENT:
        content = _identifier_hover(result, token.value, token.line)

    if content is None:
        return None

    start = to_position(token.line, token.col)
    return lsp.Hover(
        contents=lsp.MarkupContent(
            kind=lsp.MarkupKind.Markdown,
            value=content,
        ),
        range=lsp.Range(
            start=start,
            end=lsp.Position(line=start.line, character=start.character + len(token.text)),
        ),
    )
