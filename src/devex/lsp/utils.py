"""Shared utility functions for the mill LSP feature modules.

Token lookup, declaration collection and keyword documentation used by
completion, hover and symbols.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lsprotocol import types as lsp

from mill.ast_nodes import (
    ForInStmt,
    FunctionLiteral,
    LetStmt,
    NodeVisitor,
    Program,
)
from mill.tokens import Token, TokenType


KEYWORD_DOCS = {
    "let": "Declares a variable in the current scope.",
    "fn": "Function literal: `fn(a, b) { ... }`.",
    "return": "Returns a value from the enclosing function.",
    "if": "Conditional branch; the condition must be a bool.",
    "else": "Alternative branch of an if statement.",
    "loop": "Repeats its body until `break` or `return`.",
    "while": "Repeats its body while the condition is true.",
    "for": "Iterates over array elements, map keys or string characters.",
    "in": "Separates the loop variable from the iterable in a for loop.",
    "break": "Exits the innermost loop.",
    "continue": "Skips to the next iteration of the innermost loop.",
    "true": "Boolean literal true.",
    "false": "Boolean literal false.",
    "null": "The null value.",
}


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def function_signature(func: FunctionLiteral) -> str:
    return f"fn({', '.join(func.params)})"


def to_position(line: int, col: int) -> lsp.Position:
    """Convert 1-based mill position to 0-based LSP position."""
    return lsp.Position(line=max(0, line - 1), character=max(0, col - 1))


# ---------------------------------------------------------------------------
# Token lookup
# ---------------------------------------------------------------------------


def find_token_at_position(
    tokens: list[Token], position: lsp.Position
) -> Optional[Token]:
    """Find the token that covers the given 0-based LSP position."""
    target_line = position.line + 1
    target_col = position.character + 1

    for tok in tokens:
        if tok.type == TokenType.EOF:
            continue
        if tok.line != target_line:
            continue
        tok_end_col = tok.col + len(tok.text)
        if tok.col <= target_col < tok_end_col:
            return tok
    return None


def find_token_after(tokens: list[Token], line: int, col: int) -> Optional[Token]:
    """Return the token following the one that starts at line:col."""
    for i, tok in enumerate(tokens):
        if tok.line == line and tok.col == col:
            return tokens[i + 1] if i + 1 < len(tokens) else None
    return None


def find_closing_brace(tokens: list[Token], line: int, col: int) -> Optional[Token]:
    """Find the '}' matching the first '{' at or after line:col."""
    depth = 0
    found_open = False
    for tok in tokens:
        if (tok.line, tok.col) < (line, col):
            continue
        if tok.type == TokenType.LBRACE:
            depth += 1
            found_open = True
        elif tok.type == TokenType.RBRACE:
            depth -= 1
            if found_open and depth == 0:
                return tok
    return None


def get_text_before_cursor(source: str, position: lsp.Position) -> str:
    """Get the text on the current line before the cursor."""
    lines = source.split("\n")
    if 0 <= position.line < len(lines):
        return lines[position.line][: position.character]
    return ""


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass
class Declaration:
    name: str
    kind: str  # "variable", "function", "parameter" or "loop variable"
    line: int
    col: int
    detail: str = ""


class _DeclarationCollector(NodeVisitor):
    def __init__(self):
        self.declarations: list[Declaration] = []

    def visit_LetStmt(self, node: LetStmt):
        if isinstance(node.initializer, FunctionLiteral):
            detail = function_signature(node.initializer)
            self.declarations.append(
                Declaration(node.name, "function", node.line, node.col, detail))
        else:
            self.declarations.append(
                Declaration(node.name, "variable", node.line, node.col))
        self.generic_visit(node)

    def visit_FunctionLiteral(self, node: FunctionLiteral):
        for param in node.params:
            self.declarations.append(
                Declaration(param, "parameter", node.line, node.col,
                            function_signature(node)))
        self.generic_visit(node)

    def visit_ForInStmt(self, node: ForInStmt):
        self.declarations.append(
            Declaration(node.var_name, "loop variable", node.line, node.col))
        self.generic_visit(node)


def collect_declarations(program: Program) -> list[Declaration]:
    """All declarations in source order (nested bodies included)."""
    collector = _DeclarationCollector()
    for stmt in program.statements:
        collector.visit(stmt)
    if program.result is not None:
        collector.visit(program.result)
    return collector.declarations


def declarations_before(program: Program, line: int) -> dict[str, Declaration]:
    """Latest declaration of each name starting on or before a 1-based line."""
    visible: dict[str, Declaration] = {}
    for decl in collect_declarations(program):
        if decl.line <= line:
            visible[decl.name] = decl
    return visible
