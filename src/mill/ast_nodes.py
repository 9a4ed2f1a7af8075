"""AST node definitions for the mill language.

Nodes are plain dataclasses, immutable by convention once the parser has
built them. Every node records the line/col of its first token.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional, Union


class UnaryOp(Enum):
    NEG = "-"
    NOT = "!"


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQ = "=="
    NO_EQ = "!="
    LT = "<"
    LT_EQ = "<="
    GT = ">"
    GT_EQ = ">="
    INDEX = "[]"
    AND = "&&"
    OR = "||"


# --- Expressions ---

@dataclass
class BoolLiteral:
    value: bool = False
    line: int = 0
    col: int = 0

@dataclass
class NullLiteral:
    line: int = 0
    col: int = 0

@dataclass
class IntLiteral:
    value: int = 0
    line: int = 0
    col: int = 0

@dataclass
class FloatLiteral:
    value: float = 0.0
    line: int = 0
    col: int = 0

@dataclass
class StringLiteral:
    value: str = ""
    line: int = 0
    col: int = 0

@dataclass
class Identifier:
    name: str = ""
    line: int = 0
    col: int = 0

@dataclass
class ArrayLiteral:
    elements: list[expr] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class MapEntry:
    key: expr = None
    value: expr = None

@dataclass
class MapLiteral:
    entries: list[MapEntry] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class FunctionLiteral:
    params: list[str] = field(default_factory=list)
    body: list[stmt] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class CallExpr:
    callee: expr = None
    args: list[expr] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class MemberExpr:
    obj: expr = None
    field: str = ""
    line: int = 0
    col: int = 0

@dataclass
class UnaryExpr:
    op: UnaryOp = UnaryOp.NEG
    operand: expr = None
    line: int = 0
    col: int = 0

@dataclass
class BinaryExpr:
    op: BinaryOp = BinaryOp.ADD
    left: expr = None
    right: expr = None
    line: int = 0
    col: int = 0


# --- Assignment targets ---

@dataclass
class IdentifierTarget:
    name: str = ""
    line: int = 0
    col: int = 0

@dataclass
class MemberTarget:
    obj: expr = None
    field: str = ""
    line: int = 0
    col: int = 0

@dataclass
class IndexTarget:
    obj: expr = None
    index: expr = None
    line: int = 0
    col: int = 0


# --- Statements ---

@dataclass
class LetStmt:
    name: str = ""
    initializer: expr = None
    line: int = 0
    col: int = 0

@dataclass
class AssignStmt:
    target: lvalue = None
    value: expr = None
    line: int = 0
    col: int = 0

@dataclass
class ExprStmt:
    expr: expr = None
    is_result: bool = False
    line: int = 0
    col: int = 0

@dataclass
class ReturnStmt:
    value: expr = None
    line: int = 0
    col: int = 0

@dataclass
class BreakStmt:
    line: int = 0
    col: int = 0

@dataclass
class ContinueStmt:
    line: int = 0
    col: int = 0

@dataclass
class LoopStmt:
    body: list[stmt] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class WhileStmt:
    condition: expr = None
    body: list[stmt] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class ForInStmt:
    var_name: str = ""
    iterable: expr = None
    body: list[stmt] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class IfBranch:
    condition: expr = None
    body: list[stmt] = field(default_factory=list)

@dataclass
class IfStmt:
    branches: list[IfBranch] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class Block:
    statements: list[stmt] = field(default_factory=list)
    line: int = 0
    col: int = 0

@dataclass
class Program:
    statements: list[stmt] = field(default_factory=list)
    result: Optional[expr] = None
    source_file: Optional[str] = None


# --- Sum type aliases ---

expr = Union[BoolLiteral, NullLiteral, IntLiteral, FloatLiteral, StringLiteral, Identifier, ArrayLiteral, MapLiteral, FunctionLiteral, CallExpr, MemberExpr, UnaryExpr, BinaryExpr]
lvalue = Union[IdentifierTarget, MemberTarget, IndexTarget]
stmt = Union[LetStmt, AssignStmt, ExprStmt, ReturnStmt, BreakStmt, ContinueStmt, LoopStmt, WhileStmt, ForInStmt, IfStmt, Block]


# --- Visitor ---

class NodeVisitor:
    """Base class for AST visitors. Override visit_* methods.

    generic_visit walks every child node (dataclass fields holding nodes or
    lists of nodes) in declaration order.
    """

    def visit(self, node):
        method = f"visit_{type(node).__name__}"
        visitor = getattr(self, method, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node):
        for f in fields(node):
            child = getattr(node, f.name)
            if isinstance(child, list):
                for item in child:
                    if _is_node(item):
                        self.visit(item)
            elif _is_node(child):
                self.visit(child)


def _is_node(value) -> bool:
    return hasattr(value, "__dataclass_fields__")
