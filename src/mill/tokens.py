"""Token type definitions for the mill language.

Keyword and symbol tables live here, together with the binding-power
tables the expression parser climbs on.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Union


class TokenType(Enum):
    # Literals
    IDENT = auto()
    INT_LIT = auto()
    FLOAT_LIT = auto()
    STRING_LIT = auto()

    # Keywords
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    FN = auto()
    RETURN = auto()
    LET = auto()
    IF = auto()
    ELSE = auto()
    LOOP = auto()
    BREAK = auto()
    CONTINUE = auto()
    FOR = auto()
    IN = auto()
    WHILE = auto()

    # Punctuation
    COLON = auto()         # :
    SEMICOLON = auto()     # ;
    COMMA = auto()         # ,
    DOT = auto()           # .

    # Delimiters
    LPAREN = auto()        # (
    RPAREN = auto()        # )
    LBRACE = auto()        # {
    RBRACE = auto()        # }
    LBRACKET = auto()      # [
    RBRACKET = auto()      # ]

    # Operators
    PLUS = auto()          # +
    MINUS = auto()         # -
    STAR = auto()          # *
    SLASH = auto()         # /
    PERCENT = auto()       # %
    EQ_EQ = auto()         # ==
    EQ = auto()            # =
    BANG_EQ = auto()       # !=
    BANG = auto()          # !
    LT_EQ = auto()         # <=
    LT = auto()            # <
    GT_EQ = auto()         # >=
    GT = auto()            # >
    AMP_AMP = auto()       # &&
    PIPE_PIPE = auto()     # ||

    # Special
    EOF = auto()


@dataclass
class Token:
    type: TokenType
    value: Union[str, int, float]
    line: int
    col: int
    # Source spelling, sliced from the input (string literals keep their quotes)
    text: str = ""

    def describe(self) -> str:
        """Human-readable form used in "expected X, found Y" messages."""
        if self.type == TokenType.EOF:
            return "end of file"
        if self.type == TokenType.IDENT:
            return f"identifier '{self.value}'"
        if self.type == TokenType.INT_LIT:
            return f"integer '{self.value}'"
        if self.type == TokenType.FLOAT_LIT:
            return f"float '{self.value}'"
        if self.type == TokenType.STRING_LIT:
            return f'string "{self.value}"'
        if self.type in KEYWORD_TYPES:
            return f"keyword '{self.value}'"
        return f"symbol '{self.value}'"

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"


# Range of the 32-bit signed integers mill computes with
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

# Keyword lookup table: string -> TokenType
KEYWORDS: dict[str, TokenType] = {
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "fn": TokenType.FN,
    "return": TokenType.RETURN,
    "let": TokenType.LET,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "loop": TokenType.LOOP,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "while": TokenType.WHILE,
}

KEYWORD_TYPES: set[TokenType] = set(KEYWORDS.values())

# Single-character symbols
SYMBOLS: dict[str, TokenType] = {
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.EQ,
    "!": TokenType.BANG,
    "<": TokenType.LT,
    ">": TokenType.GT,
}

# Two-character operators, matched before their single-character prefixes
DOUBLE_SYMBOLS: dict[str, TokenType] = {
    "==": TokenType.EQ_EQ,
    "!=": TokenType.BANG_EQ,
    "<=": TokenType.LT_EQ,
    ">=": TokenType.GT_EQ,
    "&&": TokenType.AMP_AMP,
    "||": TokenType.PIPE_PIPE,
}

# Tokens after which a '-' starts an operator rather than a negative literal
OPERAND_END_TYPES: set[TokenType] = {
    TokenType.IDENT, TokenType.INT_LIT, TokenType.FLOAT_LIT,
    TokenType.STRING_LIT, TokenType.TRUE, TokenType.FALSE, TokenType.NULL,
    TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE,
}

# Binding powers (higher binds tighter)
PREFIX_BP: dict[TokenType, int] = {
    TokenType.MINUS: 9,
    TokenType.BANG: 9,
}

POSTFIX_BP: dict[TokenType, int] = {
    TokenType.LBRACKET: 10,
    TokenType.LPAREN: 10,
}

INFIX_BP: dict[TokenType, tuple[int, int]] = {
    TokenType.AMP_AMP: (1, 2),
    TokenType.PIPE_PIPE: (1, 2),
    TokenType.EQ_EQ: (3, 4),
    TokenType.BANG_EQ: (3, 4),
    TokenType.LT: (3, 4),
    TokenType.LT_EQ: (3, 4),
    TokenType.GT: (3, 4),
    TokenType.GT_EQ: (3, 4),
    TokenType.PLUS: (5, 6),
    TokenType.MINUS: (5, 6),
    TokenType.STAR: (7, 8),
    TokenType.SLASH: (7, 8),
    TokenType.PERCENT: (7, 8),
    TokenType.DOT: (11, 12),
}
