"""Error taxonomies for mill: parse-time (lexical + syntactic) and runtime.

Both are fatal for the pass that raised them; nothing is recovered or
collected. Every error carries the 1-based line/col it was raised at.
"""

from enum import Enum
from typing import Optional


class ParseErrorKind(Enum):
    # Lexer
    UNEXPECTED_CHARACTER = "unexpected character"
    NON_ASCII_BYTE = "non ASCII byte"
    INVALID_INTEGER_LITERAL = "invalid integer literal"
    UNTERMINATED_STRING = "unterminated string literal"

    # Parser
    UNEXPECTED_TOKEN = "unexpected token"
    UNTERMINATED_BLOCK = "unterminated block"
    EXPRESSION_NOT_ASSIGNABLE = "expression not assignable"


class ParseError(Exception):
    def __init__(self, kind: ParseErrorKind, message: str, line: int, col: int,
                 source_file: Optional[str] = None, expected: Optional[str] = None,
                 found: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.line = line
        self.col = col
        self.source_file = source_file
        self.expected = expected
        self.found = found
        super().__init__(f"{message} at {line}:{col}")

    @classmethod
    def unexpected_token(cls, expected: str, token, source_file: Optional[str] = None):
        return cls(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Expected {expected}, found {token.describe()}",
            token.line, token.col,
            source_file=source_file, expected=expected, found=token.describe(),
        )


class ErrorKind(Enum):
    REDECLARATION = "Redeclaration"
    UNKNOWN_IDENTIFIER = "Unknown identifier"
    UNSUPPORTED_OPERATION = "Unsupported operation"
    EXPECTED_BOOL = "Expected bool"
    EXPECTED_FUNCTION = "Expected function"
    WRONG_ARGUMENT_COUNT = "Wrong argument count"
    MAP_KEY_NOT_HASHABLE = "Map key not hashable"
    UPWARD_CONTROL_FLOW_REACHED_TOP_LEVEL = "Upward control flow reached top level"
    LOOP_CONTROL_FLOW_REACHED_FUNCTION = "Loop control flow reached function"
    INDEX_OUT_OF_BOUNDS = "Index out of bounds"
    KEY_NOT_FOUND = "Key not found"
    DIVISION_BY_ZERO = "Division by zero"


class InterpreterError(Exception):
    def __init__(self, kind: ErrorKind, detail: str = "", line: int = 0, col: int = 0):
        self.kind = kind
        self.detail = detail
        self.line = line
        self.col = col
        message = f"{kind.value}: {detail}" if detail else kind.value
        self.message = message
        super().__init__(f"{message} at {line}:{col}")
