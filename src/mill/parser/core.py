"""Parser core: token manipulation, error handling, and parse() entry points."""

from ..ast_nodes import Block, ExprStmt, Program
from ..errors import ParseError, ParseErrorKind
from ..lexer import Lexer
from ..tokens import Token, TokenType


class ParserBase:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer

    def parse(self) -> Program:
        """Parse statements until end of input.

        A final expression without a trailing semicolon becomes the
        program's result expression.
        """
        program = Program(source_file=self.lexer.filename)
        while not self._at_end():
            stmt = self._parse_statement(top_level=True)
            if isinstance(stmt, ExprStmt) and stmt.is_result:
                program.result = stmt.expr
            else:
                program.statements.append(stmt)
        return program

    def parse_expression(self):
        """Parse exactly one expression spanning the whole input."""
        expr = self._parse_expr()
        if not self._at_end():
            raise self._unexpected("end of file")
        return expr

    def parse_statement(self):
        """Parse one statement, including its terminating semicolon."""
        return self._parse_statement()

    def parse_block(self) -> Block:
        return self._parse_block()

    # ---- Token helpers ----

    def _peek(self) -> Token:
        return self.lexer.peek()

    def _advance(self) -> Token:
        return self.lexer.next()

    def _at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _check(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _match(self, *types: TokenType) -> Token | None:
        if self._peek().type in types:
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        tok = self._peek()
        if tok.type == token_type:
            return self._advance()
        raise self._unexpected(expected)

    def _unexpected(self, expected: str) -> ParseError:
        return ParseError.unexpected_token(expected, self._peek(),
                                           source_file=self.lexer.filename)

    def _error(self, kind: ParseErrorKind, msg: str, tok: Token) -> ParseError:
        return ParseError(kind, msg, tok.line, tok.col, source_file=self.lexer.filename)
