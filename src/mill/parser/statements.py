"""Statement dispatch, blocks, declarations, and assignments."""

from ..tokens import TokenType
from ..ast_nodes import (
    AssignStmt, BinaryExpr, BinaryOp, Block, ExprStmt, Identifier,
    IdentifierTarget, IndexTarget, LetStmt, MemberExpr, MemberTarget, NullLiteral,
)
from ..errors import ParseErrorKind


class StatementsMixin:

    def _parse_block_body(self) -> list:
        """Parse `{ stmt* }` and return the statements."""
        self._expect(TokenType.LBRACE, "block")
        stmts = []
        while not self._check(TokenType.RBRACE):
            if self._at_end():
                raise self._error(ParseErrorKind.UNTERMINATED_BLOCK,
                                  "Expected closing curly bracket, found end of file",
                                  self._peek())
            stmts.append(self._parse_statement())
        self._advance()  # }
        return stmts

    def _parse_block(self) -> Block:
        tok = self._peek()
        return Block(statements=self._parse_block_body(), line=tok.line, col=tok.col)

    def _parse_statement(self, top_level: bool = False):
        tok = self._peek()

        if tok.type == TokenType.LBRACE:
            return self._parse_block()
        if tok.type == TokenType.LET:
            return self._parse_let_stmt()
        if tok.type == TokenType.RETURN:
            return self._parse_return_stmt()
        if tok.type == TokenType.BREAK:
            return self._parse_break_stmt()
        if tok.type == TokenType.CONTINUE:
            return self._parse_continue_stmt()
        if tok.type == TokenType.IF:
            return self._parse_if_stmt()
        if tok.type == TokenType.LOOP:
            return self._parse_loop_stmt()
        if tok.type == TokenType.WHILE:
            return self._parse_while_stmt()
        if tok.type == TokenType.FOR:
            return self._parse_for_stmt()

        return self._parse_expr_stmt(top_level)

    def _expect_semicolon(self):
        self._expect(TokenType.SEMICOLON, "semicolon")

    # ---- Declaration ----

    def _parse_let_stmt(self) -> LetStmt:
        tok = self._expect(TokenType.LET, "keyword 'let'")
        name = self._expect(TokenType.IDENT, "identifier").value
        if self._match(TokenType.EQ):
            init = self._parse_expr()
        elif self._check(TokenType.SEMICOLON):
            init = NullLiteral(line=tok.line, col=tok.col)
        else:
            raise self._unexpected("semicolon or initializer")
        self._expect_semicolon()
        return LetStmt(name=name, initializer=init, line=tok.line, col=tok.col)

    # ---- Expression statement / assignment ----

    def _parse_expr_stmt(self, top_level: bool = False):
        tok = self._peek()
        expr = self._parse_expr()

        if self._check(TokenType.EQ):
            target = self._as_target(expr)
            self._advance()
            value = self._parse_expr()
            self._expect_semicolon()
            return AssignStmt(target=target, value=value, line=tok.line, col=tok.col)

        if top_level and self._at_end():
            return ExprStmt(expr=expr, is_result=True, line=tok.line, col=tok.col)

        if not self._check(TokenType.SEMICOLON):
            raise self._unexpected("';' or '='")
        self._advance()
        return ExprStmt(expr=expr, line=tok.line, col=tok.col)

    def _as_target(self, expr):
        """Re-validate a parsed expression as an assignment target."""
        if isinstance(expr, Identifier):
            return IdentifierTarget(name=expr.name, line=expr.line, col=expr.col)
        if isinstance(expr, MemberExpr):
            return MemberTarget(obj=expr.obj, field=expr.field,
                                line=expr.line, col=expr.col)
        if isinstance(expr, BinaryExpr) and expr.op == BinaryOp.INDEX:
            return IndexTarget(obj=expr.left, index=expr.right,
                               line=expr.line, col=expr.col)
        raise self._error(ParseErrorKind.EXPRESSION_NOT_ASSIGNABLE,
                          "Expression not assignable", self._peek())
