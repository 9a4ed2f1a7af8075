"""Control flow statement parsing: if, loop, while, for, return, break, continue."""

from ..ast_nodes import (
    BoolLiteral, BreakStmt, ContinueStmt, ForInStmt, IfBranch, IfStmt,
    LoopStmt, NullLiteral, ReturnStmt, WhileStmt,
)
from ..tokens import TokenType


class ControlFlowMixin:

    def _parse_return_stmt(self) -> ReturnStmt:
        tok = self._expect(TokenType.RETURN, "keyword 'return'")
        if self._check(TokenType.SEMICOLON):
            value = NullLiteral(line=tok.line, col=tok.col)
        else:
            value = self._parse_expr()
        self._expect_semicolon()
        return ReturnStmt(value=value, line=tok.line, col=tok.col)

    def _parse_break_stmt(self) -> BreakStmt:
        tok = self._expect(TokenType.BREAK, "keyword 'break'")
        self._expect_semicolon()
        return BreakStmt(line=tok.line, col=tok.col)

    def _parse_continue_stmt(self) -> ContinueStmt:
        tok = self._expect(TokenType.CONTINUE, "keyword 'continue'")
        self._expect_semicolon()
        return ContinueStmt(line=tok.line, col=tok.col)

    def _parse_if_stmt(self) -> IfStmt:
        """if/else-if/else chains collapse into one ordered branch list.

        A trailing `else` becomes a branch whose condition is `true`.
        """
        tok = self._expect(TokenType.IF, "keyword 'if'")
        condition = self._parse_expr()
        branches = [IfBranch(condition=condition, body=self._parse_block_body())]

        while self._check(TokenType.ELSE):
            else_tok = self._advance()
            if self._match(TokenType.IF):
                condition = self._parse_expr()
                branches.append(IfBranch(condition=condition, body=self._parse_block_body()))
            else:
                always = BoolLiteral(value=True, line=else_tok.line, col=else_tok.col)
                branches.append(IfBranch(condition=always, body=self._parse_block_body()))
                break

        return IfStmt(branches=branches, line=tok.line, col=tok.col)

    def _parse_loop_stmt(self) -> LoopStmt:
        tok = self._expect(TokenType.LOOP, "keyword 'loop'")
        return LoopStmt(body=self._parse_block_body(), line=tok.line, col=tok.col)

    def _parse_while_stmt(self) -> WhileStmt:
        tok = self._expect(TokenType.WHILE, "keyword 'while'")
        condition = self._parse_expr()
        body = self._parse_block_body()
        return WhileStmt(condition=condition, body=body, line=tok.line, col=tok.col)

    def _parse_for_stmt(self) -> ForInStmt:
        tok = self._expect(TokenType.FOR, "keyword 'for'")
        var_name = self._expect(TokenType.IDENT, "identifier").value
        self._expect(TokenType.IN, "keyword 'in'")
        iterable = self._parse_expr()
        body = self._parse_block_body()
        return ForInStmt(var_name=var_name, iterable=iterable, body=body,
                         line=tok.line, col=tok.col)
