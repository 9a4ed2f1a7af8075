"""Expression parsing: precedence climbing over the binding-power tables."""

from ..ast_nodes import (
    BinaryExpr, BinaryOp, CallExpr, IntLiteral, MemberExpr, UnaryExpr, UnaryOp,
)
from ..tokens import (
    INFIX_BP, INT_MAX, INT_MIN, POSTFIX_BP, PREFIX_BP, KEYWORD_TYPES, TokenType,
)

_BINARY_OPS = {
    TokenType.PLUS: BinaryOp.ADD,
    TokenType.MINUS: BinaryOp.SUB,
    TokenType.STAR: BinaryOp.MUL,
    TokenType.SLASH: BinaryOp.DIV,
    TokenType.PERCENT: BinaryOp.MOD,
    TokenType.EQ_EQ: BinaryOp.EQ,
    TokenType.BANG_EQ: BinaryOp.NO_EQ,
    TokenType.LT: BinaryOp.LT,
    TokenType.LT_EQ: BinaryOp.LT_EQ,
    TokenType.GT: BinaryOp.GT,
    TokenType.GT_EQ: BinaryOp.GT_EQ,
    TokenType.AMP_AMP: BinaryOp.AND,
    TokenType.PIPE_PIPE: BinaryOp.OR,
}

_UNARY_OPS = {
    TokenType.MINUS: UnaryOp.NEG,
    TokenType.BANG: UnaryOp.NOT,
}

# Tokens that are neither operators nor able to follow an operand
_OPERAND_TYPES = KEYWORD_TYPES | {
    TokenType.IDENT, TokenType.INT_LIT, TokenType.FLOAT_LIT, TokenType.STRING_LIT,
}


class ExpressionsMixin:

    def _parse_expr(self):
        return self._parse_expr_bp(0)

    def _parse_expr_bp(self, min_bp: int):
        tok = self._peek()
        if tok.type in PREFIX_BP:
            self._advance()
            if tok.type == TokenType.MINUS and self._match_int_min_magnitude():
                lhs = IntLiteral(value=INT_MIN, line=tok.line, col=tok.col)
            else:
                operand = self._parse_expr_bp(PREFIX_BP[tok.type])
                lhs = UnaryExpr(op=_UNARY_OPS[tok.type], operand=operand,
                                line=tok.line, col=tok.col)
        else:
            lhs = self._parse_primary()
        return self._parse_operators(lhs, min_bp)

    def _match_int_min_magnitude(self) -> bool:
        """Consume the 2147483648 of a `- 2147483648` the lexer split in two."""
        literal = self._peek()
        if literal.type == TokenType.INT_LIT and literal.value == INT_MAX + 1:
            self._advance()
            return True
        return False

    def _parse_operators(self, lhs, min_bp: int):
        while True:
            tok = self._peek()
            if tok.type == TokenType.EOF:
                break
            if tok.type in _OPERAND_TYPES:
                raise self._unexpected("operator or end of expression")

            if tok.type in POSTFIX_BP:
                if POSTFIX_BP[tok.type] < min_bp:
                    break
                lhs = self._parse_postfix(lhs)
                continue

            if tok.type in INFIX_BP:
                l_bp, r_bp = INFIX_BP[tok.type]
                if l_bp < min_bp:
                    break
                self._advance()
                if tok.type == TokenType.DOT:
                    name = self._expect(TokenType.IDENT, "identifier").value
                    lhs = MemberExpr(obj=lhs, field=name, line=lhs.line, col=lhs.col)
                else:
                    rhs = self._parse_expr_bp(r_bp)
                    lhs = BinaryExpr(op=_BINARY_OPS[tok.type], left=lhs, right=rhs,
                                     line=lhs.line, col=lhs.col)
                continue

            break

        return lhs

    def _parse_postfix(self, lhs):
        tok = self._advance()

        if tok.type == TokenType.LBRACKET:
            index = self._parse_expr()
            self._expect(TokenType.RBRACKET, "closing square bracket")
            return BinaryExpr(op=BinaryOp.INDEX, left=lhs, right=index,
                              line=lhs.line, col=lhs.col)

        args = self._parse_comma_list(self._parse_expr, TokenType.RPAREN,
                                      "closing parenthesis")
        return CallExpr(callee=lhs, args=args, line=lhs.line, col=lhs.col)

    def _parse_comma_list(self, parse_item, closing: TokenType, closing_name: str) -> list:
        """Parse `item, item, ...` up to and including the closing delimiter."""
        items = []
        while not self._check(closing):
            items.append(parse_item())
            if not self._match(TokenType.COMMA):
                break
        self._expect(closing, closing_name)
        return items
