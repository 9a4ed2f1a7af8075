"""Primary expression parsing: literals, identifiers, arrays, maps, functions."""

from ..errors import ParseErrorKind
from ..tokens import INT_MAX, TokenType
from ..ast_nodes import (
    ArrayLiteral, BoolLiteral, FloatLiteral, FunctionLiteral, Identifier,
    IntLiteral, MapEntry, MapLiteral, NullLiteral, StringLiteral,
)


class PrimaryMixin:

    def _parse_primary(self):
        tok = self._peek()

        if tok.type == TokenType.TRUE:
            self._advance()
            return BoolLiteral(value=True, line=tok.line, col=tok.col)
        if tok.type == TokenType.FALSE:
            self._advance()
            return BoolLiteral(value=False, line=tok.line, col=tok.col)
        if tok.type == TokenType.NULL:
            self._advance()
            return NullLiteral(line=tok.line, col=tok.col)

        if tok.type == TokenType.IDENT:
            self._advance()
            return Identifier(name=tok.value, line=tok.line, col=tok.col)
        if tok.type == TokenType.INT_LIT:
            if tok.value > INT_MAX:
                raise self._error(ParseErrorKind.INVALID_INTEGER_LITERAL,
                                  f"Integer literal too large ({tok.text})", tok)
            self._advance()
            return IntLiteral(value=tok.value, line=tok.line, col=tok.col)
        if tok.type == TokenType.FLOAT_LIT:
            self._advance()
            return FloatLiteral(value=tok.value, line=tok.line, col=tok.col)
        if tok.type == TokenType.STRING_LIT:
            self._advance()
            return StringLiteral(value=tok.value, line=tok.line, col=tok.col)

        if tok.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expr()
            self._expect(TokenType.RPAREN, "closing parenthesis")
            return expr

        if tok.type == TokenType.LBRACKET:
            return self._parse_array_literal()
        if tok.type == TokenType.LBRACE:
            return self._parse_map_literal()
        if tok.type == TokenType.FN:
            return self._parse_function_literal()

        raise self._unexpected("start of expression")

    # ---- Compound literals ----

    def _parse_array_literal(self) -> ArrayLiteral:
        tok = self._expect(TokenType.LBRACKET, "opening square bracket")
        elements = self._parse_comma_list(self._parse_expr, TokenType.RBRACKET,
                                          "closing square bracket")
        return ArrayLiteral(elements=elements, line=tok.line, col=tok.col)

    def _parse_map_literal(self) -> MapLiteral:
        """Parse `{k: v, ...}`; keys are full expressions."""
        tok = self._expect(TokenType.LBRACE, "opening curly bracket")
        entries = []
        while True:
            if self._at_end():
                raise self._unexpected("closing curly bracket")
            if self._match(TokenType.RBRACE):
                break
            key = self._parse_expr()
            self._expect(TokenType.COLON, "colon")
            value = self._parse_expr()
            entries.append(MapEntry(key=key, value=value))
            if self._match(TokenType.RBRACE):
                break
            self._expect(TokenType.COMMA, "comma or closing curly bracket")
        return MapLiteral(entries=entries, line=tok.line, col=tok.col)

    def _parse_function_literal(self) -> FunctionLiteral:
        tok = self._expect(TokenType.FN, "keyword 'fn'")
        self._expect(TokenType.LPAREN, "parameter list")
        params = self._parse_comma_list(self._parse_param, TokenType.RPAREN,
                                        "closing parenthesis")
        body = self._parse_block_body()
        return FunctionLiteral(params=params, body=body, line=tok.line, col=tok.col)

    def _parse_param(self) -> str:
        return self._expect(TokenType.IDENT, "identifier").value
