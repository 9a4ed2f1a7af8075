"""Lexer for the mill language.

Tokens are produced on demand: `next()` consumes a token, `peek()` buffers
one token of lookahead. `tokenize()` drains the whole stream for tooling.
"""

from typing import Optional

from .errors import ParseError, ParseErrorKind
from .tokens import (
    DOUBLE_SYMBOLS, INT_MAX, INT_MIN, KEYWORDS, OPERAND_END_TYPES, SYMBOLS, Token,
    TokenType,
)


class LexerError(ParseError):
    pass


class Lexer:
    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self._lookahead: Optional[Token] = None
        self._last_type: Optional[TokenType] = None
        self._start = 0

    # ---- Token stream ----

    def next(self) -> Token:
        """Consume and return the next token."""
        if self._lookahead is not None:
            tok, self._lookahead = self._lookahead, None
            return tok
        return self._read_token()

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self._read_token()
        return self._lookahead

    def tokenize(self) -> list[Token]:
        tokens = []
        while True:
            tok = self.next()
            tokens.append(tok)
            if tok.type == TokenType.EOF:
                return tokens

    # ---- Character helpers ----

    def _peek_char(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _error(self, kind: ParseErrorKind, message: str, line: int, col: int) -> LexerError:
        return LexerError(kind, message, line, col, source_file=self.filename)

    def _emit(self, token_type: TokenType, value, line: int, col: int) -> Token:
        self._last_type = token_type
        return Token(token_type, value, line, col, self.source[self._start:self.pos])

    # ---- Dispatch ----

    def _read_token(self) -> Token:
        self._skip_whitespace_and_comments()
        if self.pos >= len(self.source):
            return Token(TokenType.EOF, "", self.line, self.col)

        self._start = self.pos
        ch = self._peek_char()
        line, col = self.line, self.col

        if not ch.isascii():
            # Undecodable input bytes arrive as lone surrogates
            if '\udc80' <= ch <= '\udcff':
                byte = ord(ch) - 0xDC00
            else:
                byte = ch.encode("utf-8")[0]
            raise self._error(
                ParseErrorKind.NON_ASCII_BYTE,
                f"Non ASCII byte: 0x{byte:X} "
                f"(note: this is allowed in comments and string literals)",
                line, col,
            )
        if _is_digit(ch):
            return self._read_number(line, col)
        if ch == '-' and _is_digit(self._peek_char(1)) and self._last_type not in OPERAND_END_TYPES:
            return self._read_number(line, col)
        if ch.isalpha() or ch == '_':
            return self._read_identifier(line, col)
        if ch == '"':
            return self._read_string(line, col)
        return self._read_symbol(line, col)

    # ---- Whitespace and comments ----

    def _skip_whitespace_and_comments(self):
        while self.pos < len(self.source):
            ch = self._peek_char()
            if ch in (' ', '\t', '\n', '\r', '\f', '\v'):
                self._advance()
            elif ch == '#':
                while self.pos < len(self.source) and self._peek_char() != '\n':
                    self._advance()
            else:
                break

    # ---- Literals ----

    def _read_number(self, line: int, col: int) -> Token:
        start = self.pos
        if self._peek_char() == '-':
            self._advance()
        while _is_digit(self._peek_char()):
            self._advance()

        if self._peek_char() == '.' and _is_digit(self._peek_char(1)):
            self._advance()  # .
            while _is_digit(self._peek_char()):
                self._advance()
            text = self.source[start:self.pos]
            return self._emit(TokenType.FLOAT_LIT, float(text), line, col)

        text = self.source[start:self.pos]
        value = int(text)
        # The parser folds `- 2147483648` into INT_MIN
        if value == INT_MAX + 1 and self._last_type == TokenType.MINUS:
            return self._emit(TokenType.INT_LIT, value, line, col)
        if value > INT_MAX:
            raise self._error(ParseErrorKind.INVALID_INTEGER_LITERAL,
                              f"Integer literal too large ({text})", line, col)
        if value < INT_MIN:
            raise self._error(ParseErrorKind.INVALID_INTEGER_LITERAL,
                              f"Integer literal too small ({text})", line, col)
        return self._emit(TokenType.INT_LIT, value, line, col)

    def _read_string(self, line: int, col: int) -> Token:
        self._advance()  # opening "
        chars: list[str] = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == '"':
                return self._emit(TokenType.STRING_LIT, ''.join(chars), line, col)
            chars.append(ch)
            # \" stays in the string verbatim
            if ch == '\\' and self._peek_char() == '"':
                chars.append(self._advance())
        raise self._error(ParseErrorKind.UNTERMINATED_STRING,
                          "Unterminated string literal", line, col)

    # ---- Identifier / keyword ----

    def _read_identifier(self, line: int, col: int) -> Token:
        start = self.pos
        while self.pos < len(self.source) and (
                self._peek_char().isascii() and
                (self._peek_char().isalnum() or self._peek_char() == '_')):
            self._advance()
        value = self.source[start:self.pos]
        token_type = KEYWORDS.get(value, TokenType.IDENT)
        return self._emit(token_type, value, line, col)

    # ---- Symbols (two-character operators first) ----

    def _read_symbol(self, line: int, col: int) -> Token:
        pair = self.source[self.pos:self.pos + 2]
        token_type = DOUBLE_SYMBOLS.get(pair)
        if token_type is not None:
            self._advance()
            self._advance()
            return self._emit(token_type, pair, line, col)

        ch = self._peek_char()
        token_type = SYMBOLS.get(ch)
        if token_type is not None:
            self._advance()
            return self._emit(token_type, ch, line, col)

        raise self._error(ParseErrorKind.UNEXPECTED_CHARACTER,
                          f"Unexpected character '{ch}'", line, col)


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'
