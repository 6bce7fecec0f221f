"""Lexical analysis of interpreter source text."""

from __future__ import annotations

import string
from typing import Iterator

from cinterp.tokens import Token, TokenType, format_token

BAD_BASE_MSG = "Either no or invalid digit in the specified base"
UNEXPECTED_CHAR_MSG = "Unexpected character"

_KEYWORDS = {
    "add": TokenType.ADD,
    "and": TokenType.AND,
    "asr": TokenType.ASR,
    "b": TokenType.BRANCH,
    "b.eq": TokenType.BRANCH_EQ,
    "b.gt": TokenType.BRANCH_GT,
    "b.ge": TokenType.BRANCH_GE,
    "b.lt": TokenType.BRANCH_LT,
    "b.le": TokenType.BRANCH_LE,
    "b.ne": TokenType.BRANCH_NEQ,
    "call": TokenType.CALL,
    "cmp": TokenType.CMP,
    "cmp_u": TokenType.CMP_U,
    "eor": TokenType.EOR,
    "load": TokenType.LOAD,
    "lsl": TokenType.LSL,
    "lsr": TokenType.LSR,
    "mov": TokenType.MOV,
    "orr": TokenType.ORR,
    "print": TokenType.PRINT,
    "put": TokenType.PUT,
    "ret": TokenType.RET,
    "store": TokenType.STORE,
    "sub": TokenType.SUB,
}

_END = "\0"
_ALPHA = frozenset(string.ascii_letters + "_.")
_DIGITS = frozenset(string.digits)
_HEX = frozenset(string.hexdigits)
_BINARY = frozenset("01")
_BLANKS = frozenset(" ,\r\t")


class Lexer:
    """Produces tokens one at a time from source text."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._start = 0
        self._pos = 0
        self.line = 1
        self.column = 1

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return _END

    def _peek_next(self) -> str:
        if self._is_at_end():
            return _END
        nxt = self._pos + 1
        return self._text[nxt] if nxt < len(self._text) else _END

    def _is_at_end(self) -> bool:
        return self._peek() == _END

    def _advance(self) -> str:
        ch = self._peek()
        self._pos += 1
        self.column += 1
        return ch

    def _make_token(self, kind: TokenType) -> Token:
        lexeme = self._text[self._start:self._pos]
        return Token(kind, lexeme, self.line, self.column - len(lexeme))

    def _error_token(self, message: str) -> Token:
        return Token(TokenType.ERR, message, self.line, self.column - 1)

    def _skip_whitespace(self) -> None:
        while True:
            ch = self._peek()
            if ch in _BLANKS:
                self._advance()
            elif ch == "/" and self._peek_next() == "/":
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
                return
            else:
                return

    def next_token(self) -> Token:
        """Return the next token; EOF is returned repeatedly at the end."""
        self._skip_whitespace()
        self._start = self._pos
        if self._is_at_end():
            return self._make_token(TokenType.EOF)

        ch = self._advance()
        if ch in _ALPHA:
            return self._identifier()
        if ch in _DIGITS:
            return self._number(ch)
        if ch in ("\n", ";"):
            token = self._make_token(TokenType.NL)
            if ch == "\n":
                self.line += 1
                self.column = 1
            return token
        if ch == ":":
            return self._make_token(TokenType.COLON)
        if ch == '"':
            return self._string()
        return self._error_token(UNEXPECTED_CHAR_MSG)

    def _identifier(self) -> Token:
        while self._peek() in _ALPHA or self._peek() in _DIGITS:
            self._advance()
        word = self._text[self._start:self._pos]
        return self._make_token(_KEYWORDS.get(word, TokenType.IDENT))

    def _number(self, first_digit: str) -> Token:
        prefix = self._peek()
        if first_digit == "0" and prefix in ("b", "x"):
            self._advance()
            return self._digits(_BINARY if prefix == "b" else _HEX)
        while self._peek() in _DIGITS:
            self._advance()
        return self._make_token(TokenType.NUM)

    def _digits(self, allowed: frozenset) -> Token:
        if self._peek() not in allowed:
            return self._error_token(BAD_BASE_MSG)
        while self._peek() in allowed:
            self._advance()
        return self._make_token(TokenType.NUM)

    def _string(self) -> Token:
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == "\n":
                self.line += 1
                self.column = 1
            self._advance()
        # The lexeme excludes the opening and closing quotes.
        self._start += 1
        token = self._make_token(TokenType.STR)
        if not self._is_at_end():
            self._advance()
        return token

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF or error token."""
        while True:
            token = self.next_token()
            yield token
            if token.type in (TokenType.EOF, TokenType.ERR):
                return


def format_lexed_tokens(text: str) -> str:
    """Render every token of ``text`` as blank-line separated blocks."""
    return "\n".join(format_token(token) for token in Lexer(text))