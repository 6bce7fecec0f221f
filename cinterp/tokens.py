"""Token types and tokens produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class TokenType(IntEnum):
    """Kinds of tokens the lexer can emit."""

    ADD = 0
    AND = 1
    ASR = 2
    BRANCH = 3
    BRANCH_EQ = 4
    BRANCH_GE = 5
    BRANCH_GT = 6
    BRANCH_LE = 7
    BRANCH_LT = 8
    BRANCH_NEQ = 9
    CALL = 10
    CMP = 11
    CMP_U = 12
    COLON = 13
    EOF = 14
    EOR = 15
    ERR = 16
    IDENT = 17
    LOAD = 18
    LSL = 19
    LSR = 20
    MOV = 21
    NL = 22
    NUM = 23
    ORR = 24
    PRINT = 25
    PUT = 26
    RET = 27
    STORE = 28
    STR = 29
    SUB = 30


@dataclass(frozen=True)
class Token:
    """A lexical token with its 1-based source position.

    For error tokens the lexeme holds the error message.
    """

    type: TokenType
    lexeme: str
    line: int
    column: int

    @property
    def length(self) -> int:
        return len(self.lexeme)


def format_token(token: Token) -> str:
    """Render a token in the human-readable debugging layout."""
    if token.type is TokenType.EOF:
        shown = "EOF"
    elif token.type is TokenType.NL:
        shown = "Newline"
    else:
        shown = token.lexeme
    return (
        f"Token: {shown}\n"
        f"Token type: {int(token.type)}\n"
        f"Token length: {token.length}\n"
        f"Line: {token.line}:{token.column}\n"
    )