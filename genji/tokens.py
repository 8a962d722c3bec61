"""Lexical tokens of the SQL dialect and their properties."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Token(enum.IntEnum):
    """A lexical token of the SQL language."""

    # special tokens
    ILLEGAL = enum.auto()
    EOF = enum.auto()
    WS = enum.auto()
    COMMENT = enum.auto()

    # literals
    IDENT = enum.auto()
    IDENTORSTRING = enum.auto()
    NAMEDPARAM = enum.auto()
    POSITIONALPARAM = enum.auto()
    NUMBER = enum.auto()
    INTEGER = enum.auto()
    DURATIONVAL = enum.auto()
    STRING = enum.auto()
    BADSTRING = enum.auto()
    BADESCAPE = enum.auto()
    TRUE = enum.auto()
    FALSE = enum.auto()
    REGEX = enum.auto()
    BADREGEX = enum.auto()

    # operators
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    MOD = enum.auto()
    BITWISEAND = enum.auto()
    BITWISEOR = enum.auto()
    BITWISEXOR = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    EQ = enum.auto()
    NEQ = enum.auto()
    EQREGEX = enum.auto()
    NEQREGEX = enum.auto()
    LT = enum.auto()
    LTE = enum.auto()
    GT = enum.auto()
    GTE = enum.auto()

    # punctuation
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    COMMA = enum.auto()
    COLON = enum.auto()
    DOUBLECOLON = enum.auto()
    SEMICOLON = enum.auto()
    DOT = enum.auto()

    # keywords
    ALL = enum.auto()
    ALTER = enum.auto()
    AS = enum.auto()
    ASC = enum.auto()
    BY = enum.auto()
    CREATE = enum.auto()
    DELETE = enum.auto()
    DESC = enum.auto()
    DROP = enum.auto()
    DURATION = enum.auto()
    EXISTS = enum.auto()
    FROM = enum.auto()
    IF = enum.auto()
    IN = enum.auto()
    INDEX = enum.auto()
    INF = enum.auto()
    INSERT = enum.auto()
    INTO = enum.auto()
    LIMIT = enum.auto()
    NOT = enum.auto()
    OFFSET = enum.auto()
    ON = enum.auto()
    ORDER = enum.auto()
    SELECT = enum.auto()
    SET = enum.auto()
    RECORDS = enum.auto()
    TABLE = enum.auto()
    TO = enum.auto()
    UNIQUE = enum.auto()
    UPDATE = enum.auto()
    VALUES = enum.auto()
    WHERE = enum.auto()

    def precedence(self) -> int:
        """Return the precedence of a binary operator, 0 for other tokens."""
        return _PRECEDENCE.get(self, 0)

    def is_operator(self) -> bool:
        """Tell whether the token is an operator."""
        return Token.ADD <= self <= Token.GTE

    def __str__(self) -> str:
        return _STRINGS.get(self, "")

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_STRINGS = {
    Token.ILLEGAL: "ILLEGAL",
    Token.EOF: "EOF",
    Token.WS: "WS",
    Token.IDENT: "IDENT",
    Token.IDENTORSTRING: "IDENTORSTRING",
    Token.POSITIONALPARAM: "?",
    Token.NUMBER: "NUMBER",
    Token.DURATIONVAL: "DURATIONVAL",
    Token.STRING: "STRING",
    Token.BADSTRING: "BADSTRING",
    Token.BADESCAPE: "BADESCAPE",
    Token.TRUE: "TRUE",
    Token.FALSE: "FALSE",
    Token.REGEX: "REGEX",
    Token.ADD: "+",
    Token.SUB: "-",
    Token.MUL: "*",
    Token.DIV: "/",
    Token.MOD: "%",
    Token.BITWISEAND: "&",
    Token.BITWISEOR: "|",
    Token.BITWISEXOR: "^",
    Token.AND: "AND",
    Token.OR: "OR",
    Token.EQ: "=",
    Token.NEQ: "!=",
    Token.EQREGEX: "=~",
    Token.NEQREGEX: "!~",
    Token.LT: "<",
    Token.LTE: "<=",
    Token.GT: ">",
    Token.GTE: ">=",
    Token.LPAREN: "(",
    Token.RPAREN: ")",
    Token.COMMA: ",",
    Token.COLON: ":",
    Token.DOUBLECOLON: "::",
    Token.SEMICOLON: ";",
    Token.DOT: ".",
}

_KEYWORD_TOKENS = [t for t in Token if Token.ALL <= t <= Token.WHERE and t is not Token.INF]
_STRINGS.update({t: t.name for t in _KEYWORD_TOKENS})

_KEYWORDS = {t.name.lower(): t for t in _KEYWORD_TOKENS}
_KEYWORDS.update({"and": Token.AND, "or": Token.OR, "true": Token.TRUE, "false": Token.FALSE})

_PRECEDENCE = {Token.OR: 1, Token.AND: 2}
_PRECEDENCE.update(
    {
        t: 3
        for t in (
            Token.EQ,
            Token.NEQ,
            Token.EQREGEX,
            Token.NEQREGEX,
            Token.LT,
            Token.LTE,
            Token.GT,
            Token.GTE,
        )
    }
)
_PRECEDENCE.update({t: 4 for t in (Token.ADD, Token.SUB, Token.BITWISEOR, Token.BITWISEXOR)})
_PRECEDENCE.update({t: 5 for t in (Token.MUL, Token.DIV, Token.MOD, Token.BITWISEAND)})


@dataclass(frozen=True)
class Pos:
    """Zero-based line and character position of a token."""

    line: int = 0
    char: int = 0


def tokstr(tok: Token, lit: str) -> str:
    """Return the literal if there is one, otherwise the token's text."""
    return lit if lit else str(tok)


def lookup(ident: str) -> Token:
    """Return the keyword token for ident, case-insensitively, or IDENT."""
    return _KEYWORDS.get(ident.lower(), Token.IDENT)