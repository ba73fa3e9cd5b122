"""Lexical vocabulary shared by every stage of the lox pipeline.

A Token is produced by the scanner and consumed by the parser. Tokens that name something (variables, operators,
keywords) are kept inside AST nodes afterwards, so that later stages can point at a line and a lexeme when reporting
an error.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """Closed set of token kinds."""
    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # one or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # keywords
    AND = auto()
    BREAK = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {
    "and": TokenKind.AND,
    "break": TokenKind.BREAK,
    "class": TokenKind.CLASS,
    "else": TokenKind.ELSE,
    "false": TokenKind.FALSE,
    "for": TokenKind.FOR,
    "fun": TokenKind.FUN,
    "if": TokenKind.IF,
    "nil": TokenKind.NIL,
    "or": TokenKind.OR,
    "print": TokenKind.PRINT,
    "return": TokenKind.RETURN,
    "super": TokenKind.SUPER,
    "this": TokenKind.THIS,
    "true": TokenKind.TRUE,
    "var": TokenKind.VAR,
    "while": TokenKind.WHILE,
}


@dataclass(frozen=True)
class Token:
    """Immutable lexical token. literal holds the scanned value of NUMBER (float) and STRING (str) tokens."""
    kind: TokenKind
    lexeme: str
    literal: object
    line: int

    def __str__(self):
        return f"{self.kind.name} {self.lexeme!r} {self.literal!r} (line {self.line})"


WHOLE_SUFFIX = ".000000"


def numeral(num):
    """Returns str rendering of float num, the literal value of a NUMBER token. Rendering is fixed-point with six
    decimals, and a literal ".000000" suffix is stripped: 3 -> "3", 2.5 -> "2.500000".
    """
    text = "%f" % num
    if text.endswith(WHOLE_SUFFIX):
        return text[:-len(WHOLE_SUFFIX)]
    return text
