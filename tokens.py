"""
Dara token model
Token kinds and the immutable token record shared by the lexer and parser
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class TokenKind(Enum):
    """Closed set of token kinds; values double as display names"""

    # Special
    EOF = "EOF"
    ILLEGAL = "ILLEGAL"
    COMMENT = "COMMENT"

    # Identifiers and literals
    IDENT = "IDENT"
    NUMBER = "NUMBER"
    STRING = "STRING"

    # Keywords
    LET = "LET"
    FUNCTION = "FUNCTION"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NIL = "NIL"

    # Two-character operators
    DECLARE = ":="
    EQ = "=="
    NOT_EQ = "!="
    LT_EQ = "<="
    GT_EQ = ">="
    AND = "&&"
    OR = "||"

    # Single-character operators
    ASSIGN = "="
    LT = "<"
    GT = ">"
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    PERCENT = "%"
    BANG = "!"

    # Delimiters
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    SEMICOLON = ";"


KEYWORDS = MappingProxyType({
    "let": TokenKind.LET,
    "fn": TokenKind.FUNCTION,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "nil": TokenKind.NIL,
})

# Every fixed-spelling operator and delimiter, keyed by its source text
OPERATORS = MappingProxyType({
    kind.value: kind for kind in TokenKind
    if not kind.value.isalpha()
})


@dataclass(frozen=True)
class Token:
    """Dara token with source position (position is ignored by equality)"""
    kind: TokenKind
    literal: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.kind.value}({self.literal!r})"


def lookup_ident(word: str) -> TokenKind:
    """Classify a word as a keyword or a plain identifier"""
    return KEYWORDS.get(word, TokenKind.IDENT)
