"""
Dara Lexer
Turns source text into tokens using a single pyparsing token grammar
"""

from typing import Iterator, List, Optional
import re

from pyparsing import (
    MatchFirst, ParseResults, QuotedString, Regex, Word,
    alphanums, alphas, col, lineno, one_of
)

from tokens import OPERATORS, Token, TokenKind, lookup_ident


def _position(source: str, loc: int) -> dict:
    return {'line': lineno(loc, source), 'column': col(loc, source)}


def _comment_body(text: str) -> str:
    """Strip comment markers and surrounding whitespace"""
    if text.startswith("//"):
        return text[2:].strip()
    if text.endswith("*/") and len(text) >= 4:
        return text[2:-2].strip()
    # Unterminated block comment runs to end of input
    return text[2:].strip()


def _comment_action(source: str, loc: int, toks: ParseResults) -> Token:
    return Token(TokenKind.COMMENT, _comment_body(toks[0]), **_position(source, loc))


def _string_action(source: str, loc: int, toks: ParseResults) -> Token:
    return Token(TokenKind.STRING, toks[0], **_position(source, loc))


def _number_action(source: str, loc: int, toks: ParseResults) -> Token:
    return Token(TokenKind.NUMBER, toks[0], **_position(source, loc))


def _word_action(source: str, loc: int, toks: ParseResults) -> Token:
    return Token(lookup_ident(toks[0]), toks[0], **_position(source, loc))


def _operator_action(source: str, loc: int, toks: ParseResults) -> Token:
    return Token(OPERATORS[toks[0]], toks[0], **_position(source, loc))


def _illegal_action(source: str, loc: int, toks: ParseResults) -> Token:
    return Token(TokenKind.ILLEGAL, toks[0], **_position(source, loc))


def _build_token_grammar() -> MatchFirst:
    """Build the token grammar once; order of alternatives is significant"""

    # Comments must be tried before the '/' operator
    line_comment = Regex(r"//[^\n]*")
    block_comment = Regex(r"/\*.*?(?:\*/|\Z)", flags=re.DOTALL)
    comment = (block_comment | line_comment).set_parse_action(_comment_action)

    # Either quote style; no escape sequences, may span lines
    string_literal = (
        QuotedString('"', multiline=True, convert_whitespace_escapes=False) |
        QuotedString("'", multiline=True, convert_whitespace_escapes=False)
    ).set_parse_action(_string_action)

    # Literal text is kept verbatim ("10.0" stays "10.0")
    number = Regex(r"\d+(?:\.\d+)?").set_parse_action(_number_action)

    word = Word(alphas + "_", alphanums + "_").set_parse_action(_word_action)

    # one_of puts longer operators first, so "==" wins over "="
    operator = one_of(list(OPERATORS)).set_parse_action(_operator_action)

    # Anything else is surfaced to the parser as ILLEGAL
    illegal = Regex(r"\S").set_parse_action(_illegal_action)

    grammar = MatchFirst([comment, string_literal, number, word, operator, illegal])
    # Keep tabs so columns and string contents match the source
    return grammar.parse_with_tabs()


TOKEN_GRAMMAR = _build_token_grammar()


class Lexer:
    """Incremental lexer: one token per next_token() call, then EOF forever"""

    def __init__(self, source: str):
        self.source = source
        self._pending = self._scan()
        self._eof: Optional[Token] = None

    def _scan(self) -> Iterator[Token]:
        for toks, _start, _end in TOKEN_GRAMMAR.scan_string(self.source):
            yield toks[0]

    def _make_eof(self) -> Token:
        line = self.source.count("\n") + 1
        column = len(self.source) - self.source.rfind("\n")
        return Token(TokenKind.EOF, "", line, column)

    def next_token(self) -> Token:
        if self._eof is not None:
            return self._eof

        token = next(self._pending, None)
        if token is None:
            self._eof = self._make_eof()
            return self._eof
        return token

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def scan(self) -> List[Token]:
        """Tokenize the whole source; the result ends with a single EOF"""
        return list(self)


def lex(source: str) -> List[Token]:
    """Convert source text into a token list"""
    return Lexer(source).scan()
