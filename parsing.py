"""
Dara Programming Language Parser
Recursive-descent statements with Pratt (precedence climbing) expressions
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple
import math

from ast_nodes import (
    AssignStatement, BlockStatement, Boolean, CallExpression, DeclareStatement,
    Expression, ExpressionStatement, FunctionLiteral, Identifier, IfStatement,
    InfixExpression, Nil, NumberLiteral, PrefixExpression, Program,
    ReturnStatement, Statement, StringLiteral
)
from error_handling import DaraParseError, DaraStackOverflowError, make_parse_error
from lexer import lex
from tokens import Token, TokenKind


class Precedence(IntEnum):
    LOWEST = 1
    OR = 2          # ||
    AND = 3         # &&
    EQUALITY = 4    # == !=
    RELATIONAL = 5  # < > <= >=
    SUM = 6         # + -
    PRODUCT = 7     # * / %
    PREFIX = 8      # -x !x
    CALL = 9        # f(x)


PRECEDENCES: Mapping[TokenKind, Precedence] = MappingProxyType({
    TokenKind.OR: Precedence.OR,
    TokenKind.AND: Precedence.AND,
    TokenKind.EQ: Precedence.EQUALITY,
    TokenKind.NOT_EQ: Precedence.EQUALITY,
    TokenKind.LT: Precedence.RELATIONAL,
    TokenKind.GT: Precedence.RELATIONAL,
    TokenKind.LT_EQ: Precedence.RELATIONAL,
    TokenKind.GT_EQ: Precedence.RELATIONAL,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.PERCENT: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
})


class Parser:
    """
    Parses one token stream into a Program.

    Parsing never raises: grammar violations are collected in `errors`
    (plain messages) and `error_details` (messages with source positions).
    Comment tokens are dropped before the parser ever sees them.
    """

    def __init__(self, tokens: Iterable[Token], debug: bool = False):
        self.debug = debug
        self.errors: List[str] = []
        self.error_details: List[Dict] = []

        self._tokens = iter(tokens)
        self._eof = Token(TokenKind.EOF, "")
        self.cur_token = self._pull_token()
        self.peek_token = self._pull_token()

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def _pull_token(self) -> Token:
        for token in self._tokens:
            if token.kind is TokenKind.COMMENT:
                continue
            if token.kind is TokenKind.EOF:
                self._eof = token
                self._tokens = iter(())
            return token
        return self._eof

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self._pull_token()

    def cur_is(self, kind: TokenKind) -> bool:
        return self.cur_token.kind is kind

    def peek_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind is kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advance if the next token has the given kind, else record an error"""
        if self.peek_is(kind):
            self.next_token()
            return True
        self._peek_error(kind)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _add_error(self, message: str, token: Token, expected: Optional[List[str]] = None) -> None:
        self.errors.append(message)
        self.error_details.append(make_parse_error(
            message=message,
            line=token.line,
            column=token.column,
            expected=expected,
            got=token.literal or token.kind.value
        ))

    def _peek_error(self, kind: TokenKind) -> None:
        message = (f"expected next token to be {kind.value}, "
                   f"got {self.peek_token.kind.value} instead")
        self._add_error(message, self.peek_token, [kind.value])

    def _no_prefix_parse_fn_error(self, token: Token) -> None:
        self._add_error(f"no prefix parse function for {token.kind.value} found", token)

    def _synchronize(self) -> None:
        """Skip the rest of a malformed statement"""
        while not self.cur_is(TokenKind.SEMICOLON) and not self.cur_is(TokenKind.EOF):
            self.next_token()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        """Parse to EOF; nesting deeper than the host stack raises DaraStackOverflowError"""
        statements = []

        while not self.cur_is(TokenKind.EOF):
            error_count = len(self.errors)
            try:
                stmt = self.parse_statement()
            except RecursionError as e:
                raise DaraStackOverflowError(
                    f"stack overflow: expression nested too deeply at line {self.cur_token.line}") from e
            if stmt is not None:
                statements.append(stmt)
                if self.debug:
                    print(f"Parsed statement: {stmt}")
            if len(self.errors) > error_count:
                self._synchronize()
            self.next_token()

        return Program(tuple(statements))

    def parse_statement(self) -> Optional[Statement]:
        kind = self.cur_token.kind

        if kind is TokenKind.LET:
            return self.parse_let_statement()
        elif kind is TokenKind.IDENT and self.peek_is(TokenKind.DECLARE):
            return self.parse_binding_statement(DeclareStatement)
        elif kind is TokenKind.IDENT and self.peek_is(TokenKind.ASSIGN):
            return self.parse_binding_statement(AssignStatement)
        elif kind is TokenKind.RETURN:
            return self.parse_return_statement()
        elif kind is TokenKind.IF:
            return self.parse_if_statement()
        else:
            return self.parse_expression_statement()

    def _skip_semicolon(self) -> None:
        if self.peek_is(TokenKind.SEMICOLON):
            self.next_token()

    def parse_let_statement(self) -> Optional[DeclareStatement]:
        """let IDENT = Expression ;?"""
        token = self.cur_token

        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self._skip_semicolon()
        return DeclareStatement(token, name, value)

    def parse_binding_statement(self, node_class) -> Optional[Statement]:
        """IDENT (":=" | "=") Expression ;?"""
        name = Identifier(self.cur_token, self.cur_token.literal)
        self.next_token()
        token = self.cur_token
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self._skip_semicolon()
        return node_class(token, name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        token = self.cur_token
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self._skip_semicolon()
        return ReturnStatement(token, value)

    def parse_if_statement(self) -> Optional[IfStatement]:
        """if Expression Block (else (IfStatement | Block))?"""
        token = self.cur_token
        self.next_token()

        # Parentheses around the condition are just a grouped expression
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_is(TokenKind.ELSE):
            self.next_token()
            if self.peek_is(TokenKind.IF):
                self.next_token()
                alternative = self.parse_if_statement()
            elif self.expect_peek(TokenKind.LBRACE):
                alternative = self.parse_block_statement()
            if alternative is None:
                return None

        self._skip_semicolon()
        return IfStatement(token, condition, consequence, alternative)

    def parse_block_statement(self) -> Optional[BlockStatement]:
        """{ Statement* }"""
        token = self.cur_token
        statements = []
        self.next_token()

        while not self.cur_is(TokenKind.RBRACE):
            if self.cur_is(TokenKind.EOF):
                self._add_error(
                    "unterminated block: expected next token to be }, got EOF instead",
                    self.cur_token, ["}"]
                )
                return None
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return BlockStatement(token, tuple(statements))

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        token = self.cur_token

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        self._skip_semicolon()
        return ExpressionStatement(token, expression)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = PREFIX_RULES.get(self.cur_token.kind)
        if prefix is None:
            self._no_prefix_parse_fn_error(self.cur_token)
            return None

        left = prefix(self)

        while (left is not None
               and not self.peek_is(TokenKind.SEMICOLON)
               and precedence < self.peek_precedence()):
            infix = INFIX_RULES.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(self, left)

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def _parse_number_literal(self) -> Optional[Expression]:
        try:
            value = float(self.cur_token.literal)
        except ValueError:
            value = None
        # Digit runs too long for a float overflow to inf
        if value is None or not math.isfinite(value):
            self._add_error(f"could not parse {self.cur_token.literal} as number", self.cur_token)
            return None
        return NumberLiteral(self.cur_token, value)

    def _parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def _parse_boolean(self) -> Expression:
        return Boolean(self.cur_token, self.cur_is(TokenKind.TRUE))

    def _parse_nil(self) -> Expression:
        return Nil(self.cur_token)

    def _parse_prefix_expression(self) -> Optional[Expression]:
        token = self.cur_token
        self.next_token()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(token, token.literal, right)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def _parse_function_literal(self) -> Optional[Expression]:
        """fn ( ParamList ) Block"""
        token = self.cur_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(token, parameters, body)

    def _parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        if self.peek_is(TokenKind.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TokenKind.IDENT):
            return None
        parameters = [Identifier(self.cur_token, self.cur_token.literal)]

        while self.peek_is(TokenKind.COMMA):
            self.next_token()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            parameters.append(Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(parameters)

    def _parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()

        # Same-precedence right operand keeps binary operators left-associative
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(token, left, token.literal, right)

    def _parse_call_expression(self, function: Expression) -> Optional[Expression]:
        token = self.cur_token
        arguments = self._parse_expression_list(TokenKind.RPAREN)
        if arguments is None:
            return None
        return CallExpression(token, function, arguments)

    def _parse_expression_list(self, end: TokenKind) -> Optional[Tuple[Expression, ...]]:
        if self.peek_is(end):
            self.next_token()
            return ()

        self.next_token()
        first = self.parse_expression(Precedence.LOWEST)
        if first is None:
            return None
        items = [first]

        while self.peek_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None
        return tuple(items)


PrefixRule = Callable[[Parser], Optional[Expression]]
InfixRule = Callable[[Parser, Expression], Optional[Expression]]

PREFIX_RULES: Mapping[TokenKind, PrefixRule] = MappingProxyType({
    TokenKind.IDENT: Parser._parse_identifier,
    TokenKind.NUMBER: Parser._parse_number_literal,
    TokenKind.STRING: Parser._parse_string_literal,
    TokenKind.TRUE: Parser._parse_boolean,
    TokenKind.FALSE: Parser._parse_boolean,
    TokenKind.NIL: Parser._parse_nil,
    TokenKind.BANG: Parser._parse_prefix_expression,
    TokenKind.MINUS: Parser._parse_prefix_expression,
    TokenKind.LPAREN: Parser._parse_grouped_expression,
    TokenKind.FUNCTION: Parser._parse_function_literal,
})

INFIX_RULES: Mapping[TokenKind, InfixRule] = MappingProxyType({
    **{kind: Parser._parse_infix_expression for kind in PRECEDENCES if kind is not TokenKind.LPAREN},
    TokenKind.LPAREN: Parser._parse_call_expression,
})


def parse(tokens: Iterable[Token], debug: bool = False) -> Tuple[Program, List[str]]:
    """Parse a token stream into a Program plus any error messages"""
    parser = Parser(tokens, debug)
    program = parser.parse_program()
    return program, parser.errors


class DaraParser:
    """Main Dara parser combining lexer and grammar"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Dara source code"""
        return lex(text)

    def parse_string(self, text: str, filename: str = "<input>") -> Program:
        """Parse Dara source code; raises DaraParseError on grammar violations"""
        parser = Parser(lex(text), self.debug)
        program = parser.parse_program()
        if parser.errors:
            raise DaraParseError(parser.errors, parser.error_details, text, filename)
        return program

    def parse_file(self, filepath: str) -> Program:
        """Parse a Dara source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise DaraParseError([f"File not found: {filepath}"], filename=filepath)
        except UnicodeDecodeError as e:
            raise DaraParseError([f"Cannot decode file {filepath}: {e}"], filename=filepath)
        return self.parse_string(content, filepath)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> DaraParser:
    """Create a Dara parser"""
    return DaraParser(debug=debug)


def create_debug_parser() -> DaraParser:
    """Create a Dara parser with debug enabled"""
    return DaraParser(debug=True)
