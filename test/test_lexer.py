"""
Lexer tests for Dara
Token kinds, literals, comments and end-of-input behaviour
"""

import pytest
from lexer import Lexer, lex
from tokens import Token, TokenKind as K


def kinds_and_literals(source):
  return [(t.kind, t.literal) for t in lex(source)]


class TestOperators:
  """Test operator recognition"""

  def test_assign_and_equality(self):
    """A bare '=' is assignment; '==' is greedy"""
    assert kinds_and_literals("=") == [(K.ASSIGN, "="), (K.EOF, "")]
    assert kinds_and_literals("==") == [(K.EQ, "=="), (K.EOF, "")]

  def test_two_character_operators(self):
    """Two-character operators win over their one-character prefixes"""
    source = "== != <= >= && || :="
    expected = [K.EQ, K.NOT_EQ, K.LT_EQ, K.GT_EQ, K.AND, K.OR, K.DECLARE, K.EOF]
    assert [t.kind for t in lex(source)] == expected

  def test_adjacent_operators(self):
    """Operators need no whitespace between them"""
    assert kinds_and_literals("!-*/5;") == [
        (K.BANG, "!"), (K.MINUS, "-"), (K.ASTERISK, "*"), (K.SLASH, "/"),
        (K.NUMBER, "5"), (K.SEMICOLON, ";"), (K.EOF, ""),
    ]

  def test_unknown_character_is_illegal(self):
    """Unrecognised characters surface as ILLEGAL tokens, not exceptions"""
    assert kinds_and_literals("a @ b") == [
        (K.IDENT, "a"), (K.ILLEGAL, "@"), (K.IDENT, "b"), (K.EOF, ""),
    ]


class TestComments:
  """Test both comment styles"""

  def test_line_comment(self):
    assert kinds_and_literals("// Some comment\n") == [(K.COMMENT, "Some comment"), (K.EOF, "")]

  def test_line_comment_without_line_break(self):
    assert kinds_and_literals("// Some comment") == [(K.COMMENT, "Some comment"), (K.EOF, "")]

  def test_c_style_comment(self):
    assert kinds_and_literals("/* Some comment */") == [(K.COMMENT, "Some comment"), (K.EOF, "")]

  def test_multiline_c_style_comment(self):
    """Inner line breaks are kept; only the outer whitespace is trimmed"""
    source = "/*\nSome comment\nAnd more\n*/"
    assert kinds_and_literals(source) == [(K.COMMENT, "Some comment\nAnd more"), (K.EOF, "")]

  @pytest.mark.parametrize("source", ["/* comment */10", "/* comment */ 10", "  /* comment */\n\n10  "])
  def test_comment_before_number(self, source):
    """A comment followed by a number regardless of surrounding whitespace"""
    assert kinds_and_literals(source) == [(K.COMMENT, "comment"), (K.NUMBER, "10"), (K.EOF, "")]

  def test_unterminated_block_comment(self):
    """An unterminated block comment runs to end of input"""
    assert kinds_and_literals("1 /* never closed") == [
        (K.NUMBER, "1"), (K.COMMENT, "never closed"), (K.EOF, ""),
    ]


class TestLiterals:
  """Test numbers, strings, identifiers and keywords"""

  def test_number_literal_text_is_verbatim(self):
    """'10.0' and '10' stay distinct at the token level"""
    assert kinds_and_literals("10.0 10") == [(K.NUMBER, "10.0"), (K.NUMBER, "10"), (K.EOF, "")]

  def test_strings_with_either_quote(self):
    """Delimiters are not part of the literal"""
    assert kinds_and_literals("\"10\" '9'") == [(K.STRING, "10"), (K.STRING, "9"), (K.EOF, "")]

  def test_string_keeps_other_quote_and_tabs(self):
    assert kinds_and_literals("'say \"hi\"\t!'") == [(K.STRING, 'say "hi"\t!'), (K.EOF, "")]

  def test_empty_string(self):
    assert kinds_and_literals('""') == [(K.STRING, ""), (K.EOF, "")]

  def test_keywords(self):
    source = "let fn if else return true false nil"
    expected = [K.LET, K.FUNCTION, K.IF, K.ELSE, K.RETURN, K.TRUE, K.FALSE, K.NIL, K.EOF]
    assert [t.kind for t in lex(source)] == expected

  def test_identifiers(self):
    """Letters or underscore first, then alphanumerics"""
    assert kinds_and_literals("five5 _tmp letter") == [
        (K.IDENT, "five5"), (K.IDENT, "_tmp"), (K.IDENT, "letter"), (K.EOF, ""),
    ]


class TestNextToken:
  """Full program scan matching the incremental interface"""

  SOURCE = """let five5 = 5;
let ten = 10.0;

let add = fn(x, y) {
  x + y;
};

let result = add(five, ten);
!-*/5;
5 < 10 > 5 >= 10;

if (5 <= 10) {
    return true;
} else {
    return false;
}

// 10 == 10; 10 != 9;

/* comment */10

10 == "10"; 10 != '9';"""

  EXPECTED = [
      (K.LET, "let"), (K.IDENT, "five5"), (K.ASSIGN, "="), (K.NUMBER, "5"), (K.SEMICOLON, ";"),
      (K.LET, "let"), (K.IDENT, "ten"), (K.ASSIGN, "="), (K.NUMBER, "10.0"), (K.SEMICOLON, ";"),
      (K.LET, "let"), (K.IDENT, "add"), (K.ASSIGN, "="), (K.FUNCTION, "fn"), (K.LPAREN, "("),
      (K.IDENT, "x"), (K.COMMA, ","), (K.IDENT, "y"), (K.RPAREN, ")"), (K.LBRACE, "{"),
      (K.IDENT, "x"), (K.PLUS, "+"), (K.IDENT, "y"), (K.SEMICOLON, ";"), (K.RBRACE, "}"),
      (K.SEMICOLON, ";"),
      (K.LET, "let"), (K.IDENT, "result"), (K.ASSIGN, "="), (K.IDENT, "add"), (K.LPAREN, "("),
      (K.IDENT, "five"), (K.COMMA, ","), (K.IDENT, "ten"), (K.RPAREN, ")"), (K.SEMICOLON, ";"),
      (K.BANG, "!"), (K.MINUS, "-"), (K.ASTERISK, "*"), (K.SLASH, "/"), (K.NUMBER, "5"),
      (K.SEMICOLON, ";"),
      (K.NUMBER, "5"), (K.LT, "<"), (K.NUMBER, "10"), (K.GT, ">"), (K.NUMBER, "5"),
      (K.GT_EQ, ">="), (K.NUMBER, "10"), (K.SEMICOLON, ";"),
      (K.IF, "if"), (K.LPAREN, "("), (K.NUMBER, "5"), (K.LT_EQ, "<="), (K.NUMBER, "10"),
      (K.RPAREN, ")"), (K.LBRACE, "{"), (K.RETURN, "return"), (K.TRUE, "true"),
      (K.SEMICOLON, ";"), (K.RBRACE, "}"), (K.ELSE, "else"), (K.LBRACE, "{"),
      (K.RETURN, "return"), (K.FALSE, "false"), (K.SEMICOLON, ";"), (K.RBRACE, "}"),
      (K.COMMENT, "10 == 10; 10 != 9;"),
      (K.COMMENT, "comment"), (K.NUMBER, "10"),
      (K.NUMBER, "10"), (K.EQ, "=="), (K.STRING, "10"), (K.SEMICOLON, ";"),
      (K.NUMBER, "10"), (K.NOT_EQ, "!="), (K.STRING, "9"), (K.SEMICOLON, ";"),
      (K.EOF, ""),
  ]

  def test_incremental_next_token(self):
    lexer = Lexer(self.SOURCE)
    actual = [(t.kind, t.literal) for t in (lexer.next_token() for _ in self.EXPECTED)]
    assert actual == self.EXPECTED

  def test_scan_matches_incremental(self):
    assert kinds_and_literals(self.SOURCE) == self.EXPECTED

  def test_eof_repeats_forever(self):
    """Calls after exhaustion keep returning EOF"""
    lexer = Lexer("x")
    assert lexer.next_token().kind is K.IDENT
    for _ in range(3):
      assert lexer.next_token().kind is K.EOF

  def test_scan_ends_with_single_eof(self):
    tokens = Lexer("let test = 5.2;").scan()
    assert [t.kind for t in tokens].count(K.EOF) == 1
    assert tokens[-1] == Token(K.EOF, "")


class TestPositions:
  """Source positions carried by tokens"""

  def test_line_and_column(self):
    tokens = lex("x := 1\n  y")
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (1, 3)
    assert (tokens[3].line, tokens[3].column) == (2, 3)

  def test_position_ignored_by_equality(self):
    assert Token(K.IDENT, "x", 1, 1) == Token(K.IDENT, "x", 9, 9)
