import pytest

from genji.tokens import Pos, Token, lookup, tokstr


def test_operator_strings():
    assert tokstr(Token.ADD, "") == "+"
    assert tokstr(Token.GTE, "") == ">="
    assert tokstr(Token.NEQ, "") == "!="
    assert tokstr(Token.DOUBLECOLON, "") == "::"


def test_keyword_strings():
    assert tokstr(Token.SELECT, "") == "SELECT"
    assert tokstr(Token.WHERE, "") == "WHERE"
    assert tokstr(Token.POSITIONALPARAM, "") == "?"


def test_format_uses_text():
    assert f"{Token.LPAREN}" == tokstr(Token.LPAREN, "") == "("


@pytest.mark.parametrize(
    "text, tok",
    [
        ("select", Token.SELECT),
        ("SeLeCt", Token.SELECT),
        ("and", Token.AND),
        ("OR", Token.OR),
        ("true", Token.TRUE),
        ("FALSE", Token.FALSE),
        ("records", Token.RECORDS),
        ("unique", Token.UNIQUE),
    ],
)
def test_lookup_keywords(text, tok):
    assert lookup(text) is tok


@pytest.mark.parametrize("text", ["foo", "selects", "_x", "inf"])
def test_lookup_identifiers(text):
    assert lookup(text) is Token.IDENT


def test_every_keyword_round_trips_through_lookup():
    for tok in Token:
        if Token.ALL <= tok <= Token.WHERE and tok is not Token.INF:
            assert lookup(str(tok)) is tok
            assert lookup(str(tok).lower()) is tok


def test_precedence_ordering():
    assert Token.OR.precedence() < Token.AND.precedence()
    assert Token.AND.precedence() < Token.EQ.precedence()
    assert Token.EQ.precedence() < Token.ADD.precedence()
    assert Token.ADD.precedence() < Token.MUL.precedence()


def test_precedence_groups_are_equal():
    assert Token.EQ.precedence() == Token.LT.precedence() == Token.GTE.precedence()
    assert Token.ADD.precedence() == Token.SUB.precedence() == Token.BITWISEOR.precedence()
    assert Token.MUL.precedence() == Token.DIV.precedence() == Token.BITWISEAND.precedence()


def test_non_operators_have_no_precedence():
    assert Token.OR.precedence() == 1
    assert Token.LPAREN.precedence() == 0
    assert Token.IDENT.precedence() == 0


def test_is_operator():
    assert Token.ADD.is_operator() is True
    assert Token.GTE.is_operator() is True
    assert lookup("and").is_operator() is True
    assert Token.LPAREN.is_operator() is False
    assert Token.BADREGEX.is_operator() is False
    assert lookup("select").is_operator() is False
    operators = [t for t in Token if t.is_operator()]
    assert all(t.precedence() > 0 for t in operators)


def test_tokstr_prefers_literal():
    assert tokstr(Token.IDENT, "foo") == "foo"
    assert tokstr(Token.EQ, "") == "="
    assert tokstr(Token.EOF, "") == "EOF"


def test_pos_equality():
    assert Pos() == Pos(0, 0)
    assert Pos(1, 2) == Pos(line=1, char=2)
    assert Pos(1, 2) != Pos(2, 1)