import io

import pytest

from genji.scanner import (
    BadEscapeError,
    BadStringError,
    BufScanner,
    ScanError,
    Scanner,
    is_regex_op,
    scan_bare_ident,
    scan_delimited,
    scan_string,
)
from genji.tokens import Pos, Token

T = Token

SCAN_CASES = [
    ("", T.EOF, "", Pos()),
    ("#", T.ILLEGAL, "#", Pos()),
    (" ", T.WS, " ", Pos()),
    ("\t", T.WS, "\t", Pos()),
    ("\n", T.WS, "\n", Pos()),
    ("\r", T.WS, "\n", Pos()),
    ("\r\n", T.WS, "\n", Pos()),
    ("\rX", T.WS, "\n", Pos()),
    ("\n\r", T.WS, "\n\n", Pos()),
    (" \n\t \r\n\t", T.WS, " \n\t \n\t", Pos()),
    (" foo", T.WS, " ", Pos()),
    ("+", T.ADD, "", Pos()),
    ("-", T.SUB, "", Pos()),
    ("*", T.MUL, "", Pos()),
    ("/", T.DIV, "", Pos()),
    ("%", T.MOD, "", Pos()),
    ("AND", T.AND, "", Pos()),
    ("and", T.AND, "", Pos()),
    ("OR", T.OR, "", Pos()),
    ("or", T.OR, "", Pos()),
    ("=", T.EQ, "", Pos()),
    ("<>", T.NEQ, "", Pos()),
    ("! ", T.ILLEGAL, "!", Pos()),
    ("<", T.LT, "", Pos()),
    ("<=", T.LTE, "", Pos()),
    (">", T.GT, "", Pos()),
    (">=", T.GTE, "", Pos()),
    ("(", T.LPAREN, "", Pos()),
    (")", T.RPAREN, "", Pos()),
    (",", T.COMMA, "", Pos()),
    (";", T.SEMICOLON, "", Pos()),
    (".", T.DOT, "", Pos()),
    ("=~", T.EQREGEX, "", Pos()),
    ("!~", T.NEQREGEX, "", Pos()),
    (":", T.COLON, "", Pos()),
    ("::", T.DOUBLECOLON, "", Pos()),
    ("foo", T.IDENT, "foo", Pos()),
    ("_foo", T.IDENT, "_foo", Pos()),
    ("Zx12_3U_-", T.IDENT, "Zx12_3U_", Pos()),
    ('"foo"', T.IDENTORSTRING, "foo", Pos()),
    (r'"foo\\bar"', T.IDENTORSTRING, "foo\\bar", Pos()),
    (r'"foo\bar"', T.BADESCAPE, r"\b", Pos(0, 5)),
    (r'"foo\"bar\""', T.IDENTORSTRING, 'foo"bar"', Pos()),
    ('test"', T.BADSTRING, "", Pos(0, 3)),
    ('"test', T.BADSTRING, "test", Pos()),
    ("$host", T.NAMEDPARAM, "$host", Pos()),
    ('$"host param"', T.NAMEDPARAM, "$host param", Pos()),
    ("?", T.POSITIONALPARAM, "", Pos()),
    ("true", T.TRUE, "", Pos()),
    ("false", T.FALSE, "", Pos()),
    ("'testing 123!'", T.STRING, "testing 123!", Pos()),
    (r"'foo\nbar'", T.STRING, "foo\nbar", Pos()),
    (r"'foo\\bar'", T.STRING, "foo\\bar", Pos()),
    ("'test", T.BADSTRING, "test", Pos()),
    ("'test\nfoo", T.BADSTRING, "test", Pos()),
    (r"'test\g'", T.BADESCAPE, r"\g", Pos(0, 6)),
    ("100", T.INTEGER, "100", Pos()),
    ("100.23", T.NUMBER, "100.23", Pos()),
    (".23", T.NUMBER, ".23", Pos()),
    ("10.3s", T.NUMBER, "10.3", Pos()),
    ("10u", T.DURATIONVAL, "10u", Pos()),
    ("10µ", T.DURATIONVAL, "10µ", Pos()),
    ("10ms", T.DURATIONVAL, "10ms", Pos()),
    ("1s", T.DURATIONVAL, "1s", Pos()),
    ("10m", T.DURATIONVAL, "10m", Pos()),
    ("10h", T.DURATIONVAL, "10h", Pos()),
    ("10d", T.DURATIONVAL, "10d", Pos()),
    ("10w", T.DURATIONVAL, "10w", Pos()),
    ("10x", T.DURATIONVAL, "10x", Pos()),
    ("ALL", T.ALL, "", Pos()),
    ("ALTER", T.ALTER, "", Pos()),
    ("AS", T.AS, "", Pos()),
    ("ASC", T.ASC, "", Pos()),
    ("BY", T.BY, "", Pos()),
    ("DELETE", T.DELETE, "", Pos()),
    ("DESC", T.DESC, "", Pos()),
    ("DROP", T.DROP, "", Pos()),
    ("DURATION", T.DURATION, "", Pos()),
    ("FROM", T.FROM, "", Pos()),
    ("INSERT", T.INSERT, "", Pos()),
    ("INTO", T.INTO, "", Pos()),
    ("LIMIT", T.LIMIT, "", Pos()),
    ("OFFSET", T.OFFSET, "", Pos()),
    ("ORDER", T.ORDER, "", Pos()),
    ("SELECT", T.SELECT, "", Pos()),
    ("TO", T.TO, "", Pos()),
    ("VALUES", T.VALUES, "", Pos()),
    ("WHERE", T.WHERE, "", Pos()),
    ("seLECT", T.SELECT, "", Pos()),
]


@pytest.mark.parametrize("text, tok, lit, pos", SCAN_CASES)
def test_scan(text, tok, lit, pos):
    assert Scanner(text).scan() == (tok, pos, lit)


def test_scan_multi():
    expected = [
        (T.SELECT, Pos(0, 0), ""),
        (T.WS, Pos(0, 6), " "),
        (T.IDENT, Pos(0, 7), "value"),
        (T.WS, Pos(0, 12), " "),
        (T.FROM, Pos(0, 13), ""),
        (T.WS, Pos(0, 17), " "),
        (T.IDENT, Pos(0, 18), "myseries"),
        (T.WS, Pos(0, 26), " "),
        (T.WHERE, Pos(0, 27), ""),
        (T.WS, Pos(0, 32), " "),
        (T.IDENT, Pos(0, 33), "a"),
        (T.WS, Pos(0, 34), " "),
        (T.EQ, Pos(0, 35), ""),
        (T.WS, Pos(0, 36), " "),
        (T.STRING, Pos(0, 36), "b"),
        (T.EOF, Pos(0, 40), ""),
    ]
    s = Scanner("SELECT value from myseries WHERE a = 'b'")
    actual = []
    while True:
        result = s.scan()
        actual.append(result)
        if result[0] is T.EOF:
            break
    assert actual == expected


def test_scanner_reads_file_like_source():
    s = Scanner(io.StringIO("foo"))
    assert s.scan() == (T.IDENT, Pos(0, 0), "foo")
    assert s.scan()[0] is T.EOF


def test_line_comment():
    s = Scanner("-- a comment\nfoo")
    assert s.scan()[0] is T.COMMENT
    assert s.scan() == (T.IDENT, Pos(1, 0), "foo")


def test_block_comment():
    s = Scanner("/* a ** comment */x")
    assert s.scan()[0] is T.COMMENT
    assert s.scan()[:2:2] == (T.IDENT,)
    assert Scanner("/* never closed").scan()[0] is T.ILLEGAL


STRING_CASES = [
    ('""', ""),
    ('"foo bar"', "foo bar"),
    ("'foo bar'", "foo bar"),
    (r'"foo\nbar"', "foo\nbar"),
    (r'"foo\\bar"', "foo\\bar"),
    (r'"foo\"bar"', 'foo"bar'),
    (r"'foo\'bar'", "foo'bar"),
]


@pytest.mark.parametrize("text, out", STRING_CASES)
def test_scan_string(text, out):
    assert scan_string(text) == out


@pytest.mark.parametrize(
    "text, error, message, out",
    [
        ('"foo\n', BadStringError, "bad string", "foo"),
        ('"foo', BadStringError, "bad string", "foo"),
        (r'"foo\xbar"', BadEscapeError, "bad escape", r"\x"),
    ],
)
def test_scan_string_errors(text, error, message, out):
    with pytest.raises(error) as exc:
        scan_string(text)
    assert str(exc.value) == message
    assert exc.value.literal == out


@pytest.mark.parametrize(
    "text, lit",
    [
        (r"/^payments\./", r"^payments\."),
        (r"/foo\/bar/", "foo/bar"),
        (r"/foo\\/bar/", r"foo\/bar"),
        (r"/foo\\bar/", r"foo\\bar"),
        (r"/http\:\/\/www\.example\.com/", r"http\://www\.example\.com"),
    ],
)
def test_scan_regex(text, lit):
    tok, _, got = Scanner(text).scan_regex()
    assert tok is T.REGEX
    assert got == lit


def test_scan_regex_unterminated_is_bad():
    tok, _, lit = Scanner("/foo").scan_regex()
    assert tok is T.BADREGEX
    assert lit == ""


def test_scan_delimited_errors():
    with pytest.raises(ScanError):
        scan_delimited("xfoo/", "/", "/", {}, True)
    with pytest.raises(ScanError):
        scan_delimited("/foo\nbar/", "/", "/", {}, True)
    with pytest.raises(BadEscapeError) as exc:
        scan_delimited(r"/a\qb/", "/", "/", {"/": "/"}, False)
    assert exc.value.literal == r"\q"


def test_scan_bare_ident():
    assert scan_bare_ident("abc_12-x") == "abc_12"
    assert scan_bare_ident("-x") == ""


def test_buf_scanner_unscan():
    s = BufScanner("SELECT foo")
    first = s.scan()
    assert first == (T.SELECT, Pos(0, 0), "")
    s.unscan()
    assert s.scan() == first
    ws = s.scan()
    ident = s.scan()
    assert ws[0] is T.WS
    assert ident == (T.IDENT, Pos(0, 7), "foo")
    s.unscan()
    s.unscan()
    assert s.scan() == ws
    assert s.scan() == ident
    assert s.scan()[0] is T.EOF


def test_is_regex_op():
    assert is_regex_op(T.EQREGEX)
    assert is_regex_op(T.NEQREGEX)
    assert not is_regex_op(T.EQ)