"""Lexical scanner for the SQL dialect."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, Tuple, Union

from .tokens import Pos, Token, lookup

EOF_CHAR = ""

Lexeme = Tuple[Token, Pos, str]


class ScanError(Exception):
    """Raised when text cannot be scanned; carries what was read."""

    def __init__(self, message: str, literal: str = "") -> None:
        super().__init__(message)
        self.literal = literal


class BadStringError(ScanError):
    """A quoted string is unterminated or spans a newline."""

    def __init__(self, literal: str = "") -> None:
        super().__init__("bad string", literal)


class BadEscapeError(ScanError):
    """A backslash is followed by a character that is not a valid escape."""

    def __init__(self, literal: str = "") -> None:
        super().__init__("bad escape", literal)


class _RuneSource(Protocol):
    def read_rune(self) -> str: ...

    def unread_rune(self) -> None: ...


class _StringRunes:
    """Reads characters from a string one at a time, with one step of unread."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._offset = 0
        self._last = 0

    def read_rune(self) -> str:
        if self._offset >= len(self._text):
            self._last = 0
            return EOF_CHAR
        ch = self._text[self._offset]
        self._offset += 1
        self._last = 1
        return ch

    def unread_rune(self) -> None:
        self._offset -= self._last
        self._last = 0


def _read_all(source: Any) -> str:
    if isinstance(source, str):
        return source
    if hasattr(source, "read"):
        data = source.read()
        return data.decode("utf-8", "replace") if isinstance(data, bytes) else data
    raise TypeError(f"cannot scan {source.__class__.__name__}")


def _as_runes(source: Any) -> _RuneSource:
    if hasattr(source, "read_rune") and hasattr(source, "unread_rune"):
        return source
    return _StringRunes(_read_all(source))


def _is_whitespace(ch: str) -> bool:
    return ch in (" ", "\t", "\n") and ch != ""


def _is_letter(ch: str) -> bool:
    return ch != "" and ("a" <= ch <= "z" or "A" <= ch <= "Z")


def _is_digit(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


def _is_ident_char(ch: str) -> bool:
    return _is_letter(ch) or _is_digit(ch) or ch == "_"


def _is_unit(ch: str) -> bool:
    return _is_letter(ch) or ch == "µ"


class _Reader:
    """Character reader tracking positions, with a small unread buffer."""

    _SIZE = 3

    def __init__(self, text: str) -> None:
        self._text = text
        self._offset = 0
        self._buf: List[Tuple[str, Pos]] = [(EOF_CHAR, Pos(0, 0))] * self._SIZE
        self._i = 0
        self._n = 0
        self._line = 0
        self._char = 0
        self._eof = False

    def _read_raw(self) -> str:
        if self._offset >= len(self._text):
            return EOF_CHAR
        ch = self._text[self._offset]
        self._offset += 1
        if ch == "\r":
            if self._offset < len(self._text) and self._text[self._offset] == "\n":
                self._offset += 1
            ch = "\n"
        return ch

    def read(self) -> Tuple[str, Pos]:
        if self._n > 0:
            self._n -= 1
            return self.curr()

        ch = self._read_raw()
        self._i = (self._i + 1) % self._SIZE
        self._buf[self._i] = (ch, Pos(self._line, self._char))

        if ch == "\n":
            self._line += 1
            self._char = 0
        elif not self._eof:
            self._char += 1

        if ch == EOF_CHAR:
            self._eof = True

        return self.curr()

    def unread(self) -> None:
        self._n += 1

    def curr(self) -> Tuple[str, Pos]:
        return self._buf[(self._i - self._n) % self._SIZE]

    def read_rune(self) -> str:
        return self.read()[0]

    def unread_rune(self) -> None:
        self.unread()


_SINGLE = {
    "?": Token.POSITIONALPARAM,
    "+": Token.ADD,
    "*": Token.MUL,
    "%": Token.MOD,
    "&": Token.BITWISEAND,
    "|": Token.BITWISEOR,
    "^": Token.BITWISEXOR,
    "(": Token.LPAREN,
    ")": Token.RPAREN,
    ",": Token.COMMA,
    ";": Token.SEMICOLON,
}

# first character -> (token when alone, {second character: token})
_PAIRS: Dict[str, Tuple[Union[Token, None], Dict[str, Token]]] = {
    "=": (Token.EQ, {"~": Token.EQREGEX}),
    "!": (None, {"=": Token.NEQ, "~": Token.NEQREGEX}),
    ">": (Token.GT, {"=": Token.GTE}),
    "<": (Token.LT, {"=": Token.LTE, ">": Token.NEQ}),
    ":": (Token.COLON, {":": Token.DOUBLECOLON}),
}


class Scanner:
    """Splits SQL text into tokens."""

    def __init__(self, source: Any) -> None:
        self._r = _Reader(_read_all(source))

    def scan(self) -> Lexeme:
        """Return the next token, its position and its literal text."""
        r = self._r
        ch0, pos = r.read()

        if _is_whitespace(ch0):
            return self._scan_whitespace()
        if _is_letter(ch0) or ch0 == "_":
            r.unread()
            return self._scan_ident(True, False)
        if _is_digit(ch0):
            return self._scan_number()

        if ch0 == EOF_CHAR:
            return Token.EOF, pos, ""
        if ch0 == '"':
            r.unread()
            return self._scan_ident(True, True)
        if ch0 == "'":
            return self._scan_string()
        if ch0 == ".":
            ch1, _ = r.read()
            r.unread()
            if _is_digit(ch1):
                return self._scan_number()
            return Token.DOT, pos, ""
        if ch0 == "$":
            tok, _, lit = self._scan_ident(False, False)
            if tok is not Token.IDENT:
                return tok, pos, "$" + lit
            return Token.NAMEDPARAM, pos, "$" + lit
        if ch0 in _SINGLE:
            return _SINGLE[ch0], pos, ""
        if ch0 == "-":
            ch1, _ = r.read()
            if ch1 == "-":
                self._skip_until_newline()
                return Token.COMMENT, pos, ""
            r.unread()
            return Token.SUB, pos, ""
        if ch0 == "/":
            ch1, _ = r.read()
            if ch1 == "*":
                if not self._skip_until_end_comment():
                    return Token.ILLEGAL, pos, ""
                return Token.COMMENT, pos, ""
            r.unread()
            return Token.DIV, pos, ""
        if ch0 in _PAIRS:
            alone, follow = _PAIRS[ch0]
            ch1, _ = r.read()
            if ch1 in follow:
                return follow[ch1], pos, ""
            r.unread()
            if alone is not None:
                return alone, pos, ""

        return Token.ILLEGAL, pos, ch0

    def scan_regex(self) -> Lexeme:
        """Scan a regular expression delimited by slashes."""
        _, pos = self._r.curr()
        try:
            lit = scan_delimited(self._r, "/", "/", {"/": "/"}, True)
        except BadEscapeError:
            _, pos = self._r.curr()
            return Token.BADESCAPE, pos, ""
        except ScanError:
            return Token.BADREGEX, pos, ""
        return Token.REGEX, pos, lit

    def _scan_whitespace(self) -> Lexeme:
        r = self._r
        ch, pos = r.curr()
        chars = [ch]
        while True:
            ch, _ = r.read()
            if ch == EOF_CHAR:
                break
            if not _is_whitespace(ch):
                r.unread()
                break
            chars.append(ch)
        return Token.WS, pos, "".join(chars)

    def _skip_until_newline(self) -> None:
        while True:
            ch, _ = self._r.read()
            if ch in ("\n", EOF_CHAR):
                return

    def _skip_until_end_comment(self) -> bool:
        r = self._r
        while True:
            ch1, _ = r.read()
            if ch1 == "*":
                while True:
                    ch2, _ = r.read()
                    if ch2 == "/":
                        return True
                    if ch2 == EOF_CHAR:
                        return False
                    if ch2 != "*":
                        break
            elif ch1 == EOF_CHAR:
                return False

    def _scan_ident(self, keywords: bool, or_string: bool) -> Lexeme:
        r = self._r
        _, pos = r.read()
        r.unread()

        parts: List[str] = []
        while True:
            ch, _ = r.read()
            if ch == EOF_CHAR:
                break
            if ch == '"':
                tok0, pos0, lit0 = self._scan_string()
                if tok0 in (Token.BADSTRING, Token.BADESCAPE):
                    return tok0, pos0, lit0
                return (Token.IDENTORSTRING if or_string else Token.IDENT), pos, lit0
            r.unread()
            if not _is_ident_char(ch):
                break
            parts.append(scan_bare_ident(r))

        lit = "".join(parts)
        if keywords:
            tok = lookup(lit)
            if tok is not Token.IDENT:
                return tok, pos, ""
        return Token.IDENT, pos, lit

    def _scan_string(self) -> Lexeme:
        r = self._r
        r.unread()
        _, pos = r.curr()
        try:
            lit = scan_string(r)
        except BadStringError as exc:
            return Token.BADSTRING, pos, exc.literal
        except BadEscapeError as exc:
            _, pos = r.curr()
            return Token.BADESCAPE, pos, exc.literal
        return Token.STRING, pos, lit

    def _scan_digits(self) -> str:
        r = self._r
        digits = []
        while True:
            ch, _ = r.read()
            if not _is_digit(ch):
                r.unread()
                break
            digits.append(ch)
        return "".join(digits)

    def _scan_number(self) -> Lexeme:
        r = self._r
        ch, pos = r.curr()
        if ch == ".":
            ch1, _ = r.read()
            r.unread()
            if not _is_digit(ch1):
                return Token.ILLEGAL, pos, "."
            r.unread()
        else:
            r.unread()

        parts = [self._scan_digits()]

        is_decimal = False
        ch0, _ = r.read()
        if ch0 == ".":
            is_decimal = True
            ch1, _ = r.read()
            if _is_digit(ch1):
                parts += [ch0, ch1, self._scan_digits()]
            else:
                r.unread()
        else:
            r.unread()

        if is_decimal:
            return Token.NUMBER, pos, "".join(parts)

        ch0, _ = r.read()
        if _is_unit(ch0):
            parts.append(ch0)
            while True:
                ch1, _ = r.read()
                if not _is_unit(ch1):
                    r.unread()
                    break
                parts.append(ch1)
            while True:
                ch1, _ = r.read()
                if _is_unit(ch1) or _is_digit(ch1):
                    parts.append(ch1)
                else:
                    r.unread()
                    break
            return Token.DURATIONVAL, pos, "".join(parts)

        r.unread()
        return Token.INTEGER, pos, "".join(parts)


class BufScanner:
    """Scanner wrapper that can push back up to a few tokens."""

    _SIZE = 3

    def __init__(self, source: Any) -> None:
        self._s = Scanner(source)
        self._i = 0
        self._n = 0
        self._buf: List[Lexeme] = [(Token.ILLEGAL, Pos(0, 0), "")] * self._SIZE

    def scan(self) -> Lexeme:
        """Return the next token, taking pushed-back tokens first."""
        return self._scan_with(self._s.scan)

    def scan_regex(self) -> Lexeme:
        """Return the next regex token, taking pushed-back tokens first."""
        return self._scan_with(self._s.scan_regex)

    def unscan(self) -> None:
        """Push the previously read token back."""
        self._n += 1

    def _scan_with(self, scan: Any) -> Lexeme:
        if self._n > 0:
            self._n -= 1
            return self._curr()
        self._i = (self._i + 1) % self._SIZE
        self._buf[self._i] = scan()
        return self._curr()

    def _curr(self) -> Lexeme:
        return self._buf[(self._i - self._n) % self._SIZE]


def scan_delimited(
    source: Any,
    start: str,
    end: str,
    escapes: Dict[str, str],
    escapes_pass_thru: bool,
) -> str:
    """Read text between start and end delimiters, resolving escapes."""
    r = _as_runes(source)
    ch = r.read_rune()
    if ch == EOF_CHAR:
        raise ScanError("unexpected end of input")
    if ch != start:
        raise ScanError(f"expected {start}; found {ch}")

    out: List[str] = []
    while True:
        ch0 = r.read_rune()
        if ch0 == end:
            return "".join(out)
        if ch0 == EOF_CHAR:
            raise ScanError("unexpected end of input", "".join(out))
        if ch0 == "\n":
            raise ScanError("delimited text contains new line")
        if ch0 == "\\":
            ch1 = r.read_rune()
            if ch1 == EOF_CHAR:
                raise ScanError("unexpected end of input")
            if ch1 not in escapes:
                if escapes_pass_thru:
                    r.unread_rune()
                    out.append(ch0)
                    continue
                raise BadEscapeError(ch0 + ch1)
            out.append(escapes[ch1])
        else:
            out.append(ch0)


def scan_string(source: Any) -> str:
    """Read a quoted string; the first character read is the quote."""
    r = _as_runes(source)
    ending = r.read_rune()
    if ending == EOF_CHAR:
        raise BadStringError("")

    escapes = {"n": "\n", "\\": "\\", '"': '"', "'": "'"}
    out: List[str] = []
    while True:
        ch0 = r.read_rune()
        if ch0 == ending:
            return "".join(out)
        if ch0 == EOF_CHAR or ch0 == "\n":
            raise BadStringError("".join(out))
        if ch0 == "\\":
            ch1 = r.read_rune()
            if ch1 in escapes and ch1 != EOF_CHAR:
                out.append(escapes[ch1])
            else:
                raise BadEscapeError(ch0 + ch1)
        else:
            out.append(ch0)


def scan_bare_ident(source: Any) -> str:
    """Read an unquoted identifier."""
    r = _as_runes(source)
    chars: List[str] = []
    while True:
        ch = r.read_rune()
        if ch == EOF_CHAR:
            break
        if not _is_ident_char(ch):
            r.unread_rune()
            break
        chars.append(ch)
    return "".join(chars)


def is_regex_op(tok: Token) -> bool:
    """Tell whether the operator takes a regex operand."""
    return tok in (Token.EQREGEX, Token.NEQREGEX)