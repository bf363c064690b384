"""Character level tokenizer turning text into fields, record ends and comments.

Each call to ``next_token()`` advances over exactly one unit of the input:

- a field terminated by a delimiter (``FIELD``)
- the last field of a record terminated by CR, LF or CRLF (``END_OF_RECORD``)
- the end of input, possibly with a pending last field (``END_OF_FILE``, ``ready`` if so)
- a whole comment line (``COMMENT``)
- malformed input (``INVALID``), with a description in ``Tokenizer.error``

Delimiters may consist of several characters. Escaped characters, both inside and outside of
quotes, mirror what the printer produces when escaping: ``\\n`` and ``\\r`` for line breaks, and
the escape char before itself, the quote char and each character of the delimiter. An escape char
before any other character is kept as text.
"""
from __future__ import annotations

from ..utils import BACKSPACE, CR, CRLF, EOF, FF, LF, SP, TAB
from .dialects import Dialect
from .source import SourceReader, TextSource
from .tokens import Token, TokenType

ESCAPES: dict[str, str] = {"r": CR, "n": LF, "t": TAB, "b": BACKSPACE, "f": FF}
"""Characters following the escape char that stand for a control character."""

CONTROLS: frozenset[str] = frozenset((CR, LF, FF, TAB, BACKSPACE))
"""Control characters that are kept as they are when escaped."""


class Tokenizer:
    """Produce tokens from a character source according to a dialect.

    The dialect is copied on entry. The tokenizer never rewinds, and once the source is closed,
    only ``END_OF_FILE`` tokens are produced.
    """

    def __init__(self, source: TextSource | SourceReader, dialect: Dialect):
        self.dialect = dialect = dialect.copy()
        self.reader = source if isinstance(source, SourceReader) else SourceReader(source)
        self.delimiter = dialect.delimiter
        self.quote = dialect.quote_char
        self.escape = dialect.escape_char
        self.comment = dialect.comment_marker
        self.ignore_surrounding_spaces = dialect.ignore_surrounding_spaces
        self.ignore_empty_lines = dialect.ignore_empty_lines
        self.strict = dialect.is_strict_quote_mode
        self.first_eol: str | None = None
        self.error: str | None = None
        self._last_delimiter = False
        self._meta = {ch for ch in (self.escape, self.quote, self.comment) if ch is not None}
        self._meta.update(self.delimiter)

    @property
    def line_number(self) -> int:
        return self.reader.line_number

    @property
    def position(self) -> int:
        """Number of characters consumed so far."""
        return self.reader.position

    @property
    def closed(self) -> bool:
        return self.reader.closed

    def close(self):
        self.reader.close()

    def next_token(self, token: Token) -> Token:
        """Fill the (reset) token with the next unit of input and return it."""
        reader = self.reader
        if reader.closed:
            return self._finish(token, TokenType.END_OF_FILE)

        last = reader.last_char
        c = reader.read()
        eol = self.read_end_of_line(c)

        if self.ignore_empty_lines:
            while eol and is_start_of_line(last):
                last = c
                c = reader.read()
                eol = self.read_end_of_line(c)
                if c == EOF:
                    return self._finish(token, TokenType.END_OF_FILE)

        if last == EOF or (not self._last_delimiter and c == EOF):
            return self._finish(token, TokenType.END_OF_FILE)

        if is_start_of_line(last) and self.is_comment_start(c):
            line = reader.read_line()
            if line is None:
                return self._finish(token, TokenType.END_OF_FILE)

            token.append(line.strip())
            return self._finish(token, TokenType.COMMENT)

        delim = self.is_delimiter(c)
        if self.ignore_surrounding_spaces:
            while not delim and not eol and c != EOF and c.isspace():
                c = reader.read()
                eol = self.read_end_of_line(c)
                delim = self.is_delimiter(c)

        if delim:
            return self._finish(token, TokenType.FIELD)
        if eol:
            return self._finish(token, TokenType.END_OF_RECORD)
        if c == EOF:
            return self._finish(token, TokenType.END_OF_FILE, ready=True)
        if c == self.quote:
            return self.parse_quoted(token)

        return self.parse_simple(token, c)

    def _finish(self, token: Token, kind: TokenType, ready: bool | None = None) -> Token:
        token.type = kind
        if ready is not None:
            token.ready = ready
        self._last_delimiter = kind is TokenType.FIELD
        return token

    def _invalid(self, token: Token, msg: str) -> Token:
        self.error = msg
        return self._finish(token, TokenType.INVALID)

    def parse_simple(self, token: Token, c: str) -> Token:
        """An unquoted field, starting with the (already consumed) character c.

        Quote characters inside unquoted fields are kept as they are, except in strict quote
        modes, where values containing quotes are always quoted when printed.
        """
        while True:
            if self.read_end_of_line(c):
                kind = TokenType.END_OF_RECORD
                break
            if c == EOF:
                token.ready = True
                kind = TokenType.END_OF_FILE
                break
            if self.is_delimiter(c):
                kind = TokenType.FIELD
                break

            if c == self.escape:
                if not self.append_escaped(token):
                    return self._invalid(token, "EOF whilst processing escape sequence")
            elif c == self.quote and self.strict:
                return self._invalid(
                    token, f"Unexpected quote character {c!r} in unquoted field '{token.text}'"
                )
            else:
                token.append(c)

            c = self.reader.read()

        if self.ignore_surrounding_spaces:
            self.trim_trailing_spaces(token)

        return self._finish(token, kind)

    def parse_quoted(self, token: Token) -> Token:
        """A field enclosed in quotes, the opening quote having been consumed already.

        Line breaks inside the quotes are part of the field. A doubled quote is a literal quote.
        After the closing quote only whitespace is allowed before the next delimiter or line break.
        """
        reader = self.reader
        start_line = self.line_number
        token.quoted = True

        while True:
            c = reader.read()

            if c == self.quote:
                if reader.peek() == self.quote:
                    token.append(reader.read())
                    continue

                # Closing quote
                while True:
                    c = reader.read()
                    if self.is_delimiter(c):
                        return self._finish(token, TokenType.FIELD)
                    if c == EOF:
                        return self._finish(token, TokenType.END_OF_FILE, ready=True)
                    if self.read_end_of_line(c):
                        return self._finish(token, TokenType.END_OF_RECORD)
                    if not c.isspace():
                        return self._invalid(
                            token, "Invalid char between encapsulated token and delimiter"
                        )

            elif c == self.escape:
                if not self.append_escaped(token):
                    return self._invalid(token, "EOF whilst processing escape sequence")

            elif c == EOF:
                return self._invalid(
                    token,
                    f"EOF reached before encapsulated token finished (started on line {start_line})",
                )

            else:
                token.append(c)

    def append_escaped(self, token: Token) -> bool:
        """Add what follows an (already consumed) escape char. False if the input ends instead."""
        if self.is_escaped_delimiter():
            token.append(self.delimiter)
            return True

        c = self.reader.read()
        if c == EOF:
            return False

        if c in ESCAPES:
            token.append(ESCAPES[c])
        elif c in CONTROLS or c in self._meta:
            token.append(c)
        else:
            # Not an escape sequence, so the escape char is just text
            token.append(self.escape)
            token.append(c)

        return True

    def is_escaped_delimiter(self) -> bool:
        """Whether an escaped (multi-character) delimiter follows, consuming it if so.

        A delimiter ``abc`` is printed escaped as ``\\a\\b\\c``. Here the first escape char has
        already been consumed.
        """
        delim = self.delimiter
        n = 2 * len(delim) - 1
        ahead = self.reader.peek(n)
        if len(ahead) < n or ahead[0] != delim[0]:
            return False

        for i in range(1, len(delim)):
            if ahead[2 * i - 1] != self.escape or ahead[2 * i] != delim[i]:
                return False

        for _ in range(n):
            self.reader.read()

        return True

    def is_delimiter(self, c: str) -> bool:
        """Whether c starts a delimiter, consuming the delimiter's remaining characters if so."""
        delim = self.delimiter
        if c == EOF or c != delim[0]:
            return False

        if len(delim) == 1:
            return True

        rest = delim[1:]
        if self.reader.peek(len(rest)) != rest:
            return False

        for _ in range(len(rest)):
            self.reader.read()

        return True

    def is_comment_start(self, c: str) -> bool:
        """Whether c, or the first character after some spaces, is the comment marker.

        Leading spaces are consumed if they precede a comment marker.
        """
        if self.comment is None:
            return False

        if c == self.comment:
            return True

        if c != SP:
            return False

        n = 1
        while True:
            ahead = self.reader.peek(n)
            if len(ahead) < n:
                return False
            if ahead[-1] == self.comment:
                for _ in range(n):
                    self.reader.read()
                return True
            if ahead[-1] != SP:
                return False
            n += 1

    def read_end_of_line(self, c: str) -> bool:
        """Whether c is a line break, consuming the LF of a CRLF pair."""
        if c == CR and self.reader.peek() == LF:
            c = self.reader.read()
            if self.first_eol is None:
                self.first_eol = CRLF

        if c != CR and c != LF:
            return False

        if self.first_eol is None:
            self.first_eol = c

        return True

    @staticmethod
    def trim_trailing_spaces(token: Token):
        text = token.text
        trimmed = text.rstrip()
        if len(trimmed) != len(text):
            token.content[:] = [trimmed]


def is_start_of_line(c: str | None) -> bool:
    return c is None or c == LF or c == CR
