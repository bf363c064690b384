"""Buffered character reader with lookahead, the input side of the tokenizer.

Reads the underlying text stream in chunks, never rewinds, and keeps track of the number of
characters consumed and of line breaks seen (CR, LF and CRLF each count as one).
"""
from __future__ import annotations

from io import StringIO
from typing import TextIO, Union

from ..utils import CR, EOF, LF
from .abc import TokenizeError

TextSource = Union[str, TextIO]
"""A string or anything with a ``read(n)`` method returning strings."""

BUFFER_SIZE: int = 8192
"""Number of characters requested from the underlying stream at once."""


class SourceReader:
    """Forward-only character cursor over a text source.

    ``last_char`` is None before anything was read, and ``EOF`` (the empty string) once the end
    of the source has been reached.
    """

    def __init__(self, source: TextSource, buffer_size: int = BUFFER_SIZE):
        if isinstance(source, str):
            source = StringIO(source)

        self.source = source
        self.buffer_size = max(1, buffer_size)
        self.last_char: str | None = None
        self.eol_counter = 0
        self.position = 0
        self.closed = False
        self._buffer = ""
        self._pos = 0
        self._exhausted = False

    def _fill(self, n: int):
        """Make sure at least n unread characters are buffered, unless the source runs out."""
        while len(self._buffer) - self._pos < n and not self._exhausted:
            try:
                chunk = self.source.read(self.buffer_size)
            except (OSError, ValueError) as exc:
                raise TokenizeError(
                    f"(line {self.line_number}) Failed reading from source: {exc}",
                    line=self.line_number,
                ) from exc

            if not chunk:
                self._exhausted = True
            else:
                self._buffer = self._buffer[self._pos :] + chunk
                self._pos = 0

    def read(self) -> str:
        """Consume and return the next character, or EOF."""
        if self.closed:
            self.last_char = EOF
            return EOF

        self._fill(1)
        if self._pos >= len(self._buffer):
            # An unterminated last line still counts as a line
            if self.last_char not in (CR, LF, EOF, None):
                self.eol_counter += 1
            self.last_char = EOF
            return EOF

        c = self._buffer[self._pos]
        self._pos += 1
        self.position += 1
        if c == CR or (c == LF and self.last_char != CR):
            self.eol_counter += 1

        self.last_char = c
        return c

    def peek(self, n: int = 1) -> str:
        """Up to n upcoming characters without consuming them (fewer only at the end)."""
        if self.closed:
            return EOF

        self._fill(n)
        return self._buffer[self._pos : self._pos + n]

    def read_line(self) -> str | None:
        """Consume the rest of the current line, returning it without the line break.

        Returns None if there is nothing left to read.
        """
        if self.peek() == EOF:
            return None

        chars = []
        while True:
            c = self.read()
            if c == EOF or c == LF:
                break
            if c == CR:
                if self.peek() == LF:
                    self.read()
                break
            chars.append(c)

        return "".join(chars)

    @property
    def line_number(self) -> int:
        """Number of the line being read, or of the last complete line just read."""
        if self.last_char in (CR, LF, EOF, None):
            return self.eol_counter

        return self.eol_counter + 1

    def close(self):
        self.closed = True
        self._buffer = ""
        self._pos = 0
        close = getattr(self.source, "close", None)
        if close is not None:
            close()
