"""Decisions about quoting and escaping of printed values.

Whatever is printed here is parsed back into the same value by the tokenizer using the same
dialect. Values are either

- wrapped in quotes, with quote and escape chars inside prefixed by the escape char (or doubled
  if there is no escape char),
- escaped, i.e. line breaks, the escape and quote chars, delimiters and a comment marker that
  would start a comment line prefixed by the escape char (if there is no quote char, or quote
  mode is ``NONE``),
- or printed as they are.

Values with a ``read()`` method are treated as character streams and consumed in chunks, without
ever holding the complete value in memory.
"""
from __future__ import annotations

import re
from typing import Any, Callable

from ..utils import COMMENT, CR, LF, SP, is_number, trim
from .dialects import Dialect, QuoteMode

Write = Callable[[str], Any]

CHUNK_SIZE: int = 8192
"""Number of characters read at once from streamed values."""


def is_stream(value) -> bool:
    return callable(getattr(value, "read", None))


class QuotingEngine:
    """Print single values as fields of a record. The dialect is copied on entry."""

    def __init__(self, dialect: Dialect):
        self.dialect = dialect = dialect.copy()
        self.delimiter = dialect.delimiter
        self.quote = dialect.quote_char
        self.escape = dialect.escape_char
        self.mode = dialect.quote_mode
        # Char used to escape quotes (and escape chars) inside quoted values
        self.inner_escape = self.escape if self.escape is not None else self.quote

        specials = "".join(ch for ch in (self.quote, self.escape) if ch is not None)
        self._specials = re.compile(f"[{re.escape(specials)}]") if specials else None

    def null_text(self) -> str:
        """How a null value is printed."""
        dialect = self.dialect
        if dialect.null_string is None:
            return ""

        if self.mode is QuoteMode.ALL:
            return dialect.quoted_null_string

        return dialect.null_string

    def print_field(self, value, first: bool, write: Write):
        """Write the value as a field, preceded by a delimiter unless it's the first in the record."""
        if is_stream(value):
            return self.print_stream(value, first, write)

        if value is None:
            text = self.null_text()
        elif isinstance(value, str):
            text = value
        else:
            text = str(value)

        if self.dialect.trim:
            text = trim(text)

        if not first:
            write(self.delimiter)

        if value is None:
            write(text)
        elif self.quote is not None:
            self.print_with_quotes(value, text, first, write)
        elif self.escape is not None:
            self.print_with_escapes(text, write, first)
        else:
            write(text)

    def format_field(self, value, first: bool = True) -> str:
        parts = []
        self.print_field(value, first, parts.append)
        return "".join(parts)

    def needs_quotes(self, value, text: str, first: bool) -> bool:
        """Whether the value must be quoted (only meaningful if there is a quote char)."""
        mode = self.mode
        if mode in (QuoteMode.ALL, QuoteMode.ALL_NON_NULL):
            return True

        if mode is QuoteMode.NON_NUMERIC:
            return not is_number(value)

        if mode is QuoteMode.NONE:
            return False

        if not text:
            # An empty first field would be an empty line
            return first

        if text[0] <= COMMENT or text[0] == self.dialect.comment_marker:
            return True

        if text[-1] <= SP:
            return True

        specials = (CR, LF, self.quote, self.inner_escape)
        if any(ch in text for ch in specials):
            return True

        # Also catches the end of the value running into the next (self-overlapping) delimiter
        return self.delimiter in text + self.delimiter[:-1]

    def print_with_quotes(self, value, text: str, first: bool, write: Write):
        if self.mode is QuoteMode.NONE:
            return self.print_with_escapes(text, write, first)

        if not self.needs_quotes(value, text, first):
            return write(text)

        write(self.quote)
        write(self.escape_specials(text))
        write(self.quote)

    def escape_specials(self, text: str) -> str:
        """Prefix quote and escape chars with the escape char (i.e. double them without one)."""
        if self._specials is None:
            return text

        prefix = self.inner_escape
        return self._specials.sub(lambda m: prefix + m.group(0), text)

    def print_with_escapes(self, text: str, write: Write, first: bool = False):
        marker = self.comment_marker_position(text) if first else -1
        self._escape(text, write, final=True, marker=marker)

    def comment_marker_position(self, text: str) -> int:
        """Index of a comment marker that would turn the line into a comment, -1 if there is none.

        Like the tokenizer, this accepts spaces before the marker.
        """
        comment = self.dialect.comment_marker
        if comment is None:
            return -1

        n_spaces = len(text) - len(text.lstrip(SP))
        return n_spaces if text[n_spaces : n_spaces + 1] == comment else -1

    def _escape(self, text: str, write: Write, final: bool = True, marker: int = -1) -> int:
        """Write text with line breaks, escape and quote chars and delimiters escaped.

        The comment marker at index ``marker`` (if not -1) is escaped too.

        Unless ``final``, stops before a trailing partial delimiter that might be completed by
        text following later, and returns the number of characters consumed. If ``final``, a
        trailing partial delimiter that would merge with the next delimiter is escaped as well.
        """
        delim = self.delimiter
        esc = self.escape
        n = len(text)
        start = pos = 0

        while pos < n:
            c = text[pos]
            partial = c == delim[0] and n - pos < len(delim)
            if partial and not final and delim.startswith(text[pos:]):
                break

            if partial and (text[pos:] + delim).startswith(delim):
                if pos > start:
                    write(text[start:pos])
                write(esc + c)
                pos += 1
                start = pos
            elif c == LF or c == CR or c == esc or c == self.quote or pos == marker:
                if pos > start:
                    write(text[start:pos])
                write(esc + ("n" if c == LF else "r" if c == CR else c))
                pos += 1
                start = pos
            elif text.startswith(delim, pos):
                if pos > start:
                    write(text[start:pos])
                write("".join(esc + d for d in delim))
                pos += len(delim)
                start = pos
            else:
                pos += 1

        if pos > start:
            write(text[start:pos])

        return pos

    def print_stream(self, stream, first: bool, write: Write):
        """Write a character stream as a field, consuming it in chunks.

        Streams are always quoted (if there is a quote char), since their content can't be
        inspected upfront.
        """
        if not first:
            write(self.delimiter)

        if self.quote is not None and self.mode is not QuoteMode.NONE:
            write(self.quote)
            for chunk in iter_chunks(stream):
                write(self.escape_specials(chunk))
            write(self.quote)
        elif self.escape is not None:
            pending = ""
            # Until the first non-space char, a comment marker may still start the line
            leading = first
            marker = -1
            for chunk in iter_chunks(stream):
                text = pending + chunk
                if leading and text.strip(SP):
                    marker = self.comment_marker_position(text)
                    leading = False
                consumed = self._escape(text, write, final=False, marker=marker)
                pending = text[consumed:]
                marker = marker - consumed if marker >= consumed else -1
            self._escape(pending, write, final=True, marker=marker)
        else:
            for chunk in iter_chunks(stream):
                write(chunk)


def iter_chunks(stream, size: int = CHUNK_SIZE):
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk
