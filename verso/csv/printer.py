"""Printing of records to a text sink."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TextIO

from ..log import LOG, pformat
from ..utils import CR, LF, SP
from .dialects import DEFAULT, Dialect
from .quoting import QuotingEngine, is_stream


def is_row(value) -> bool:
    """Whether a value is a collection of fields rather than a single field."""
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes)) and not is_stream(value)


class Printer:
    """Print values as delimited, quoted and escaped records to a sink.

    The sink only needs a ``write(str)`` method. It is flushed and closed only if it supports that.
    Errors writing to the sink propagate unchanged.

    On creation, the dialect's header comments and header (unless ``skip_header_record``) are
    printed first.
    """

    def __init__(self, sink: TextIO, dialect: Dialect | None = None, log: bool = False):
        self.sink = sink
        self._dialect = (dialect or DEFAULT).copy()
        self.engine = QuotingEngine(self._dialect)
        self.log = log
        self.new_record = True

        if self.log:
            LOG.info(f"Printing with dialect:\n{pformat(self._dialect)}")

        for line in self._dialect.header_comments or ():
            self.print_comment(line)

        if self._dialect.header and not self._dialect.skip_header_record:
            self.print_record(self._dialect.header)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def write(self, text: str):
        self.sink.write(text)

    def print(self, value: Any):
        """Print a single field of the current record."""
        self.engine.print_field(value, self.new_record, self.write)
        self.new_record = False

    def println(self):
        """End the current record."""
        dialect = self._dialect
        if dialect.trailing_delimiter:
            self.write(dialect.delimiter)

        self._end_line()

    def _end_line(self):
        separator = self._dialect.record_separator
        if separator is not None:
            self.write(separator)

        self.new_record = True

    def print_record(self, *values: Any):
        """Print values as one record.

        Either pass the values individually or a single collection (list, tuple, ...) of values.
        """
        if len(values) == 1 and is_row(values[0]):
            values = values[0]

        for value in values:
            self.print(value)

        self.println()

    def print_records(self, rows: Iterable[Any]):
        """Print each row as a record. A row that isn't a collection becomes a single field."""
        for row in rows:
            if is_row(row):
                self.print_record(row)
            else:
                self.print_record((row,))

    def print_comment(self, comment: str | None):
        """Print (possibly multiline) text as comment lines. Ignored without a comment marker."""
        marker = self._dialect.comment_marker
        if comment is None or marker is None:
            return

        if not self.new_record:
            self.println()

        self.write(marker + SP)
        lines = comment.replace(CR + LF, LF).replace(CR, LF).split(LF)
        for i, line in enumerate(lines):
            if i > 0:
                self._end_line()
                self.write(marker + SP)
            self.write(line)

        self._end_line()

    def flush(self):
        flush = getattr(self.sink, "flush", None)
        if flush is not None:
            flush()

    def close(self, flush: bool = False):
        """Close the sink, flushing it first if asked to or if the dialect auto-flushes."""
        if flush or self._dialect.auto_flush:
            self.flush()

        close = getattr(self.sink, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()


def format_record(*values: Any, dialect: Dialect = DEFAULT) -> str:
    """A single formatted record, without the record separator."""
    parts = []
    engine = QuotingEngine(dialect)
    if len(values) == 1 and is_row(values[0]):
        values = values[0]

    for i, value in enumerate(values):
        engine.print_field(value, i == 0, parts.append)

    if dialect.trailing_delimiter:
        parts.append(dialect.delimiter)

    return "".join(parts)
