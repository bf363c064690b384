"""Assembly of tokens into records.

The parser is a forward-only cursor over its input. Iterating over it more than once continues
where the last iteration stopped, rather than starting again from the beginning.
"""
from __future__ import annotations

from collections.abc import Iterator

from ..log import LOG, pformat
from ..utils import LF, trim
from .abc import TokenizeError
from .dialects import DEFAULT, Dialect
from .headers import HeaderResolver, Headers
from .records import Record, Records, Value
from .source import SourceReader, TextSource
from .tokenizer import Tokenizer
from .tokens import Token, TokenType


class Parser:
    """Parse records from a text source according to a dialect.

    The header, if the dialect specifies one, is resolved right away, consuming the header record
    where necessary. ``character_offset`` and ``record_number`` allow resuming the parse of a
    source somewhere in its middle, e.g. at the position and number of a previously parsed record.
    """

    def __init__(
        self,
        source: TextSource | SourceReader,
        dialect: Dialect | None = None,
        character_offset: int = 0,
        record_number: int = 1,
        log: bool = False,
    ):
        self._dialect = (dialect or DEFAULT).copy()
        self.log = log
        self.tokenizer = Tokenizer(source, self._dialect)
        self._token = Token()
        self._values: list[Value] = []
        self._character_offset = 0
        self._record_number = 0
        # Header records read while resolving are assembled without one
        self._headers: Headers | None = None

        if self.log:
            LOG.info(f"Parsing with dialect:\n{pformat(self._dialect)}")

        resolver = HeaderResolver(self._dialect, self._next_values, log=log)
        self._headers = resolver.resolve()

        self._record_number = record_number - 1
        self._character_offset = character_offset

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def headers(self) -> Headers | None:
        return self._headers

    @property
    def header_map(self) -> dict[str, int] | None:
        """Copy of the column name -> index mapping, None if there is no header."""
        return self._headers.mapping() if self._headers is not None else None

    @property
    def header_names(self) -> tuple[str, ...]:
        return self._headers.names if self._headers is not None else ()

    @property
    def record_number(self) -> int:
        """Number of the last record returned (0 before the first)."""
        return self._record_number

    @property
    def line_number(self) -> int:
        return self.tokenizer.line_number

    @property
    def first_end_of_line(self) -> str | None:
        """The first line break (CR, LF or CRLF) encountered in the input so far."""
        return self.tokenizer.first_eol

    @property
    def closed(self) -> bool:
        return self.tokenizer.closed

    def _next_values(self) -> list[Value] | None:
        record = self.next_record()
        return list(record.values) if record is not None else None

    def _add_value(self, last: bool):
        token = self._token
        text = token.text
        if self._dialect.trim:
            text = trim(text)

        if last and not text and self._dialect.trailing_delimiter:
            return

        self._values.append(self._handle_null(text, token.quoted))

    def _handle_null(self, text: str, quoted: bool) -> Value:
        """Decide between null, empty and literal text."""
        dialect = self._dialect
        strict = dialect.is_strict_quote_mode
        if text == dialect.null_string:
            return text if strict and quoted else None

        if strict and dialect.null_string is None and not text and not quoted:
            return None

        return text

    def next_record(self) -> Record | None:
        """The next record, or None at the end of input."""
        token = self._token
        tokenizer = self.tokenizer
        self._values = []
        comments = []
        start = tokenizer.position + self._character_offset

        while True:
            tokenizer.next_token(token.reset())
            kind = token.type

            if kind is TokenType.FIELD:
                self._add_value(last=False)
                continue

            if kind is TokenType.END_OF_RECORD:
                self._add_value(last=True)
            elif kind is TokenType.END_OF_FILE:
                if token.ready:
                    self._add_value(last=True)
            elif kind is TokenType.COMMENT:
                comments.append(token.text)
                continue
            else:
                line = self.line_number
                msg = f"(line {line}) invalid parse sequence: {tokenizer.error}"
                LOG.debug(msg)
                raise TokenizeError(msg, line=line)

            break

        if not self._values:
            return None

        self._record_number += 1
        return Record(
            self._values,
            number=self._record_number,
            position=start,
            comment=LF.join(comments) if comments else None,
            headers=self._headers,
        )

    def records(self) -> Records:
        """All remaining records, in a list keeping their header alive."""
        return Records(self, headers=self._headers)

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        if self.closed:
            raise StopIteration

        record = self.next_record()
        if record is None:
            raise StopIteration
        return record

    def close(self):
        self.tokenizer.close()

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()
