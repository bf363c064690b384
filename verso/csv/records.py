"""Immutable records produced by the parser."""
from __future__ import annotations

import weakref
from collections.abc import Iterable, Iterator, Sequence
from typing import Union

from .abc import HeaderError
from .headers import Headers

Value = Union[str, None]


class Record:
    """The values of one logical line of CSV, plus the comment preceding it, if any.

    Values can be looked up by position or, if the parse has a header, by column name. Records
    only hold a weak reference to the header of the parse they come from.
    """

    __slots__ = ("values", "comment", "number", "position", "_headers")

    def __init__(
        self,
        values: Sequence[Value],
        number: int,
        position: int = 0,
        comment: str | None = None,
        headers: Headers | None = None,
    ):
        self.values: tuple[Value, ...] = tuple(values)
        self.number = number
        self.position = position
        self.comment = comment
        self._headers = weakref.ref(headers) if headers is not None else None

    @property
    def headers(self) -> Headers | None:
        return self._headers() if self._headers is not None else None

    def _require_headers(self) -> Headers:
        headers = self.headers
        if headers is None:
            if self._headers is None:
                msg = "No header mapping was specified, the record values can't be accessed by name"
            else:
                msg = "The header mapping of this record doesn't exist anymore"
            raise HeaderError(msg)
        return headers

    def _index(self, name: str) -> int:
        headers = self._require_headers()
        idx = headers.index(name)
        if idx is None:
            raise KeyError(f"Mapping for {name!r} not found, expected one of {list(headers.names)}")
        return idx

    def __getitem__(self, key: int | str) -> Value:
        if isinstance(key, str):
            idx = self._index(key)
            try:
                return self.values[idx]
            except IndexError:
                raise IndexError(
                    f"Index for header {key!r} is {idx} but record {self.number} "
                    f"only has {len(self.values)} values"
                ) from None

        return self.values[key]

    def get(self, name: str, default: Value = None) -> Value:
        """Value of the named column, or the default if the name isn't mapped or out of range."""
        headers = self._require_headers()
        idx = headers.index(name)
        if idx is None or idx >= len(self.values):
            return default
        return self.values[idx]

    def is_mapped(self, name: str) -> bool:
        headers = self.headers
        return headers is not None and name in headers

    def is_set(self, key: int | str) -> bool:
        """Whether the column exists in this record (i.e. the record is long enough)."""
        if isinstance(key, str):
            headers = self.headers
            idx = headers.index(key) if headers is not None else None
            return idx is not None and idx < len(self.values)

        return 0 <= key < len(self.values)

    def is_consistent(self) -> bool:
        """Whether the record has as many values as there are mapped header names."""
        headers = self.headers
        return headers is None or len(headers) == len(self.values)

    @property
    def has_comment(self) -> bool:
        return self.comment is not None

    def to_dict(self) -> dict[str, Value]:
        """Mapped column names and their values (for columns this record has)."""
        headers = self.headers
        if headers is None:
            return {}

        return {
            name: self.values[idx]
            for name, idx in headers.mapping().items()
            if idx < len(self.values)
        }

    def __iter__(self) -> Iterator[Value]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self):
        return (
            f"Record(number={self.number}, position={self.position}, "
            f"comment={self.comment!r}, values={list(self.values)})"
        )


class Records(list):
    """A list of records that keeps the header of their parse alive.

    Records themselves only reference the header weakly, so lists of them outliving their parser
    hold on to it here.
    """

    def __init__(self, records: Iterable[Record] = (), headers: Headers | None = None):
        super().__init__(records)
        self.headers = headers

    @property
    def header_names(self) -> tuple[str, ...]:
        return self.headers.names if self.headers is not None else ()
