"""Resolution of column names into a name -> index mapping.

Headers are resolved once per parse, either from the names configured in the dialect or from the
first record of the input. Names can be looked up case-insensitively if the dialect says so, in
which case lookups go through a normalized key while the names themselves keep their original
spelling.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from ..log import LOG, pformat
from .abc import HeaderError

if TYPE_CHECKING:
    from .dialects import Dialect


def is_blank(name: str | None) -> bool:
    return name is None or not name.strip()


def normalize_name(name: str, ignore_case: bool = False) -> str:
    """The key a header name is mapped (and looked up) with."""
    return name.casefold() if ignore_case else name


def find_duplicates(names: Iterable[str | None], ignore_case: bool = False) -> list[str]:
    """Non-blank names occurring more than once (in order of their second occurrence)."""
    seen = set()
    duplicates = []
    for name in names:
        if is_blank(name):
            continue

        key = normalize_name(name, ignore_case)
        if key in seen:
            duplicates.append(name)
        seen.add(key)

    return duplicates


@dataclass
class Headers:
    """Ordered column names and the mapping of (normalized) names to column indices.

    With duplicate names a name maps to its last occurrence. Blank names are kept in ``names``, so
    that positions are preserved, but cannot be looked up. Absent (``None``) names are in neither.
    """

    names: tuple[str, ...] = ()
    ignore_case: bool = False
    _index: dict[str, int] = field(default_factory=dict, repr=False)
    _spelling: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_names(cls, names: Sequence[str | None], ignore_case: bool = False) -> Headers:
        headers = cls(ignore_case=ignore_case)
        kept = []
        for i, name in enumerate(names):
            if name is None:
                continue

            kept.append(name)
            if not name.strip():
                continue

            key = headers.key(name)
            headers._index[key] = i
            headers._spelling.setdefault(key, name)

        headers.names = tuple(kept)
        return headers

    def key(self, name: str) -> str:
        return normalize_name(name, self.ignore_case)

    def index(self, name: str) -> int | None:
        """Column index of the name or None if it isn't mapped."""
        return self._index.get(self.key(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.key(name) in self._index

    def __len__(self) -> int:
        return len(self._index)

    def mapping(self) -> dict[str, int]:
        """Copy of the name -> index mapping, names in their first seen spelling."""
        return {self._spelling[key]: idx for key, idx in self._index.items()}


@dataclass
class HeaderResolver:
    """Produce the Headers for a parse given the dialect and a way to read the next record.

    ``read_record`` is expected to return the values of the next record or None at the end of
    input. It is called at most once.
    """

    dialect: Dialect
    read_record: Callable[[], Sequence[str | None] | None]
    log: bool = False

    def resolve(self) -> Headers | None:
        dialect = self.dialect
        if dialect.header is None:
            return None

        if len(dialect.header) == 0:
            names = self.read_record()
            if names is None:
                LOG.debug("No header record found, input is empty")
                names = ()
        else:
            if dialect.skip_header_record:
                self.read_record()
            names = dialect.header

        self.validate(names)
        headers = Headers.from_names(names, ignore_case=dialect.ignore_header_case)
        if self.log:
            LOG.info(f"Resolved header:\n{pformat(list(headers.names))}")

        return headers

    def validate(self, names: Sequence[str | None]):
        dialect = self.dialect
        seen = set()
        for name in names:
            if is_blank(name):
                if not dialect.allow_missing_column_names:
                    raise HeaderError(
                        f"A header name is missing in {list(names)}. "
                        "Set allow_missing_column_names to accept blank names."
                    )
                continue

            key = normalize_name(name, dialect.ignore_header_case)
            if key in seen and not dialect.allow_duplicate_header_names:
                raise HeaderError(
                    f"The header contains a duplicate name: {name!r} in {list(names)}. "
                    "Set allow_duplicate_header_names to accept duplicates."
                )
            seen.add(key)
