"""CSV dialects: the complete configuration of how text is tokenized and produced.

A ``Dialect`` is an immutable value, validated once when it is created. To derive a new dialect
either use ``Dialect.replace()`` or collect changes in a mutable ``DialectBuilder`` and ``build()``
it at the end.

Python quoting levels and their equivalent quote modes:

- ``QUOTE_ALL``: 1 -> ``ALL``
- ``QUOTE_MINIMAL``: 0 -> ``MINIMAL``
- ``QUOTE_NONE``: 3 -> ``NONE``
- ``QUOTE_NONNUMERIC``: 2 -> ``NON_NUMERIC``

"""
from __future__ import annotations

import copy
import os
from csv import QUOTE_ALL, QUOTE_MINIMAL, QUOTE_NONE, QUOTE_NONNUMERIC
from csv import Dialect as PyDialect
from csv import get_dialect
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from functools import partial

from ..log import dict_view
from ..utils import CRLF, LF, contains_line_break
from .abc import ConfigurationError
from .headers import find_duplicates

PyDialectT = type(PyDialect)


class QuoteMode(str, Enum):
    """When printed fields get wrapped in quote characters."""

    ALL = "ALL"
    ALL_NON_NULL = "ALL_NON_NULL"
    MINIMAL = "MINIMAL"
    NON_NUMERIC = "NON_NUMERIC"
    NONE = "NONE"

    @property
    def is_strict(self) -> bool:
        """Strict modes tell empty (quoted) values apart from null (unquoted empty) ones."""
        return self in (QuoteMode.ALL_NON_NULL, QuoteMode.NON_NUMERIC)


PY_QUOTING: dict[int, QuoteMode] = {
    QUOTE_MINIMAL: QuoteMode.MINIMAL,
    QUOTE_ALL: QuoteMode.ALL,
    QUOTE_NONNUMERIC: QuoteMode.NON_NUMERIC,
    QUOTE_NONE: QuoteMode.NONE,
}


@dataclass(frozen=True)
class Dialect:
    """Delimiter, quoting, escaping, comments, nulls and header handling of a CSV flavour.

    ``header`` is either None (no header), an empty tuple (the first record of the input holds the
    names) or a tuple of explicit names. ``record_separator`` is only used for output, since any
    of CR, LF or CRLF is accepted as the end of a record when parsing.

    A quote char equal to the escape char means quotes inside quoted values are escaped by
    doubling them, as in PostgreSQL or MongoDB exports.
    """

    delimiter: str = ","
    quote_char: str | None = '"'
    escape_char: str | None = None
    comment_marker: str | None = None
    quote_mode: QuoteMode = QuoteMode.MINIMAL
    record_separator: str | None = CRLF
    null_string: str | None = None
    header: tuple[str | None, ...] | None = None
    header_comments: tuple[str | None, ...] | None = None
    ignore_empty_lines: bool = True
    ignore_surrounding_spaces: bool = False
    ignore_header_case: bool = False
    allow_missing_column_names: bool = False
    allow_duplicate_header_names: bool = True
    skip_header_record: bool = False
    trim: bool = False
    trailing_delimiter: bool = False
    auto_flush: bool = False

    def __post_init__(self):
        # Frozen, so normalize convenient but incorrect types via object.__setattr__
        set_ = partial(object.__setattr__, self)
        if self.quote_mode is None:
            set_("quote_mode", QuoteMode.MINIMAL)
        elif not isinstance(self.quote_mode, QuoteMode):
            try:
                set_("quote_mode", QuoteMode(str(self.quote_mode).upper()))
            except ValueError as exc:
                raise ConfigurationError(f"Unknown quote mode: {self.quote_mode!r}") from exc

        if self.header is not None and not isinstance(self.header, tuple):
            set_("header", tuple(self.header))

        if self.header_comments is not None:
            comments = tuple(None if c is None else str(c) for c in self.header_comments)
            set_("header_comments", comments)

        self.validate()

    def validate(self):
        delim = self.delimiter
        if not isinstance(delim, str) or not delim:
            raise ConfigurationError(f"The delimiter must be a non-empty string, got {delim!r}")

        if contains_line_break(delim):
            raise ConfigurationError("The delimiter cannot be a line break")

        chars = (
            ("quote character", self.quote_char),
            ("escape character", self.escape_char),
            ("comment marker", self.comment_marker),
        )
        for name, char in chars:
            if char is None:
                continue

            if not isinstance(char, str) or len(char) != 1:
                raise ConfigurationError(f"The {name} must be a single character, got {char!r}")

            if contains_line_break(char):
                raise ConfigurationError(f"The {name} cannot be a line break")

            if char in delim:
                raise ConfigurationError(
                    f"The {name} and the delimiter cannot be the same ({char!r} in {delim!r})"
                )

        if self.comment_marker is not None:
            if self.comment_marker == self.quote_char:
                raise ConfigurationError(
                    f"The comment marker and the quote character cannot be the same ({self.comment_marker!r})"
                )

            if self.comment_marker == self.escape_char:
                raise ConfigurationError(
                    f"The comment marker and the escape character cannot be the same ({self.comment_marker!r})"
                )

        if self.quote_mode is QuoteMode.NONE and self.escape_char is None:
            raise ConfigurationError("Quote mode NONE requires an escape character")

        if self.header and not self.allow_duplicate_header_names:
            duplicates = find_duplicates(self.header, self.ignore_header_case)
            if duplicates:
                raise ConfigurationError(
                    f"The header contains duplicate names {duplicates} in {list(self.header)}"
                )

    @property
    def is_quote_char_set(self) -> bool:
        return self.quote_char is not None

    @property
    def is_escape_char_set(self) -> bool:
        return self.escape_char is not None

    @property
    def is_comment_marker_set(self) -> bool:
        return self.comment_marker is not None

    @property
    def is_null_string_set(self) -> bool:
        return self.null_string is not None

    @property
    def is_strict_quote_mode(self) -> bool:
        return self.quote_mode.is_strict

    @property
    def quoted_null_string(self) -> str | None:
        """The null string wrapped in quote characters (if there is a quote char)."""
        if self.null_string is None:
            return None

        if self.quote_char is None:
            return self.null_string

        return f"{self.quote_char}{self.null_string}{self.quote_char}"

    def replace(self, **changes) -> Dialect:
        """A new (validated) dialect with some attributes changed."""
        return replace(self, **changes)

    def copy(self) -> Dialect:
        """An independent copy. Doesn't validate again, the original already was."""
        return copy.copy(self)

    def builder(self) -> DialectBuilder:
        return DialectBuilder(self)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_builtin(cls, dialect: str | PyDialectT) -> Dialect:
        """Make an instance from a built-in dialect class.

        Python's ``skipinitialspace`` only skips leading spaces, while here surrounding spaces
        are ignored on both ends of unquoted fields.
        """
        if isinstance(dialect, str):
            dialect = get_dialect(dialect)

        if dialect.quoting not in PY_QUOTING:
            raise ConfigurationError(f"Unsupported quoting level: {dialect.quoting}")

        escape_char = dialect.escapechar
        if escape_char is None and not dialect.doublequote:
            raise ConfigurationError("Dialects without double quotes need an escape character")

        return cls(
            delimiter=dialect.delimiter,
            quote_char=dialect.quotechar,
            escape_char=escape_char,
            quote_mode=PY_QUOTING[dialect.quoting],
            record_separator=dialect.lineterminator,
            ignore_surrounding_spaces=dialect.skipinitialspace,
        )

    def to_builtin(self) -> PyDialectT:
        """Make a subclass of built-in Dialect from this instance."""
        if len(self.delimiter) != 1:
            raise ConfigurationError(
                f"Python's csv module only supports single character delimiters, got {self.delimiter!r}"
            )

        levels = {mode: level for level, mode in PY_QUOTING.items()}
        levels[QuoteMode.ALL_NON_NULL] = QUOTE_ALL
        doubling = self.escape_char is None or self.escape_char == self.quote_char

        class _Dialect(PyDialect):
            _name = "generated"
            lineterminator = self.record_separator or CRLF
            quoting = levels[self.quote_mode]
            escapechar = None if doubling else self.escape_char
            doublequote = doubling
            delimiter = self.delimiter
            quotechar = self.quote_char
            skipinitialspace = self.ignore_surrounding_spaces
            strict = False

        return _Dialect

    def view(self, title: str = "Dialect"):
        return dict_view(
            {k: v.value if isinstance(v, Enum) else v for k, v in self.to_dict().items()},
            title=title,
        )

    def __rich__(self):
        return self.view()


class DialectBuilder:
    """Mutable staging area for the attributes of a new Dialect.

    Attributes are assigned freely and only validated when calling ``build()``:

        builder = DEFAULT.builder()
        builder.delimiter = ";"
        builder.null_string = "NULL"
        dialect = builder.build()

    """

    def __init__(self, dialect: Dialect | None = None, **changes):
        base = dialect if dialect is not None else Dialect()
        attrs = {f.name: getattr(base, f.name) for f in fields(Dialect)}
        object.__setattr__(self, "_attrs", attrs)
        self.set(**changes)

    def __getattr__(self, name):
        # Not set yet on instances created without __init__, e.g. when copying or unpickling
        if name == "_attrs":
            raise AttributeError(name)

        try:
            return self._attrs[name]
        except KeyError:
            raise AttributeError(f"Dialects have no attribute {name!r}") from None

    def __setattr__(self, name, value):
        if name not in self._attrs:
            raise AttributeError(f"Dialects have no attribute {name!r}")
        self._attrs[name] = value

    def set(self, **changes) -> DialectBuilder:
        """Assign several attributes at once. Returns the builder itself for chaining."""
        for name, value in changes.items():
            setattr(self, name, value)
        return self

    def first_record_as_header(self) -> DialectBuilder:
        """Read column names from the first record, and don't print a header."""
        return self.set(header=(), skip_header_record=True)

    def build(self) -> Dialect:
        return Dialect(**self._attrs)


DEFAULT = Dialect()
"""Comma separated, double quotes, CRLF, empty lines ignored."""

RFC4180 = DEFAULT.replace(ignore_empty_lines=False)

EXCEL = DEFAULT.replace(ignore_empty_lines=False, allow_missing_column_names=True)

INFORMIX_UNLOAD = DEFAULT.replace(
    delimiter="|",
    escape_char="\\",
    quote_char='"',
    record_separator=LF,
)

INFORMIX_UNLOAD_CSV = DEFAULT.replace(delimiter=",", quote_char='"', record_separator=LF)

MONGODB_CSV = DEFAULT.replace(
    delimiter=",",
    escape_char='"',
    quote_char='"',
    quote_mode=QuoteMode.MINIMAL,
    skip_header_record=False,
)

MONGODB_TSV = MONGODB_CSV.replace(delimiter="\t")

MYSQL = DEFAULT.replace(
    delimiter="\t",
    escape_char="\\",
    ignore_empty_lines=False,
    quote_char=None,
    record_separator=LF,
    null_string="\\N",
    quote_mode=QuoteMode.ALL_NON_NULL,
)

ORACLE = DEFAULT.replace(
    delimiter=",",
    escape_char="\\",
    ignore_empty_lines=False,
    quote_char='"',
    null_string="\\N",
    trim=True,
    record_separator=os.linesep,
    quote_mode=QuoteMode.MINIMAL,
)

POSTGRESQL_CSV = DEFAULT.replace(
    delimiter=",",
    escape_char='"',
    ignore_empty_lines=False,
    quote_char='"',
    record_separator=LF,
    null_string="",
    quote_mode=QuoteMode.ALL_NON_NULL,
)

POSTGRESQL_TEXT = DEFAULT.replace(
    delimiter="\t",
    escape_char="\\",
    ignore_empty_lines=False,
    quote_char='"',
    record_separator=LF,
    null_string="\\N",
    quote_mode=QuoteMode.ALL_NON_NULL,
)

TDF = DEFAULT.replace(delimiter="\t", ignore_surrounding_spaces=True)


class Preset(str, Enum):
    """Names of predefined dialects."""

    Default = "Default"
    RFC4180 = "RFC4180"
    Excel = "Excel"
    InformixUnload = "InformixUnload"
    InformixUnloadCsv = "InformixUnloadCsv"
    MongoDBCsv = "MongoDBCsv"
    MongoDBTsv = "MongoDBTsv"
    MySQL = "MySQL"
    Oracle = "Oracle"
    PostgreSQLCsv = "PostgreSQLCsv"
    PostgreSQLText = "PostgreSQLText"
    TDF = "TDF"

    @property
    def dialect(self) -> Dialect:
        return PRESETS[self]


PRESETS: dict[Preset, Dialect] = {
    Preset.Default: DEFAULT,
    Preset.RFC4180: RFC4180,
    Preset.Excel: EXCEL,
    Preset.InformixUnload: INFORMIX_UNLOAD,
    Preset.InformixUnloadCsv: INFORMIX_UNLOAD_CSV,
    Preset.MongoDBCsv: MONGODB_CSV,
    Preset.MongoDBTsv: MONGODB_TSV,
    Preset.MySQL: MYSQL,
    Preset.Oracle: ORACLE,
    Preset.PostgreSQLCsv: POSTGRESQL_CSV,
    Preset.PostgreSQLText: POSTGRESQL_TEXT,
    Preset.TDF: TDF,
}


def get_preset(name: str | Preset) -> Dialect:
    """Look up a predefined dialect by (case-insensitive) name."""
    if isinstance(name, Preset):
        return name.dialect

    lookup = {preset.value.lower(): preset for preset in Preset}
    try:
        return lookup[str(name).lower()].dialect
    except KeyError:
        raise ConfigurationError(
            f"Unknown dialect {name!r}. Available: {[p.value for p in Preset]}"
        ) from None
