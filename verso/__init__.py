"""A package for parsing and printing CSV in all its dialects (RFC4180, Excel, MySQL, ...)."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TextIO

import pyarrow as pa

from . import utils
from .arrow import print_table, to_table
from .csv import (
    DEFAULT,
    ConfigurationError,
    Dialect,
    DialectBuilder,
    EmptyFileError,
    HeaderError,
    Parser,
    Preset,
    Printer,
    QuoteMode,
    Record,
    Records,
    SinkError,
    TokenizeError,
    VersoError,
    format_record,
    get_preset,
    open_text,
    parse_file,
)
from .csv.abc import FileLike
from .csv.encodings import EncodingDetector
from .csv.source import TextSource
from .log import CONSOLE, LOG, pformat, records_view


def resolve_dialect(dialect: Dialect | Preset | str | None) -> Dialect:
    if dialect is None:
        return DEFAULT
    if isinstance(dialect, Dialect):
        return dialect
    return get_preset(dialect)


def parse(
    source: TextSource,
    dialect: Dialect | Preset | str | None = None,
    log: bool = False,
) -> Parser:
    """Thin wrapper around the parser: records from a string or text stream."""
    return Parser(source, dialect=resolve_dialect(dialect), log=log)


def read_records(
    fp: FileLike,
    dialect: Dialect | Preset | str | None = None,
    encoding: str | EncodingDetector | None = None,
    log: bool = False,
) -> Records:
    """All records of a file (path or stream), detecting its encoding if not given.

    The returned list keeps the header alive, so its records can be accessed by column name for as
    long as the list is around.
    """
    with parse_file(fp, dialect=resolve_dialect(dialect), encoding=encoding, log=log) as parser:
        records = parser.records()

    if log:
        LOG.info(pformat(records_view(records, names=parser.header_names, title="Records")))

    return records


def read_table(
    fp: FileLike,
    dialect: Dialect | Preset | str | None = None,
    encoding: str | EncodingDetector | None = None,
    n_rows: int | None = None,
    log: bool = False,
) -> pa.Table:
    """An Arrow table of strings with the (first n) records of a file, columns named after the header."""
    with parse_file(fp, dialect=resolve_dialect(dialect), encoding=encoding, log=log) as parser:
        table = to_table(parser, n_rows=n_rows, log=log)

    if log:
        LOG.info(f"Read table with {table.num_rows:,} rows and {table.num_columns} columns")

    return table


def printer(
    sink: TextIO,
    dialect: Dialect | Preset | str | None = None,
    log: bool = False,
) -> Printer:
    """Thin wrapper around the printer."""
    return Printer(sink, dialect=resolve_dialect(dialect), log=log)


def print_records(
    sink: TextIO,
    rows: Iterable[Any],
    dialect: Dialect | Preset | str | None = None,
) -> None:
    """Print all rows to the sink, flushing (but not closing) it at the end."""
    pr = printer(sink, dialect=dialect)
    pr.print_records(rows)
    pr.flush()


__all__ = [
    "CONSOLE",
    "ConfigurationError",
    "DEFAULT",
    "Dialect",
    "DialectBuilder",
    "EmptyFileError",
    "format_record",
    "get_preset",
    "HeaderError",
    "LOG",
    "open_text",
    "parse",
    "parse_file",
    "Parser",
    "Preset",
    "print_records",
    "print_table",
    "printer",
    "Printer",
    "QuoteMode",
    "read_records",
    "read_table",
    "Record",
    "Records",
    "SinkError",
    "to_table",
    "TokenizeError",
    "utils",
    "VersoError",
]

__version__ = "0.1.0"
