"""Bridge between CSV records and Arrow tables.

Tables built from parsed records only contain string columns (nulls stay null), and printing a
table prints the column names as header followed by one record per row.
"""
from __future__ import annotations

from itertools import islice

import pyarrow as pa

from .csv.parser import Parser
from .csv.printer import Printer
from .log import LOG
from .utils import uniquify


def clean_column_names(names: list[str]) -> list[str]:
    """Handle empty and duplicate column names."""
    names = [name.strip() for name in names]
    unnamed = [i for i, x in enumerate(names) if not x]
    for i, col_idx in enumerate(unnamed):
        names[col_idx] = f"Unnamed_{i}"

    return uniquify(names)


def to_table(parser: Parser, n_rows: int | None = None, log: bool = False) -> pa.Table:
    """Arrow table of strings from the (remaining) records of the parser.

    Columns are named after the header if there is one, and ``column_i`` otherwise. Records
    shorter than the widest one are padded with nulls.
    """
    records = list(islice(parser, n_rows))
    names = list(parser.header_names)
    n_columns = max([len(names)] + [len(rec) for rec in records])

    if names:
        names += [""] * (n_columns - len(names))
        names = clean_column_names(names)
    else:
        names = [f"column_{i}" for i in range(n_columns)]

    short = sum(1 for rec in records if len(rec) < n_columns)
    if short and log:
        LOG.warning(f"Padded {short} records with fewer than {n_columns} values with nulls")

    arrays = [
        pa.array([rec.values[i] if i < len(rec) else None for rec in records], type=pa.string())
        for i in range(n_columns)
    ]

    return pa.Table.from_arrays(arrays, names=names)


def print_table(printer: Printer, table: pa.Table, header: bool = True):
    """Print the column names (optionally) and all rows of the table as records."""
    if header:
        printer.print_record(table.column_names)

    if table.num_columns == 0:
        return

    for batch in table.to_batches():
        columns = [col.to_pylist() for col in batch.columns]
        printer.print_records(zip(*columns))
