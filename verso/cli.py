"""Command-line interface."""
from itertools import islice
from pathlib import Path
from typing import Optional

import typer

from .csv import Preset, Printer, parse_file
from .log import CONSOLE, LOG, pformat, records_view
from .utils import Timer

CLI = typer.Typer()


def with_header(preset: Preset, header: bool):
    dialect = preset.dialect
    if header:
        return dialect.builder().first_record_as_header().build()
    return dialect


@CLI.command()
def read(
    fp: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, resolve_path=True),
    dialect: Preset = typer.Option(Preset.Default, help="Dialect to parse the file with."),
    header: bool = typer.Option(True, help="Whether the first record holds column names."),
    rows: int = typer.Option(10, help="Number of records to show."),
    log: Optional[bool] = typer.Option(False),
):
    """Parse a CSV file and show its first records."""
    with Timer() as t, parse_file(fp, dialect=with_header(dialect, header), log=log) as parser:
        records = list(islice(parser, rows))
        names = parser.header_names

    LOG.info(pformat(records_view(records, names=names, title="Records", n_rows_max=rows)))
    LOG.info(f"Parsing took {t.elapsed:.2f} seconds.")


@CLI.command()
def convert(
    fp: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, resolve_path=True),
    output: Path = typer.Argument(..., dir_okay=False, resolve_path=True),
    source: Preset = typer.Option(Preset.Default, help="Dialect of the input file."),
    target: Preset = typer.Option(Preset.RFC4180, help="Dialect of the output file."),
    header: bool = typer.Option(True, help="Whether the first record holds column names."),
    log: Optional[bool] = typer.Option(False),
):
    """Print all records of a CSV file to another file using a different dialect."""
    n_records = 0
    with Timer() as t, parse_file(fp, dialect=with_header(source, header), log=log) as parser:
        target_dialect = target.dialect
        if header:
            target_dialect = target_dialect.replace(
                header=parser.header_names, skip_header_record=False
            )

        with open(output, "w", encoding="utf-8", newline="") as sink:
            printer = Printer(sink, dialect=target_dialect, log=log)
            for record in parser:
                printer.print_record(record.values)
                n_records += 1
            printer.flush()

    LOG.info(f"Converted {n_records} records from {source.value} to {target.value} in {t.elapsed:.2f} seconds.")


@CLI.command()
def dialects():
    """Show the configuration of all predefined dialects."""
    for preset in Preset:
        CONSOLE.print(preset.dialect.view(title=preset.value))
