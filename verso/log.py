"""Helpers to pretty print/log dialects and records using Rich."""
from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from rich import box, get_console
from rich.padding import Padding
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

CONSOLE = get_console()

BOX = box.HORIZONTALS


class ColoredFormatter(logging.Formatter):
    """A custom formatter controlling message color."""

    RESET = "\x1b[0m"

    FORMAT = "<COL>{asctime} {levelname} | {name} | {module}.{funcName}:{lineno}<RESET> \n{message}"

    COLORS = {
        logging.DEBUG: "\x1b[38;20m",  # grey
        logging.INFO: "\x1b[38;20m",  # grey
        logging.WARNING: "\x1b[33;1m",  # bold yellow
        logging.ERROR: "\x1b[31;1m",  # bold red
        logging.CRITICAL: "\x1b[31;1m",  # bold red
    }

    def __init__(self, datefmt=None, validate=True):
        super().__init__(self.FORMAT, style="{", datefmt=datefmt, validate=validate)

    def format(self, record):
        msg = super().format(record)
        col = self.COLORS.get(record.levelno)
        return msg.replace("<COL>", col).replace("<RESET>", self.RESET)


def setup_logging(level=logging.DEBUG, color=True):
    """Ensure logging handler is only added once."""
    date_fmt = "%H:%M:%S"
    if color:
        fmt = ColoredFormatter(datefmt=date_fmt)
    else:
        fmt = logging.Formatter(
            "{asctime} {levelname} | {name} | {module}.{funcName}:{lineno} \n{message}",
            datefmt=date_fmt,
            style="{",
        )

    logger = logging.getLogger("verso")
    logger.setLevel(level)

    if not any(getattr(h, "_verso", False) for h in logger.handlers):
        _sh = logging.StreamHandler(sys.stdout)
        _sh._verso = True
        logger.addHandler(_sh)

    for handler in logger.handlers:
        if getattr(handler, "_verso", False):
            handler.setFormatter(fmt)

    return logger


LOG = setup_logging(level=logging.INFO, color=True)


def pformat(obj, console=None, markup=True, end="", strip=False, **kwargs):
    """Pretty format any object, if possible with Rich."""
    console = console or CONSOLE

    with console.capture() as capture:
        console.print(obj, markup=markup, end=end)

    result = capture.get()

    if strip:
        result = result.strip()

    return result


def dict_view(
    d: dict, title: str = "", expand: bool = False, width=None, padding=1, **kwds
) -> Panel:
    dv = Pretty(d, **kwds)
    p = Panel(dv, expand=expand, title=title, width=width, box=BOX)
    return Padding(p, padding)


def records_view(
    records: Sequence,
    names: Sequence[str] | None = None,
    title: str | None = None,
    n_rows_max: int = 10,
    n_columns_max: int = 6,
    max_column_width: int = 20,
    padding: int = 1,
) -> Table:
    """Parsed records (anything iterating over values) to a rich table.

    Columns are named after the header ``names`` where available, and numbered otherwise.
    The last row shows the number of nulls per column.
    """
    rows = [list(rec) for rec in records]
    n_columns = max((len(row) for row in rows), default=len(names or ()))
    names = list(names or ())
    names += [f"{i}" for i in range(len(names), n_columns)]

    sample = [row[:n_columns_max] for row in rows[:n_rows_max]]
    cropped = n_columns > n_columns_max
    columns = names[:n_columns_max] + (["..."] if cropped else [])

    style = "bold indian_red1"
    caption = Text.from_markup(
        f"[{style}]{len(rows):,}[/] records ✕ [{style}]{n_columns}[/] columns"
    )

    table = Table(
        title=title,
        caption=caption,
        title_justify="left",
        caption_justify="left",
        box=BOX,
    )

    for name in columns:
        table.add_column(
            name or "",
            max_width=max_column_width,
            overflow="crop",
            no_wrap=True,
        )

    ellipses = len(rows) > n_rows_max

    def value_repr(x):
        if x is None:
            return Text.from_markup("[italic]null[/]")
        return Pretty(x, max_length=max_column_width, max_string=max_column_width)

    for i, row in enumerate(sample):
        cells = [value_repr(x) for x in row]
        cells += [""] * (min(n_columns, n_columns_max) - len(cells))
        if cropped:
            cells.append("...")
        end_section = False if ellipses else i == len(sample) - 1
        table.add_row(*cells, end_section=end_section)

    if ellipses:
        table.add_row(*["..."] * len(columns), end_section=True)

    def null_repr(i):
        n_nulls = sum(1 for row in rows if i < len(row) and row[i] is None)
        if n_nulls:
            return Text.from_markup(f"[italic bold]nulls {n_nulls}[/]")
        else:
            return Text.from_markup("[italic]nulls 0[/]")

    nulls = [null_repr(i) for i in range(min(n_columns, n_columns_max))]
    if cropped:
        nulls.append("")
    table.add_row(*nulls)

    return Padding(table, padding)
