"""Test conversion between records and Arrow tables."""
import io

import pyarrow as pa

import verso
from verso.arrow import clean_column_names, print_table, to_table
from verso.csv import DEFAULT, Dialect, Parser, Printer, QuoteMode

from .utils import equal

HEADER = DEFAULT.builder().first_record_as_header().build()


def test_clean_column_names():
    names = [" a", "", "b", "a", "", "a"]
    assert clean_column_names(names) == ["a", "Unnamed_0", "b", "a_1", "Unnamed_1", "a_2"]


def test_with_header():
    tbl = to_table(Parser("x,y\r\na,1\r\n,2", HEADER))
    assert tbl.column_names == ["x", "y"]
    assert tbl.schema.types == [pa.string(), pa.string()]
    assert equal(tbl.to_pydict(), {"x": ["a", ""], "y": ["1", "2"]})


def test_without_header():
    tbl = to_table(Parser("a,b\nc", DEFAULT))
    assert tbl.column_names == ["column_0", "column_1"]
    assert equal(tbl.to_pydict(), {"column_0": ["a", "c"], "column_1": ["b", None]})


def test_missing_and_duplicate_names():
    dialect = HEADER.replace(allow_missing_column_names=True)
    tbl = to_table(Parser("a,,a\n1,2,3,4", dialect), log=True)
    assert tbl.column_names == ["a", "Unnamed_0", "a_1", "Unnamed_1"]
    assert tbl.num_rows == 1


def test_nulls():
    dialect = Dialect(quote_mode=QuoteMode.ALL_NON_NULL)
    tbl = to_table(Parser('a,,"",b', dialect))
    assert equal(tbl.to_pylist(), [{"column_0": "a", "column_1": None, "column_2": "", "column_3": "b"}])


def test_n_rows():
    parser = Parser("1\n2\n3\n4", DEFAULT)
    assert to_table(parser, n_rows=2).column("column_0").to_pylist() == ["1", "2"]
    assert to_table(parser).column("column_0").to_pylist() == ["3", "4"]


def test_empty():
    tbl = to_table(Parser("", DEFAULT))
    assert tbl.num_columns == 0
    assert tbl.num_rows == 0


def test_print_table():
    tbl = pa.table({"x": ["a", None], "y": [1, 2]})

    sink = io.StringIO()
    print_table(Printer(sink), tbl)
    assert equal(sink.getvalue(), "x,y\r\na,1\r\n,2\r\n")

    sink = io.StringIO()
    print_table(Printer(sink, Dialect(record_separator="\n")), tbl, header=False)
    assert equal(sink.getvalue(), "a,1\n,2\n")


def test_read_table():
    tbl = verso.read_table(io.BytesIO(b"x,y\r\n1,2\r\n3,4\r\n"), dialect=HEADER, n_rows=1, log=True)
    assert equal(tbl.to_pydict(), {"x": ["1"], "y": ["2"]})


def test_table_roundtrip():
    tbl = pa.table({"a b": ["x,y", None, ""], "c": ['"q"', "\n", " s "]})
    sink = io.StringIO()
    print_table(Printer(sink), tbl)

    parser = Parser(sink.getvalue(), HEADER)
    result = to_table(parser)
    assert result.column_names == ["a b", "c"]
    assert equal(result.to_pydict(), {"a b": ["x,y", "", ""], "c": ['"q"', "\n", " s "]})
