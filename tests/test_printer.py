"""Test quoting, escaping and printing of records."""
import io

import pytest

from verso.csv import (
    DEFAULT,
    MONGODB_CSV,
    MYSQL,
    ORACLE,
    POSTGRESQL_TEXT,
    Dialect,
    Parser,
    Printer,
    QuoteMode,
    QuotingEngine,
    SinkError,
    format_record,
)

from .utils import equal


def printed(*rows, dialect=DEFAULT):
    sink = io.StringIO()
    printer = Printer(sink, dialect)
    for row in rows:
        printer.print_record(row)
    return sink.getvalue()


@pytest.mark.parametrize(
    "value,expected",
    [
        ("abc", "abc"),
        ("", '""'),
        ("a,b", '"a,b"'),
        ('a"b', '"a""b"'),
        ("a\nb", '"a\nb"'),
        ("a\rb", '"a\rb"'),
        (" a", '" a"'),
        ("a ", '"a "'),
        ("#a", '"#a"'),
        ("!a", '"!a"'),
        ("$a", "$a"),
        ("a#", "a#"),
        (None, ""),
        (1, "1"),
        (1.5, "1.5"),
    ],
)
def test_minimal_quotes(value, expected):
    engine = QuotingEngine(DEFAULT)
    assert equal(engine.format_field(value), expected)


def test_minimal_quotes_not_first():
    assert format_record("a", "") == "a,"
    assert format_record("a", None, 1) == "a,,1"


def test_comment_marker_is_quoted():
    dialect = Dialect(comment_marker="$")
    assert format_record("$a", "b$", dialect=dialect) == '"$a",b$'


@pytest.mark.parametrize(
    "mode,null,expected",
    [
        (QuoteMode.ALL, None, '"a",,"1"'),
        (QuoteMode.ALL, "NULL", '"a","NULL","1"'),
        (QuoteMode.ALL_NON_NULL, None, '"a",,"1"'),
        (QuoteMode.ALL_NON_NULL, "NULL", '"a",NULL,"1"'),
        (QuoteMode.NON_NUMERIC, None, '"a",,1'),
        (QuoteMode.MINIMAL, "NULL", "a,NULL,1"),
    ],
)
def test_quote_modes(mode, null, expected):
    dialect = Dialect(quote_mode=mode, null_string=null)
    assert equal(format_record("a", None, 1, dialect=dialect), expected)


def test_non_numeric():
    dialect = Dialect(quote_mode=QuoteMode.NON_NUMERIC)
    assert format_record(1, 2.5, "3", True, dialect=dialect) == '1,2.5,"3","True"'


def test_escapes():
    dialect = Dialect(quote_mode=QuoteMode.NONE, escape_char="\\")
    actual = format_record("a,b", 'x"y', "l\nm", "c\\d", "r\rs", dialect=dialect)
    assert equal(actual, 'a\\,b,x\\"y,l\\nm,c\\\\d,r\\rs')

    dialect = Dialect(delimiter="[|]", quote_char=None, escape_char="!")
    assert format_record("a[|]b", "c[|", "!", dialect=dialect) == "a![!|!]b[|]c[|[|]!!"


def test_overlapping_delimiter():
    dialect = Dialect(delimiter=";;")
    assert format_record("a;", "b;c", "d", dialect=dialect) == '"a;";;b;c;;d'

    dialect = Dialect(delimiter=";;", quote_char=None, escape_char="\\")
    text = format_record("a;", "b;c", "d;", dialect=dialect)
    assert equal(text, "a\\;;;b;c;;d\\;")
    assert list(Parser(text, dialect).next_record()) == ["a;", "b;c", "d;"]


def test_escaped_comment_marker():
    dialect = Dialect(quote_char=None, escape_char="\\", comment_marker="#")
    assert format_record("#x", "#y", dialect=dialect) == "\\#x,#y"
    assert format_record(" #x", dialect=dialect) == " \\#x"
    assert format_record("x#", dialect=dialect) == "x#"
    assert format_record(TwoChars("  #a"), "b", dialect=dialect) == "  \\#a,b"

    dialect = Dialect(quote_mode=QuoteMode.NONE, escape_char="\\", comment_marker="#")
    assert format_record(" #x", "y", dialect=dialect) == " \\#x,y"

    sink = io.StringIO()
    Printer(sink, dialect).print_records([["#x", "y"], ["a", "b"]])
    records = Parser(sink.getvalue(), dialect).records()
    assert [list(rec) for rec in records] == [["#x", "y"], ["a", "b"]]
    assert records[0].comment is None


def test_without_quotes_and_escapes():
    dialect = Dialect(quote_char=None)
    assert format_record("a b", '"c"', dialect=dialect) == 'a b,"c"'


@pytest.mark.parametrize(
    "dialect,values,expected",
    [
        (MYSQL, ["a\tb", None, "c\nd"], "a\\\tb\t\\N\tc\\nd"),
        (POSTGRESQL_TEXT, ["a", None, 'b"c'], '"a"\t\\N\t"b\\"c"'),
        (MONGODB_CSV, ['x"y', "z"], '"x""y",z'),
        (ORACLE, [" a\\b ", None], '"a\\\\b",\\N'),
    ],
)
def test_presets(dialect, values, expected):
    assert equal(format_record(values, dialect=dialect), expected)


def test_trim():
    dialect = Dialect(trim=True)
    assert format_record(" a ", "\tb", dialect=dialect) == "a,b"


def test_header():
    dialect = DEFAULT.replace(header=("x", "y"))
    assert printed(["1", "2"], dialect=dialect) == "x,y\r\n1,2\r\n"

    dialect = dialect.replace(skip_header_record=True)
    assert printed(["1", "2"], dialect=dialect) == "1,2\r\n"


def test_header_comments():
    dialect = Dialect(
        comment_marker="#",
        header_comments=("Made by verso", "line2\nline3"),
        header=("x",),
        record_separator="\n",
    )
    assert printed(dialect=dialect) == "# Made by verso\n# line2\n# line3\nx\n"

    # Without a comment marker, comments are dropped silently
    dialect = dialect.replace(comment_marker=None)
    assert printed(dialect=dialect) == "x\n"


def test_print_comment():
    sink = io.StringIO()
    printer = Printer(sink, Dialect(comment_marker="#", trailing_delimiter=True))
    printer.print("a")
    printer.print_comment("one\r\ntwo\rthree")
    printer.print_comment(None)
    printer.print_record("b")
    assert equal(sink.getvalue(), "a,\r\n# one\r\n# two\r\n# three\r\nb,\r\n")


def test_record_separators():
    dialect = Dialect(trailing_delimiter=True)
    assert printed(["a", "b"], dialect=dialect) == "a,b,\r\n"
    assert format_record("a", "b", dialect=dialect) == "a,b,"

    dialect = Dialect(record_separator=None)
    assert printed(["a", "b"], ["c"], dialect=dialect) == "a,bc"

    dialect = Dialect(record_separator="\n")
    assert printed(["a", "b"], ["c"], dialect=dialect) == "a,b\nc\n"


def test_print_records():
    sink = io.StringIO()
    printer = Printer(sink)
    printer.print_records([["a", "b"], "c", ("d", None), iter(["e"])])
    printer.print_record("f", "g")
    printer.print_record(["h", "i"])
    assert equal(sink.getvalue(), "a,b\r\nc\r\nd,\r\ne\r\nf,g\r\nh,i\r\n")


def test_empty_record():
    assert printed([]) == "\r\n"


def test_stream():
    sink = io.StringIO()
    printer = Printer(sink)
    printer.print("x")
    printer.print(io.StringIO('a"b'))
    printer.print(io.StringIO("plain"))
    printer.println()
    assert equal(sink.getvalue(), 'x,"a""b","plain"\r\n')


def test_large_stream():
    value = "ab,c" * 5000
    assert format_record(io.StringIO(value)) == f'"{value}"'


class TwoChars:
    """Hands out its text two characters at a time."""

    def __init__(self, text):
        self.text = text

    def read(self, n=-1):
        chunk, self.text = self.text[:2], self.text[2:]
        return chunk


def test_stream_with_escapes():
    dialect = Dialect(delimiter="[|]", quote_char=None, escape_char="!")
    actual = format_record(TwoChars("ab[|]cd[|"), dialect=dialect)
    assert equal(actual, "ab![!|!]cd[|")

    dialect = Dialect(quote_mode=QuoteMode.NONE, escape_char="\\")
    actual = format_record(TwoChars("a,\nb\\"), "x", dialect=dialect)
    assert equal(actual, "a\\,\\nb\\\\,x")

    dialect = Dialect(quote_char=None)
    assert format_record(TwoChars("a,b"), dialect=dialect) == "a,b"


class Sink:
    def __init__(self):
        self.parts = []
        self.n_flushed = 0
        self.closed = False

    def write(self, text):
        self.parts.append(text)

    def flush(self):
        self.n_flushed += 1

    def close(self):
        self.closed = True


def test_close_and_flush():
    sink = Sink()
    printer = Printer(sink)
    printer.print_record("a")
    printer.close()
    assert sink.closed
    assert sink.n_flushed == 0
    assert "".join(sink.parts) == "a\r\n"

    sink = Sink()
    Printer(sink).close(flush=True)
    assert sink.n_flushed == 1

    sink = Sink()
    with Printer(sink, Dialect(auto_flush=True)) as printer:
        printer.print_record("a")
    assert sink.closed
    assert sink.n_flushed == 1


def test_minimal_sink():
    class WriteOnly:
        def __init__(self):
            self.text = ""

        def write(self, text):
            self.text += text

    sink = WriteOnly()
    with Printer(sink) as printer:
        printer.print_record("a", "b")
        printer.flush()

    assert sink.text == "a,b\r\n"


def test_sink_errors():
    class Broken:
        def write(self, text):
            raise OSError("No space left on device")

    printer = Printer(Broken())
    with pytest.raises(SinkError):
        printer.print_record("a")


def test_dialect_is_copied():
    dialect = Dialect(delimiter=";")
    printer = Printer(io.StringIO(), dialect)
    assert printer.dialect == dialect
    assert printer.dialect is not dialect
