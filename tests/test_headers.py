"""Test resolution of column names."""
import pytest

from verso.csv import DEFAULT, HeaderError, Headers
from verso.csv.headers import HeaderResolver, find_duplicates

from .utils import equal


class Records:
    """Stand-in for the parser, handing out prepared records and counting reads."""

    def __init__(self, *records):
        self.records = list(records)
        self.n_reads = 0

    def __call__(self):
        self.n_reads += 1
        return self.records.pop(0) if self.records else None


def test_names_and_mapping():
    headers = Headers.from_names(["a", "b", "", " ", None, "a"])
    assert headers.names == ("a", "b", "", " ", "a")
    assert equal(headers.mapping(), {"a": 5, "b": 1})
    assert headers.index("a") == 5
    assert headers.index("") is None
    assert headers.index("c") is None
    assert "b" in headers
    assert "" not in headers
    assert len(headers) == 2


def test_ignore_case():
    headers = Headers.from_names(["Name", "AGE"], ignore_case=True)
    assert headers.index("name") == 0
    assert headers.index("NAME") == 0
    assert "age" in headers
    assert equal(headers.mapping(), {"Name": 0, "AGE": 1})

    headers = Headers.from_names(["Name", "AGE"])
    assert headers.index("name") is None
    assert "Name" in headers


def test_find_duplicates():
    assert find_duplicates(["a", "b", "a", "", "", None, None]) == ["a"]
    assert find_duplicates(["a", "A"]) == []
    assert find_duplicates(["a", "A"], ignore_case=True) == ["A"]


def test_no_header():
    records = Records(["x", "y"])
    assert HeaderResolver(DEFAULT, records).resolve() is None
    assert records.n_reads == 0


def test_header_from_first_record():
    records = Records(["x", "y"], ["1", "2"])
    headers = HeaderResolver(DEFAULT.replace(header=()), records).resolve()
    assert headers.names == ("x", "y")
    assert records.n_reads == 1


def test_header_from_empty_input():
    headers = HeaderResolver(DEFAULT.replace(header=()), Records()).resolve()
    assert headers.names == ()
    assert headers.mapping() == {}


@pytest.mark.parametrize("skip", [True, False])
def test_explicit_header(skip):
    records = Records(["x", "y"], ["1", "2"])
    dialect = DEFAULT.replace(header=("a", "b"), skip_header_record=skip)
    headers = HeaderResolver(dialect, records).resolve()
    assert headers.names == ("a", "b")
    assert records.n_reads == (1 if skip else 0)


@pytest.mark.parametrize("names", [["a", ""], ["a", "  "], ["a", None]])
def test_missing_names(names):
    dialect = DEFAULT.replace(header=())
    with pytest.raises(HeaderError):
        HeaderResolver(dialect, Records(names)).resolve()

    dialect = dialect.replace(allow_missing_column_names=True)
    headers = HeaderResolver(dialect, Records(names)).resolve()
    assert headers.mapping() == {"a": 0}


def test_duplicate_names():
    dialect = DEFAULT.replace(header=(), allow_duplicate_header_names=False)
    with pytest.raises(HeaderError):
        HeaderResolver(dialect, Records(["a", "b", "a"])).resolve()

    dialect = dialect.replace(ignore_header_case=True)
    with pytest.raises(HeaderError):
        HeaderResolver(dialect, Records(["a", "A"])).resolve()

    # Blank names are never duplicates
    dialect = dialect.replace(allow_missing_column_names=True)
    headers = HeaderResolver(dialect, Records(["a", "", ""])).resolve()
    assert headers.names == ("a", "", "")

    dialect = DEFAULT.replace(header=())
    headers = HeaderResolver(dialect, Records(["a", "b", "a"])).resolve()
    assert headers.index("a") == 2
