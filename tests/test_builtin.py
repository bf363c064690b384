"""Whatever Python's csv module writes, we read back like its reader does."""
import csv
import io
from csv import get_dialect

import pytest
from hypothesis import given
from hypothesis.strategies import data

from verso.csv import Dialect, Parser

from .utils import equal, values

csv_strat = pytest.importorskip("hypothesis_csv.strategies").csv


@given(data=data())
@pytest.mark.parametrize("dialect", ["excel", "excel-tab", "unix"])
def test_same_as_builtin(dialect, data):
    pydialect = get_dialect(dialect)
    text = data.draw(csv_strat(dialect=pydialect, lines=3, header=2))

    expected = list(csv.reader(io.StringIO(text), pydialect))
    records = Parser(text, Dialect.from_builtin(pydialect)).records()

    assert equal(values(records), expected, extra=text)
    assert equal(4, len(records), extra=text)
