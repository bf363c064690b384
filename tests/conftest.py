"""Shared fixtures."""
from dataclasses import dataclass
from inspect import cleandoc

import pytest

from verso.csv import DEFAULT, Dialect


@dataclass
class TestCase:
    name: str
    dialect: Dialect
    csv: str
    records: list


@pytest.fixture
def simple_csv() -> TestCase:

    return TestCase(
        name="simple",
        dialect=DEFAULT,
        csv=cleandoc(
            """
            a,b,c
            0,1,2
            3,4,5
            """
        ),
        records=[["a", "b", "c"], ["0", "1", "2"], ["3", "4", "5"]],
    )


@pytest.fixture
def header_csv(simple_csv) -> TestCase:

    return TestCase(
        name="header",
        dialect=DEFAULT.builder().first_record_as_header().build(),
        csv=simple_csv.csv,
        records=simple_csv.records[1:],
    )
