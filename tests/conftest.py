import io

import pytest

from likert_survey.core.cleaner import clean_table
from likert_survey.core.data_loader import read_raw_table

# 3 respondents, 2 items: [[1,3],[empty,5],[4,empty]]
EXAMPLE_CSV = "A,B\n1,3\n,5\n4,\n"


@pytest.fixture
def example_csv():
    return EXAMPLE_CSV


@pytest.fixture
def raw_example():
    return read_raw_table(io.StringIO(EXAMPLE_CSV))


@pytest.fixture
def clean_example(raw_example):
    return clean_table(raw_example)


@pytest.fixture
def survey_csv():
    return (
        "Incumbent,Rival,Office,Desk\n"
        "1,3,2,4\n"
        "2,,3,4\n"
        "1,4,,3\n"
        "5,5,4,5\n"
        "2,3,3,\n"
        "4,4,2,3\n"
    )
