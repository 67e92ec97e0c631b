import io
from collections import Counter

import pytest

from likert_survey.core.cleaner import clean_table
from likert_survey.core.data_loader import read_raw_table
from likert_survey.core.reshaper import UnknownItemError, to_long, to_long_excluding


def test_long_table_has_n_times_k_records(clean_example):
    long = to_long(clean_example)

    assert len(long.frame) == 6
    assert list(long.frame.columns) == ["item", "rating"]
    assert long.items == ("A", "B")
    pairs = Counter(zip(long.frame["item"], long.frame["rating"]))
    assert pairs == Counter({("A", 1): 1, ("A", 3): 1, ("A", 4): 1, ("B", 3): 2, ("B", 5): 1})


def test_record_count_on_larger_table(survey_csv):
    clean = clean_table(read_raw_table(io.StringIO(survey_csv)))
    long = to_long(clean)
    assert len(long.frame) == clean.n_respondents * len(clean.items)


def test_excluding_variant_keeps_side_column(clean_example):
    paired = to_long_excluding(clean_example, "A")

    assert paired.distinguished_item == "A"
    assert paired.items == ("B",)
    assert list(paired.frame.columns) == ["distinguished_rating", "item", "rating"]
    assert set(paired.frame["item"]) == {"B"}
    assert list(zip(paired.frame["distinguished_rating"], paired.frame["rating"])) == [(1, 3), (3, 5), (4, 3)]


def test_excluding_variant_count(survey_csv):
    clean = clean_table(read_raw_table(io.StringIO(survey_csv)))
    paired = to_long_excluding(clean, "Office")
    assert len(paired.frame) == clean.n_respondents * (len(clean.items) - 1)
    assert "Office" not in set(paired.frame["item"])


def test_unknown_item_raises(clean_example):
    with pytest.raises(UnknownItemError):
        to_long_excluding(clean_example, "Z")


def test_unvalidated_input_is_rejected(raw_example):
    with pytest.raises(TypeError):
        to_long(raw_example)
    with pytest.raises(TypeError):
        to_long_excluding(raw_example, "A")


def test_input_frame_unchanged(clean_example):
    columns = list(clean_example.frame.columns)
    to_long_excluding(clean_example, "B")
    assert list(clean_example.frame.columns) == columns
