import io

import pandas as pd
import pytest

from likert_survey.core.cleaner import CleanTable, RangeViolation, ValidationError, clean_table
from likert_survey.core.data_loader import RawTable, read_raw_table


def test_example_fill(clean_example):
    assert clean_example.frame["A"].tolist() == [1, 3, 4]
    assert clean_example.frame["B"].tolist() == [3, 5, 3]
    assert clean_example.filled_cells == 2
    assert clean_example.valid_range == (1, 5)


def test_input_is_not_mutated(raw_example):
    before = raw_example.frame.copy()
    clean_table(raw_example)
    pd.testing.assert_frame_equal(raw_example.frame, before)


def test_idempotent_on_clean_table(clean_example):
    again = clean_table(clean_example)
    pd.testing.assert_frame_equal(again.frame, clean_example.frame)
    assert again.filled_cells == 0


def test_idempotent_on_raw_table_without_missing_cells():
    raw = read_raw_table(io.StringIO("A,B\n1,2\n5,4\n"))
    first = clean_table(raw)
    second = clean_table(RawTable(frame=first.frame))
    pd.testing.assert_frame_equal(first.frame, second.frame)


def test_out_of_range_value_raises_with_location():
    raw = read_raw_table(io.StringIO("A,B\n1,6\n2,3\n0,\n"))

    with pytest.raises(ValidationError) as excinfo:
        clean_table(raw)

    err = excinfo.value
    assert err.violations == [
        RangeViolation(row=0, item="B", value=6),
        RangeViolation(row=2, item="A", value=0),
    ]
    assert err.rows == [0, 2]
    assert "2 cell(s) in 2 respondent(s)" in str(err)
    assert "respondent index 2 'A'=0" in str(err)


def test_fill_value_outside_range_fails_validation(raw_example):
    with pytest.raises(ValidationError):
        clean_table(raw_example, neutral_fill=9)


def test_alternate_scale():
    raw = read_raw_table(io.StringIO("A,B\n7,\n1,6\n"))
    clean = clean_table(raw, neutral_fill=4, valid_range=(1, 7))
    assert clean.frame["B"].tolist() == [4, 6]
    assert clean.valid_range == (1, 7)

    with pytest.raises(ValidationError):
        clean_table(raw)


def test_inverted_range_is_rejected(raw_example):
    with pytest.raises(ValueError):
        clean_table(raw_example, valid_range=(5, 1))


def test_clean_table_cannot_hold_unvalidated_data():
    with pytest.raises(ValueError):
        CleanTable(frame=pd.DataFrame({"A": pd.array([1, None], dtype="Int64")}))

    with pytest.raises(ValidationError):
        CleanTable(frame=pd.DataFrame({"A": [1, 8]}))


def test_item_with_no_observations_is_all_neutral():
    raw = read_raw_table(io.StringIO("A,B\n1,\n2,\n"))
    clean = clean_table(raw)
    assert clean.frame["B"].tolist() == [3, 3]
