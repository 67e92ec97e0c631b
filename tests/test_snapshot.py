import io

import pytest

from likert_survey.core.pipeline import PipelineParameters, run_pipeline
from likert_survey.core.snapshot import _direction_from_delta, _lean_from_mean, build_snapshot


def test_snapshot_of_example(example_csv):
    result = run_pipeline(PipelineParameters(source=io.StringIO(example_csv), distinguished_item="A"))
    snap = build_snapshot(result)

    assert snap.n_respondents == 3
    assert snap.n_items == 2
    assert snap.filled_cells == 2
    assert snap.most_favorable_item == "A"
    assert snap.least_favorable_item == "B"
    assert snap.lean_by_item == {"A": "favorable", "B": "unfavorable"}

    assert snap.distinguished_item == "A"
    assert snap.conditional_mean_by_rating == {1: 3.0, 3: 5.0, 4: 3.0}
    assert [(f.rating_start, f.rating_end, f.direction) for f in snap.trend_facts] == [
        (1, 3, "increase"),
        (3, 4, "decrease"),
    ]
    assert snap.overall_delta == pytest.approx(0.0)
    assert snap.overall_direction == "no_change"


def test_snapshot_without_correlation(example_csv):
    result = run_pipeline(PipelineParameters(source=io.StringIO(example_csv)))
    snap = build_snapshot(result)

    assert snap.distinguished_item is None
    assert snap.conditional_mean_by_rating == {}
    assert snap.trend_facts == []
    assert snap.overall_direction is None


def test_snapshot_of_empty_survey():
    result = run_pipeline(PipelineParameters(source=io.StringIO("A,B\n")))
    snap = build_snapshot(result)

    assert snap.n_respondents == 0
    assert snap.most_favorable_item is None
    assert snap.least_favorable_item is None
    assert snap.lean_by_item == {"A": "neutral", "B": "neutral"}


def test_tolerance_bands():
    assert _direction_from_delta(0.05) == "no_change"
    assert _direction_from_delta(0.5) == "increase"
    assert _direction_from_delta(-0.5) == "decrease"
    assert _direction_from_delta(float("nan")) == "no_change"

    assert _lean_from_mean(0.05) == "neutral"
    assert _lean_from_mean(-1.0) == "unfavorable"
    assert _lean_from_mean(0.05, tolerance=0.01) == "favorable"
