from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import math

from likert_survey.config import SNAPSHOT_TOLERANCE
from likert_survey.core.aggregator import MEAN_COL
from likert_survey.core.correlator import MEAN_OTHER_COL
from likert_survey.core.pipeline import SurveyAnalysisResult
from likert_survey.core.reshaper import DISTINGUISHED_COL, ITEM_COL


@dataclass
class ConditionalTrendFact:
    """
    Change in the mean other-item rating between two consecutive observed
    distinguished rating values.
    """
    rating_start: int
    rating_end: int
    value_start: float
    value_end: float
    delta: float
    direction: str  # 'increase', 'decrease', 'no_change'


@dataclass
class SurveySnapshot:
    """
    Canonical headline facts derived from a SurveyAnalysisResult.

    Anything said about the survey in a summary should be traceable back
    to one of these fields.
    """
    n_respondents: int
    n_items: int
    filled_cells: int

    most_favorable_item: Optional[str]
    least_favorable_item: Optional[str]

    mean_by_item: Dict[str, float]
    lean_by_item: Dict[str, str]   # 'favorable', 'unfavorable', 'neutral'

    distinguished_item: Optional[str]
    conditional_mean_by_rating: Dict[int, float]
    overall_delta: Optional[float]
    overall_direction: Optional[str]
    trend_facts: List[ConditionalTrendFact]


def _direction_from_delta(delta: float, tolerance: float = SNAPSHOT_TOLERANCE) -> str:
    """
    Interpret a numeric delta as 'increase', 'decrease', or 'no_change'.

    Changes within the tolerance count as 'no_change'.
    """
    if math.isnan(delta):
        return "no_change"
    if delta > tolerance:
        return "increase"
    if delta < -tolerance:
        return "decrease"
    return "no_change"


def _lean_from_mean(mean: float, tolerance: float = SNAPSHOT_TOLERANCE) -> str:
    if math.isnan(mean):
        return "neutral"
    if mean > tolerance:
        return "favorable"
    if mean < -tolerance:
        return "unfavorable"
    return "neutral"


def build_snapshot(result: SurveyAnalysisResult, tolerance: float = SNAPSHOT_TOLERANCE) -> SurveySnapshot:
    """
    Build the headline facts for one pipeline run.

    This function:
      - Counts respondents, items and filled cells
      - Picks the most / least favorable item from the mean ranking
      - Labels each item's lean from its transformed mean
      - Computes step-by-step and first->last deltas of the conditional
        means (only when a distinguished item was analysed)
    """
    ranked = result.stats_by_mean
    mean_by_item: Dict[str, float] = {
        str(row[ITEM_COL]): float(row[MEAN_COL]) for _, row in ranked.iterrows()
    }
    lean_by_item = {item: _lean_from_mean(m, tolerance=tolerance) for item, m in mean_by_item.items()}

    valid = ranked[ranked[MEAN_COL].notna()]
    most_favorable = str(valid.iloc[0][ITEM_COL]) if not valid.empty else None
    # Lowest mean; among equal means the earliest item in the ranking wins
    least_favorable: Optional[str] = None
    if not valid.empty:
        lowest = valid[MEAN_COL].min()
        least_favorable = str(valid[valid[MEAN_COL] == lowest].iloc[0][ITEM_COL])

    conditional: Dict[int, float] = {}
    if result.conditional_means is not None:
        for _, row in result.conditional_means.iterrows():
            conditional[int(row[DISTINGUISHED_COL])] = float(row[MEAN_OTHER_COL])

    trend_facts: List[ConditionalTrendFact] = []
    prev_rating: Optional[int] = None
    prev_value: Optional[float] = None
    for rating in sorted(conditional):
        value = conditional[rating]
        if prev_rating is not None and prev_value is not None:
            delta = value - prev_value
            trend_facts.append(
                ConditionalTrendFact(
                    rating_start=prev_rating,
                    rating_end=rating,
                    value_start=prev_value,
                    value_end=value,
                    delta=delta,
                    direction=_direction_from_delta(delta, tolerance=tolerance),
                )
            )
        prev_rating = rating
        prev_value = value

    overall_delta: Optional[float] = None
    overall_direction: Optional[str] = None
    if len(conditional) >= 2:
        ratings = sorted(conditional)
        overall_delta = conditional[ratings[-1]] - conditional[ratings[0]]
        overall_direction = _direction_from_delta(overall_delta, tolerance=tolerance)

    return SurveySnapshot(
        n_respondents=result.clean.n_respondents,
        n_items=len(result.clean.items),
        filled_cells=result.clean.filled_cells,
        most_favorable_item=most_favorable,
        least_favorable_item=least_favorable,
        mean_by_item=mean_by_item,
        lean_by_item=lean_by_item,
        distinguished_item=result.params.distinguished_item,
        conditional_mean_by_rating=conditional,
        overall_delta=overall_delta,
        overall_direction=overall_direction,
        trend_facts=trend_facts,
    )
