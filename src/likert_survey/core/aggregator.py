from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import pandas as pd

from likert_survey.config import DEFAULT_TIE_BREAK, SCALE_CENTER, TIE_BREAK_CHOICES
from likert_survey.core.reshaper import ITEM_COL, RATING_COL, LongTable

logger = logging.getLogger(__name__)

# Item stats columns
POSITION_COL = "position"
N_COL = "n"
MEAN_COL = "mean"
MEDIAN_COL = "median"
RANK_COL = "rank"
COUNT_PREFIX = "count_"

_FAVORABILITY_COL = "__favorability__"


@dataclass
class ItemStats:
    """
    Per-item statistics.

    mean / median are on the transformed scale (center - rating), so with
    the default center of 3: +2 = strong like, 0 = neutral, -2 = strong dislike.
    """
    item: str
    position: int
    n: int
    distribution: Dict[int, int]
    mean: float
    median: float


def count_column(value: int) -> str:
    return f"{COUNT_PREFIX}{value}"


def rating_values_of(stats: pd.DataFrame) -> List[int]:
    """Rating values that have a count column in an item stats frame, ascending."""
    return sorted(int(c[len(COUNT_PREFIX):]) for c in stats.columns if str(c).startswith(COUNT_PREFIX))


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def compute_item_stats(
    long: LongTable,
    center: int = SCALE_CENTER,
    rating_values: Optional[Sequence[int]] = None,
) -> pd.DataFrame:
    """
    Group long records by item and compute distribution, mean and median.

    Key behavior:
      - One row per item, in original column order (position 0..K-1).
      - count_<v> columns for every rating value v (default: the table's
        valid range), zero-filled for unobserved values.
      - mean / median are taken over (center - rating). The median of a
        handful of discrete values is itself coarse (mostly whole or half
        steps); that is expected.
      - An item with no records keeps zero counts and NaN mean/median.
    """
    if rating_values is None:
        lo, hi = long.valid_range
        rating_values = list(range(lo, hi + 1))

    items = list(long.items)
    work = long.frame.assign(**{_FAVORABILITY_COL: center - long.frame[RATING_COL]})

    summary = (
        work.groupby(ITEM_COL, sort=False)
            .agg(
                n=(RATING_COL, "size"),
                mean=(_FAVORABILITY_COL, "mean"),
                median=(_FAVORABILITY_COL, "median"),
            )
            .reindex(items)
    )

    out = pd.DataFrame({ITEM_COL: items, POSITION_COL: range(len(items))})
    out[N_COL] = summary[N_COL].fillna(0).astype(int).to_list()

    for value in rating_values:
        counts = (
            work[work[RATING_COL] == value]
            .groupby(ITEM_COL, sort=False)
            .size()
            .reindex(items, fill_value=0)
        )
        out[count_column(value)] = counts.astype(int).to_list()

    out[MEAN_COL] = summary[MEAN_COL].astype(float).to_list()
    out[MEDIAN_COL] = summary[MEDIAN_COL].astype(float).to_list()

    logger.info("Computed stats for %s items (center=%s, values=%s)", len(items), center, list(rating_values))
    return out


def item_stats_records(stats: pd.DataFrame) -> List[ItemStats]:
    values = rating_values_of(stats)
    records: List[ItemStats] = []
    for _, row in stats.iterrows():
        records.append(
            ItemStats(
                item=str(row[ITEM_COL]),
                position=int(row[POSITION_COL]),
                n=int(row[N_COL]),
                distribution={v: int(row[count_column(v)]) for v in values},
                mean=float(row[MEAN_COL]),
                median=float(row[MEDIAN_COL]),
            )
        )
    return records


# ---------------------------------------------------------------------------
# Orderings
# ---------------------------------------------------------------------------

def order_by_statistic(
    stats: pd.DataFrame,
    column: str,
    ascending: bool,
    tie_break: str = DEFAULT_TIE_BREAK,
) -> pd.DataFrame:
    """
    Return a new frame sorted by `column`, with an explicit 1-based rank column.

    Sorting is stable; ties fall back to original column order
    (tie_break="column") or item name (tie_break="alphabetical").
    NaN values sort last.
    """
    if tie_break not in TIE_BREAK_CHOICES:
        raise ValueError(f"tie_break must be one of {TIE_BREAK_CHOICES}, got {tie_break!r}")
    if column not in stats.columns:
        raise ValueError(f"Unknown statistic column {column!r}. Present columns: {list(stats.columns)}")

    tie_col = POSITION_COL if tie_break == "column" else ITEM_COL
    out = (
        stats.sort_values(
            [column, tie_col],
            ascending=[ascending, True],
            kind="mergesort",
            na_position="last",
        )
        .reset_index(drop=True)
    )
    out[RANK_COL] = range(1, len(out) + 1)
    return out


def order_by_dislike_count(
    stats: pd.DataFrame,
    dislike_value: Optional[int] = None,
    tie_break: str = DEFAULT_TIE_BREAK,
) -> pd.DataFrame:
    """
    Ordering for the distribution plot: ascending count of the strong-dislike
    rating (the highest rating value, 5 by default).
    """
    if dislike_value is None:
        values = rating_values_of(stats)
        if not values:
            raise ValueError("Item stats frame has no count_<value> columns.")
        dislike_value = values[-1]
    return order_by_statistic(stats, count_column(dislike_value), ascending=True, tie_break=tie_break)


def order_by_mean(stats: pd.DataFrame, tie_break: str = DEFAULT_TIE_BREAK) -> pd.DataFrame:
    """Ordering for the mean bar chart: most favorable item first."""
    return order_by_statistic(stats, MEAN_COL, ascending=False, tie_break=tie_break)


def order_by_median(stats: pd.DataFrame, tie_break: str = DEFAULT_TIE_BREAK) -> pd.DataFrame:
    return order_by_statistic(stats, MEDIAN_COL, ascending=False, tie_break=tie_break)
