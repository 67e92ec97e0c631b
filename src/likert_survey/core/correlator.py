from __future__ import annotations

import logging
from typing import Tuple

import pandas as pd

from likert_survey.core.cleaner import CleanTable
from likert_survey.core.reshaper import (
    DISTINGUISHED_COL,
    RATING_COL,
    PairedTable,
    to_long_excluding,
)

logger = logging.getLogger(__name__)

MEAN_OTHER_COL = "mean_other_rating"
N_PAIRS_COL = "n_pairs"


def pair_with_distinguished(table: CleanTable, distinguished_item: str) -> PairedTable:
    """
    Pair each respondent's distinguished rating with each of their other ratings.
    """
    return to_long_excluding(table, distinguished_item)


def conditional_means(paired: PairedTable) -> pd.DataFrame:
    """
    Mean raw rating of the other items, grouped by distinguished rating.

    Key behavior:
      - Ratings are used as-is (no favorability transform).
      - Only distinguished rating values that were actually observed get a
        row; an empty group has no defined mean and is left out rather than
        reported as 0 or NaN.
      - Rows are ordered by ascending distinguished rating.
    """
    df = paired.frame
    if df.empty:
        logger.warning("No paired records for %r; conditional mean table is empty.", paired.distinguished_item)
        return pd.DataFrame(
            {
                DISTINGUISHED_COL: pd.Series([], dtype="int64"),
                MEAN_OTHER_COL: pd.Series([], dtype="float64"),
                N_PAIRS_COL: pd.Series([], dtype="int64"),
            }
        )

    out = (
        df.groupby(DISTINGUISHED_COL, sort=True, observed=True)
          .agg(
              mean_other_rating=(RATING_COL, "mean"),
              n_pairs=(RATING_COL, "size"),
          )
          .reset_index()
    )
    out = out[out[N_PAIRS_COL] > 0].reset_index(drop=True)
    out[DISTINGUISHED_COL] = out[DISTINGUISHED_COL].astype("int64")
    out[MEAN_OTHER_COL] = out[MEAN_OTHER_COL].astype(float)

    logger.info(
        "Conditional means for %r over %s groups (%s paired records)",
        paired.distinguished_item, len(out), len(df),
    )
    return out


def correlate(table: CleanTable, distinguished_item: str) -> Tuple[PairedTable, pd.DataFrame]:
    paired = pair_with_distinguished(table, distinguished_item)
    return paired, conditional_means(paired)
