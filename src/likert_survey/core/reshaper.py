from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import pandas as pd

from likert_survey.core.cleaner import CleanTable

logger = logging.getLogger(__name__)

# Long table columns
ITEM_COL = "item"
RATING_COL = "rating"
DISTINGUISHED_COL = "distinguished_rating"

_VAR_TMP = "__item__"
_VALUE_TMP = "__rating__"


class UnknownItemError(KeyError):
    """Raised when a requested item is not a column of the survey table."""


@dataclass(frozen=True, eq=False)
class LongTable:
    """
    One row per (respondent, item) observation: columns item, rating.

    `items` keeps the original column order as an explicit sort key;
    row order in `frame` carries no meaning.
    """
    frame: pd.DataFrame
    items: Tuple[str, ...]
    valid_range: Tuple[int, int]


@dataclass(frozen=True, eq=False)
class PairedTable:
    """
    One row per (respondent, other item): distinguished_rating, item, rating.
    """
    frame: pd.DataFrame
    distinguished_item: str
    items: Tuple[str, ...]
    valid_range: Tuple[int, int]


def _require_clean(table: CleanTable) -> None:
    if not isinstance(table, CleanTable):
        raise TypeError(
            f"Expected a CleanTable (validated data), got {type(table).__name__}. Run clean_table() first."
        )


def _melt(frame: pd.DataFrame) -> pd.DataFrame:
    """Column-major wide -> long; item names never clash with the long column names."""
    if frame.shape[1] == 0:
        return pd.DataFrame(
            {ITEM_COL: pd.Series([], dtype=str), RATING_COL: pd.Series([], dtype="int64")}
        )
    long_df = frame.melt(var_name=_VAR_TMP, value_name=_VALUE_TMP)
    long_df = long_df.rename(columns={_VAR_TMP: ITEM_COL, _VALUE_TMP: RATING_COL})
    long_df[ITEM_COL] = long_df[ITEM_COL].astype(str)
    long_df[RATING_COL] = long_df[RATING_COL].astype("int64")
    return long_df.reset_index(drop=True)


def to_long(table: CleanTable) -> LongTable:
    """
    Pivot a CleanTable (N respondents x K items) into exactly N*K records.

    Respondent identity is dropped; nothing else is lost.
    """
    _require_clean(table)

    long_df = _melt(table.frame)
    logger.info(
        "Pivoted %s respondents x %s items -> %s long records",
        table.n_respondents, len(table.items), len(long_df),
    )
    return LongTable(frame=long_df, items=table.items, valid_range=table.valid_range)


def to_long_excluding(table: CleanTable, distinguished_item: str) -> PairedTable:
    """
    Pivot every item except `distinguished_item`, keeping that item's rating
    as a per-respondent side column (distinguished_rating).

    Produces N*(K-1) records.
    """
    _require_clean(table)

    if distinguished_item not in table.items:
        raise UnknownItemError(
            f"Item {distinguished_item!r} not found. Available items: {list(table.items)}"
        )

    others = tuple(i for i in table.items if i != distinguished_item)

    paired_df = _melt(table.frame[list(others)])
    # melt is column-major, so the side column repeats once per other item
    side = table.frame[distinguished_item].to_list() * len(others)
    paired_df.insert(0, DISTINGUISHED_COL, pd.Series(side, dtype="int64"))
    logger.info(
        "Pivoted %s respondents x %s other items around %r -> %s paired records",
        table.n_respondents, len(others), distinguished_item, len(paired_df),
    )
    return PairedTable(
        frame=paired_df,
        distinguished_item=distinguished_item,
        items=others,
        valid_range=table.valid_range,
    )
