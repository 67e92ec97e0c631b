from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

import pandas as pd

from likert_survey.config import DEFAULT_NEUTRAL_FILL, DEFAULT_VALID_RANGE
from likert_survey.core.data_loader import RawTable

logger = logging.getLogger(__name__)

CLEAN_DTYPE = "int64"

# Number of offending cells spelled out in a ValidationError message
_MAX_REPORTED = 10


@dataclass(frozen=True)
class RangeViolation:
    row: int    # 0-based respondent index
    item: str
    value: int


class ValidationError(Exception):
    """Raised when a (filled) rating lies outside the valid range."""

    def __init__(self, violations: List[RangeViolation], valid_range: Tuple[int, int]):
        self.violations = list(violations)
        self.valid_range = valid_range
        super().__init__(_describe_violations(self.violations, valid_range))

    @property
    def rows(self) -> List[int]:
        return sorted({v.row for v in self.violations})


def _describe_violations(violations: List[RangeViolation], valid_range: Tuple[int, int]) -> str:
    lo, hi = valid_range
    shown = ", ".join(f"respondent index {v.row} '{v.item}'={v.value}" for v in violations[:_MAX_REPORTED])
    more = len(violations) - _MAX_REPORTED
    suffix = f", ... ({more} more)" if more > 0 else ""
    n_rows = len({v.row for v in violations})
    return (
        f"{len(violations)} cell(s) in {n_rows} respondent(s) outside valid range [{lo}, {hi}] "
        f"(0-based respondent index, header excluded): "
        f"{shown}{suffix}"
    )


def _check_range(valid_range: Tuple[int, int]) -> Tuple[int, int]:
    lo, hi = (int(valid_range[0]), int(valid_range[1]))
    if lo > hi:
        raise ValueError(f"valid_range lower bound {lo} exceeds upper bound {hi}.")
    return lo, hi


def find_range_violations(frame: pd.DataFrame, valid_range: Tuple[int, int]) -> List[RangeViolation]:
    """
    List every cell outside valid_range, ordered by row then column position.
    """
    lo, hi = _check_range(valid_range)
    position = {name: i for i, name in enumerate(frame.columns)}

    out: List[RangeViolation] = []
    for item in frame.columns:
        col = frame[item]
        outside = ((col < lo) | (col > hi)).fillna(False).to_list()
        for row, (flag, value) in enumerate(zip(outside, col.to_list())):
            if flag:
                out.append(RangeViolation(row=row, item=str(item), value=int(value)))

    out.sort(key=lambda v: (v.row, position[v.item]))
    return out


@dataclass(frozen=True, eq=False)
class CleanTable:
    """
    Wide survey table with every cell a concrete, range-checked integer.

    Construction validates: a CleanTable with an absent or out-of-range
    cell cannot exist, so every downstream stage sees range-valid data.
    """
    frame: pd.DataFrame
    valid_range: Tuple[int, int] = DEFAULT_VALID_RANGE
    filled_cells: int = 0

    def __post_init__(self) -> None:
        if self.frame.isna().any().any():
            raise ValueError("CleanTable cannot contain absent cells; run clean_table() first.")
        violations = find_range_violations(self.frame, self.valid_range)
        if violations:
            raise ValidationError(violations, _check_range(self.valid_range))

    @property
    def items(self) -> Tuple[str, ...]:
        return tuple(str(c) for c in self.frame.columns)

    @property
    def n_respondents(self) -> int:
        return int(len(self.frame))


def clean_table(
    table: Union[RawTable, CleanTable],
    neutral_fill: int = DEFAULT_NEUTRAL_FILL,
    valid_range: Tuple[int, int] = DEFAULT_VALID_RANGE,
) -> CleanTable:
    """
    Fill absent cells with neutral_fill, then validate the rating range.

    Key behavior:
      - Input is never mutated; a new frame is built.
      - The fill happens first, so a fill value outside the range fails
        validation wherever it was used.
      - Out-of-range values are never corrected; ValidationError lists them.
      - Cleaning an already clean table returns an identical table.
    """
    valid_range = _check_range(valid_range)
    frame = table.frame

    missing = frame.isna()
    n_filled = int(missing.sum().sum())

    all_missing = [str(c) for c in frame.columns if len(frame) > 0 and bool(missing[c].all())]
    if all_missing:
        logger.warning(
            "Item(s) %s have no observed ratings; every cell takes the fill value %s.",
            all_missing, neutral_fill,
        )

    filled = frame.fillna(int(neutral_fill)).astype(CLEAN_DTYPE)

    try:
        clean = CleanTable(frame=filled, valid_range=valid_range, filled_cells=n_filled)
    except ValidationError as exc:
        logger.error("Validation failed: %s", exc)
        raise

    logger.info(
        "Cleaned %s respondents x %s items (%s cells filled with %s, range %s)",
        clean.n_respondents, len(clean.items), n_filled, neutral_fill, valid_range,
    )
    return clean
