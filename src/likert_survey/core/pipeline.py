from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from likert_survey.config import (
    DEFAULT_NEUTRAL_FILL,
    DEFAULT_TIE_BREAK,
    DEFAULT_VALID_RANGE,
    SCALE_CENTER,
)
from likert_survey.core.aggregator import (
    compute_item_stats,
    order_by_dislike_count,
    order_by_mean,
    order_by_median,
)
from likert_survey.core.cleaner import CleanTable, clean_table
from likert_survey.core.correlator import correlate
from likert_survey.core.data_loader import RawTable, Source, read_raw_table
from likert_survey.core.reshaper import LongTable, PairedTable, to_long

logger = logging.getLogger(__name__)


@dataclass
class PipelineParameters:
    """
    Everything one analysis run needs.

    distinguished_item:
      - None -> no correlation check; the correlation products stay None
      - "<item>" -> paired table + conditional means against that item
    """
    source: Source
    distinguished_item: Optional[str] = None
    neutral_fill: int = DEFAULT_NEUTRAL_FILL
    valid_range: Tuple[int, int] = DEFAULT_VALID_RANGE
    center: int = SCALE_CENTER
    tie_break: str = DEFAULT_TIE_BREAK


@dataclass
class SurveyAnalysisResult:
    params: PipelineParameters

    raw: RawTable
    clean: CleanTable
    long: LongTable

    # Item stats in the two consumer orderings (plus the median ranking)
    stats_by_dislike: pd.DataFrame
    stats_by_mean: pd.DataFrame
    stats_by_median: pd.DataFrame

    # Populated only when a distinguished item was given
    paired: PairedTable | None
    conditional_means: pd.DataFrame | None

    elapsed_seconds: float


def run_pipeline(params: PipelineParameters) -> SurveyAnalysisResult:
    """
    Load -> clean/validate -> reshape -> aggregate -> correlate.

    FormatError and ValidationError propagate unchanged; nothing after the
    failing stage runs, and there is no partial result.
    """
    logger.info("Running survey pipeline with params=%s", params)
    t0 = time.perf_counter()

    raw = read_raw_table(params.source)
    clean = clean_table(raw, neutral_fill=params.neutral_fill, valid_range=params.valid_range)
    long = to_long(clean)

    stats = compute_item_stats(long, center=params.center)
    stats_by_dislike = order_by_dislike_count(stats, tie_break=params.tie_break)
    stats_by_mean = order_by_mean(stats, tie_break=params.tie_break)
    stats_by_median = order_by_median(stats, tie_break=params.tie_break)

    paired: PairedTable | None = None
    cond: pd.DataFrame | None = None
    if params.distinguished_item is not None:
        paired, cond = correlate(clean, params.distinguished_item)

    elapsed = time.perf_counter() - t0
    logger.info("Survey pipeline completed in %0.3fs", elapsed)

    return SurveyAnalysisResult(
        params=params,
        raw=raw,
        clean=clean,
        long=long,
        stats_by_dislike=stats_by_dislike,
        stats_by_mean=stats_by_mean,
        stats_by_median=stats_by_median,
        paired=paired,
        conditional_means=cond,
        elapsed_seconds=elapsed,
    )
