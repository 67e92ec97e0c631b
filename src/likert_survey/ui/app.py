from __future__ import annotations

import io
import time
import traceback
from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st

from likert_survey.config import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_NEUTRAL_FILL,
    DEFAULT_VALID_RANGE,
    SAMPLE_DATA_PATH,
    TIE_BREAK_CHOICES,
)
from likert_survey.core.cleaner import ValidationError
from likert_survey.core.data_loader import FormatError, read_raw_table
from likert_survey.core.pipeline import PipelineParameters, SurveyAnalysisResult, run_pipeline
from likert_survey.core.snapshot import build_snapshot

NO_DISTINGUISHED = "(none - skip correlation check)"


def _read_source_text() -> Tuple[Optional[str], str]:
    """
    Returns:
      (csv_text, source_label)

    csv_text is None when neither an upload nor the bundled sample is available.
    """
    uploaded = st.file_uploader("Survey CSV (header = item names, one row per respondent)", type=["csv"])
    if uploaded is not None:
        return uploaded.getvalue().decode("utf-8-sig"), uploaded.name

    if SAMPLE_DATA_PATH.exists():
        st.caption(f"No file uploaded; using bundled sample {SAMPLE_DATA_PATH.name}.")
        return SAMPLE_DATA_PATH.read_text(encoding="utf-8-sig"), SAMPLE_DATA_PATH.name

    st.info("Upload a survey CSV to begin.")
    return None, ""


def _preview_items(csv_text: str) -> List[str]:
    try:
        return list(read_raw_table(io.StringIO(csv_text)).items)
    except FormatError as err:
        st.error(f"Could not read the survey table: {err}")
        return []


def _render_settings(items: List[str]) -> Tuple[Optional[str], int, Tuple[int, int], str]:
    col1, col2 = st.columns(2)

    with col1:
        choice = st.selectbox("Distinguished item", options=[NO_DISTINGUISHED] + items, index=0)
        distinguished = None if choice == NO_DISTINGUISHED else choice
        tie_break = st.selectbox("Tie break for rankings", options=list(TIE_BREAK_CHOICES), index=0)

    with col2:
        neutral_fill = int(st.number_input("Neutral fill value", value=DEFAULT_NEUTRAL_FILL, step=1))
        lo = int(st.number_input("Lowest valid rating", value=DEFAULT_VALID_RANGE[0], step=1))
        hi = int(st.number_input("Highest valid rating", value=DEFAULT_VALID_RANGE[1], step=1))

    return distinguished, neutral_fill, (lo, hi), tie_break


def _render_result(result: SurveyAnalysisResult) -> None:
    snapshot = build_snapshot(result)

    st.success(
        f"Analysed {snapshot.n_respondents} respondents x {snapshot.n_items} items "
        f"({snapshot.filled_cells} empty cells filled) in {result.elapsed_seconds:0.2f}s."
    )
    st.write(f"Most favorable item: {snapshot.most_favorable_item or '(n/a)'}")
    st.write(f"Least favorable item: {snapshot.least_favorable_item or '(n/a)'}")

    st.subheader("Rating distribution (ordered by strong-dislike count)")
    st.dataframe(result.stats_by_dislike, use_container_width=True)

    st.subheader("Mean favorability ranking")
    st.dataframe(result.stats_by_mean, use_container_width=True)

    st.subheader("Median favorability ranking")
    st.dataframe(result.stats_by_median, use_container_width=True)

    if result.conditional_means is not None:
        st.subheader(f"Mean rating of other items by '{snapshot.distinguished_item}' rating")
        st.dataframe(result.conditional_means, use_container_width=True)
        if snapshot.overall_direction is not None:
            st.write(
                f"Lowest -> highest observed rating: {snapshot.overall_direction} "
                f"(delta {snapshot.overall_delta:+0.2f})"
            )

        rows = [
            {
                "From rating": f.rating_start,
                "To rating": f.rating_end,
                "Mean other rating (from)": f.value_start,
                "Mean other rating (to)": f.value_end,
                "Delta": f.delta,
                "Direction": f.direction,
            }
            for f in snapshot.trend_facts
        ]
        if rows:
            st.dataframe(pd.DataFrame(rows), use_container_width=True)


def _render_analysis() -> None:
    csv_text, source_label = _read_source_text()
    if csv_text is None:
        return

    items = _preview_items(csv_text)
    if not items:
        return

    distinguished, neutral_fill, valid_range, tie_break = _render_settings(items)

    if st.button("Run analysis", key="run_analysis_btn"):
        status = st.status("Running survey pipeline...", expanded=False)
        t0 = time.perf_counter()
        try:
            params = PipelineParameters(
                source=io.StringIO(csv_text),
                distinguished_item=distinguished,
                neutral_fill=neutral_fill,
                valid_range=valid_range,
                tie_break=tie_break,
            )
            result = run_pipeline(params)
            status.update(label=f"Done in {time.perf_counter() - t0:0.2f}s ({source_label}).", state="complete")
            _render_result(result)

        except (FormatError, ValidationError) as err:
            status.update(label="Survey data rejected.", state="error")
            st.error(f"{type(err).__name__}: {err}")
            st.write("Fix the source file and run again.")

        except Exception as e:
            status.update(label="Unexpected error.", state="error")
            st.error("Unexpected error while running the analysis.")
            st.code(repr(e))
            st.text_area("Traceback", value=traceback.format_exc(), height=280)


def run_app() -> None:
    st.set_page_config(page_title=APP_NAME, page_icon="📊", layout="wide")
    st.title(APP_NAME)
    st.caption(f"Version {APP_VERSION}")

    _render_analysis()
