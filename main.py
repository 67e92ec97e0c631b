from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure the src/ directory is on sys.path so we can import likert_survey
# (run with: streamlit run main.py)
ROOT_DIR = Path(__file__).resolve().parent
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from likert_survey.config import LOG_FORMAT, LOG_LEVEL  # type: ignore
from likert_survey.ui.app import run_app  # type: ignore


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    run_app()
