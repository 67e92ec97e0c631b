from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data directory (bundled sample survey lives here)
DATA_DIR = PROJECT_ROOT / "data"
SAMPLE_DATA_PATH = DATA_DIR / "sample_survey.csv"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Likert Survey Analytics"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Analysis defaults
#
# These are only defaults. Every stage takes them as explicit keyword
# arguments so the pipeline can be run against other scales.
# ---------------------------------------------------------------------------

# Value written into empty cells before validation (3 = neutral)
DEFAULT_NEUTRAL_FILL = 3

# Inclusive range every cleaned rating must fall into
DEFAULT_VALID_RANGE = (1, 5)

# Favorability transform: favorability = SCALE_CENTER - rating.
# Maps 1..5 (1 = strong like, 5 = strong dislike) onto +2..-2.
SCALE_CENTER = 3

# How ties are broken when items are ranked by a statistic:
#   "column"       -> original column order of the input file
#   "alphabetical" -> item name
DEFAULT_TIE_BREAK = "column"
TIE_BREAK_CHOICES = ("column", "alphabetical")

# |mean| within this band counts as 'neutral' in snapshots; a conditional
# mean delta within it counts as 'no_change'
SNAPSHOT_TOLERANCE = 0.1

# ---------------------------------------------------------------------------
# Logging (applied by the entry point only)
# ---------------------------------------------------------------------------

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
