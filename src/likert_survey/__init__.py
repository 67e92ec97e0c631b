"""
Likert survey analytics.

Load a wide Likert survey table, clean and validate it, pivot it to long
form, and compute per-item statistics and a conditional-mean correlation
check against one distinguished item.
"""

from likert_survey.config import APP_VERSION as __version__

__all__ = ["__version__"]
