from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

# Nullable integer dtype used for raw ratings (absent cells are <NA>)
RAW_DTYPE = "Int64"

# ASCII digits only
_INT_RE = re.compile(r"[+-]?[0-9]+")

Source = Union[str, Path, IO[str]]


class FormatError(Exception):
    """Raised when the survey table is malformed (header, row shape or cell syntax)."""


@dataclass(frozen=True, eq=False)
class RawTable:
    """
    Wide survey table exactly as read from the source.

    - One row per respondent, one column per item, in file order.
    - Cells are integers or <NA> (absent); no range check has happened yet.
    """
    frame: pd.DataFrame

    @property
    def items(self) -> Tuple[str, ...]:
        return tuple(str(c) for c in self.frame.columns)

    @property
    def n_respondents(self) -> int:
        return int(len(self.frame))

    @property
    def n_missing(self) -> int:
        return int(self.frame.isna().sum().sum())


# ---------------------------------------------------------------------------
# Cell / header helpers
# ---------------------------------------------------------------------------

def _parse_cell(text: str, line_no: int, item: str) -> Optional[int]:
    value = text.strip()
    if value == "":
        return None
    if not _INT_RE.fullmatch(value):
        raise FormatError(f"Line {line_no}, column '{item}': {text!r} is not an integer rating.")
    return int(value)


def _parse_header(row: Sequence[str], line_no: int) -> List[str]:
    header = [str(c).strip() for c in row]

    empty = [i + 1 for i, name in enumerate(header) if name == ""]
    if empty:
        raise FormatError(f"Line {line_no}: header has empty column name(s) at position(s) {empty}.")

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for name in header:
        seen[name] = seen.get(name, 0) + 1
        if seen[name] == 2:
            duplicates.append(name)
    if duplicates:
        raise FormatError(f"Line {line_no}: duplicate column name(s) in header: {duplicates}.")

    return header


def _is_blank_line(row: Sequence[str], header: Optional[List[str]]) -> bool:
    """
    True only for a line with no content at all.

    A header-width row of empty cells (e.g. ",," for three items) is a
    respondent who skipped every item, not a blank line.
    """
    if not row:
        return True
    if len(row) == 1 and str(row[0]).strip() == "":
        return header is None or len(header) > 1
    return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_raw_rows(rows: Iterable[Sequence[str]]) -> RawTable:
    """
    Build a RawTable from already-split rows (first non-blank row = header).

    Key behavior:
      - Column order and row order are preserved.
      - Empty cells become <NA>; other cells must be integer literals.
      - Completely blank lines are skipped; a row of empty cells is a
        respondent with every rating absent.
      - A header with no data rows is a valid, empty table.

    Raises FormatError for a missing/invalid header, ragged rows,
    or a non-integer cell. Messages carry the 1-based line number.
    """
    header: Optional[List[str]] = None
    columns: Dict[str, List[Optional[int]]] = {}

    for line_no, row in enumerate(rows, start=1):
        if _is_blank_line(row, header):
            continue

        if header is None:
            header = _parse_header(row, line_no)
            columns = {name: [] for name in header}
            continue

        if len(row) != len(header):
            raise FormatError(
                f"Line {line_no}: expected {len(header)} cells (header width), found {len(row)}."
            )

        for name, cell in zip(header, row):
            columns[name].append(_parse_cell(str(cell), line_no, name))

    if header is None:
        raise FormatError("Input has no header row (empty table).")

    frame = pd.DataFrame(
        {name: pd.array(values, dtype=RAW_DTYPE) for name, values in columns.items()},
        columns=header,
    )
    return RawTable(frame=frame)


def read_raw_table(source: Source) -> RawTable:
    """
    Read a comma-separated survey file (path or open text stream) into a RawTable.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        logger.info("Reading survey table from %s", path)
        with path.open("r", encoding="utf-8-sig", newline="") as fh:
            table = _read_stream(fh)
    else:
        logger.info("Reading survey table from stream %r", getattr(source, "name", source))
        table = _read_stream(source)

    logger.info(
        "Loaded %s respondents x %s items (%s empty cells)",
        table.n_respondents, len(table.items), table.n_missing,
    )
    return table


def _read_stream(stream: IO[str]) -> RawTable:
    try:
        return parse_raw_rows(csv.reader(stream))
    except csv.Error as exc:
        raise FormatError(f"CSV syntax error: {exc}") from exc
