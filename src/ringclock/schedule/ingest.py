"""Schedule file ingestion: CSV and spreadsheet files to raw activity rows.

Expected layout is three columns with a header row::

    start,end,activity
    06:00,07:00,Gym
    07.30,17.00,Work
    22:00,06:00,Sleep

Header names are matched case-insensitively; the label column may be
called ``activity`` or ``label``.  Column order does not matter.  All
cells are read as text so ``06.00`` is never coerced to a float.
"""

from __future__ import annotations

import datetime as dt
import io
import logging
import math
import zipfile
from pathlib import Path
from typing import Any

import pandas as pd
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from ringclock.core.defaults import LABEL_COLUMN_ALIASES, SUPPORTED_EXTENSIONS
from ringclock.core.types import RawActivity
from ringclock.schedule.normalize import MalformedScheduleError

logger = logging.getLogger(__name__)

# What pandas and its Excel engines raise for a file that is not a readable table.
_UNREADABLE = (
    ValueError,
    KeyError,
    OSError,
    zipfile.BadZipFile,
    xlrd.XLRDError,
    InvalidFileException,
)


def _cell_text(value: Any) -> str | None:
    """Render one spreadsheet cell as the loose time/label text the normalizer expects."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.strftime("%H:%M")
    if isinstance(value, dt.time):
        return value.strftime("%H:%M")
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # Spreadsheets store 6.30 as the float 6.3.
        return f"{value:.2f}"
    text = str(value).strip()
    return text or None


def _resolve_columns(df: pd.DataFrame) -> dict[str, str]:
    lookup = {str(c).strip().lower(): c for c in df.columns}
    resolved: dict[str, str] = {}
    missing: list[str] = []
    for key in ("start", "end"):
        if key in lookup:
            resolved[key] = lookup[key]
        else:
            missing.append(key)
    label_col = next((lookup[a] for a in LABEL_COLUMN_ALIASES if a in lookup), None)
    if label_col is None:
        missing.append("/".join(LABEL_COLUMN_ALIASES))
    else:
        resolved["label"] = label_col
    if missing:
        raise MalformedScheduleError(
            f"Schedule missing required columns: {missing} (found {list(df.columns)})"
        )
    return resolved


def frame_to_rows(df: pd.DataFrame) -> list[RawActivity]:
    """Convert a loaded schedule table into :class:`RawActivity` rows.

    Rows whose three relevant cells are all blank are dropped; partially
    blank rows are kept so normalization can report them.

    Raises:
        MalformedScheduleError: If a required column is missing.
    """
    cols = _resolve_columns(df)
    rows: list[RawActivity] = []
    for record in df.to_dict(orient="records"):
        label = _cell_text(record[cols["label"]])
        start = _cell_text(record[cols["start"]])
        end = _cell_text(record[cols["end"]])
        if label is None and start is None and end is None:
            continue
        rows.append(RawActivity(label=label, start=start, end=end))
    return rows


def _read_frame(source: Path | io.BytesIO, suffix: str, display_name: str) -> pd.DataFrame:
    """Load the first table in *source*, reporting any parse failure as malformed."""
    try:
        if suffix == ".csv":
            return pd.read_csv(source, dtype=str, skipinitialspace=True, skip_blank_lines=True)
        return pd.read_excel(source, sheet_name=0, dtype=object)
    except _UNREADABLE as exc:
        raise MalformedScheduleError(f"Cannot parse {display_name}: {exc}") from exc


def _check_suffix(file_name: str) -> str:
    suffix = Path(file_name).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported schedule file type {suffix!r}; "
            f"expected one of {list(SUPPORTED_EXTENSIONS)}"
        )
    return suffix


def read_schedule_file(path: Path) -> list[RawActivity]:
    """Read a ``.csv``, ``.xlsx`` or ``.xls`` schedule from disk.

    Spreadsheets are read from their first sheet.

    Args:
        path: Schedule file path.

    Returns:
        Raw rows in file order.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the extension is unsupported.
        MalformedScheduleError: If the header lacks a required column or
            the file cannot be parsed as a table.
    """
    path = Path(path)
    suffix = _check_suffix(path.name)
    if not path.exists():
        raise FileNotFoundError(f"Schedule file not found: {path}")
    df = _read_frame(path, suffix, path.name)
    rows = frame_to_rows(df)
    logger.info("Read %d rows from file_name=%r", len(rows), path.name)
    return rows


def read_schedule_bytes(data: bytes, file_name: str) -> list[RawActivity]:
    """Read a schedule from in-memory *data*, using *file_name* to pick the format.

    Raises:
        ValueError: If the extension is unsupported.
        MalformedScheduleError: If the content cannot be parsed as a table.
    """
    suffix = _check_suffix(file_name)
    if not data:
        raise MalformedScheduleError("Uploaded schedule is empty")
    df = _read_frame(io.BytesIO(data), suffix, "upload")
    rows = frame_to_rows(df)
    logger.info("Read %d rows from uploaded file_name=%r", len(rows), file_name)
    return rows
