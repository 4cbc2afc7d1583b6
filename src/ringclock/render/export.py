"""Chart and activity export: SVG, JSON, CSV, and Parquet output."""

from __future__ import annotations

import contextlib
import csv
import json
import os
import tempfile
from pathlib import Path
from typing import Sequence

import pandas as pd

from ringclock.core.defaults import LABEL_MAX_CHARS
from ringclock.core.time import format_minutes
from ringclock.core.types import NormalizedActivity
from ringclock.geometry.arc import build_chart_geometry

_COLUMNS = [
    "index", "name", "start", "end", "start_minutes", "end_minutes",
    "duration", "zone", "color", "start_angle", "end_angle", "angle_width",
    "large_arc_flag", "path", "label_x", "label_y", "label_rotation",
]


def write_text_atomic(text: str, path: Path) -> Path:
    """Write *text* to *path* atomically.

    Writes to a temporary file in the same directory first, then
    replaces the target via :func:`os.replace` so readers never see a
    partially-written file.

    Returns:
        The *path* that was written, for convenient chaining.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=path.suffix + ".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise
    return path


def write_chart_svg(svg: str, path: Path) -> Path:
    """Persist rendered chart markup to *path*."""
    return write_text_atomic(svg, path)


def activity_rows(
    activities: Sequence[NormalizedActivity],
    *,
    label_max_chars: int = LABEL_MAX_CHARS,
) -> list[dict[str, object]]:
    """Flatten activities and their geometry into table rows, in input order."""
    slices = build_chart_geometry(activities, label_max_chars=label_max_chars)
    slices.sort(key=lambda s: s.activity.index)
    rows: list[dict[str, object]] = []
    for s in slices:
        a = s.activity
        rows.append({
            "index": a.index,
            "name": a.name,
            "start": format_minutes(a.start_minutes),
            "end": format_minutes(a.end_minutes),
            "start_minutes": a.start_minutes,
            "end_minutes": a.end_minutes,
            "duration": a.duration,
            "zone": a.zone.value,
            "color": a.color,
            "start_angle": round(a.start_angle, 4),
            "end_angle": round(a.end_angle, 4),
            "angle_width": round(s.sector.angle_width, 4),
            "large_arc_flag": s.sector.large_arc_flag,
            "path": s.sector.path,
            "label_x": round(s.label.x, 3),
            "label_y": round(s.label.y, 3),
            "label_rotation": round(s.label.rotation, 4),
        })
    return rows


def export_activities_json(activities: Sequence[NormalizedActivity], path: Path) -> Path:
    """Write activities with geometry as a JSON array.

    Returns:
        The *path* that was written.
    """
    return write_text_atomic(json.dumps(activity_rows(activities), indent=2) + "\n", path)


def export_activities_csv(activities: Sequence[NormalizedActivity], path: Path) -> Path:
    """Write activities with geometry as a flat CSV, one row per activity.

    Returns:
        The *path* that was written.
    """
    rows = activity_rows(activities)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    return path


def export_activities_parquet(activities: Sequence[NormalizedActivity], path: Path) -> Path:
    """Write activities with geometry as a Parquet file.

    Schema matches :func:`export_activities_csv`.

    Returns:
        The *path* that was written.
    """
    df = pd.DataFrame(activity_rows(activities), columns=_COLUMNS)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, engine="pyarrow", index=False)
    return path


def export_activities(activities: Sequence[NormalizedActivity], path: Path) -> Path:
    """Dispatch on *path*'s suffix (``.json``, ``.csv`` or ``.parquet``).

    Raises:
        ValueError: For any other suffix.
    """
    suffix = path.suffix.lower()
    if suffix == ".json":
        return export_activities_json(activities, path)
    if suffix == ".csv":
        return export_activities_csv(activities, path)
    if suffix == ".parquet":
        return export_activities_parquet(activities, path)
    raise ValueError(f"Unsupported export format {suffix!r}; use .json, .csv or .parquet")
