"""Interval normalization: raw schedule rows to clock-ready activities.

A batch either normalizes completely or fails as a whole; there is no
per-row skipping.  Row order is preserved and drives colour assignment.
"""

from __future__ import annotations

import math
import warnings
from typing import Any, Mapping, Sequence

from ringclock.core.defaults import MINUTES_PER_DAY, PALETTE
from ringclock.core.time import ClockTimeError, parse_clock_time
from ringclock.core.types import NormalizedActivity, RawActivity, Zone
from ringclock.geometry.arc import angle_of


class MalformedScheduleError(ValueError):
    """Raised when a schedule row is missing a value or cannot be parsed.

    ``row`` is the 0-based position of the offending row in the input
    sequence, or ``None`` when the problem is with the file layout itself
    (e.g. a missing column).
    """

    def __init__(self, message: str, row: int | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.row = row
        self.field = field


class EmptyScheduleWarning(UserWarning):
    """Emitted when a schedule contains no rows; the chart renders empty."""


def _field_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def _parse_minutes(value: str, row: int, field: str) -> int:
    try:
        return parse_clock_time(value)
    except ClockTimeError as exc:
        raise MalformedScheduleError(
            f"Row {row}: invalid {field} time ({exc})", row=row, field=field,
        ) from exc


def normalize_row(raw: RawActivity, index: int, palette: Sequence[str] = PALETTE) -> NormalizedActivity:
    """Normalize a single row at input position *index*.

    Raises:
        MalformedScheduleError: If the label, start or end is missing or a
            time cannot be parsed.
    """
    label = _field_text(raw.label)
    start = _field_text(raw.start)
    end = _field_text(raw.end)
    for field, value in (("label", label), ("start", start), ("end", end)):
        if value is None:
            raise MalformedScheduleError(
                f"Row {index}: missing {field}", row=index, field=field,
            )

    start_minutes = _parse_minutes(start, index, "start")  # type: ignore[arg-type]
    end_minutes = _parse_minutes(end, index, "end")  # type: ignore[arg-type]
    # Equal start and end means a full day, not zero length.
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY

    return NormalizedActivity(
        index=index,
        name=label,  # type: ignore[arg-type]
        start_minutes=start_minutes,
        end_minutes=end_minutes,
        duration=end_minutes - start_minutes,
        start_angle=angle_of(start_minutes),
        end_angle=angle_of(end_minutes % MINUTES_PER_DAY),
        color=palette[index % len(palette)],
    )


def normalize(
    rows: Sequence[RawActivity | Mapping[str, Any]],
    *,
    palette: Sequence[str] = PALETTE,
) -> list[NormalizedActivity]:
    """Convert raw schedule rows into :class:`NormalizedActivity` records.

    Each row's times are parsed to minutes since midnight; an end time at
    or before the start time is pushed into the next day, so ``08:00 ->
    08:00`` lasts 24 hours.  Colours cycle through *palette* by input
    position.

    Args:
        rows: Raw rows, either :class:`RawActivity` instances or mappings
            with ``label``, ``start`` and ``end`` keys.
        palette: Colours to cycle through.  Must be non-empty.

    Returns:
        One normalized activity per input row, in input order.  An empty
        input returns ``[]`` and emits :class:`EmptyScheduleWarning`.

    Raises:
        MalformedScheduleError: On the first row that is incomplete or
            unparseable.  No partial result is returned.
        ValueError: If *palette* is empty.
    """
    if not palette:
        raise ValueError("palette must contain at least one colour")
    if not rows:
        warnings.warn("Schedule contains no activities", EmptyScheduleWarning, stacklevel=2)
        return []

    activities: list[NormalizedActivity] = []
    for i, row in enumerate(rows):
        raw = row if isinstance(row, RawActivity) else _raw_from_mapping(row, i)
        activities.append(normalize_row(raw, i, palette))
    return activities


def _raw_from_mapping(row: Mapping[str, Any], index: int) -> RawActivity:
    if not isinstance(row, Mapping):
        raise MalformedScheduleError(
            f"Row {index}: expected a mapping, got {type(row).__name__}", row=index,
        )
    label = _field_text(row.get("label")) or _field_text(row.get("activity"))
    return RawActivity(
        label=label,
        start=_field_text(row.get("start")),
        end=_field_text(row.get("end")),
    )


def group_by_zone(
    activities: Sequence[NormalizedActivity],
) -> dict[Zone, list[NormalizedActivity]]:
    """Split *activities* into inner and outer lists, keeping input order in each."""
    groups: dict[Zone, list[NormalizedActivity]] = {Zone.INNER: [], Zone.OUTER: []}
    for activity in activities:
        groups[activity.zone].append(activity)
    return groups
