"""Core data contracts: raw schedule rows, normalized activities, and ring zones."""

from __future__ import annotations

import math
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field, model_validator

from ringclock.core.defaults import (
    INNER_ZONE_END_HOUR,
    INNER_ZONE_START_HOUR,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
)


class Zone(StrEnum):
    """Which concentric ring an activity is drawn on.

    ``INNER`` holds activities that start between 06:00 and 17:59;
    everything else goes on the ``OUTER`` ring.
    """

    INNER = "inner"
    OUTER = "outer"


def zone_for_minutes(start_minutes: int) -> Zone:
    """Return the ring for an activity starting at *start_minutes* past midnight.

    Only the start hour matters -- end time and duration never move an
    activity between rings.
    """
    hour = (start_minutes // MINUTES_PER_HOUR) % 24
    if INNER_ZONE_START_HOUR <= hour < INNER_ZONE_END_HOUR:
        return Zone.INNER
    return Zone.OUTER


class RawActivity(BaseModel, frozen=True):
    """One schedule row as handed over by the ingestion layer.

    Values are kept as loosely-formatted strings (``"06:00"``, ``"6.30"``);
    ``None`` marks a blank cell so the normalizer can report it.
    """

    label: str | None = Field(default=None, description="Free-text activity name.")
    start: str | None = Field(default=None, description="Wall-clock start, e.g. '06:00' or '6.30'.")
    end: str | None = Field(default=None, description="Wall-clock end, e.g. '07:00' or '7.00'.")


class RingRadii(BaseModel, frozen=True):
    """Inner and outer radius of one annular band."""

    inner: float = Field(ge=0.0)
    outer: float = Field(gt=0.0)

    @model_validator(mode="after")
    def _check_order(self) -> RingRadii:
        if self.inner > self.outer:
            raise ValueError(
                f"inner radius ({self.inner}) must not exceed outer radius ({self.outer})"
            )
        return self


class NormalizedActivity(BaseModel, frozen=True):
    """A schedule row resolved to absolute minutes, clock angles and a colour.

    ``end_minutes`` is shifted by a full day when the raw end time is not
    after the start time, so it always lies in
    ``(start_minutes, start_minutes + 1440]``.  ``zone`` is not stored; it
    is recomputed from ``start_minutes`` on every access so the two can
    never disagree.

    ``end_angle`` is the clock angle of ``end_minutes mod 1440`` and may be
    numerically <= ``start_angle``; the geometry engine corrects for that.
    """

    index: int = Field(ge=0, description="0-based position of the source row.")
    name: str = Field(description="Activity label.")
    start_minutes: int = Field(ge=0, lt=MINUTES_PER_DAY, description="Minutes since midnight.")
    end_minutes: int = Field(description="Minutes since midnight, +1440 for overnight rows.")
    duration: int = Field(gt=0, le=MINUTES_PER_DAY, description="end_minutes - start_minutes.")
    start_angle: float = Field(ge=0.0, lt=360.0, description="Clock angle of the start, degrees.")
    end_angle: float = Field(ge=0.0, lt=360.0, description="Clock angle of the end, degrees.")
    color: str = Field(description="Fill colour picked from the palette by input order.")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def zone(self) -> Zone:
        return zone_for_minutes(self.start_minutes)

    @model_validator(mode="after")
    def _check_invariants(self) -> NormalizedActivity:
        if self.end_minutes - self.start_minutes != self.duration:
            raise ValueError(
                f"duration ({self.duration}) must equal end_minutes - start_minutes "
                f"({self.end_minutes} - {self.start_minutes})"
            )
        if not (math.isfinite(self.start_angle) and math.isfinite(self.end_angle)):
            raise ValueError("angles must be finite")
        return self
