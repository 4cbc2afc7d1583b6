"""Soft checks over a normalized schedule: overlaps, over-full days, palette reuse.

None of these block rendering -- overlapping activities are drawn on top of
each other, and a schedule may legitimately cover more than 24 hours of
activity -- but callers may want to surface them.
"""

from __future__ import annotations

from enum import StrEnum
from itertools import combinations
from typing import Any, Sequence

from pydantic import BaseModel

from ringclock.core.defaults import MINUTES_PER_DAY, PALETTE
from ringclock.core.time import format_minutes
from ringclock.core.types import NormalizedActivity


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class Finding(BaseModel, frozen=True):
    severity: Severity
    check: str
    rows: tuple[int, ...] = ()
    message: str
    detail: Any = None


class ValidationReport(BaseModel):
    """Collects all findings from :func:`validate_schedule`."""

    findings: list[Finding] = []

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


def overlap_minutes(a: NormalizedActivity, b: NormalizedActivity) -> int:
    """Minutes shared by *a* and *b* on a repeating 24-hour day."""
    total = 0
    for shift in (-MINUTES_PER_DAY, 0, MINUTES_PER_DAY):
        lo = max(a.start_minutes, b.start_minutes + shift)
        hi = min(a.end_minutes, b.end_minutes + shift)
        if hi > lo:
            total += hi - lo
    return total


def validate_schedule(
    activities: Sequence[NormalizedActivity],
    *,
    palette: Sequence[str] = PALETTE,
) -> ValidationReport:
    """Run soft checks on a normalized schedule.

    Warnings:
        * Pairs of activities that overlap in time.
        * Total scheduled time exceeding 24 hours.
        * More activities than palette colours (colours repeat).

    Args:
        activities: Output of :func:`~ringclock.schedule.normalize.normalize`.
        palette: Palette the colours were drawn from.

    Returns:
        A :class:`ValidationReport`; ``ok`` is always ``True`` because
        every finding here is a warning.
    """
    report = ValidationReport()
    if not activities:
        report.findings.append(Finding(
            severity=Severity.WARNING,
            check="empty_schedule",
            message="Schedule is empty; nothing to draw.",
        ))
        return report

    for a, b in combinations(activities, 2):
        shared = overlap_minutes(a, b)
        if shared > 0:
            report.findings.append(Finding(
                severity=Severity.WARNING,
                check="overlap",
                rows=(a.index, b.index),
                message=(
                    f"Rows {a.index} ({format_minutes(a.start_minutes)}-"
                    f"{format_minutes(a.end_minutes)}) and {b.index} "
                    f"({format_minutes(b.start_minutes)}-{format_minutes(b.end_minutes)}) "
                    f"overlap by {shared} min"
                ),
                detail={"minutes": shared},
            ))

    total = sum(a.duration for a in activities)
    if total > MINUTES_PER_DAY:
        report.findings.append(Finding(
            severity=Severity.WARNING,
            check="over_full_day",
            message=f"Activities add up to {total} min, more than a 24-hour day.",
            detail={"minutes": total},
        ))

    if len(activities) > len(palette):
        report.findings.append(Finding(
            severity=Severity.WARNING,
            check="palette_reuse",
            rows=tuple(a.index for a in activities[len(palette):]),
            message=(
                f"{len(activities)} activities but only {len(palette)} colours; "
                "colours repeat."
            ),
        ))

    return report
