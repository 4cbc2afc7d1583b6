"""Time-to-geometry transform: clock angles, annular sectors and label anchors.

The chart uses a 12-hour analog face shared by both halves of the day:
06:00 and 18:00 land on the same angle and are told apart by ring
(inner vs outer), not by position.  Angles are in degrees, measured
clockwise in SVG screen coordinates with 0 deg pointing right, so the
12-o'clock position sits at 270 deg.

Every function here is pure.  Callers recompute paths from the current
activity list on each render instead of caching them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, Mapping, Sequence

from ringclock.core.defaults import (
    CHART_CENTER_X,
    CHART_CENTER_Y,
    DEGREES_PER_HOUR,
    FACE_ROTATION_DEGREES,
    HOURS_ON_FACE,
    INNER_RING_INNER_RADIUS,
    INNER_RING_OUTER_RADIUS,
    LABEL_ELLIPSIS,
    LABEL_FONT_SIZE,
    LABEL_FONT_SIZE_SMALL,
    LABEL_MAX_CHARS,
    MINUTES_PER_HOUR,
    OUTER_LABEL_POSITION,
    OUTER_RING_INNER_RADIUS,
    OUTER_RING_OUTER_RADIUS,
)
from ringclock.core.types import NormalizedActivity, RingRadii, Zone

ZONE_RADII: Final[Mapping[Zone, RingRadii]] = {
    Zone.INNER: RingRadii(inner=INNER_RING_INNER_RADIUS, outer=INNER_RING_OUTER_RADIUS),
    Zone.OUTER: RingRadii(inner=OUTER_RING_INNER_RADIUS, outer=OUTER_RING_OUTER_RADIUS),
}

# Minutes for one full lap of the 12-hour face.
_LAP_MINUTES: Final[int] = HOURS_ON_FACE * MINUTES_PER_HOUR


@dataclass(frozen=True)
class SectorGeometry:
    """A closed annular-sector path plus the angles it was built from."""

    path: str
    start_angle: float
    end_angle: float
    angle_width: float
    large_arc_flag: int
    wraps: bool


@dataclass(frozen=True)
class LabelPlacement:
    """Where and how a slice label is drawn."""

    x: float
    y: float
    rotation: float
    mid_angle: float
    text: str
    font_size: str


@dataclass(frozen=True)
class SliceGeometry:
    """Everything needed to draw one activity with no further derivation."""

    activity: NormalizedActivity
    radii: RingRadii
    sector: SectorGeometry
    label: LabelPlacement


def angle_of(minutes: int) -> float:
    """Map *minutes* since midnight to a clock angle in ``[0, 360)``.

    Hours are folded onto a 12-hour face (30 deg per hour, 0.5 deg per
    minute) and the result is rotated by -90 deg so that 12 o'clock points
    up on screen.  Midnight and noon therefore both map to 270 deg.

    Raises:
        ValueError: If *minutes* is not finite.
    """
    if not math.isfinite(minutes):
        raise ValueError(f"minutes must be finite, got {minutes!r}")
    h = (minutes // MINUTES_PER_HOUR) % HOURS_ON_FACE
    m = minutes % MINUTES_PER_HOUR
    angle = h * DEGREES_PER_HOUR + (m / MINUTES_PER_HOUR) * DEGREES_PER_HOUR
    return (angle - FACE_ROTATION_DEGREES + 360.0) % 360.0


def _point(cx: float, cy: float, r: float, degrees: float) -> tuple[float, float]:
    rad = math.radians(degrees)
    return cx + r * math.cos(rad), cy + r * math.sin(rad)


def _num(value: float) -> str:
    """Format a coordinate compactly: at most three decimals, no ``-0``."""
    value = round(value, 3)
    if value == 0:
        return "0"
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text


def _xy(point: tuple[float, float]) -> str:
    return f"{_num(point[0])} {_num(point[1])}"


def annular_sector(
    start_angle: float,
    end_angle: float,
    radii: RingRadii,
    *,
    center_x: float = CHART_CENTER_X,
    center_y: float = CHART_CENTER_Y,
    duration: int | None = None,
) -> SectorGeometry:
    """Build the SVG path of an annular sector running clockwise.

    When ``end_angle - start_angle <= 0`` the span crosses the 0 deg
    boundary: 360 is added to the width and to the end angle used for the
    corner points (``start_angle`` is left alone).  Spans wider than
    180 deg set the large-arc flag so the major arc is drawn.

    A span of a full lap (360 deg) cannot be expressed by a single SVG arc
    whose endpoints coincide, so it is emitted as two half-arcs through the
    opposite point.

    Args:
        start_angle: Clock angle of the start, degrees in ``[0, 360)``.
        end_angle: Clock angle of the end, degrees in ``[0, 360)``.
        radii: Ring band to draw in.
        center_x: Chart centre x.
        center_y: Chart centre y.
        duration: Activity length in minutes, when known.  Activities of
            12 hours or more cover the whole face and are drawn as a full
            ring regardless of the angle difference.

    Returns:
        The path and the corrected angular extent.

    Raises:
        ValueError: If either angle is not finite.
    """
    if not (math.isfinite(start_angle) and math.isfinite(end_angle)):
        raise ValueError(f"angles must be finite, got {start_angle!r}, {end_angle!r}")

    angle_width = end_angle - start_angle
    wraps = angle_width <= 0
    if wraps:
        angle_width += 360.0
    if duration is not None and duration >= _LAP_MINUTES:
        angle_width = 360.0
    sweep_end = start_angle + angle_width

    large_arc_flag = 1 if angle_width > 180 else 0
    r_out, r_in = radii.outer, radii.inner
    cx, cy = center_x, center_y

    outer_start = _point(cx, cy, r_out, start_angle)
    outer_end = _point(cx, cy, r_out, sweep_end)
    inner_end = _point(cx, cy, r_in, sweep_end)
    inner_start = _point(cx, cy, r_in, start_angle)

    if angle_width >= 360.0:
        half = start_angle + 180.0
        outer_half = _point(cx, cy, r_out, half)
        inner_half = _point(cx, cy, r_in, half)
        commands = [
            f"M {_xy(outer_start)}",
            f"A {_num(r_out)} {_num(r_out)} 0 0 1 {_xy(outer_half)}",
            f"A {_num(r_out)} {_num(r_out)} 0 0 1 {_xy(outer_end)}",
            f"L {_xy(inner_end)}",
            f"A {_num(r_in)} {_num(r_in)} 0 0 0 {_xy(inner_half)}",
            f"A {_num(r_in)} {_num(r_in)} 0 0 0 {_xy(inner_start)}",
            "Z",
        ]
    else:
        commands = [
            f"M {_xy(outer_start)}",
            f"A {_num(r_out)} {_num(r_out)} 0 {large_arc_flag} 1 {_xy(outer_end)}",
            f"L {_xy(inner_end)}",
            f"A {_num(r_in)} {_num(r_in)} 0 {large_arc_flag} 0 {_xy(inner_start)}",
            "Z",
        ]

    return SectorGeometry(
        path=" ".join(commands),
        start_angle=start_angle,
        end_angle=end_angle,
        angle_width=angle_width,
        large_arc_flag=large_arc_flag,
        wraps=wraps,
    )


def truncate_label(name: str, max_chars: int = LABEL_MAX_CHARS) -> str:
    """Cut *name* to *max_chars* characters plus an ellipsis when it is longer."""
    if len(name) > max_chars:
        return name[:max_chars] + LABEL_ELLIPSIS
    return name


def label_radius(zone: Zone, radii: RingRadii) -> float:
    """Radial distance of the label anchor for a slice in *zone*."""
    if zone is Zone.OUTER:
        return radii.inner + (radii.outer - radii.inner) * OUTER_LABEL_POSITION
    return (radii.outer + radii.inner) / 2


def label_placement(
    name: str,
    zone: Zone,
    sector: SectorGeometry,
    radii: RingRadii,
    *,
    center_x: float = CHART_CENTER_X,
    center_y: float = CHART_CENTER_Y,
    max_chars: int = LABEL_MAX_CHARS,
) -> LabelPlacement:
    """Anchor a label at the angular middle of *sector*.

    Text is rotated to follow the radius.  On the left half of the face
    (mid angle strictly between 90 and 270 deg) it is turned a further
    180 deg so it never reads upside down.
    """
    mid_angle = (sector.start_angle + sector.angle_width / 2) % 360.0
    x, y = _point(center_x, center_y, label_radius(zone, radii), mid_angle)
    rotation = mid_angle + 180.0 if 90.0 < mid_angle < 270.0 else mid_angle
    font_size = LABEL_FONT_SIZE_SMALL if len(name) > max_chars else LABEL_FONT_SIZE
    return LabelPlacement(
        x=x,
        y=y,
        rotation=rotation,
        mid_angle=mid_angle,
        text=truncate_label(name, max_chars),
        font_size=font_size,
    )


def check_ring_layout(radii_map: Mapping[Zone, RingRadii]) -> None:
    """Ensure both zones are present and the inner ring sits inside the outer one.

    Raises:
        ValueError: If a zone is missing or the bands overlap.
    """
    missing = set(Zone) - set(radii_map)
    if missing:
        raise ValueError(f"Missing radii for zones: {sorted(missing)}")
    inner, outer = radii_map[Zone.INNER], radii_map[Zone.OUTER]
    if inner.outer > outer.inner:
        raise ValueError(
            f"Inner ring outer radius ({inner.outer}) must not exceed "
            f"outer ring inner radius ({outer.inner})"
        )


def build_slice(
    activity: NormalizedActivity,
    *,
    radii_map: Mapping[Zone, RingRadii] = ZONE_RADII,
    center_x: float = CHART_CENTER_X,
    center_y: float = CHART_CENTER_Y,
    label_max_chars: int = LABEL_MAX_CHARS,
) -> SliceGeometry:
    """Compute the sector path and label placement for one activity."""
    zone = activity.zone
    radii = radii_map[zone]
    sector = annular_sector(
        activity.start_angle,
        activity.end_angle,
        radii,
        center_x=center_x,
        center_y=center_y,
        duration=activity.duration,
    )
    label = label_placement(
        activity.name,
        zone,
        sector,
        radii,
        center_x=center_x,
        center_y=center_y,
        max_chars=label_max_chars,
    )
    return SliceGeometry(activity=activity, radii=radii, sector=sector, label=label)


def build_chart_geometry(
    activities: Sequence[NormalizedActivity],
    *,
    radii_map: Mapping[Zone, RingRadii] = ZONE_RADII,
    center_x: float = CHART_CENTER_X,
    center_y: float = CHART_CENTER_Y,
    label_max_chars: int = LABEL_MAX_CHARS,
) -> list[SliceGeometry]:
    """Build slices for every activity in draw order.

    Inner-ring slices come first, then outer-ring slices; within each ring
    the input order is kept.

    Raises:
        ValueError: If *radii_map* is incomplete or the rings overlap.
    """
    check_ring_layout(radii_map)
    ordered = sorted(activities, key=lambda a: a.zone is not Zone.INNER)
    return [
        build_slice(
            a,
            radii_map=radii_map,
            center_x=center_x,
            center_y=center_y,
            label_max_chars=label_max_chars,
        )
        for a in ordered
    ]
