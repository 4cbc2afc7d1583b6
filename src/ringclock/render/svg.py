"""SVG document assembly for the dual-ring activity clock."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence
from xml.sax.saxutils import escape, quoteattr

from ringclock.core.defaults import (
    CHART_CENTER_X,
    CHART_CENTER_Y,
    CHART_SIZE,
    COMPACT_WIDTH_MAX,
    FULL_WIDTH_MAX,
    HOURS_ON_FACE,
    LABEL_MAX_CHARS,
    MINUTES_PER_HOUR,
    NUMERAL_COLOR,
    NUMERAL_FONT_SIZE,
    NUMERAL_RADIUS,
    SPOKE_COLOR,
    SPOKE_RADIUS,
)
from ringclock.core.types import NormalizedActivity
from ringclock.geometry.arc import SliceGeometry, build_chart_geometry

_LEGEND_ROW_HEIGHT = 20
_LEGEND_COLUMNS = 2
_LEGEND_PADDING = 10


@dataclass(frozen=True)
class LegendEntry:
    name: str
    color: str
    hours: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def legend_entries(activities: Sequence[NormalizedActivity]) -> list[LegendEntry]:
    """One legend entry per activity, in input order, with whole-hour durations."""
    return [
        LegendEntry(
            name=a.name,
            color=a.color,
            hours=_round_half_up(a.duration / MINUTES_PER_HOUR),
        )
        for a in activities
    ]


def _f(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def _clock_face() -> list[str]:
    out = ['<g class="clock-face">']
    for i in range(1, HOURS_ON_FACE + 1):
        rad = math.radians(i * 30 - 90)
        x = CHART_CENTER_X + NUMERAL_RADIUS * math.cos(rad)
        y = CHART_CENTER_Y + NUMERAL_RADIUS * math.sin(rad)
        lx = CHART_CENTER_X + SPOKE_RADIUS * math.cos(rad)
        ly = CHART_CENTER_Y + SPOKE_RADIUS * math.sin(rad)
        out.append(
            f'<line x1="{_f(CHART_CENTER_X)}" y1="{_f(CHART_CENTER_Y)}" '
            f'x2="{_f(lx)}" y2="{_f(ly)}" stroke="{SPOKE_COLOR}" stroke-width="1"/>'
        )
        out.append(
            f'<text x="{_f(x)}" y="{_f(y)}" text-anchor="middle" dominant-baseline="central" '
            f'font-size="{NUMERAL_FONT_SIZE}" font-weight="bold" fill="{NUMERAL_COLOR}">{i}</text>'
        )
    out.append("</g>")
    return out


def _slice(geom: SliceGeometry) -> list[str]:
    act, label = geom.activity, geom.label
    return [
        f'<g class="slice slice-{act.zone.value}" data-index="{act.index}">',
        f'<path d="{geom.sector.path}" fill={quoteattr(act.color)} stroke="white" stroke-width="0.5"/>',
        (
            f'<text x="{_f(label.x)}" y="{_f(label.y)}" text-anchor="middle" '
            f'dominant-baseline="middle" font-size="{label.font_size}" fill="black" '
            f'transform="rotate({_f(label.rotation)}, {_f(label.x)}, {_f(label.y)})">'
            f"{escape(label.text)}</text>"
        ),
        "</g>",
    ]


def _legend(entries: Sequence[LegendEntry], top: float) -> list[str]:
    col_width = CHART_SIZE / _LEGEND_COLUMNS
    out = ['<g class="legend">']
    for i, entry in enumerate(entries):
        row, col = divmod(i, _LEGEND_COLUMNS)
        x = col * col_width + _LEGEND_PADDING
        y = top + row * _LEGEND_ROW_HEIGHT
        out.append(f'<rect x="{_f(x)}" y="{_f(y)}" width="12" height="12" rx="2" fill={quoteattr(entry.color)}/>')
        out.append(
            f'<text x="{_f(x + 18)}" y="{_f(y + 10)}" font-size="0.6rem" fill="black">'
            f"{escape(entry.name)} ({entry.hours}h)</text>"
        )
    out.append("</g>")
    return out


def render_chart_svg(
    activities: Sequence[NormalizedActivity],
    *,
    full_width: bool = False,
    legend: bool = True,
    label_max_chars: int = LABEL_MAX_CHARS,
) -> str:
    """Render *activities* as a standalone SVG document.

    Inner-ring slices are drawn before outer-ring slices.  ``full_width``
    only changes the root element's ``max-width`` style; paths are the
    same either way.  An empty schedule renders the bare clock face with
    a placeholder caption.

    Args:
        activities: Normalized activities in input order.
        full_width: Let the chart grow to 90% of the viewport instead of 60%.
        legend: Append a colour legend below the clock face.
        label_max_chars: Length above which slice labels are truncated.

    Returns:
        SVG markup as a string.
    """
    slices = build_chart_geometry(activities, label_max_chars=label_max_chars)
    entries = legend_entries(activities) if legend else []
    legend_rows = math.ceil(len(entries) / _LEGEND_COLUMNS)
    height = CHART_SIZE + (legend_rows * _LEGEND_ROW_HEIGHT + _LEGEND_PADDING if legend_rows else 0)
    max_width = FULL_WIDTH_MAX if full_width else COMPACT_WIDTH_MAX

    svg = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {CHART_SIZE} {height}" '
        f'width="100%" style="max-width: {max_width}; height: auto; display: block">',
        '<rect x="0" y="0" width="100%" height="100%" fill="#ffffff"/>',
    ]
    svg.extend(_clock_face())
    if not slices:
        svg.append(
            f'<text x="{_f(CHART_CENTER_X)}" y="{_f(CHART_CENTER_Y)}" text-anchor="middle" '
            f'dominant-baseline="middle" font-size="0.8rem" fill="#64748b">No activities</text>'
        )
    for geom in slices:
        svg.extend(_slice(geom))
    if entries:
        svg.extend(_legend(entries, CHART_SIZE))
    svg.append("</svg>")
    return "\n".join(svg)
