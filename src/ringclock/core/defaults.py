"""Centralised default constants for ringclock.

Every project-wide magic number / string lives here.
Import these instead of hard-coding values in function signatures or CLI options.
"""

from __future__ import annotations

from typing import Final

# ── Clock / time ──
MINUTES_PER_HOUR: Final[int] = 60
MINUTES_PER_DAY: Final[int] = 1440
HOURS_ON_FACE: Final[int] = 12
DEGREES_PER_HOUR: Final[float] = 30.0
FACE_ROTATION_DEGREES: Final[float] = 90.0
INNER_ZONE_START_HOUR: Final[int] = 6
INNER_ZONE_END_HOUR: Final[int] = 18

# ── Chart canvas ──
CHART_SIZE: Final[int] = 500
CHART_CENTER_X: Final[float] = 250.0
CHART_CENTER_Y: Final[float] = 250.0
FULL_WIDTH_MAX: Final[str] = "90vw"
COMPACT_WIDTH_MAX: Final[str] = "60vw"

# ── Rings ──
INNER_RING_INNER_RADIUS: Final[float] = 0.0
INNER_RING_OUTER_RADIUS: Final[float] = 120.0
OUTER_RING_INNER_RADIUS: Final[float] = 130.0
OUTER_RING_OUTER_RADIUS: Final[float] = 200.0
OUTER_LABEL_POSITION: Final[float] = 0.5

# ── Clock face ──
NUMERAL_RADIUS: Final[float] = 220.0
SPOKE_RADIUS: Final[float] = 210.0
SPOKE_COLOR: Final[str] = "#cbd5e1"
NUMERAL_COLOR: Final[str] = "#334155"

# ── Labels ──
LABEL_MAX_CHARS: Final[int] = 30
LABEL_ELLIPSIS: Final[str] = "..."
LABEL_FONT_SIZE: Final[str] = "0.4rem"
LABEL_FONT_SIZE_SMALL: Final[str] = "0.3rem"
NUMERAL_FONT_SIZE: Final[str] = "0.7rem"

# ── Palette ──
PALETTE: Final[tuple[str, ...]] = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#F8C471", "#82E0AA", "#F1948A", "#85C1E9", "#D7BDE2",
)

# ── Ingestion ──
SUPPORTED_EXTENSIONS: Final[tuple[str, ...]] = (".csv", ".xlsx", ".xls")
LABEL_COLUMN_ALIASES: Final[tuple[str, ...]] = ("activity", "label")

# ── Paths ──
DEFAULT_CONFIG_DIR: Final[str] = ".ringclock"
DEFAULT_OUT_DIR: Final[str] = "artifacts"
DEFAULT_CHART_FILENAME: Final[str] = "activity-chart.svg"

# ── Server ──
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8741
