"""Wall-clock string parsing and formatting.

Schedule times carry no date, no AM/PM marker and no timezone; they are
read on a plain 24-hour clock.  Either ``:`` or ``.`` separates hours from
minutes (``"06:00"``, ``"6.30"``, ``"22"``).
"""

from __future__ import annotations

import re
from typing import Final

from ringclock.core.defaults import MINUTES_PER_DAY, MINUTES_PER_HOUR

_SEPARATOR: Final[re.Pattern[str]] = re.compile(r"[:.]")
_LEADING_DIGITS: Final[re.Pattern[str]] = re.compile(r"\s*(\d+)")


class ClockTimeError(ValueError):
    """Raised when a string cannot be read as a 24-hour wall-clock time."""


def parse_clock_time(text: str) -> int:
    """Convert a wall-clock string to minutes since midnight.

    The string is split on the first ``:`` or ``.``.  The left part must be
    an integer hour in 0-23.  The right part contributes minutes from its
    leading digits (so ``"06:30:00"`` reads as 06:30); when it is absent or
    has no leading digits the minutes default to 0.  Minutes above 59 are
    rejected.

    Args:
        text: Raw time string, e.g. ``"06:00"``, ``"6.30"``, ``" 22 "``.

    Returns:
        Minutes since midnight in ``[0, 1440)``.

    Raises:
        ClockTimeError: If the hour part is not an integer, or either part
            is out of range.
    """
    parts = _SEPARATOR.split(text.strip(), maxsplit=1)
    hour_text = parts[0].strip()
    try:
        hours = int(hour_text)
    except ValueError:
        raise ClockTimeError(f"Cannot read hour from {text!r}") from None

    minutes = 0
    if len(parts) > 1:
        m = _LEADING_DIGITS.match(parts[1])
        if m is not None:
            minutes = int(m.group(1))

    if not 0 <= hours <= 23:
        raise ClockTimeError(f"Hour out of range (0-23) in {text!r}")
    if not 0 <= minutes <= 59:
        raise ClockTimeError(f"Minute out of range (0-59) in {text!r}")
    return hours * MINUTES_PER_HOUR + minutes


def format_minutes(minutes: int) -> str:
    """Render *minutes* since midnight as ``HH:MM``, wrapping past 24 h."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // MINUTES_PER_HOUR:02d}:{minutes % MINUTES_PER_HOUR:02d}"
