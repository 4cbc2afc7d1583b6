"""Log redaction for schedule labels and uploaded file names.

Activity labels are free text typed by the user ("Therapy", "Call mum"),
and schedule files are often named after the person or the week they
describe.  Modules that mention either one log it as a ``key=value`` pair
(``file_name='week 12.csv'``); :class:`SanitizingFilter` rewrites the value
so only counts, timings and generations reach log output.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Final, Iterable

SENSITIVE_KEYS: Final[tuple[str, ...]] = (
    "label",
    "activity",
    "name",
    "file_name",
)

_REDACTED: Final[str] = "[REDACTED]"


@lru_cache(maxsize=8)
def _pattern_for(keys: tuple[str, ...]) -> re.Pattern[str]:
    # Keys only match as whole words, so "relabel=" is left alone.
    alternation = "|".join(re.escape(k) for k in sorted(keys, key=len, reverse=True))
    return re.compile(
        r"\b(?P<key>" + alternation + r")\s*[=:]\s*(?P<value>\"[^\"]*\"|'[^']*'|\S+)",
        re.IGNORECASE,
    )


def redact_message(message: str, keys: Iterable[str] = SENSITIVE_KEYS) -> str:
    """Replace the value of every sensitive ``key=value`` / ``key: value`` pair.

    Quoted values (as produced by ``%r``) are redacted whole, so file names
    containing spaces do not leak their tail.
    """
    pattern = _pattern_for(tuple(keys))
    return pattern.sub(lambda m: f"{m.group('key')}={_REDACTED}", message)


class SanitizingFilter(logging.Filter):
    """Rewrites each record's message with :func:`redact_message` applied.

    Arguments are merged into the message first, so a label passed as a
    ``%s`` argument is redacted just like one written inline.
    """

    def __init__(self, keys: Iterable[str] = SENSITIVE_KEYS) -> None:
        super().__init__()
        self.keys = tuple(keys)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage() if record.args else str(record.msg)
        record.msg = redact_message(message, self.keys)
        record.args = None
        return True


def install_sanitizing_filter(
    logger: logging.Logger | None = None,
    *,
    handler_level: bool = False,
) -> SanitizingFilter:
    """Attach a :class:`SanitizingFilter` to *logger* (the root logger by default).

    Logger filters only see records created on that exact logger, so the
    CLI passes ``handler_level=True`` to cover records propagated from
    every ``ringclock.*`` module.

    Returns:
        The installed filter, for later removal.
    """
    filt = SanitizingFilter()
    target = logger or logging.getLogger()
    if handler_level:
        for handler in target.handlers:
            handler.addFilter(filt)
    else:
        target.addFilter(filt)
    return filt
