"""Display configuration persistence.

Stores chart display settings as a JSON file inside a config directory.
Missing keys fall back to defaults; the file is only written when a
setting changes.

Typical location::

    .ringclock/config.json

Usage::

    from ringclock.core.config import ChartConfig

    cfg = ChartConfig(config_dir)
    cfg.full_width            # False until toggled
    cfg.full_width = True     # persists immediately
    cfg.as_dict()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ringclock.core.defaults import DEFAULT_CONFIG_DIR, LABEL_MAX_CHARS

logger = logging.getLogger(__name__)

_CONFIG_FILENAME = "config.json"


class ChartConfig:
    """Read/write access to ``config.json`` in a config directory.

    ``full_width`` only changes how large the chart is drawn on screen;
    it never affects slice geometry.  ``label_max_chars`` is the length
    above which slice labels are truncated with an ellipsis.

    All mutations are persisted immediately.  The file is plain JSON so
    it can be hand-edited.
    """

    def __init__(self, config_dir: Path | str = DEFAULT_CONFIG_DIR) -> None:
        self._path = Path(config_dir) / _CONFIG_FILENAME
        self._data: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._path.exists():
            try:
                data = json.loads(self._path.read_text("utf-8"))
            except (json.JSONDecodeError, OSError):
                logger.warning("Corrupt config at %s, using defaults", self._path)
                return {}
            if isinstance(data, dict):
                return data
            logger.warning("Config at %s is not a JSON object, using defaults", self._path)
        return {}

    def _persist(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._data, indent=2) + "\n", "utf-8")

    # -- full_width (display toggle) -------------------------------------------

    @property
    def full_width(self) -> bool:
        return bool(self._data.get("full_width", False))

    @full_width.setter
    def full_width(self, value: bool) -> None:
        self._data["full_width"] = bool(value)
        self._persist()

    # -- label_max_chars -------------------------------------------------------

    @property
    def label_max_chars(self) -> int:
        return int(self._data.get("label_max_chars", LABEL_MAX_CHARS))

    @label_max_chars.setter
    def label_max_chars(self, value: int) -> None:
        self._data["label_max_chars"] = _check_label_max_chars(value)
        self._persist()

    # -- generic helpers -------------------------------------------------------

    def as_dict(self) -> dict[str, Any]:
        return {
            "full_width": self.full_width,
            "label_max_chars": self.label_max_chars,
        }

    def update(self, patch: dict[str, Any]) -> dict[str, Any]:
        """Merge *patch* into the config and persist.  Returns the full config.

        Unknown keys are rejected so typos do not silently persist.
        """
        unknown = set(patch) - {"full_width", "label_max_chars"}
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        if "label_max_chars" in patch:
            self._data["label_max_chars"] = _check_label_max_chars(patch["label_max_chars"])
        if "full_width" in patch:
            self._data["full_width"] = bool(patch["full_width"])
        self._persist()
        return self.as_dict()


def _check_label_max_chars(value: Any) -> int:
    n = int(value)
    if n < 1:
        raise ValueError(f"label_max_chars must be >= 1, got {n}")
    return n
