"""The single current-schedule cell, replaced atomically on each successful load.

Readers always see a complete :class:`ScheduleSnapshot`; a failed load
never touches the cell.  Every load takes a generation token when it
starts, and a result is only committed if no newer load has started since,
so a slow read of an old file can never overwrite a newer one.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from ringclock.core.types import NormalizedActivity, RawActivity
from ringclock.schedule.ingest import read_schedule_bytes, read_schedule_file
from ringclock.schedule.normalize import normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleSnapshot:
    """An immutable view of the loaded schedule."""

    activities: tuple[NormalizedActivity, ...] = ()
    file_name: str = ""
    generation: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.activities


@dataclass
class ScheduleStore:
    """Owner of the current :class:`ScheduleSnapshot`.

    Thread-safe: the cell and the generation counter are guarded by one
    lock, and normalization runs outside it.
    """

    _snapshot: ScheduleSnapshot = field(default_factory=ScheduleSnapshot)
    _latest_token: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def snapshot(self) -> ScheduleSnapshot:
        with self._lock:
            return self._snapshot

    def begin_load(self) -> int:
        """Reserve a token for a new load; any earlier in-flight load is superseded."""
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def commit(
        self,
        token: int,
        rows: Sequence[RawActivity],
        file_name: str,
    ) -> ScheduleSnapshot | None:
        """Normalize *rows* and install them if *token* is still the newest load.

        Returns:
            The new snapshot, or ``None`` if the load was superseded (the
            result is discarded).

        Raises:
            MalformedScheduleError: If normalization fails.  The current
                snapshot is left unchanged.
        """
        activities = normalize(rows)
        with self._lock:
            if token != self._latest_token:
                logger.info(
                    "Discarding superseded load %d (latest is %d)", token, self._latest_token,
                )
                return None
            self._snapshot = ScheduleSnapshot(
                activities=tuple(activities),
                file_name=file_name,
                generation=token,
            )
            snap = self._snapshot
        logger.info(
            "Loaded %d activities from file_name=%r (generation %d)",
            len(activities), file_name, token,
        )
        return snap

    def load_rows(self, rows: Sequence[RawActivity], file_name: str = "") -> ScheduleSnapshot:
        """Synchronously replace the schedule with *rows*."""
        token = self.begin_load()
        snap = self.commit(token, rows, file_name)
        # Only a concurrent begin_load() can supersede this call.
        return snap if snap is not None else self.snapshot

    async def load_file(self, path: Path) -> ScheduleSnapshot | None:
        """Read *path* off the event loop and commit it unless superseded."""
        token = self.begin_load()
        rows = await asyncio.to_thread(read_schedule_file, Path(path))
        return self.commit(token, rows, Path(path).name)

    async def load_bytes(self, data: bytes, file_name: str) -> ScheduleSnapshot | None:
        """Parse uploaded *data* off the event loop and commit it unless superseded."""
        token = self.begin_load()
        rows = await asyncio.to_thread(read_schedule_bytes, data, file_name)
        return self.commit(token, rows, file_name)

    def clear(self) -> None:
        """Drop the current schedule and supersede any in-flight load."""
        with self._lock:
            self._latest_token += 1
            self._snapshot = ScheduleSnapshot(generation=self._latest_token)
