"""Shared fixtures for the ringclock test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from ringclock.core.types import RawActivity


@pytest.fixture()
def sample_rows() -> list[RawActivity]:
    """Gym and work in the day, sleep across midnight."""
    return [
        RawActivity(label="Gym", start="06:00", end="07:00"),
        RawActivity(label="Work", start="07:30", end="17:00"),
        RawActivity(label="Sleep", start="22:00", end="06:00"),
    ]


@pytest.fixture()
def schedule_csv(tmp_path: Path) -> Path:
    path = tmp_path / "schedule.csv"
    path.write_text(
        "start, end, activity\n"
        "06.00, 07.00, Gym\n"
        "07.30, 17.00, Work\n"
        "22.00, 06.00, Sleep\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def malformed_csv(tmp_path: Path) -> Path:
    path = tmp_path / "broken.csv"
    path.write_text(
        "start,end,activity\n"
        "06:00,07:00,Gym\n"
        "07:30,,Work\n",
        encoding="utf-8",
    )
    return path
