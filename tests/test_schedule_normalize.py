"""Tests for interval normalization: overnight wrap, zones, colours, batch failure."""

from __future__ import annotations

import pytest

from ringclock.core.defaults import PALETTE
from ringclock.core.types import RawActivity, Zone
from ringclock.schedule.normalize import (
    EmptyScheduleWarning,
    MalformedScheduleError,
    group_by_zone,
    normalize,
)


def _row(start: str | None, end: str | None, label: str | None = "Block") -> RawActivity:
    return RawActivity(label=label, start=start, end=end)


class TestEndToEnd:
    def test_gym_work_sleep(self, sample_rows) -> None:
        acts = normalize(sample_rows)
        assert len(acts) == 3
        gym, work, sleep = acts
        assert (gym.name, gym.zone, gym.duration) == ("Gym", Zone.INNER, 60)
        assert (work.name, work.zone, work.duration) == ("Work", Zone.INNER, 570)
        assert (sleep.name, sleep.zone, sleep.duration) == ("Sleep", Zone.OUTER, 480)
        assert sleep.start_minutes == 1320
        assert sleep.end_minutes == 1800

    def test_same_start_and_end_is_full_day(self) -> None:
        # Equal start and end is read as "all day", never as zero length.
        (act,) = normalize([_row("08:00", "08:00")])
        assert act.duration == 1440
        assert act.end_minutes == 480 + 1440
        assert act.zone is Zone.INNER

    def test_missing_end_rejects_whole_batch(self) -> None:
        rows = [_row("06:00", "07:00"), _row("07:30", None, label="Work")]
        with pytest.raises(MalformedScheduleError) as excinfo:
            normalize(rows)
        assert excinfo.value.row == 1
        assert excinfo.value.field == "end"


class TestOvernight:
    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            ("22:00", "06:00", 480),
            ("23:30", "00:00", 30),
            ("18:00", "17:59", 1439),
            ("00:00", "00:00", 1440),
        ],
    )
    def test_duration_wraps_into_next_day(self, start: str, end: str, expected: int) -> None:
        (act,) = normalize([_row(start, end)])
        assert act.duration == expected
        assert act.start_minutes < act.end_minutes <= act.start_minutes + 1440

    def test_end_angle_uses_wall_clock_end(self) -> None:
        (act,) = normalize([_row("22:00", "06:00")])
        assert act.start_angle == pytest.approx(210.0)
        assert act.end_angle == pytest.approx(90.0)

    def test_same_day_interval_not_shifted(self) -> None:
        (act,) = normalize([_row("06:30", "07:15")])
        assert act.end_minutes == 435
        assert act.duration == 45


class TestZoneAssignment:
    @pytest.mark.parametrize(
        ("start", "zone"),
        [("06:00", Zone.INNER), ("17:59", Zone.INNER), ("18:00", Zone.OUTER), ("05:59", Zone.OUTER)],
    )
    def test_start_hour_decides(self, start: str, zone: Zone) -> None:
        (act,) = normalize([_row(start, "23:30")])
        assert act.zone is zone

    def test_long_evening_block_stays_outer(self) -> None:
        (act,) = normalize([_row("18:00", "12:00")])
        assert act.zone is Zone.OUTER


class TestColours:
    def test_palette_by_input_position(self) -> None:
        rows = [_row("06:00", "07:00", label=f"A{i}") for i in range(len(PALETTE) + 2)]
        acts = normalize(rows)
        assert len(acts) == len(rows)
        for i, act in enumerate(acts):
            assert act.color == PALETTE[i % len(PALETTE)]
            assert act.index == i

    def test_custom_palette(self) -> None:
        acts = normalize([_row("06:00", "07:00"), _row("07:00", "08:00")], palette=["#000"])
        assert [a.color for a in acts] == ["#000", "#000"]

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(ValueError, match="palette"):
            normalize([_row("06:00", "07:00")], palette=[])


class TestMalformedRows:
    @pytest.mark.parametrize("field", ["label", "start", "end"])
    def test_missing_field(self, field: str) -> None:
        values = {"label": "Gym", "start": "06:00", "end": "07:00", field: None}
        with pytest.raises(MalformedScheduleError, match=f"missing {field}") as excinfo:
            normalize([RawActivity(**values)])
        assert excinfo.value.row == 0
        assert excinfo.value.field == field

    def test_blank_string_counts_as_missing(self) -> None:
        with pytest.raises(MalformedScheduleError, match="missing label"):
            normalize([_row("06:00", "07:00", label="   ")])

    def test_unparseable_time_reports_position(self) -> None:
        rows = [_row("06:00", "07:00"), _row("07:00", "08:00"), _row("noon", "13:00")]
        with pytest.raises(MalformedScheduleError) as excinfo:
            normalize(rows)
        assert excinfo.value.row == 2
        assert excinfo.value.field == "start"

    def test_out_of_range_time_rejected(self) -> None:
        with pytest.raises(MalformedScheduleError, match="out of range"):
            normalize([_row("25:00", "07:00")])

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            normalize([_row(None, "07:00")])


class TestInputs:
    def test_accepts_mappings(self) -> None:
        acts = normalize([
            {"activity": "Gym", "start": "06.00", "end": "07.00"},
            {"label": "Work", "start": "07:30", "end": "17:00"},
        ])
        assert [a.name for a in acts] == ["Gym", "Work"]

    def test_blank_label_key_falls_back_to_activity(self) -> None:
        (act,) = normalize([{"label": None, "activity": "Gym", "start": "06:00", "end": "07:00"}])
        assert act.name == "Gym"

    def test_mapping_without_any_label_rejected(self) -> None:
        with pytest.raises(MalformedScheduleError, match="missing label"):
            normalize([{"label": "  ", "start": "06:00", "end": "07:00"}])

    def test_order_preserved(self, sample_rows) -> None:
        acts = normalize(list(reversed(sample_rows)))
        assert [a.name for a in acts] == ["Sleep", "Work", "Gym"]

    def test_empty_batch_warns_and_returns_empty(self) -> None:
        with pytest.warns(EmptyScheduleWarning):
            assert normalize([]) == []


class TestGroupByZone:
    def test_stable_groups(self) -> None:
        rows = [
            _row("22:00", "06:00", label="Sleep"),
            _row("06:00", "07:00", label="Gym"),
            _row("19:00", "20:00", label="Dinner"),
            _row("07:30", "17:00", label="Work"),
        ]
        groups = group_by_zone(normalize(rows))
        assert [a.name for a in groups[Zone.INNER]] == ["Gym", "Work"]
        assert [a.name for a in groups[Zone.OUTER]] == ["Sleep", "Dinner"]

    def test_both_keys_present_when_empty(self) -> None:
        groups = group_by_zone([])
        assert groups == {Zone.INNER: [], Zone.OUTER: []}
