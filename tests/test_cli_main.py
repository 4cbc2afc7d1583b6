"""End-to-end CLI tests for ringclock commands.

Tests invoke the Typer CLI via CliRunner against schedule files in temp
directories and verify exit codes, printed summaries, and written files.
"""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from ringclock.cli.main import app

runner = CliRunner()


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------

class TestRender:
    def test_writes_svg(self, schedule_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "out" / "chart.svg"
        result = runner.invoke(app, [
            "render", "--file", str(schedule_csv), "--out", str(out),
            "--config-dir", str(tmp_path / "cfg"),
        ])
        assert result.exit_code == 0, result.output
        assert "Processed 3 activities" in result.output
        svg = out.read_text(encoding="utf-8")
        assert svg.startswith("<svg")
        assert svg.count("<path") == 3
        assert "max-width: 60vw" in svg

    def test_full_width_flag_overrides_config(self, schedule_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "chart.svg"
        result = runner.invoke(app, [
            "render", "--file", str(schedule_csv), "--out", str(out),
            "--full-width", "--config-dir", str(tmp_path / "cfg"),
        ])
        assert result.exit_code == 0, result.output
        assert "max-width: 90vw" in out.read_text(encoding="utf-8")

    def test_uses_saved_full_width(self, schedule_csv: Path, tmp_path: Path) -> None:
        cfg_dir = tmp_path / "cfg"
        runner.invoke(app, ["config", "set", "--full-width", "--config-dir", str(cfg_dir)])
        out = tmp_path / "chart.svg"
        result = runner.invoke(app, [
            "render", "--file", str(schedule_csv), "--out", str(out),
            "--config-dir", str(cfg_dir),
        ])
        assert result.exit_code == 0, result.output
        assert "max-width: 90vw" in out.read_text(encoding="utf-8")

    def test_malformed_file_exits_1(self, malformed_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "chart.svg"
        result = runner.invoke(app, ["render", "--file", str(malformed_csv), "--out", str(out)])
        assert result.exit_code == 1
        assert "Error parsing broken.csv" in result.output
        assert "missing end" in result.output
        assert not out.exists()

    def test_corrupt_spreadsheet_exits_1(self, tmp_path: Path) -> None:
        src = tmp_path / "day.xlsx"
        src.write_bytes(b"PK\x03\x04" + b"\x00" * 200)
        result = runner.invoke(app, ["render", "--file", str(src), "--out", str(tmp_path / "chart.svg")])
        assert result.exit_code == 1
        assert "Error parsing day.xlsx" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_missing_file_exits_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["render", "--file", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_header_only_file_renders_placeholder(self, tmp_path: Path) -> None:
        src = tmp_path / "empty.csv"
        src.write_text("start,end,activity\n", encoding="utf-8")
        out = tmp_path / "chart.svg"
        result = runner.invoke(app, [
            "render", "--file", str(src), "--out", str(out),
            "--config-dir", str(tmp_path / "cfg"),
        ])
        assert result.exit_code == 0, result.output
        assert "No activities found in empty.csv" in result.output
        assert "No activities" in out.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# show / export / validate
# ---------------------------------------------------------------------------

class TestShow:
    def test_groups_by_ring(self, schedule_csv: Path) -> None:
        result = runner.invoke(app, ["show", "--file", str(schedule_csv)])
        assert result.exit_code == 0, result.output
        assert "Inner ring (06:00-18:00): 2" in result.output
        assert "Outer ring (18:00-06:00): 1" in result.output
        assert "[2] 22:00-06:00" in result.output
        assert "Sleep" in result.output


class TestExport:
    def test_json(self, schedule_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "acts.json"
        result = runner.invoke(app, ["export", "--file", str(schedule_csv), "--out", str(out)])
        assert result.exit_code == 0, result.output
        assert "Exported 3 activities" in result.output
        data = json.loads(out.read_text())
        assert [d["name"] for d in data] == ["Gym", "Work", "Sleep"]

    def test_unsupported_suffix_exits_1(self, schedule_csv: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["export", "--file", str(schedule_csv), "--out", str(tmp_path / "a.txt")])
        assert result.exit_code == 1
        assert "Unsupported export format" in result.output


class TestValidate:
    def test_clean_schedule(self, schedule_csv: Path) -> None:
        result = runner.invoke(app, ["validate", "--file", str(schedule_csv)])
        assert result.exit_code == 0, result.output
        assert "3 activities, 0 warning(s)" in result.output

    def test_overlap_reported_as_warning(self, tmp_path: Path) -> None:
        src = tmp_path / "overlap.csv"
        src.write_text(
            "start,end,activity\n"
            "09:00,11:00,Meeting\n"
            "10:00,12:00,Lunch prep\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["validate", "--file", str(src)])
        assert result.exit_code == 0, result.output
        assert "WARNING [overlap]" in result.output
        assert "overlap by 60 min" in result.output
        assert "2 activities, 1 warning(s)" in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

class TestConfig:
    def test_show_defaults(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["config", "show", "--config-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "full_width = False" in result.output
        assert "label_max_chars = 30" in result.output

    def test_set_persists(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [
            "config", "set", "--full-width", "--label-max-chars", "12",
            "--config-dir", str(tmp_path),
        ])
        assert result.exit_code == 0, result.output
        saved = json.loads((tmp_path / "config.json").read_text())
        assert saved == {"full_width": True, "label_max_chars": 12}

        shown = runner.invoke(app, ["config", "show", "--config-dir", str(tmp_path)])
        assert "label_max_chars = 12" in shown.output

    def test_set_nothing_exits_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["config", "set", "--config-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_set_invalid_value_exits_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [
            "config", "set", "--label-max-chars", "0", "--config-dir", str(tmp_path),
        ])
        assert result.exit_code == 1
        assert not (tmp_path / "config.json").exists()
