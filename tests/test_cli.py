"""Tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from timeslotgen import __version__
from timeslotgen.cli.app import app

runner = CliRunner()

SCHEDULE = """
timezone: UTC
day: "2024-01-01"
range:
  start: "09:00"
  end: "12:00"
slot_duration_minutes: 60
excluded_windows:
  - start: "10:00"
    end: "11:00"
"""


def _schedule(tmp_path: Path, text: str = SCHEDULE) -> str:
    path = tmp_path / "timeslots.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestGenerateCommand:
    """Test the generate CLI command."""

    def test_generate_json(self, tmp_path: Path) -> None:
        """Test JSON records on stdout."""
        result = runner.invoke(app, ["generate", _schedule(tmp_path), "--json"])

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert [record["start"] for record in records] == [
            "2024-01-01T09:00:00.000Z",
            "2024-01-01T11:00:00.000Z",
        ]
        assert records[1]["metadata"] == {"index": 1, "duration_minutes": 60.0}

    def test_generate_table(self, tmp_path: Path) -> None:
        """Test the rich table output."""
        result = runner.invoke(app, ["generate", _schedule(tmp_path)])

        assert result.exit_code == 0
        assert "slot(s) generated" in result.stdout

    def test_verbose_logging(self, tmp_path: Path) -> None:
        """Test --verbose installs debug logging without changing the result."""
        result = runner.invoke(app, ["generate", _schedule(tmp_path), "--verbose"])

        assert result.exit_code == 0
        assert "slot(s) generated" in result.output

    def test_day_and_timezone_overrides(self, tmp_path: Path) -> None:
        """Test --day and --timezone take precedence over the file."""
        result = runner.invoke(
            app,
            ["generate", _schedule(tmp_path), "--day", "2024-06-15", "--timezone", "America/New_York", "--json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["start"] == "2024-06-15T13:00:00.000Z"

    def test_default_config_path(self, tmp_path: Path, monkeypatch) -> None:
        """Test ./timeslots.yaml is used when no file is given."""
        _schedule(tmp_path)
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["generate", "--json"])

        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 2

    def test_no_slots(self, tmp_path: Path) -> None:
        """Test the message printed when every slot is excluded."""
        text = SCHEDULE.replace('start: "10:00"', 'start: "08:00"').replace('end: "11:00"', 'end: "13:00"')

        result = runner.invoke(app, ["generate", _schedule(tmp_path, text)])

        assert result.exit_code == 0
        assert "No slots generated" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing schedule file exits with an error."""
        result = runner.invoke(app, ["generate", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Schedule file not found" in result.stdout

    def test_generation_error(self, tmp_path: Path) -> None:
        """Test domain errors are reported and exit with code 1."""
        text = SCHEDULE.replace('day: "2024-01-01"\n', "")

        result = runner.invoke(app, ["generate", _schedule(tmp_path, text)])

        assert result.exit_code == 1
        assert "Error:" in result.stdout
        assert "requires a default day" in result.stdout


class TestDailyCommand:
    """Test the daily CLI command."""

    def test_daily_json(self, tmp_path: Path) -> None:
        """Test a three day period; the day from the file is ignored."""
        result = runner.invoke(
            app,
            ["daily", _schedule(tmp_path), "--start", "2024-01-01", "--end", "2024-01-04", "--json"],
        )

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert len(records) == 6
        assert records[2]["start"] == "2024-01-02T09:00:00.000Z"

    def test_daily_max_days(self, tmp_path: Path) -> None:
        """Test the day cap is enforced."""
        result = runner.invoke(
            app,
            ["daily", _schedule(tmp_path), "--start", "2024-01-01", "--end", "2024-02-01", "--max-days", "7"],
        )

        assert result.exit_code == 1
        assert "maximum day limit" in result.stdout

    def test_daily_requires_period(self, tmp_path: Path) -> None:
        """Test --start and --end are required."""
        result = runner.invoke(app, ["daily", _schedule(tmp_path)])

        assert result.exit_code != 0


class TestVersionCommand:
    """Test the version CLI command."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout
