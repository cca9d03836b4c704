"""Tests for the campus_calendar command line entry point."""

from __future__ import annotations

import pytest

import campus_calendar


class TestCommandLine:
    """Tests for the campus_calendar entry point."""

    @pytest.fixture(autouse=True)
    def no_user_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    def test_week_view(self, capsys) -> None:
        assert campus_calendar.main(["--date", "2024-03-06", "--view", "week"]) == 0
        out = capsys.readouterr().out
        assert "Wed 6 March" in out
        assert "09:00-10:30  CS 101 Lecture @ Engineering Building, Room 201" in out

    def test_day_view_marks_conflicts(self, capsys) -> None:
        assert campus_calendar.main(["--date", "2024-03-06", "--view", "day"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Wed 6 March 2024")
        assert "CS 101 Lecture @ Engineering Building, Room 201 [1/2]" in out
        assert "Basketball Team Practice @ Gymnasium, Court 2 [2/2]" in out

    def test_day_view_public_filter(self, capsys) -> None:
        assert campus_calendar.main(["--date", "2024-03-06", "--view", "day", "--filter", "public"]) == 0
        out = capsys.readouterr().out
        assert "CS 101 Lecture" in out
        assert "Basketball Team Practice" not in out

    def test_month_view(self, capsys) -> None:
        assert campus_calendar.main(["--date", "2024-03-06", "--view", "month"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("March 2024")

    def test_export(self, tmp_path, capsys) -> None:
        target = tmp_path / "week.ics"
        assert campus_calendar.main(["--date", "2024-03-06", "--export", str(target)]) == 0
        assert target.read_bytes().startswith(b"BEGIN:VCALENDAR")
        assert "Exported" in capsys.readouterr().out

    def test_missing_config(self, tmp_path, capsys) -> None:
        assert campus_calendar.main(["--config", str(tmp_path / "missing.toml")]) == 1
        assert "Configuration file not found" in capsys.readouterr().err
