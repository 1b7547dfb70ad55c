"""Tests for calm_calendar/data/persistence.py"""

from __future__ import annotations

from datetime import date, time

import pytest

from calm_calendar.core import Calendar
from calm_calendar.data import restore_all_calendars, safe_file_name, save_all_calendars
from calm_calendar.domain import PersistenceError


class TestSafeFileName:
    """Tests for file name sanitising."""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Work", "Work"),
            ("Team A/B: Q4", "Team_A_B_Q4"),
            ("a  b", "a_b"),
            ("keep-this_one", "keep-this_one"),
        ],
    )
    def test_sanitises(self, title, expected):
        """Unsafe characters become single underscores."""
        assert safe_file_name(title) == expected


class TestSaveAndRestore:
    """Tests for directory level backup."""

    def test_round_trip(self, calendar, meeting, standup, tmp_path):
        """Saved calendars restore with their titles and events."""
        calendar.create_event(meeting)
        calendar.create_event(standup)
        personal = Calendar("Personal Stuff", default_allow_conflict=False)

        paths = save_all_calendars([calendar, personal], tmp_path / "backup")

        assert [path.name for path in paths] == ["Work.csv", "Personal_Stuff.csv"]
        restored = {cal.title: cal for cal in restore_all_calendars(tmp_path / "backup")}
        assert set(restored) == {"Work", "Personal_Stuff"}
        assert len(restored["Work"]) == 4
        assert restored["Work"].get_event("Standup", date(2024, 11, 10), time(9, 0)) is not None
        assert len(restored["Personal_Stuff"]) == 0

    def test_untitled_calendar_skipped(self, tmp_path):
        """Calendars without a title are not written."""
        assert save_all_calendars([Calendar("")], tmp_path) == []

    def test_bad_file_skipped(self, tmp_path):
        """A file that fails to import does not stop the restore."""
        (tmp_path / "bad.csv").write_text(
            "Subject,Start Date,Start Time,End Date,End Time,All Day Event,Description,Location,Private\r\n"
            "Oops,,,,,False,,,False\r\n",
            encoding="utf-8",
        )
        (tmp_path / "good.csv").write_text(
            "Subject,Start Date,Start Time,End Date,End Time,All Day Event,Description,Location,Private\r\n",
            encoding="utf-8",
        )

        restored = restore_all_calendars(tmp_path)

        assert [cal.title for cal in restored] == ["good"]

    def test_missing_directory(self, tmp_path):
        """Restoring from a missing directory raises."""
        with pytest.raises(PersistenceError, match="Directory does not exist"):
            restore_all_calendars(tmp_path / "nope")
