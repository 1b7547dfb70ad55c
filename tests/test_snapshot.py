"""Tests for calm_calendar/data/snapshot.py and the payload models."""

from __future__ import annotations

from datetime import date, time

import orjson
import pytest

from calm_calendar.api import deserialize_calendar, serialize_calendar, serialize_event
from calm_calendar.core import Calendar, update_event
from calm_calendar.data import CalendarStore, find_calendar
from calm_calendar.domain import EventUpdate, PersistenceError, RecurringEvent, Weekday


class TestPayloads:
    """Tests for JSON payloads."""

    def test_serialize_event(self, meeting):
        """Dates and times are rendered as ISO strings."""
        data = serialize_event(meeting)

        assert data["kind"] == "single"
        assert data["start_date"] == "2024-11-01"
        assert data["start_time"] == "10:00:00"
        assert data["id"] == meeting.id

    def test_series_round_trip(self, calendar, standup):
        """A series comes back as a series with the same occurrences."""
        calendar.create_event(standup)

        data = serialize_calendar(calendar)
        restored = deserialize_calendar(data)

        assert [event["kind"] for event in data["events"]] == ["recurring"]
        series = restored.recurring_events[standup.id]
        assert isinstance(series, RecurringEvent)
        assert series.recurrence_days == frozenset({Weekday.SUNDAY, Weekday.TUESDAY})
        assert [child.id for child in series.children] == [child.id for child in standup.children]
        assert len(restored) == 3


class TestCalendarStore:
    """Tests for the snapshot file."""

    def test_missing_file_loads_empty(self, tmp_path):
        """No file means no calendars."""
        assert CalendarStore(tmp_path / "none.json").load() == []

    def test_default_path_from_settings(self, isolated_settings):
        """Without a path the store uses the data directory."""
        assert CalendarStore().path == isolated_settings / "calendars.json"

    def test_save_and_load(self, calendar, meeting, standup, tmp_path):
        """Saved calendars load back with identical ids."""
        calendar.create_event(meeting)
        calendar.create_event(standup)
        store = CalendarStore(tmp_path / "state" / "calendars.json")

        store.save([calendar])
        loaded = store.load()

        assert store.path.read_bytes().endswith(b"\n")
        assert orjson.loads(store.path.read_bytes())["schema_version"] == 1
        work = find_calendar(loaded, "Work")
        assert work.default_allow_conflict is False
        assert work.get_event_by_id(meeting.id).location == "Room 1"
        assert len(work) == 4

    def test_split_series_survives_reload(self, calendar, standup, tmp_path):
        """Past occurrences of a split series are kept across reloads."""
        calendar.create_event(standup)
        update_event(calendar, standup, EventUpdate(subject="Sync"), effective_date=date(2024, 11, 5))
        store = CalendarStore(tmp_path / "calendars.json")

        store.save([calendar])
        work = store.load()[0]

        assert work.get_event("Standup", date(2024, 11, 3), time(9, 0)) is not None
        assert work.get_event("Sync", date(2024, 11, 12), time(9, 0)) is not None
        assert len(work) == 4

    def test_mutate(self, tmp_path):
        """Mutations are persisted."""
        store = CalendarStore(tmp_path / "calendars.json")

        store.mutate(lambda calendars: calendars.append(Calendar("Fresh", default_allow_conflict=True)))

        assert [cal.title for cal in store.load()] == ["Fresh"]

    def test_corrupt_file(self, tmp_path):
        """Unreadable JSON raises PersistenceError."""
        path = tmp_path / "calendars.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(PersistenceError, match="Failed to load calendars"):
            CalendarStore(path).load()

    def test_invalid_payload(self, tmp_path):
        """Well-formed JSON with the wrong shape raises PersistenceError."""
        path = tmp_path / "calendars.json"
        path.write_text('{"calendars": [{"events": []}]}', encoding="utf-8")

        with pytest.raises(PersistenceError):
            CalendarStore(path).load()

    def test_fully_deleted_series_stays_deleted(self, calendar, standup, tmp_path):
        """A series whose occurrences were all deleted reloads empty."""
        calendar.create_event(standup)
        for child in list(standup.children):
            calendar.delete_event(child)
        store = CalendarStore(tmp_path / "calendars.json")

        store.save([calendar])
        work = store.load()[0]

        assert len(work) == 0
        assert dict(work.recurring_events) == {}

    def test_series_payload_without_occurrences(self):
        """A stored series with no occurrences does not regenerate any."""
        series = RecurringEvent(
            subject="Standup",
            start_date=date(2024, 11, 3),
            end_date=date(2024, 11, 3),
            start_time=time(9, 0),
            end_time=time(9, 30),
            recurrence_days=[Weekday.SUNDAY],
            repeat_count=2,
        )
        data = {
            "title": "Work",
            "events": [dict(serialize_event(series), occurrences=[])],
        }

        restored = deserialize_calendar(data)

        assert len(restored) == 0
