"""Shared test fixtures for Calm Calendar tests.

This module provides common fixtures used across all test modules:
- Isolated settings pointing at a temporary data directory
- A calendar that rejects conflicts
- A listener that records every notification it receives
"""

from __future__ import annotations

from datetime import date, time
from pathlib import Path
from typing import Iterator, List

import pytest

from calm_calendar.config import get_settings
from calm_calendar.core import Calendar
from calm_calendar.domain import Event, RecurringEvent, SingleEvent, Weekday


# ─────────────────────────────────────────────────────────────────────────────
# Settings Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point every setting at a temporary directory and reset the cache."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("CALM_CALENDAR_DATA_DIR", str(data_dir))
    monkeypatch.delenv("CALM_CALENDAR_ALLOW_CONFLICT", raising=False)
    monkeypatch.delenv("CALM_CALENDAR_SNAPSHOT_FILE", raising=False)
    monkeypatch.delenv("CALM_CALENDAR_LOG_DIR", raising=False)
    get_settings.cache_clear()
    yield data_dir
    get_settings.cache_clear()


# ─────────────────────────────────────────────────────────────────────────────
# Calendar Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class RecordingListener:
    """Listener that keeps every notification in arrival order."""

    def __init__(self) -> None:
        self.added: List[Event] = []
        self.modified: List[Event] = []

    def on_event_added(self, event: Event) -> None:
        self.added.append(event)

    def on_event_modified(self, event: Event) -> None:
        self.modified.append(event)


@pytest.fixture
def calendar() -> Calendar:
    """Empty calendar that rejects conflicts by default."""
    return Calendar("Work", default_allow_conflict=False)


@pytest.fixture
def listener(calendar: Calendar) -> RecordingListener:
    """Recording listener registered on ``calendar``."""
    recorder = RecordingListener()
    calendar.add_listener(recorder)
    return recorder


@pytest.fixture
def meeting() -> SingleEvent:
    """Single event on 2024-11-01 from 10:00 to 11:00."""
    return SingleEvent(
        subject="Meeting",
        start_date=date(2024, 11, 1),
        end_date=date(2024, 11, 1),
        start_time=time(10, 0),
        end_time=time(11, 0),
        location="Room 1",
    )


@pytest.fixture
def standup() -> RecurringEvent:
    """Standup on Sundays and Tuesdays from 2024-11-03, three occurrences.

    Occurrences fall on 2024-11-03, 2024-11-05 and 2024-11-10.
    """
    return RecurringEvent(
        subject="Standup",
        start_date=date(2024, 11, 3),
        end_date=date(2024, 11, 3),
        start_time=time(9, 0),
        end_time=time(9, 30),
        recurrence_days=[Weekday.SUNDAY, Weekday.TUESDAY],
        repeat_count=3,
    )


@pytest.fixture
def make_listener():
    """Factory for additional recording listeners."""
    return RecordingListener
