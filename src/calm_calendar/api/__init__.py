"""Serializable payloads for calendars and events."""

from __future__ import annotations

from .models import CalendarPayload, EventPayload, SnapshotPayload
from .serializers import deserialize_calendar, serialize_calendar, serialize_event

__all__ = [
    "CalendarPayload",
    "EventPayload",
    "SnapshotPayload",
    "deserialize_calendar",
    "serialize_calendar",
    "serialize_event",
]
