"""Domain models for calendar events and their occurrences."""

from __future__ import annotations

from .enums import EventKind, Visibility, Weekday
from .errors import (
    CalendarError,
    ConflictError,
    ConstructionError,
    DuplicateKeyError,
    EventNotFoundError,
    InvalidUpdateError,
    MissingArgumentError,
    PersistenceError,
)
from .intervals import TimeInterval
from .models import DAY_END, DAY_START, Event, EventUpdate, RecurringEvent, SingleEvent
from .validation import ValidationResult

__all__ = [
    "CalendarError",
    "ConflictError",
    "ConstructionError",
    "DAY_END",
    "DAY_START",
    "DuplicateKeyError",
    "Event",
    "EventKind",
    "EventNotFoundError",
    "EventUpdate",
    "InvalidUpdateError",
    "MissingArgumentError",
    "PersistenceError",
    "RecurringEvent",
    "SingleEvent",
    "TimeInterval",
    "ValidationResult",
    "Visibility",
    "Weekday",
]
