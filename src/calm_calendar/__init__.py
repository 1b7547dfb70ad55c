"""Calm Calendar application package."""

from __future__ import annotations

from .core import Calendar, CalendarListener, update_event
from .domain import (
    CalendarError,
    EventUpdate,
    RecurringEvent,
    SingleEvent,
    TimeInterval,
    ValidationResult,
    Visibility,
    Weekday,
)

__all__ = [
    "Calendar",
    "CalendarError",
    "CalendarListener",
    "EventUpdate",
    "RecurringEvent",
    "SingleEvent",
    "TimeInterval",
    "ValidationResult",
    "Visibility",
    "Weekday",
    "main",
    "update_event",
]


def main() -> None:
    from .cli import main as cli_main

    cli_main()
