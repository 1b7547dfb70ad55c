"""Error taxonomy shared by the domain model, the calendar store and its collaborators."""

from __future__ import annotations


class CalendarError(ValueError):
    """Base class for every expected calendar failure."""


class ConstructionError(CalendarError):
    """Raised when an event or interval is built from an invalid field combination."""


class DuplicateKeyError(CalendarError):
    """Raised when an event with the same subject, start date and start time already exists."""


class ConflictError(CalendarError):
    """Raised when an event overlaps an existing one on a day and conflicts are disallowed."""


class EventNotFoundError(CalendarError):
    """Raised when a delete or update target is missing from the calendar indices."""


class InvalidUpdateError(CalendarError):
    """Raised when a patched event fails validation and the update is rolled back."""


class PersistenceError(CalendarError):
    """Raised when calendars cannot be read from or written to disk."""


class MissingArgumentError(TypeError):
    """Raised when a required argument is absent. Signals a programming error."""


def require(value: object, name: str) -> None:
    if value is None:
        raise MissingArgumentError(f"{name} is required")


__all__ = [
    "CalendarError",
    "ConflictError",
    "ConstructionError",
    "DuplicateKeyError",
    "EventNotFoundError",
    "InvalidUpdateError",
    "MissingArgumentError",
    "PersistenceError",
    "require",
]
