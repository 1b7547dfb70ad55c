from __future__ import annotations

from enum import Enum, IntEnum


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class EventKind(str, Enum):
    SINGLE = "single"
    RECURRING = "recurring"


class Weekday(IntEnum):
    """Days of the week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6
