"""Calendar store, listener registry and the transactional update protocol."""

from .calendar import CONFLICT_MESSAGE, DUPLICATE_MESSAGE, NOT_FOUND_MESSAGE, Calendar
from .listeners import CalendarListener, ListenerRegistry
from .updates import update_event

__all__ = [
    "CONFLICT_MESSAGE",
    "DUPLICATE_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "Calendar",
    "CalendarListener",
    "ListenerRegistry",
    "update_event",
]
