from __future__ import annotations

from typing import Any, Dict

from ..core import Calendar
from ..domain import Event
from .models import CalendarPayload, EventPayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(mode="json")


def serialize_calendar(calendar: Calendar) -> Dict[str, Any]:
    return CalendarPayload.from_domain(calendar).model_dump(mode="json")


def deserialize_calendar(data: Dict[str, Any]) -> Calendar:
    return CalendarPayload.model_validate(data).to_domain()
