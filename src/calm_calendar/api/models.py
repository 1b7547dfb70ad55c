from __future__ import annotations

from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core import Calendar
from ..domain import Event, EventKind, RecurringEvent, SingleEvent, Visibility, Weekday


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: EventKind
    subject: str
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    description: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    allow_conflict: Optional[bool] = Field(default=None)
    visibility: Visibility = Field(default=Visibility.PUBLIC)
    belongs_to_recurring_event: bool = Field(default=False)
    father_id: Optional[str] = Field(default=None)
    recurrence_days: Optional[List[Weekday]] = Field(default=None)
    repeat_count: Optional[int] = Field(default=None)
    recurrence_end_date: Optional[date] = Field(default=None)
    occurrences: List["EventPayload"] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        payload = cls(
            id=event.id,
            kind=event.kind,
            subject=event.subject,
            start_date=event.start_date,
            end_date=event.end_date,
            start_time=event.start_time,
            end_time=event.end_time,
            description=event.description,
            location=event.location,
            allow_conflict=event.allow_conflict,
            visibility=event.visibility,
        )
        if isinstance(event, RecurringEvent):
            payload.recurrence_days = sorted(event.recurrence_days)
            payload.repeat_count = event.repeat_count
            payload.recurrence_end_date = event.recurrence_end_date
            payload.occurrences = [cls.from_domain(child) for child in event.children]
        else:
            payload.belongs_to_recurring_event = event.belongs_to_recurring_event
            payload.father_id = event.father_id
        return payload

    def _common_fields(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "description": self.description,
            "location": self.location,
            "allow_conflict": self.allow_conflict,
            "visibility": self.visibility,
        }

    def to_domain(self) -> Event:
        if self.kind is EventKind.SINGLE:
            return SingleEvent(
                belongs_to_recurring_event=self.belongs_to_recurring_event,
                father_id=self.father_id,
                **self._common_fields(),
            )
        series = RecurringEvent(
            recurrence_days=self.recurrence_days,
            repeat_count=self.repeat_count,
            recurrence_end_date=self.recurrence_end_date,
            **self._common_fields(),
        )
        series.children = [occurrence.to_domain() for occurrence in self.occurrences]
        return series


EventPayload.model_rebuild()


class CalendarPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    default_allow_conflict: bool = Field(default=False)
    events: List[EventPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, calendar: Calendar) -> "CalendarPayload":
        series = list(calendar.recurring_events.values())
        standalone = [
            event
            for event in calendar.events_by_id.values()
            if event.father_id is None or event.father_id not in calendar.recurring_events
        ]
        ordered: List[Event] = sorted(
            [*series, *standalone],
            key=lambda ev: (ev.start_date, ev.start_time, ev.subject),
        )
        return cls(
            title=calendar.title,
            default_allow_conflict=calendar.default_allow_conflict,
            events=[EventPayload.from_domain(event) for event in ordered],
        )

    def to_domain(self) -> Calendar:
        calendar = Calendar(self.title, default_allow_conflict=self.default_allow_conflict)
        for payload in self.events:
            calendar.create_event(payload.to_domain())
        return calendar


class SnapshotPayload(BaseModel):
    schema_version: int = Field(default=1)
    calendars: List[CalendarPayload] = Field(default_factory=list)
