from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import ClassVar, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union
from uuid import uuid4

from .enums import EventKind, Visibility, Weekday
from .errors import ConstructionError, InvalidUpdateError
from .intervals import TimeInterval
from .validation import ValidationResult

DAY_START = time.min
DAY_END = time.max

CompositeKey = Tuple[Optional[str], Optional[date], Optional[time]]


def _new_id() -> str:
    return str(uuid4())


def date_range(start: date, end: date) -> Iterator[date]:
    delta = (end - start).days
    for index in range(delta + 1):
        yield start + timedelta(days=index)


def _weekdays(values: Optional[Iterable[Union[Weekday, int]]]) -> Optional[FrozenSet[Weekday]]:
    if values is None:
        return None
    return frozenset(Weekday(value) for value in values)


@dataclass
class EventUpdate:
    """Partial update for an event. ``None`` leaves the matching field untouched."""

    subject: Optional[str] = None
    start_date: Optional[date] = None
    start_time: Optional[time] = None
    end_date: Optional[date] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    location: Optional[str] = None
    allow_conflict: Optional[bool] = None
    visibility: Optional[Visibility] = None
    recurrence_days: Optional[FrozenSet[Weekday]] = None
    repeat_count: Optional[int] = None
    recurrence_end_date: Optional[date] = None

    def __post_init__(self) -> None:
        self.recurrence_days = _weekdays(self.recurrence_days)
        if self.visibility is not None:
            self.visibility = Visibility(self.visibility)


_COMMON_FIELDS = (
    "subject",
    "start_date",
    "start_time",
    "end_date",
    "end_time",
    "description",
    "location",
    "allow_conflict",
    "visibility",
)


@dataclass(eq=False)
class EventBase:
    """Fields and rules shared by single and recurring events.

    Identity is the ``id`` alone: it is generated once, survives copies and
    updates, and cannot be reassigned.
    """

    subject: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    location: Optional[str] = None
    allow_conflict: Optional[bool] = None
    visibility: Visibility = Visibility.PUBLIC
    id: str = field(default_factory=_new_id)

    kind: ClassVar[EventKind]

    def __setattr__(self, name: str, value: object) -> None:
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("Event id cannot be reassigned")
        super().__setattr__(name, value)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, EventBase):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    # Derived values ------------------------------------------------------------

    @property
    def start_datetime(self) -> datetime:
        return datetime.combine(self.start_date, self.start_time or DAY_START)

    @property
    def end_datetime(self) -> datetime:
        if self.end_time is None:
            return datetime.combine(self.start_date, DAY_END)
        return datetime.combine(self.end_date, self.end_time)

    @property
    def composite_key(self) -> CompositeKey:
        return (self.subject, self.start_date, self.start_time)

    @property
    def effective_allow_conflict(self) -> bool:
        return bool(self.allow_conflict)

    @property
    def is_all_day(self) -> bool:
        return self.start_time == DAY_START and self.end_time == DAY_END

    # Validation ----------------------------------------------------------------

    def _check_common(self) -> ValidationResult:
        if self.start_time is None and self.end_time is not None:
            return ValidationResult.fail("Cannot set endTime if startTime is null")
        if self.subject is None or self.start_date is None or self.end_date is None:
            return ValidationResult.fail("Missing required parameters.")
        if self.end_datetime < self.start_datetime:
            return ValidationResult.fail("End time cannot be before start time")
        return ValidationResult.ok()

    def _fill_defaults(self) -> None:
        if self.start_time is None:
            self.start_time = DAY_START
        if self.end_time is None:
            self.end_time = DAY_END
        if self.visibility is None:
            self.visibility = Visibility.PUBLIC
        else:
            self.visibility = Visibility(self.visibility)

    def _copy_common(self, other: "EventBase", *, keep_dates: bool = False) -> None:
        for name in _COMMON_FIELDS:
            if keep_dates and name in ("start_date", "end_date"):
                continue
            setattr(self, name, getattr(other, name))

    def _apply_common(self, update: EventUpdate) -> None:
        for name in _COMMON_FIELDS:
            value = getattr(update, name)
            if value is not None:
                setattr(self, name, value)


@dataclass(eq=False)
class SingleEvent(EventBase):
    """A one-off event, or one expanded occurrence of a recurring series."""

    belongs_to_recurring_event: bool = False
    father_id: Optional[str] = None
    intervals: List[TimeInterval] = field(default_factory=list, init=False, repr=False)

    kind: ClassVar[EventKind] = EventKind.SINGLE

    def __post_init__(self) -> None:
        self.check_is_valid().raise_for_error(ConstructionError)
        self._fill_defaults()
        self.belongs_to_recurring_event = bool(self.belongs_to_recurring_event)
        self.refresh_intervals()

    def check_is_valid(self) -> ValidationResult:
        return self._check_common()

    def compute_intervals(self) -> List[TimeInterval]:
        intervals: List[TimeInterval] = []
        for day in date_range(self.start_date, self.end_date):
            start = self.start_time if day == self.start_date else DAY_START
            end = self.end_time if day == self.end_date else DAY_END
            intervals.append(TimeInterval(self.id, day, start, end))
        return intervals

    def refresh_intervals(self) -> None:
        self.intervals = self.compute_intervals()

    def leaves(self) -> List["SingleEvent"]:
        return [self]

    def leaves_from(self, day: Optional[date]) -> List["SingleEvent"]:
        return [self]

    def deep_copy(self) -> "SingleEvent":
        return deepcopy(self)

    def pin_start(self, day: date) -> None:
        self.start_date = day

    def prepare_for_update(self) -> None:
        self.refresh_intervals()

    def apply_update(self, update: EventUpdate) -> None:
        self._apply_common(update)
        self.check_is_valid().raise_for_error(InvalidUpdateError)

    def copy_from(self, other: "SingleEvent", effective_date: Optional[date] = None) -> None:
        self._copy_common(other)
        self.refresh_intervals()


@dataclass(eq=False)
class RecurringEvent(EventBase):
    """A weekly series bounded by an occurrence count or an end date.

    The template fields describe one occurrence, which must fit in a single day.
    ``children`` holds the generated occurrences and is rebuilt wholesale by
    :meth:`regenerate`.
    """

    recurrence_days: Optional[FrozenSet[Weekday]] = None
    repeat_count: Optional[int] = None
    recurrence_end_date: Optional[date] = None
    children: List[SingleEvent] = field(default_factory=list, init=False, repr=False)

    kind: ClassVar[EventKind] = EventKind.RECURRING

    def __post_init__(self) -> None:
        self.recurrence_days = _weekdays(self.recurrence_days)
        self.check_is_valid().raise_for_error(ConstructionError)
        self._fill_defaults()
        self.regenerate()

    def check_is_valid(self) -> ValidationResult:
        result = self._check_common()
        if not result:
            return result
        if self.recurrence_days is None:
            return ValidationResult.fail("Missing required parameters.")
        if self.repeat_count is None and self.recurrence_end_date is None:
            return ValidationResult.fail("Missing required parameters.")
        if self.repeat_count is not None and self.recurrence_end_date is not None:
            return ValidationResult.fail("Cannot set both repeatCount and recurrenceEndDate")
        if self.repeat_count is not None and self.repeat_count < 1:
            return ValidationResult.fail("repeatCount must be at least 1")
        if self.start_date < self.end_date:
            return ValidationResult.fail("Recurring event cannot cross day")
        return ValidationResult.ok()

    @property
    def intervals(self) -> List[TimeInterval]:
        return self.compute_intervals()

    def compute_intervals(self) -> List[TimeInterval]:
        return [interval for child in self.children for interval in child.intervals]

    def regenerate(self) -> None:
        """Expand the template into one occurrence per matching weekday."""

        if self.recurrence_end_date is not None:
            limit = self.recurrence_end_date
        else:
            limit = self.end_date + timedelta(weeks=self.repeat_count)

        occurrences: List[SingleEvent] = []
        current = self.start_date
        while current <= limit:
            if current.weekday() in self.recurrence_days:
                if self.repeat_count is not None and len(occurrences) >= self.repeat_count:
                    break
                occurrences.append(
                    SingleEvent(
                        subject=self.subject,
                        start_date=current,
                        end_date=current,
                        start_time=self.start_time,
                        end_time=self.end_time,
                        description=self.description,
                        location=self.location,
                        allow_conflict=self.allow_conflict,
                        visibility=self.visibility,
                        belongs_to_recurring_event=True,
                        father_id=self.id,
                    )
                )
            current += timedelta(days=1)
        self.children = occurrences

    def leaves(self) -> List[SingleEvent]:
        return list(self.children)

    def leaves_from(self, day: Optional[date]) -> List[SingleEvent]:
        if day is None:
            return self.leaves()
        return [child for child in self.children if child.start_date >= day]

    def deep_copy(self) -> "RecurringEvent":
        return deepcopy(self)

    def pin_start(self, day: date) -> None:
        span = self.end_date - self.start_date
        self.start_date = day
        self.end_date = day + span

    def prepare_for_update(self) -> None:
        self.children = [child for child in self.children if child.start_date >= self.start_date]

    def set_recurrence(
        self,
        *,
        recurrence_days: Optional[Iterable[Union[Weekday, int]]] = None,
        repeat_count: Optional[int] = None,
        recurrence_end_date: Optional[date] = None,
    ) -> None:
        """Replace recurrence parameters. Giving one bound clears the other."""

        if recurrence_days is not None:
            self.recurrence_days = _weekdays(recurrence_days)
        if repeat_count is not None:
            self.repeat_count = repeat_count
            if recurrence_end_date is None:
                self.recurrence_end_date = None
        if recurrence_end_date is not None:
            self.recurrence_end_date = recurrence_end_date
            if repeat_count is None:
                self.repeat_count = None

    def apply_update(self, update: EventUpdate) -> None:
        if update.start_date is not None and update.end_date is None:
            span = self.end_date - self.start_date
            self.end_date = update.start_date + span
        self._apply_common(update)
        self.set_recurrence(
            recurrence_days=update.recurrence_days,
            repeat_count=update.repeat_count,
            recurrence_end_date=update.recurrence_end_date,
        )
        self.check_is_valid().raise_for_error(InvalidUpdateError)
        self.regenerate()

    def copy_from(self, other: "RecurringEvent", effective_date: Optional[date] = None) -> None:
        """Take over ``other``'s fields and occurrences.

        With an ``effective_date`` the series is split: occurrences before that
        date are kept, the template keeps its original dates, and ``other``'s
        occurrences replace everything from the date onward.
        """

        self._copy_common(other, keep_dates=effective_date is not None)
        self.recurrence_days = other.recurrence_days
        self.repeat_count = other.repeat_count
        self.recurrence_end_date = other.recurrence_end_date
        if effective_date is None:
            retained: List[SingleEvent] = []
        else:
            retained = [child for child in self.children if child.start_date < effective_date]
        self.children = retained + list(other.children)


Event = Union[SingleEvent, RecurringEvent]


__all__ = [
    "DAY_END",
    "DAY_START",
    "CompositeKey",
    "Event",
    "EventBase",
    "EventUpdate",
    "RecurringEvent",
    "SingleEvent",
]
