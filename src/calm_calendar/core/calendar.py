from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..config import get_settings
from ..domain import (
    DAY_START,
    ConflictError,
    DuplicateKeyError,
    Event,
    EventNotFoundError,
    EventUpdate,
    RecurringEvent,
    SingleEvent,
    TimeInterval,
    ValidationResult,
)
from ..domain.errors import require
from ..domain.models import CompositeKey, EventBase, date_range
from .listeners import CalendarListener, ListenerRegistry

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Conflicting with existing event"
DUPLICATE_MESSAGE = "Event already exists"
NOT_FOUND_MESSAGE = "Event does not exist"


def _default_allow_conflict() -> bool:
    return get_settings().calendar.default_allow_conflict


@dataclass(eq=False)
class Calendar:
    """In-memory calendar: identity indices, a per-day conflict index and listeners.

    Only leaf events (single events and the occurrences of recurring series) are
    indexed by composite key and id. Recurring series are registered separately
    so they can be removed and re-created as a unit.
    """

    title: str
    default_allow_conflict: bool = field(default_factory=_default_allow_conflict)
    _by_key: Dict[CompositeKey, SingleEvent] = field(default_factory=dict, init=False, repr=False)
    _by_id: Dict[str, SingleEvent] = field(default_factory=dict, init=False, repr=False)
    _recurring_by_id: Dict[str, RecurringEvent] = field(default_factory=dict, init=False, repr=False)
    _daily_index: Dict[date, Set[TimeInterval]] = field(default_factory=dict, init=False, repr=False)
    _listeners: ListenerRegistry = field(default_factory=ListenerRegistry, init=False, repr=False)

    # Read accessors ------------------------------------------------------------

    @property
    def events_by_id(self) -> Mapping[str, SingleEvent]:
        return MappingProxyType(self._by_id)

    @property
    def recurring_events(self) -> Mapping[str, RecurringEvent]:
        return MappingProxyType(self._recurring_by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, event: object) -> bool:
        if not isinstance(event, EventBase):
            return False
        return event.id in self._by_id or event.id in self._recurring_by_id

    # Listeners -----------------------------------------------------------------

    def add_listener(self, listener: CalendarListener) -> None:
        self._listeners.add(listener)

    def remove_listener(self, listener: CalendarListener) -> None:
        self._listeners.remove(listener)

    def notify_modified(self, event: Event) -> None:
        self._listeners.notify_modified(event)

    # Validation ----------------------------------------------------------------

    def _conflicts_on_day(self, interval: TimeInterval) -> bool:
        existing = self._daily_index.get(interval.date)
        if not existing:
            return False
        return interval.conflicts_with(existing)

    def check_conflict(self, event: Event) -> ValidationResult:
        for interval in event.intervals:
            if self._conflicts_on_day(interval):
                return ValidationResult.fail(CONFLICT_MESSAGE, ConflictError)
        return ValidationResult.ok()

    def check_is_valid(self, leaves: Iterable[SingleEvent]) -> ValidationResult:
        """Check leaves for duplicate composite keys and, unless allowed, conflicts."""

        for leaf in leaves:
            if leaf.composite_key in self._by_key:
                return ValidationResult.fail(DUPLICATE_MESSAGE, DuplicateKeyError)
            result = self.check_conflict(leaf)
            if not result and not leaf.effective_allow_conflict:
                return result
        return ValidationResult.ok()

    def validate(self, event: Event) -> ValidationResult:
        shape = event.check_is_valid()
        if not shape:
            return shape
        return self.check_is_valid(event.leaves())

    # Mutation ------------------------------------------------------------------

    def _adopt_conflict_policy(self, event: Event) -> None:
        if event.allow_conflict is None:
            event.allow_conflict = self.default_allow_conflict
        for leaf in event.leaves():
            if leaf.allow_conflict is None:
                leaf.allow_conflict = self.default_allow_conflict

    def attach(self, event: Event, leaves: Iterable[SingleEvent]) -> None:
        """Index leaves that were validated earlier. No checks, no notifications."""

        for leaf in leaves:
            self._by_key[leaf.composite_key] = leaf
            self._by_id[leaf.id] = leaf
            for interval in leaf.intervals:
                self._daily_index.setdefault(interval.date, set()).add(interval)
        if isinstance(event, RecurringEvent):
            self._recurring_by_id[event.id] = event

    def _detach_intervals(self, leaf: SingleEvent) -> None:
        for day in {interval.date for interval in leaf.intervals}:
            bucket = self._daily_index.get(day)
            if bucket is None:
                continue
            bucket.difference_update([item for item in bucket if item.owning_event_id == leaf.id])
            if not bucket:
                self._daily_index.pop(day, None)

    def create_event(self, event: Event) -> Event:
        """Validate ``event`` and index every leaf it expands to.

        Raises the mapped :class:`~calm_calendar.domain.CalendarError` subclass
        without touching any index when validation fails.
        """

        require(event, "event")
        self._adopt_conflict_policy(event)
        result = self.validate(event)
        if not result:
            logger.info("Rejected event %r on %s: %s", event.subject, event.start_date, result.message)
            result.raise_for_error()

        leaves = event.leaves()
        self.attach(event, leaves)
        logger.debug("Added %s event %s with %d occurrence(s)", event.kind.value, event.id, len(leaves))
        for leaf in leaves:
            self._listeners.notify_added(leaf)
        return event

    def delete_event_temp(self, event: Event) -> List[SingleEvent]:
        """Remove a series registration and every current leaf, all or nothing.

        Returns the indexed leaf objects that were removed. When a leaf is
        missing, every removal done so far is undone before
        :class:`EventNotFoundError` propagates.
        """

        require(event, "event")
        parent: Optional[RecurringEvent] = None
        if isinstance(event, RecurringEvent):
            parent = self._recurring_by_id.pop(event.id, None)
            if parent is None:
                raise EventNotFoundError(NOT_FOUND_MESSAGE)

        removed: List[SingleEvent] = []
        try:
            for leaf in event.leaves():
                stored = self._by_key.get(leaf.composite_key)
                if stored is None or stored.id != leaf.id or leaf.id not in self._by_id:
                    raise EventNotFoundError(NOT_FOUND_MESSAGE)
                removed.append(self._by_key.pop(leaf.composite_key))
                self._by_id.pop(leaf.id)
        except EventNotFoundError:
            for stored in removed:
                self._by_key[stored.composite_key] = stored
                self._by_id[stored.id] = stored
            if parent is not None:
                self._recurring_by_id[parent.id] = parent
            logger.warning("Delete of %s rolled back: %s", event.id, NOT_FOUND_MESSAGE)
            raise

        for stored in removed:
            self._detach_intervals(stored)
        logger.debug("Removed %d occurrence(s) of %s", len(removed), event.id)
        return removed

    def delete_event(self, event: Event) -> None:
        """Delete an event for good, detaching an occurrence from its series.

        A series whose last occurrence is deleted is unregistered as well.
        """

        self.delete_event_temp(event)
        if isinstance(event, SingleEvent) and event.father_id:
            parent = self._recurring_by_id.get(event.father_id)
            if parent is not None:
                parent.children = [child for child in parent.children if child.id != event.id]
                if not parent.children:
                    self._recurring_by_id.pop(parent.id, None)
        logger.info("Deleted %s event %r", event.kind.value, event.subject)

    def update_event(
        self,
        original: Event,
        patch: EventUpdate,
        effective_date: Optional[date] = None,
    ) -> Event:
        from .updates import update_event

        return update_event(self, original, patch, effective_date)

    # Queries -------------------------------------------------------------------

    def get_event(self, subject: str, start_date: date, start_time: Optional[time] = None) -> Optional[SingleEvent]:
        return self._by_key.get((subject, start_date, start_time or DAY_START))

    def get_event_by_id(self, event_id: str) -> Optional[SingleEvent]:
        return self._by_id.get(event_id)

    def parent_of(self, event: SingleEvent) -> Optional[RecurringEvent]:
        if not event.father_id:
            return None
        return self._recurring_by_id.get(event.father_id)

    def get_event_by_date(self, dates: Iterable[date]) -> List[SingleEvent]:
        found: Dict[str, SingleEvent] = {}
        for day in dates:
            for interval in self._daily_index.get(day, ()):
                event = self._by_id.get(interval.owning_event_id)
                if event is not None:
                    found.setdefault(event.id, event)
        return sorted(found.values(), key=lambda ev: (ev.start_date, ev.start_time, ev.subject))

    def events_between(self, start: date, end: date) -> List[SingleEvent]:
        return self.get_event_by_date(date_range(start, end))

    def is_busy(self, day: date, at: time) -> bool:
        """Return True when the minute ending at ``at`` overlaps an indexed interval."""

        probe_start = datetime.combine(day, at) - timedelta(minutes=1)
        start_time = probe_start.time() if probe_start.date() == day else DAY_START
        probe = TimeInterval("probe", day, start_time, at)
        return self._conflicts_on_day(probe)


__all__ = ["Calendar", "CONFLICT_MESSAGE", "DUPLICATE_MESSAGE", "NOT_FOUND_MESSAGE"]
