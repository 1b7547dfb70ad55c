"""Transactional event updates.

An update stages two copies of the target: an "old" view describing what is
currently indexed and a "new" view with the patch applied. The old view is
removed, the new one validated against what remains, and the calendar either
commits the new state or re-indexes the removed occurrences. Callers only ever
observe the committed or the rolled-back state.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Optional

from ..domain import Event, EventUpdate, InvalidUpdateError
from ..domain.errors import require

if TYPE_CHECKING:
    from .calendar import Calendar

logger = logging.getLogger(__name__)


def _stage_views(original: Event, patch: EventUpdate, effective_date: Optional[date]) -> tuple[Event, Event]:
    old_view = original.deep_copy()
    if effective_date is not None:
        old_view.pin_start(effective_date)
        patch = replace(patch, start_date=effective_date)
    old_view.prepare_for_update()

    new_view = original.deep_copy()
    new_view.apply_update(patch)
    new_view.prepare_for_update()
    return old_view, new_view


def update_event(
    calendar: "Calendar",
    original: Event,
    patch: EventUpdate,
    effective_date: Optional[date] = None,
) -> Event:
    """Apply ``patch`` to ``original`` inside ``calendar``, all or nothing.

    With an ``effective_date`` a recurring series is split: occurrences before
    the date stay as they are and the rest is regenerated from the patched
    template. ``original`` keeps its id and is updated in place.
    """

    require(original, "original")
    require(patch, "patch")

    old_view, new_view = _stage_views(original, patch, effective_date)
    registered = calendar.recurring_events.get(original.id, original)

    removed = calendar.delete_event_temp(old_view)

    result = calendar.validate(new_view)
    if not result:
        calendar.attach(registered, removed)
        logger.info("Update of %s rolled back: %s", original.id, result.message)
        raise InvalidUpdateError(result.message)

    original.copy_from(new_view, effective_date)
    calendar.attach(original, original.leaves_from(effective_date))
    logger.debug("Committed update of %s %s", original.kind.value, original.id)
    calendar.notify_modified(original)
    return original


__all__ = ["update_event"]
