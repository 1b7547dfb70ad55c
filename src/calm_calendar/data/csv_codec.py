"""Google Calendar compatible CSV import and export."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional

from ..core import Calendar
from ..domain import DAY_END, DAY_START, CalendarError, Event, PersistenceError, SingleEvent, Visibility

logger = logging.getLogger(__name__)

HEADER = [
    "Subject",
    "Start Date",
    "Start Time",
    "End Date",
    "End Time",
    "All Day Event",
    "Description",
    "Location",
    "Private",
]
DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%I:%M %p"


def _format_date(value: Optional[date]) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def _format_time(value: Optional[time], all_day: bool) -> str:
    if all_day or value is None:
        return ""
    return value.strftime(TIME_FORMAT)


def _flag(value: bool) -> str:
    return "True" if value else "False"


def _row(event: Event) -> List[str]:
    all_day = event.is_all_day
    return [
        event.subject or "",
        _format_date(event.start_date),
        _format_time(event.start_time, all_day),
        _format_date(event.end_date),
        _format_time(event.end_time, all_day),
        _flag(all_day),
        event.description or "",
        event.location or "",
        _flag(event.visibility is Visibility.PRIVATE),
    ]


def export_calendar(calendar: Calendar) -> str:
    """Render every indexed event of ``calendar`` as Google Calendar CSV."""

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\r\n")
    writer.writerow(HEADER)
    events = sorted(
        calendar.events_by_id.values(),
        key=lambda ev: (ev.start_date, ev.start_time, ev.subject or ""),
    )
    for event in events:
        writer.writerow(_row(event))
    return output.getvalue()


def write_calendar(calendar: Calendar, path: Path) -> None:
    try:
        path.write_text(export_calendar(calendar), encoding="utf-8", newline="")
    except OSError as exc:
        raise PersistenceError(f"Failed to write CSV to {path}: {exc}") from exc


def _parse_date(value: str) -> Optional[date]:
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def _parse_time(value: str) -> Optional[time]:
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.strptime(value.upper(), TIME_FORMAT).time()
    except ValueError:
        return None


def _event_from_row(row: List[str]) -> SingleEvent:
    subject, start_date, start_time, end_date, end_time, all_day, description, location, private = (
        cell.strip() for cell in row[: len(HEADER)]
    )
    is_all_day = all_day.lower() == "true"
    return SingleEvent(
        subject=subject,
        start_date=_parse_date(start_date),
        end_date=_parse_date(end_date),
        start_time=DAY_START if is_all_day else _parse_time(start_time),
        end_time=DAY_END if is_all_day else _parse_time(end_time),
        description=description or None,
        location=location or None,
        visibility=Visibility.PRIVATE if private.lower() == "true" else Visibility.PUBLIC,
    )


def import_calendar(calendar: Calendar, path: Path) -> int:
    """Create one single event per CSV row in ``calendar``. Returns the number imported."""

    imported = 0
    try:
        with path.open(newline="", encoding="utf-8") as handle:
            reader = csv.reader(handle)
            if next(reader, None) is None:
                return 0
            for line_number, row in enumerate(reader, start=2):
                if len(row) < len(HEADER):
                    logger.debug("Skipping malformed CSV line %d in %s", line_number, path)
                    continue
                calendar.create_event(_event_from_row(row))
                imported += 1
    except OSError as exc:
        raise PersistenceError(f"Failed to read file: {path} - {exc}") from exc
    except CalendarError as exc:
        raise PersistenceError(f"Failed to parse CSV line: {exc}") from exc
    logger.info("Imported %d event(s) from %s into %r", imported, path, calendar.title)
    return imported


__all__ = ["HEADER", "export_calendar", "import_calendar", "write_calendar"]
