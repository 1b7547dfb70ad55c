"""Data access layer: CSV codec, directory persistence and the JSON snapshot store."""

from __future__ import annotations

from .csv_codec import HEADER, export_calendar, import_calendar, write_calendar
from .persistence import restore_all_calendars, safe_file_name, save_all_calendars
from .snapshot import CalendarStore, find_calendar

__all__ = [
    "CalendarStore",
    "HEADER",
    "export_calendar",
    "find_calendar",
    "import_calendar",
    "restore_all_calendars",
    "safe_file_name",
    "save_all_calendars",
    "write_calendar",
]
