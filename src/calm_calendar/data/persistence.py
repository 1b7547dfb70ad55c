from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

from ..core import Calendar
from ..domain import CalendarError, PersistenceError
from .csv_codec import import_calendar, write_calendar

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")
_UNDERSCORES = re.compile(r"_+")


def safe_file_name(title: str) -> str:
    return _UNDERSCORES.sub("_", _UNSAFE.sub("_", title))


def save_all_calendars(calendars: Iterable[Calendar], output_dir: Path) -> List[Path]:
    """Write one CSV file per titled calendar into ``output_dir``."""

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PersistenceError(f"Failed to create directory {output_dir}: {exc}") from exc

    written: List[Path] = []
    for calendar in calendars:
        if not calendar.title:
            continue
        path = output_dir / f"{safe_file_name(calendar.title)}.csv"
        write_calendar(calendar, path)
        written.append(path)
    logger.info("Saved %d calendar(s) to %s", len(written), output_dir)
    return written


def restore_all_calendars(input_dir: Path) -> List[Calendar]:
    """Rebuild one calendar per CSV file, titled after the file name.

    A file that fails to import is logged and skipped.
    """

    if not input_dir.is_dir():
        raise PersistenceError(f"Directory does not exist: {input_dir}")

    calendars: List[Calendar] = []
    for path in sorted(input_dir.glob("*.csv")):
        calendar = Calendar(path.stem)
        try:
            import_calendar(calendar, path)
        except CalendarError as exc:
            logger.warning("Skipping %s: %s", path.name, exc)
            continue
        calendars.append(calendar)
    return calendars


__all__ = ["restore_all_calendars", "safe_file_name", "save_all_calendars"]
