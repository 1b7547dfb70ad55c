from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

import orjson
from pydantic import ValidationError

from ..api.models import CalendarPayload, SnapshotPayload
from ..config import get_settings
from ..core import Calendar
from ..domain import CalendarError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_VERSION = 1


class CalendarStore:
    """Lightweight persistence layer keeping every calendar in one JSON document."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_settings().storage.snapshot_path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Calendar]:
        if not self._path.exists():
            return []
        raw = self._path.read_bytes()
        if not raw.strip():
            return []
        try:
            snapshot = SnapshotPayload.model_validate(orjson.loads(raw))
            calendars = [payload.to_domain() for payload in snapshot.calendars]
        except (orjson.JSONDecodeError, ValidationError, CalendarError) as exc:
            raise PersistenceError(f"Failed to load calendars from {self._path}: {exc}") from exc
        logger.debug("Loaded %d calendar(s) from %s", len(calendars), self._path)
        return calendars

    def save(self, calendars: List[Calendar]) -> None:
        snapshot = SnapshotPayload(
            schema_version=SCHEMA_VERSION,
            calendars=[CalendarPayload.from_domain(calendar) for calendar in calendars],
        )
        payload = orjson.dumps(snapshot.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(payload + b"\n")
        except OSError as exc:
            raise PersistenceError(f"Failed to write calendars to {self._path}: {exc}") from exc
        logger.debug("Saved %d calendar(s) to %s", len(calendars), self._path)

    def mutate(self, callback: Callable[[List[Calendar]], T]) -> T:
        """Load, hand the calendars to ``callback``, then persist whatever it left behind."""

        calendars = self.load()
        result = callback(calendars)
        self.save(calendars)
        return result


def find_calendar(calendars: List[Calendar], title: str) -> Optional[Calendar]:
    for calendar in calendars:
        if calendar.title == title:
            return calendar
    return None


__all__ = ["CalendarStore", "SCHEMA_VERSION", "find_calendar"]
