from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "Calm Calendar"
APP_AUTHOR = "CalmCalendar"


@dataclass(frozen=True)
class CalendarSettings:
    default_allow_conflict: bool


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    snapshot_file: str

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_file


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_dir: Path
    max_bytes: int
    backup_count: int


@dataclass(frozen=True)
class AppSettings:
    calendar: CalendarSettings
    storage: StorageSettings
    logging: LoggingSettings


def _bool_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    data_dir = Path(os.getenv("CALM_CALENDAR_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))

    calendar = CalendarSettings(
        default_allow_conflict=_bool_from_env("CALM_CALENDAR_ALLOW_CONFLICT", False),
    )

    storage = StorageSettings(
        data_dir=data_dir,
        snapshot_file=os.getenv("CALM_CALENDAR_SNAPSHOT_FILE", "calendars.json"),
    )

    logging = LoggingSettings(
        level=os.getenv("CALM_CALENDAR_LOG_LEVEL", "INFO").upper(),
        log_dir=Path(os.getenv("CALM_CALENDAR_LOG_DIR") or data_dir / "logs"),
        max_bytes=_int_from_env("CALM_CALENDAR_LOG_MAX_BYTES", 1_000_000),
        backup_count=_int_from_env("CALM_CALENDAR_LOG_BACKUPS", 5),
    )

    return AppSettings(calendar=calendar, storage=storage, logging=logging)
