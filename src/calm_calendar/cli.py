from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional, Sequence

from .bootstrap import configure_logging
from .core import Calendar
from .data import (
    CalendarStore,
    find_calendar,
    import_calendar,
    restore_all_calendars,
    save_all_calendars,
    write_calendar,
)
from .domain import CalendarError

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc


def _parse_time(value: str) -> time:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid time {value!r}, expected HH:MM") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calm Calendar command line interface.")
    parser.add_argument("--store", type=Path, default=None, help="Snapshot file to operate on.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import a Google Calendar CSV file.")
    import_parser.add_argument("csv", type=Path)
    import_parser.add_argument("--title", default=None, help="Calendar title (defaults to the file name).")

    export_parser = subparsers.add_parser("export", help="Export a calendar as Google Calendar CSV.")
    export_parser.add_argument("title")
    export_parser.add_argument("output", type=Path)

    agenda_parser = subparsers.add_parser("agenda", help="List the events touching the given dates.")
    agenda_parser.add_argument("title")
    agenda_parser.add_argument("dates", nargs="+", type=_parse_date)

    busy_parser = subparsers.add_parser("busy", help="Report whether a calendar is busy at a moment.")
    busy_parser.add_argument("title")
    busy_parser.add_argument("date", type=_parse_date)
    busy_parser.add_argument("time", type=_parse_time)

    backup_parser = subparsers.add_parser("backup", help="Write every calendar as CSV into a directory.")
    backup_parser.add_argument("directory", type=Path)

    restore_parser = subparsers.add_parser("restore", help="Load every CSV file of a directory as a calendar.")
    restore_parser.add_argument("directory", type=Path)

    return parser


def _require_calendar(calendars: List[Calendar], title: str) -> Calendar:
    calendar = find_calendar(calendars, title)
    if calendar is None:
        raise CalendarError(f"Calendar {title!r} does not exist")
    return calendar


def _import(store: CalendarStore, csv_path: Path, title: Optional[str]) -> None:
    name = title or csv_path.stem

    def apply(calendars: List[Calendar]) -> int:
        calendar = find_calendar(calendars, name)
        if calendar is None:
            calendar = Calendar(name)
            calendars.append(calendar)
        return import_calendar(calendar, csv_path)

    count = store.mutate(apply)
    print(f"Imported {count} event(s) into {name!r}")


def _agenda(calendar: Calendar, dates: Sequence[date]) -> None:
    events = calendar.get_event_by_date(dates)
    if not events:
        print("No events.")
        return
    for event in events:
        start = event.start_datetime.strftime("%Y-%m-%d %H:%M")
        end = event.end_datetime.strftime("%Y-%m-%d %H:%M")
        line = f"{start} - {end}  {event.subject}"
        if event.location:
            line += f" @ {event.location}"
        print(line)


def _restore(store: CalendarStore, directory: Path) -> None:
    restored = restore_all_calendars(directory)

    def apply(calendars: List[Calendar]) -> None:
        titles = {calendar.title for calendar in restored}
        calendars[:] = [calendar for calendar in calendars if calendar.title not in titles] + restored

    store.mutate(apply)
    print(f"Restored {len(restored)} calendar(s) from {directory}")


def run(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    store = CalendarStore(args.store)

    try:
        if args.command == "import":
            _import(store, args.csv, args.title)
        elif args.command == "export":
            write_calendar(_require_calendar(store.load(), args.title), args.output)
            print(f"Exported {args.title!r} to {args.output}")
        elif args.command == "agenda":
            _agenda(_require_calendar(store.load(), args.title), args.dates)
        elif args.command == "busy":
            calendar = _require_calendar(store.load(), args.title)
            print("busy" if calendar.is_busy(args.date, args.time) else "free")
        elif args.command == "backup":
            paths = save_all_calendars(store.load(), args.directory)
            print(f"Wrote {len(paths)} file(s) to {args.directory}")
        elif args.command == "restore":
            _restore(store, args.directory)
        else:  # pragma: no cover - argparse enforces choices
            parser.print_help()
            return 2
    except CalendarError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    configure_logging()
    logging.getLogger(__name__).debug("Calm Calendar CLI starting")
    sys.exit(run())


if __name__ == "__main__":
    main()
