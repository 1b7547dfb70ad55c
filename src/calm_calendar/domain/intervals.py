from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Iterable

from .errors import ConstructionError


@dataclass(frozen=True, slots=True)
class TimeInterval:
    """The part of one calendar day occupied by an event."""

    owning_event_id: str
    date: date
    start_time: time
    end_time: time

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            raise ConstructionError("End time cannot be before start time")

    def conflicts_with(self, others: Iterable["TimeInterval"]) -> bool:
        """Return True when either endpoint of this interval falls strictly inside another.

        An interval that fully contains ``other`` without one of its own endpoints
        inside it is not reported, and touching endpoints never conflict.
        """

        for other in others:
            if other.start_time < self.start_time < other.end_time:
                return True
            if other.start_time < self.end_time < other.end_time:
                return True
        return False

    def __str__(self) -> str:
        return f"TimeInterval[{self.start_time} - {self.end_time}]"


__all__ = ["TimeInterval"]
