from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Type

from .errors import CalendarError, ConstructionError


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validation step: a flag, a readable reason and the error to raise."""

    valid: bool
    message: str
    error: Optional[Type[CalendarError]] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True, message="Valid")

    @classmethod
    def fail(cls, message: str, error: Type[CalendarError] = ConstructionError) -> "ValidationResult":
        return cls(valid=False, message=message, error=error)

    def __bool__(self) -> bool:
        return self.valid

    def raise_for_error(self, error: Optional[Type[CalendarError]] = None) -> None:
        """Raise ``error`` (or the recorded error class) when the result is invalid."""

        if self.valid:
            return
        raise (error or self.error or ConstructionError)(self.message)


__all__ = ["ValidationResult"]
