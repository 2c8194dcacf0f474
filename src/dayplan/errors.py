"""Error taxonomy shared by the schedule store and the auto-assignment path."""

from __future__ import annotations

from typing import Iterable

__all__ = [
    "DayPlanError",
    "InputError",
    "NotFoundError",
    "ParseError",
    "PlannerTransportError",
    "ValidationError",
]


class DayPlanError(RuntimeError):
    """Base error raised by the day planner."""


class InputError(DayPlanError, ValueError):
    """Raised when a direct call receives a bad title, duration, or slot."""


class NotFoundError(DayPlanError, LookupError):
    """Raised when an activity reference is not held by the store."""


class ParseError(DayPlanError):
    """Raised when planner text carries no extractable proposal payload."""

    def __init__(self, message: str, *, raw_text: str | None = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ValidationError(DayPlanError):
    """Raised with every semantic problem found in a proposal batch."""

    def __init__(self, issues: Iterable[str]) -> None:
        self.issues: tuple[str, ...] = tuple(issues)
        body = "\n".join(f"- {issue}" for issue in self.issues)
        super().__init__(f"Planner proposed disallowed assignments:\n{body}")


class PlannerTransportError(DayPlanError):
    """Raised when the external planner call itself fails."""
