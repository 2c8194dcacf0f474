"""Half-hour slot arithmetic for a single 48-slot day."""

from __future__ import annotations

SLOTS_PER_DAY = 48
MAX_SLOT = SLOTS_PER_DAY - 1


def is_valid_slot(value: object) -> bool:
    """Return True when ``value`` is a plain integer slot index in ``[0, 47]``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= MAX_SLOT


def occupied_slots(start_time: int, duration: int) -> range:
    """Return the half-open slot range ``[start_time, start_time + duration)``."""
    return range(start_time, start_time + duration)


def format_time_slot(slot: int) -> str:
    """Format a slot index as a 12-hour clock time, e.g. ``13`` -> ``6:30 AM``."""
    hours, half = divmod(slot, 2)
    minutes = half * 30
    period = "PM" if hours >= 12 else "AM"
    display_hours = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    return f"{display_hours}:{minutes:02d} {period}"


def format_duration(duration: int, *, short: bool = False) -> str:
    """Describe a half-hour duration in words."""
    if duration == 1:
        return "30 min" if short else "30 minutes"
    hours = duration * 0.5
    text = f"{hours:g}"
    return f"{text} hours"


__all__ = [
    "MAX_SLOT",
    "SLOTS_PER_DAY",
    "format_duration",
    "format_time_slot",
    "is_valid_slot",
    "occupied_slots",
]
