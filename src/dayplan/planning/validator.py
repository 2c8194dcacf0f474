"""Check a batch of planner proposals against the day's existing commitments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..errors import ValidationError
from ..schedule.occupancy import OccupancyIndex
from ..schedule.schema import Activity, Assignment
from ..slots import MAX_SLOT, SLOTS_PER_DAY, format_time_slot
from .pool import TitlePool
from .proposals import Malformed, Proposal, ProposalEntry, parse_proposals

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValidatedAssignment:
    """A proposal that passed every check and is ready to apply."""

    activity: Activity
    start_time: int


def validate_proposals(
    raw_text: str,
    eligible: Iterable[Activity],
    existing: Iterable[Assignment],
) -> list[ValidatedAssignment]:
    """Extract proposals from ``raw_text`` and validate them as one batch.

    ``eligible`` must list the activities that were unassigned when the request
    started, in creation order. Raises :class:`~dayplan.errors.ParseError` when
    the text has no payload and :class:`~dayplan.errors.ValidationError` with
    every issue found otherwise. Nothing is mutated.
    """
    entries = parse_proposals(raw_text)
    return validate_entries(entries, eligible, existing)


def validate_entries(
    entries: Sequence[ProposalEntry],
    eligible: Iterable[Activity],
    existing: Iterable[Assignment],
) -> list[ValidatedAssignment]:
    """Validate already-extracted entries; see :func:`validate_proposals`."""
    pool = TitlePool(eligible)
    occupancy = OccupancyIndex.from_assignments(existing)
    issues: list[str] = []
    validated: list[ValidatedAssignment] = []

    for entry in entries:
        if isinstance(entry, Malformed):
            issues.append(entry.reason)
            continue

        activity = pool.pop(entry.title)
        if activity is None:
            issues.append(f'No eligible unassigned activity "{entry.title}" is left to assign.')
            continue

        start_time, issue = _check_placement(entry, activity, occupancy)
        if issue is not None:
            issues.append(issue)
            pool.restore(activity)
            continue

        occupancy.occupy(activity, start_time)
        validated.append(ValidatedAssignment(activity=activity, start_time=start_time))

    if issues:
        LOGGER.debug("Rejected proposal batch with %d issue(s)", len(issues))
        raise ValidationError(issues)
    return validated


def _check_placement(
    entry: Proposal,
    activity: Activity,
    occupancy: OccupancyIndex,
) -> tuple[int, Optional[str]]:
    """Return the proposed start slot and the first problem placing it, if any."""
    title = entry.title
    start_time = _as_slot(entry.start_time)
    if start_time is None:
        return -1, f'Activity "{title}" has a non-integer start time ({entry.start_time!r}).'
    if not 0 <= start_time <= MAX_SLOT:
        return start_time, f'Activity "{title}" has an out-of-range start time ({start_time}).'

    end_slot = start_time + activity.duration
    if end_slot > SLOTS_PER_DAY:
        return start_time, (
            f'Activity "{title}" would extend past the end of the day '
            f"(slot {start_time} + duration {activity.duration} > {SLOTS_PER_DAY})."
        )

    conflict = occupancy.first_conflict(start_time, activity.duration)
    if conflict is not None:
        slot, occupant = conflict
        return start_time, (
            f"Time slot {format_time_slot(slot)} (slot {slot}) is already taken by "
            f'"{occupant.title}" and conflicts with "{title}".'
        )
    return start_time, None


def _as_slot(value: Any) -> Optional[int]:
    """Return ``value`` as an int when it is integral; booleans never are."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


__all__ = ["ValidatedAssignment", "validate_entries", "validate_proposals"]
