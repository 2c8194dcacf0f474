"""In-memory store that owns activities and their slot assignments."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ..errors import InputError, NotFoundError
from ..slots import MAX_SLOT, SLOTS_PER_DAY, is_valid_slot, occupied_slots
from .schema import Activity, Assignment

LOGGER = logging.getLogger(__name__)

Schedule = Mapping[int, tuple[Activity, ...]]


class ScheduleStore:
    """Canonical set of activities with at most one assignment each.

    Direct assignment through :meth:`assign_activity` does not look at other
    activities' slots. Overlap checking only happens on the validated batch
    path in :mod:`dayplan.planning`.
    """

    def __init__(self) -> None:
        self._activities: dict[str, Activity] = {}
        self._assignments: dict[str, Assignment] = {}

    def __contains__(self, activity: object) -> bool:
        return isinstance(activity, Activity) and self._activities.get(activity.id) == activity

    def __len__(self) -> int:
        return len(self._activities)

    def __iter__(self) -> Iterator[Activity]:
        return iter(tuple(self._activities.values()))

    # Mutations -----------------------------------------------------------------

    def add_activity(self, title: str, duration: int) -> Activity:
        """Create a fresh activity and return it."""
        if not isinstance(title, str) or not title.strip():
            raise InputError("Activity title must be a non-empty string.")
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise InputError(f"Activity duration must be an integer, got {duration!r}.")
        if not 0 <= duration <= MAX_SLOT:
            raise InputError(f"Activity duration must be between 0 and {MAX_SLOT}, got {duration}.")

        activity = Activity(title=title, duration=duration)
        self._activities[activity.id] = activity
        LOGGER.debug("Added activity %s (%s, duration %d)", activity.id, title, duration)
        return activity

    def remove_activity(self, activity: Activity) -> None:
        """Drop ``activity`` and any assignment that references it."""
        self._require(activity)
        self._assignments.pop(activity.id, None)
        del self._activities[activity.id]
        LOGGER.debug("Removed activity %s (%s)", activity.id, activity.title)

    def assign_activity(self, activity: Activity, start_time: int) -> Assignment:
        """Place ``activity`` at ``start_time``, replacing any prior assignment."""
        self._require(activity)
        if not is_valid_slot(start_time):
            raise InputError(f"Start time must be an integer between 0 and {MAX_SLOT}, got {start_time!r}.")
        if start_time + activity.duration > SLOTS_PER_DAY:
            raise InputError(
                f"\"{activity.title}\" at slot {start_time} would run past the end of the day "
                f"(slot {start_time} + duration {activity.duration} > {SLOTS_PER_DAY})."
            )

        self._assignments.pop(activity.id, None)
        assignment = Assignment(activity=activity, start_time=start_time)
        self._assignments[activity.id] = assignment
        return assignment

    def unassign_activity(self, activity: Activity) -> None:
        """Remove the assignment for ``activity``; a no-op when there is none."""
        if isinstance(activity, Activity):
            self._assignments.pop(activity.id, None)

    # Queries -------------------------------------------------------------------

    def get_activity(self, activity_id: str) -> Activity:
        """Return the activity registered under ``activity_id``."""
        try:
            return self._activities[activity_id]
        except KeyError as error:
            raise NotFoundError(f"Unknown activity id: {activity_id}") from error

    def activities(self) -> tuple[Activity, ...]:
        """Return every activity in creation order."""
        return tuple(self._activities.values())

    def assignments(self) -> tuple[Assignment, ...]:
        """Return every assignment in the order it was made."""
        return tuple(self._assignments.values())

    def assignment_for(self, activity: Activity) -> Optional[Assignment]:
        """Return the assignment for ``activity`` when one exists."""
        return self._assignments.get(activity.id)

    def is_assigned(self, activity: Activity) -> bool:
        return activity.id in self._assignments

    def unassigned_activities(self) -> tuple[Activity, ...]:
        """Return activities without an assignment, in creation order."""
        return tuple(
            activity for activity in self._activities.values() if activity.id not in self._assignments
        )

    def get_schedule(self) -> Schedule:
        """Return a read-only map from each slot to the activities occupying it."""
        buckets: dict[int, list[Activity]] = {slot: [] for slot in range(SLOTS_PER_DAY)}
        for assignment in self._assignments.values():
            for slot in occupied_slots(assignment.start_time, assignment.activity.duration):
                buckets[slot].append(assignment.activity)
        return MappingProxyType({slot: tuple(items) for slot, items in buckets.items()})

    def _require(self, activity: Activity) -> None:
        if activity not in self:
            title = getattr(activity, "title", activity)
            raise NotFoundError(f"Activity {title!r} is not in the schedule.")


__all__ = ["Schedule", "ScheduleStore"]
