"""Slot occupancy projection used for conflict detection."""

from __future__ import annotations

from typing import Iterable, Optional

from ..slots import occupied_slots
from .schema import Activity, Assignment


class OccupancyIndex:
    """Map from slot to the activity currently occupying it.

    Built from a single sweep over existing assignments. Nothing here is
    persisted; the validator builds its own index for the length of one batch.
    """

    def __init__(self) -> None:
        self._occupants: dict[int, Activity] = {}

    @classmethod
    def from_assignments(cls, assignments: Iterable[Assignment]) -> "OccupancyIndex":
        index = cls()
        for assignment in assignments:
            index.occupy(assignment.activity, assignment.start_time)
        return index

    def occupant(self, slot: int) -> Optional[Activity]:
        """Return the activity occupying ``slot``, if any."""
        return self._occupants.get(slot)

    def first_conflict(self, start_time: int, duration: int) -> Optional[tuple[int, Activity]]:
        """Return the earliest occupied slot in the proposed range with its occupant."""
        for slot in occupied_slots(start_time, duration):
            occupant = self.occupant(slot)
            if occupant is not None:
                return slot, occupant
        return None

    def occupy(self, activity: Activity, start_time: int) -> None:
        """Mark every slot covered by ``activity`` at ``start_time``."""
        for slot in occupied_slots(start_time, activity.duration):
            self._occupants[slot] = activity


__all__ = ["OccupancyIndex"]
