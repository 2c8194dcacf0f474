from __future__ import annotations

from dayplan.schedule.occupancy import OccupancyIndex
from dayplan.schedule.store import ScheduleStore


def test_index_marks_every_slot_of_existing_assignments() -> None:
    store = ScheduleStore()
    lunch = store.add_activity("Lunch", 1)
    study = store.add_activity("Study", 3)
    store.assign_activity(lunch, 26)
    store.assign_activity(study, 20)

    index = OccupancyIndex.from_assignments(store.assignments())

    assert [slot for slot in range(48) if index.occupant(slot) is not None] == [20, 21, 22, 26]
    assert index.occupant(26) == lunch
    assert [index.occupant(slot) for slot in (20, 21, 22)] == [study, study, study]
    assert index.occupant(23) is None


def test_first_conflict_reports_earliest_occupied_slot() -> None:
    store = ScheduleStore()
    lunch = store.add_activity("Lunch", 1)
    store.assign_activity(lunch, 26)
    index = OccupancyIndex.from_assignments(store.assignments())

    assert index.first_conflict(25, 2) == (26, lunch)
    assert index.first_conflict(24, 2) is None
    assert index.first_conflict(27, 3) is None


def test_zero_duration_never_conflicts() -> None:
    store = ScheduleStore()
    lunch = store.add_activity("Lunch", 1)
    store.assign_activity(lunch, 26)
    index = OccupancyIndex.from_assignments(store.assignments())

    assert index.first_conflict(26, 0) is None
