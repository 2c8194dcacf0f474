"""Schedule state: records, the canonical store, and occupancy projections."""

from .occupancy import OccupancyIndex
from .schema import Activity, Assignment
from .store import Schedule, ScheduleStore

__all__ = ["Activity", "Assignment", "OccupancyIndex", "Schedule", "ScheduleStore"]
