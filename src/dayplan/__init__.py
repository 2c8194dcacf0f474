"""Day planner: place activities into a 48-slot day, by hand or via a planner model."""

from __future__ import annotations

from .errors import (
    DayPlanError,
    InputError,
    NotFoundError,
    ParseError,
    PlannerTransportError,
    ValidationError,
)
from .planner import AutoAssignmentResult, DayPlanner
from .schedule import Activity, Assignment, OccupancyIndex, ScheduleStore

__all__ = [
    "Activity",
    "Assignment",
    "AutoAssignmentResult",
    "DayPlanError",
    "DayPlanner",
    "InputError",
    "NotFoundError",
    "OccupancyIndex",
    "ParseError",
    "PlannerTransportError",
    "ScheduleStore",
    "ValidationError",
]
