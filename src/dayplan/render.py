"""Plain-text rendering of a day's schedule."""

from __future__ import annotations

from .planner import DayPlanner
from .slots import format_duration, format_time_slot


def render_schedule(planner: DayPlanner) -> str:
    """Return the daily schedule followed by the unassigned activities.

    Each assignment is listed once, at its starting slot.
    """
    lines = ["Daily Schedule", "=============="]

    ordered = sorted(planner.assignments(), key=lambda assignment: assignment.start_time)
    for assignment in ordered:
        activity = assignment.activity
        lines.append(
            f"{format_time_slot(assignment.start_time)} - {activity.title} "
            f"({format_duration(activity.duration, short=True)})"
        )
    if not ordered:
        lines.append("No activities scheduled yet.")

    lines.extend(["", "Unassigned Activities", "====================="])
    unassigned = planner.unassigned_activities()
    if unassigned:
        lines.extend(
            f"- {activity.title} ({format_duration(activity.duration, short=True)})"
            for activity in unassigned
        )
    else:
        lines.append("All activities are assigned!")
    return "\n".join(lines)


__all__ = ["render_schedule"]
