"""Prompt templates sent to the planner when auto-assigning activities."""

from __future__ import annotations

from typing import Sequence

from .schedule.schema import Activity, Assignment
from .slots import MAX_SLOT, SLOTS_PER_DAY, format_duration, format_time_slot

EXISTING_HEADING = "EXISTING ASSIGNMENTS (ALREADY SCHEDULED - DO NOT MODIFY):"
ACTIVITIES_HEADING = "ACTIVITIES TO SCHEDULE (ONLY THESE - DO NOT ADD OTHERS):"

DEFAULT_PREFERENCES: tuple[str, ...] = (
    "Exercise activities work well in the morning (6:00 AM - 10:00 AM)",
    "Classes and study time should be scheduled during focused hours (9:00 AM - 5:00 PM)",
    "Meals should be at regular intervals (breakfast 7-9 AM, lunch 12-1 PM, dinner 6-8 PM)",
    "Social activities and relaxation are good for evenings (6:00 PM - 10:00 PM)",
    "Avoid scheduling demanding activities too late at night (after 10:00 PM)",
    "Leave buffer time between different types of activities",
)

JSON_RESPONSE_INSTRUCTION = """Return your response as a JSON object with this exact structure:
{
  "assignments": [
    {
      "title": "exact activity title from the list above",
      "startTime": valid_slot_number_0_to_47
    }
  ]
}

Return ONLY the JSON object, no additional text."""


def _slot_count(duration: int) -> str:
    return f"{duration} slot" if duration == 1 else f"{duration} slots"


def render_activity_inventory(activities: Sequence[Activity]) -> str:
    """List activities awaiting a slot, one bullet per activity."""
    return "\n".join(
        f"- {activity.title} ({format_duration(activity.duration)}, {_slot_count(activity.duration)})"
        for activity in activities
    )


def render_existing_assignments(assignments: Sequence[Assignment]) -> str:
    """List assignments the planner must leave untouched."""
    return "\n".join(
        f"- {assignment.activity.title} at {format_time_slot(assignment.start_time)} "
        f"(slot {assignment.start_time}, {format_duration(assignment.activity.duration)}, "
        f"{_slot_count(assignment.activity.duration)})"
        for assignment in assignments
    )


def render_preferences(preferences: Sequence[str]) -> str:
    """Format scheduling preferences as a single bullet list block."""
    body = "\n".join(f"- {line.strip()}" for line in preferences if line.strip())
    if not body:
        return ""
    return f"STUDENT PREFERENCES:\n{body}\n\n"


def compose_assignment_prompt(
    unassigned: Sequence[Activity],
    existing: Sequence[Assignment],
    *,
    preferences: Sequence[str] = DEFAULT_PREFERENCES,
) -> str:
    """Build the instruction text asking the planner to place ``unassigned``."""
    existing_section = ""
    if existing:
        existing_section = f"{EXISTING_HEADING}\n{render_existing_assignments(existing)}\n\n"

    requirements = [
        "ONLY assign the activities listed above - do NOT add any new activities",
        f"Use ONLY valid time slots (0-{MAX_SLOT})",
        "Avoid conflicts - don't overlap activities",
        "Consider the duration of each activity when scheduling",
        "Use appropriate time slots based on the preferences above",
        "Never assign an activity to more than one time slot",
        "Repeat a title once per listed occurrence when it appears more than once",
    ]
    if existing:
        requirements.append(
            "Keep the existing assignments listed above exactly as they are (no overlaps or changes)"
        )
    numbered = "\n".join(f"{index}. {line}" for index, line in enumerate(requirements, start=1))

    return (
        "You are a helpful AI assistant that creates optimal daily schedules for students.\n\n"
        f"{render_preferences(preferences)}"
        "TIME SYSTEM:\n"
        "- Times are represented in half-hour slots starting at midnight\n"
        "- Slot 0 = 12:00 AM, Slot 13 = 6:30 AM, Slot 26 = 1:00 PM, Slot 38 = 7:00 PM, etc.\n"
        f"- There are {SLOTS_PER_DAY} slots total (24 hours x 2)\n"
        f"- Valid slots are 0-{MAX_SLOT} (midnight to 11:30 PM)\n"
        f"- An activity lasting N slots that starts at slot S must satisfy S + N <= {SLOTS_PER_DAY}\n\n"
        f"{existing_section}"
        f"{ACTIVITIES_HEADING}\n{render_activity_inventory(unassigned)}\n\n"
        f"CRITICAL REQUIREMENTS:\n{numbered}\n\n"
        f"{JSON_RESPONSE_INSTRUCTION}"
    )


__all__ = [
    "ACTIVITIES_HEADING",
    "DEFAULT_PREFERENCES",
    "EXISTING_HEADING",
    "JSON_RESPONSE_INSTRUCTION",
    "compose_assignment_prompt",
    "render_activity_inventory",
    "render_existing_assignments",
    "render_preferences",
]
