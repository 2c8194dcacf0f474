"""Deterministic local planner used for demos and tests without network access."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterator

from ..prompts import ACTIVITIES_HEADING, EXISTING_HEADING
from ..slots import SLOTS_PER_DAY, occupied_slots
from .llm_client import LLMClient

__all__ = ["OFFLINE_MODEL", "OfflinePlannerClient", "is_offline_model"]

OFFLINE_MODEL = "offline"

_ACTIVITY_LINE = re.compile(r"^- (?P<title>.+) \([^()]*, (?P<slots>\d+) slots?\)$")
_EXISTING_LINE = re.compile(
    r"^- (?P<title>.+) at \d{1,2}:\d{2} [AP]M \(slot (?P<start>\d+), [^()]*, (?P<slots>\d+) slots?\)$"
)


def is_offline_model(model_name: str) -> bool:
    """Return True when ``model_name`` selects the local stub planner."""
    key = model_name.strip().lower()
    return key == OFFLINE_MODEL or key.endswith("-offline")


class OfflinePlannerClient(LLMClient):
    """Local stub that places activities first-fit from a preferred start slot.

    It reads the activity inventory back out of the composed prompt and answers
    with the same JSON shape a remote planner is asked for. Activities that do
    not fit anywhere are left out of the reply.
    """

    def __init__(self, *, day_start: int = 14) -> None:
        super().__init__(OFFLINE_MODEL, max_attempts=1)
        self._day_start = day_start

    def _raw_invoke(self, payload: Dict[str, Any]) -> str:
        prompt = _prompt_text(payload)
        occupied: set[int] = set()
        pending: list[tuple[str, int]] = []

        section = None
        for line in prompt.splitlines():
            stripped = line.strip()
            if stripped == EXISTING_HEADING:
                section = "existing"
                continue
            if stripped == ACTIVITIES_HEADING:
                section = "activities"
                continue
            if not stripped:
                section = None if section == "existing" else section
                continue
            if section == "existing":
                match = _EXISTING_LINE.match(stripped)
                if match:
                    occupied.update(occupied_slots(int(match["start"]), int(match["slots"])))
            elif section == "activities":
                match = _ACTIVITY_LINE.match(stripped)
                if match:
                    pending.append((match["title"], int(match["slots"])))
                else:
                    section = None

        assignments = []
        for title, duration in pending:
            start = self._first_fit(duration, occupied)
            if start is None:
                continue
            occupied.update(occupied_slots(start, duration))
            assignments.append({"title": title, "startTime": start})
        return json.dumps({"assignments": assignments})

    def _candidate_starts(self) -> Iterator[int]:
        yield from range(self._day_start, SLOTS_PER_DAY)
        yield from range(0, self._day_start)

    def _first_fit(self, duration: int, occupied: set[int]) -> int | None:
        for start in self._candidate_starts():
            if start + duration > SLOTS_PER_DAY:
                continue
            if any(slot in occupied for slot in occupied_slots(start, duration)):
                continue
            return start
        return None


def _prompt_text(payload: Dict[str, Any]) -> str:
    texts: list[str] = []
    for message in payload.get("contents") or []:
        if not isinstance(message, dict):
            continue
        for part in message.get("parts") or []:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                texts.append(part["text"])
    return "\n".join(texts)
