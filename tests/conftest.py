from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dayplan.models.llm_client import LLMClient  # noqa: E402
from dayplan.planner import DayPlanner  # noqa: E402
from dayplan.schedule.schema import Activity  # noqa: E402


class ScriptedClient(LLMClient):
    """Planner stub that replies with canned text and records every prompt."""

    def __init__(self, reply: str | Callable[[str], str]) -> None:
        super().__init__("scripted", max_attempts=1)
        self._reply = reply
        self.prompts: list[str] = []

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        self.prompts.append(prompt)
        return super().complete(prompt, system_prompt=system_prompt)

    def _raw_invoke(self, payload: dict[str, Any]) -> str:
        if callable(self._reply):
            return self._reply(self.prompts[-1])
        return self._reply


@dataclass(slots=True)
class MixedDay:
    """A planner with a manual morning and a few activities still unplaced."""

    planner: DayPlanner
    placed: dict[str, Activity] = field(default_factory=dict)
    pending: dict[str, Activity] = field(default_factory=dict)


@pytest.fixture()
def planner() -> DayPlanner:
    return DayPlanner()


@pytest.fixture()
def scripted() -> type[ScriptedClient]:
    return ScriptedClient


@pytest.fixture()
def mixed_day() -> MixedDay:
    """Breakfast at 14 and workout at 16-17; study, lunch and dinner pending."""
    planner = DayPlanner()
    breakfast = planner.add_activity("Breakfast", 1)
    workout = planner.add_activity("Morning Workout", 2)
    planner.assign_activity(breakfast, 14)
    planner.assign_activity(workout, 16)
    study = planner.add_activity("Study Session", 3)
    lunch = planner.add_activity("Lunch", 1)
    dinner = planner.add_activity("Dinner", 1)
    return MixedDay(
        planner=planner,
        placed={"Breakfast": breakfast, "Morning Workout": workout},
        pending={"Study Session": study, "Lunch": lunch, "Dinner": dinner},
    )
