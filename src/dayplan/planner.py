"""Single-session day planner: direct edits plus planner-driven auto-assignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .errors import ParseError, PlannerTransportError, ValidationError
from .models.llm_client import LLMClient
from .planning.applier import AppliedCallback, apply_batch
from .planning.exchange_log import write_exchange_log
from .planning.validator import validate_proposals
from .prompts import DEFAULT_PREFERENCES, compose_assignment_prompt
from .schedule.schema import Activity, Assignment
from .schedule.store import Schedule, ScheduleStore

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AutoAssignmentResult:
    """Outcome of a successful :meth:`DayPlanner.request_auto_assignment` call."""

    applied: tuple[Assignment, ...] = ()
    prompt: Optional[str] = None
    raw_response: Optional[str] = None
    skipped: bool = False


class DayPlanner:
    """Organise one day's activities into non-overlapping half-hour slots.

    The planner assumes exclusive use by one session. Everything around the
    planner call in :meth:`request_auto_assignment` runs without interleaving;
    a concurrent caller would need to hold a lock from the unassigned snapshot
    until the batch is applied.
    """

    def __init__(
        self,
        store: Optional[ScheduleStore] = None,
        *,
        preferences: Sequence[str] = DEFAULT_PREFERENCES,
        logs_root: Optional[Path] = None,
    ) -> None:
        self._store = store if store is not None else ScheduleStore()
        self._preferences = tuple(preferences)
        self._logs_root = logs_root

    @property
    def store(self) -> ScheduleStore:
        return self._store

    def add_activity(self, title: str, duration: int) -> Activity:
        return self._store.add_activity(title, duration)

    def remove_activity(self, activity: Activity) -> None:
        self._store.remove_activity(activity)

    def assign_activity(self, activity: Activity, start_time: int) -> Assignment:
        """Place ``activity`` directly; other activities' slots are not checked."""
        return self._store.assign_activity(activity, start_time)

    def unassign_activity(self, activity: Activity) -> None:
        self._store.unassign_activity(activity)

    def get_schedule(self) -> Schedule:
        return self._store.get_schedule()

    def activities(self) -> tuple[Activity, ...]:
        return self._store.activities()

    def assignments(self) -> tuple[Assignment, ...]:
        return self._store.assignments()

    def unassigned_activities(self) -> tuple[Activity, ...]:
        return self._store.unassigned_activities()

    def assignment_for(self, activity: Activity) -> Optional[Assignment]:
        return self._store.assignment_for(activity)

    def request_auto_assignment(
        self,
        client: LLMClient,
        *,
        on_applied: Optional[AppliedCallback] = None,
    ) -> AutoAssignmentResult:
        """Ask ``client`` to place every unassigned activity, all or nothing.

        Raises :class:`ParseError` or :class:`ValidationError` when the reply is
        unusable and propagates :class:`PlannerTransportError` from the client.
        The store is untouched in every failure case.
        """
        unassigned = self._store.unassigned_activities()
        if not unassigned:
            LOGGER.info("All activities are already assigned; nothing to request.")
            return AutoAssignmentResult(skipped=True)

        existing = self._store.assignments()
        prompt = compose_assignment_prompt(unassigned, existing, preferences=self._preferences)
        LOGGER.info(
            "Requesting assignments for %d activit%s from %s",
            len(unassigned),
            "y" if len(unassigned) == 1 else "ies",
            client.model,
        )

        try:
            raw_response = client.complete(prompt)
        except PlannerTransportError as error:
            LOGGER.error("Planner call failed: %s", error)
            self._log_exchange(client, prompt, None, "transport-error", error=error)
            raise

        LOGGER.debug("Raw planner response:\n%s", raw_response)

        try:
            batch = validate_proposals(raw_response, unassigned, existing)
        except ParseError as error:
            LOGGER.warning("Planner response could not be parsed: %s", error)
            self._log_exchange(client, prompt, raw_response, "parse-error", error=error)
            raise
        except ValidationError as error:
            LOGGER.warning("Rejected planner proposals:\n%s", "\n".join(error.issues))
            self._log_exchange(
                client, prompt, raw_response, "rejected", issues=error.issues, error=error
            )
            raise

        applied = apply_batch(self._store, batch, on_applied=on_applied)
        self._log_exchange(client, prompt, raw_response, "applied", applied=applied)
        return AutoAssignmentResult(
            applied=tuple(applied),
            prompt=prompt,
            raw_response=raw_response,
        )

    def _log_exchange(
        self,
        client: LLMClient,
        prompt: str,
        raw_response: Optional[str],
        outcome: str,
        *,
        issues: Sequence[str] = (),
        applied: Sequence[Assignment] = (),
        error: Optional[Exception] = None,
    ) -> None:
        path = write_exchange_log(
            self._logs_root,
            model=client.model,
            prompt=prompt,
            raw_response=raw_response,
            outcome=outcome,
            issues=issues,
            applied=applied,
            error=error,
        )
        if path is not None:
            LOGGER.debug("Wrote planner exchange log to %s", path)


__all__ = ["AutoAssignmentResult", "DayPlanner"]
