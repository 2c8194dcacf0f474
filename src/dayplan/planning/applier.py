"""Commit a validated proposal batch to the schedule store."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..errors import NotFoundError
from ..schedule.schema import Assignment
from ..schedule.store import ScheduleStore
from ..slots import format_time_slot
from .validator import ValidatedAssignment

LOGGER = logging.getLogger(__name__)

AppliedCallback = Callable[[Assignment], None]


def apply_batch(
    store: ScheduleStore,
    batch: Sequence[ValidatedAssignment],
    *,
    on_applied: Optional[AppliedCallback] = None,
) -> list[Assignment]:
    """Assign every validated pair through the store's direct write path.

    The batch must come from :func:`~dayplan.planning.validator.validate_proposals`
    against the store's current state, which already rules out overlaps and
    unknown activities. An empty batch is a successful no-op.
    """
    missing = [item.activity.title for item in batch if item.activity not in store]
    if missing:
        names = ", ".join(f'"{title}"' for title in missing)
        raise NotFoundError(f"Batch refers to activities no longer in the schedule: {names}")

    applied: list[Assignment] = []
    for item in batch:
        assignment = store.assign_activity(item.activity, item.start_time)
        applied.append(assignment)
        LOGGER.info(
            'Assigned "%s" to %s (slot %d)',
            item.activity.title,
            format_time_slot(item.start_time),
            item.start_time,
        )
        if on_applied is not None:
            on_applied(assignment)
    return applied


__all__ = ["AppliedCallback", "apply_batch"]
