"""Per-call FIFO queues of eligible activities keyed by title."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from ..schedule.schema import Activity


class TitlePool:
    """Eligible activities grouped by title, oldest first.

    A pool is built for one batch call and thrown away afterwards. Duplicate
    titles are resolved by creation order, never by proposal order.
    """

    def __init__(self, activities: Iterable[Activity]) -> None:
        self._queues: dict[str, deque[Activity]] = {}
        for activity in activities:
            self._queues.setdefault(activity.title, deque()).append(activity)

    def pop(self, title: str) -> Optional[Activity]:
        """Take the oldest eligible activity for ``title``."""
        queue = self._queues.get(title)
        if not queue:
            return None
        return queue.popleft()

    def restore(self, activity: Activity) -> None:
        """Return ``activity`` to the front of its title queue."""
        self._queues.setdefault(activity.title, deque()).appendleft(activity)


__all__ = ["TitlePool"]
