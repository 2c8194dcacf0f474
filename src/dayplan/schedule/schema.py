"""Typed records tracked by the schedule store."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def new_activity_id() -> str:
    """Return a fresh opaque activity handle."""
    return uuid4().hex


class RecordModel(BaseModel):
    """Base Pydantic model with strict, immutable field handling."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class Activity(RecordModel):
    """A schedulable activity measured in half-hour units.

    Two activities may share a title; ``id`` is what tells them apart.
    """

    id: str = Field(default_factory=new_activity_id)
    title: str
    duration: int
    created_at: datetime = Field(default_factory=utc_now)

    def __str__(self) -> str:
        return self.title


class Assignment(RecordModel):
    """An activity placed at a starting slot."""

    activity: Activity
    start_time: int

    @property
    def end_time(self) -> int:
        """Return the first slot after the assignment (exclusive bound)."""
        return self.start_time + self.activity.duration


__all__ = ["Activity", "Assignment", "RecordModel", "new_activity_id", "utc_now"]
