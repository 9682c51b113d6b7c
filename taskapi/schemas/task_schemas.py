from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskapi.helpers.helpers import format_duration, or_zero_time
from taskapi.models.task import TaskSnapshot, TaskStatus


class TaskAccepted(BaseModel):
    id: str
    status: TaskStatus
    message: str = "Task accepted and processing"

    model_config = ConfigDict(use_enum_values=True)


class TaskOut(BaseModel):
    id: str
    status: TaskStatus
    created_at: datetime
    started_at: datetime = Field(..., description="0001-01-01T00:00:00Z until the task starts")
    completed_at: datetime = Field(..., description="0001-01-01T00:00:00Z until the task completes")
    duration: str = Field("", description='Whole seconds, e.g. "3m12s"; empty while pending')

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_snapshot(cls, snap: TaskSnapshot) -> "TaskOut":
        return cls(
            id=snap.id,
            status=snap.status,
            created_at=snap.created_at,
            started_at=or_zero_time(snap.started_at),
            completed_at=or_zero_time(snap.completed_at),
            duration=format_duration(snap.duration),
        )
