from __future__ import annotations

import enum
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from taskapi.helpers.helpers import round_to_seconds
from taskapi.logging_config import app_logger

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TaskSnapshot:
    id: str
    status: TaskStatus
    created_at: datetime
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    duration: Optional[timedelta]


class Task:
    """
    A single unit of simulated I/O-bound work.

    Status and timestamps move together under ``_lock``: ``begin`` and
    ``finish`` write them as a pair and every reader sees either the state
    before a transition or after it.
    """

    def __init__(self, task_id: Optional[str] = None, clock: Clock = utcnow):
        self._id = task_id if task_id is not None else str(uuid.uuid4())
        self._clock = clock
        self._lock = threading.Lock()
        self._status = TaskStatus.PENDING
        self._created_at = clock()
        self._started_at: Optional[datetime] = None
        self._completed_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"Task(id={self._id!r}, status={self.status.value!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def status(self) -> TaskStatus:
        with self._lock:
            return self._status

    @property
    def started_at(self) -> Optional[datetime]:
        with self._lock:
            return self._started_at

    @property
    def completed_at(self) -> Optional[datetime]:
        with self._lock:
            return self._completed_at

    def begin(self) -> bool:
        """pending -> running. Returns False (and changes nothing) from any other state."""
        with self._lock:
            if self._status is not TaskStatus.PENDING:
                current = self._status
            else:
                self._status = TaskStatus.RUNNING
                self._started_at = self._clock()
                return True
        app_logger.warning("task %s: begin ignored, status is %s", self._id, current.value)
        return False

    def finish(self) -> bool:
        """running -> completed. Returns False (and changes nothing) from any other state."""
        with self._lock:
            if self._status is not TaskStatus.RUNNING:
                current = self._status
            else:
                self._status = TaskStatus.COMPLETED
                self._completed_at = self._clock()
                return True
        app_logger.warning("task %s: finish ignored, status is %s", self._id, current.value)
        return False

    def duration(self) -> Optional[timedelta]:
        with self._lock:
            return self._duration_locked()

    def snapshot(self) -> TaskSnapshot:
        with self._lock:
            return TaskSnapshot(
                id=self._id,
                status=self._status,
                created_at=self._created_at,
                started_at=self._started_at,
                completed_at=self._completed_at,
                duration=self._duration_locked(),
            )

    def _duration_locked(self) -> Optional[timedelta]:
        if self._status is TaskStatus.RUNNING:
            elapsed = round_to_seconds(self._clock() - self._started_at)
            return max(elapsed, timedelta(0))
        if self._status is TaskStatus.COMPLETED:
            return round_to_seconds(self._completed_at - self._started_at)
        return None
