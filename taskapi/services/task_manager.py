from __future__ import annotations

from typing import Dict

from taskapi.exceptions import TaskNotFoundError
from taskapi.helpers.locks import ReadWriteLock
from taskapi.models.task import Task


class TaskRegistry:
    """In-memory id -> Task map. The lock covers the map only, never task internals."""

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._lock = ReadWriteLock()

    def add(self, task: Task) -> None:
        with self._lock.write():
            self._tasks[task.id] = task

    def get(self, task_id: str) -> Task:
        with self._lock.read():
            task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def delete(self, task_id: str) -> None:
        with self._lock.write():
            if self._tasks.pop(task_id, None) is None:
                raise TaskNotFoundError(task_id)

    def __contains__(self, task_id: object) -> bool:
        with self._lock.read():
            return task_id in self._tasks

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tasks)
