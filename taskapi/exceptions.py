from __future__ import annotations


class TaskNotFoundError(LookupError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"task with ID {task_id} not found")


class BadRequestError(ValueError):
    pass
