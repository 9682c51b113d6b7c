from __future__ import annotations

import contextlib
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from taskapi.exceptions import BadRequestError, TaskNotFoundError
from taskapi.logging_config import app_logger
from taskapi.models.task import Task
from taskapi.routes.dependencies import get_registry, get_runner
from taskapi.schemas.task_schemas import TaskAccepted, TaskOut
from taskapi.services.task_manager import TaskRegistry
from taskapi.services.task_runner import LifecycleRunner

tasks_router = APIRouter(prefix="/tasks", tags=["tasks"])


def _require_id(task_id: Optional[str]) -> str:
    if task_id is None or not task_id.strip():
        raise BadRequestError("Task ID is required")
    return task_id


@tasks_router.post("", response_model=TaskAccepted, status_code=status.HTTP_202_ACCEPTED)
def api_create_task(
    registry: TaskRegistry = Depends(get_registry),
    runner: LifecycleRunner = Depends(get_runner),
):
    task = Task()
    registry.add(task)
    app_logger.info("task %s: created and accepted", task.id)

    try:
        runner.dispatch(task)
    except Exception:
        app_logger.exception("task %s: dispatch failed, removing it", task.id)
        with contextlib.suppress(TaskNotFoundError):
            registry.delete(task.id)
        raise
    return TaskAccepted(id=task.id, status=task.status)


@tasks_router.get("", include_in_schema=False)
@tasks_router.get("/", include_in_schema=False)
@tasks_router.delete("", include_in_schema=False)
@tasks_router.delete("/", include_in_schema=False)
def api_missing_task_id():
    _require_id(None)


@tasks_router.get("/{task_id}", response_model=TaskOut)
def api_get_task(
    task_id: str,
    registry: TaskRegistry = Depends(get_registry),
):
    task = registry.get(_require_id(task_id))
    snap = task.snapshot()
    app_logger.info("task %s: status requested, status=%s", task_id, snap.status.value)
    return TaskOut.from_snapshot(snap)


@tasks_router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_task(
    task_id: str,
    registry: TaskRegistry = Depends(get_registry),
):
    registry.delete(_require_id(task_id))
    app_logger.info("task %s: deleted", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
