# tests/test_tasks_api.py

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from taskapi.models.task import Task
from taskapi.routes.app import create_app
from taskapi.services.task_manager import TaskRegistry
from taskapi.services.task_runner import LifecycleRunner

from .fakes import ManualClock, RecordingSleeper

ZERO_TIME = "0001-01-01T00:00:00Z"


def test_ping(client: TestClient) -> None:
    resp = client.get("/ping")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_create_task_without_body(client: TestClient, registry: TaskRegistry) -> None:
    resp = client.post("/tasks")

    assert resp.status_code == 202
    data = resp.json()
    assert data["id"]
    assert data["status"] in ("pending", "running")
    assert data["message"] == "Task accepted and processing"
    assert data["id"] in registry


def test_create_task_ignores_body(client: TestClient) -> None:
    resp = client.post("/tasks", json={"anything": "goes"})
    assert resp.status_code == 202
    assert resp.json()["id"]


def test_get_running_task(client: TestClient, registry: TaskRegistry) -> None:
    clock = ManualClock()
    task = Task(task_id="test-task", clock=clock)
    task.begin()
    clock.advance(minutes=1)
    registry.add(task)

    resp = client.get("/tasks/test-task")

    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == "test-task"
    assert data["status"] == "running"
    assert data["duration"] == "1m0s"
    assert data["completed_at"] == ZERO_TIME
    assert datetime.fromisoformat(data["started_at"].replace("Z", "+00:00")) == task.started_at


def test_get_pending_task_has_zero_timestamps(client: TestClient, registry: TaskRegistry) -> None:
    registry.add(Task(task_id="waiting"))

    data = client.get("/tasks/waiting").json()

    assert data["status"] == "pending"
    assert data["started_at"] == ZERO_TIME
    assert data["completed_at"] == ZERO_TIME
    assert data["duration"] == ""


def test_get_completed_task(client: TestClient, registry: TaskRegistry) -> None:
    clock = ManualClock(datetime(2024, 5, 1, tzinfo=timezone.utc))
    task = Task(task_id="done", clock=clock)
    task.begin()
    clock.advance(minutes=3, seconds=12)
    task.finish()
    registry.add(task)

    data = client.get("/tasks/done").json()

    assert data["status"] == "completed"
    assert data["duration"] == "3m12s"
    assert data["completed_at"] != ZERO_TIME


def test_get_unknown_task(client: TestClient) -> None:
    resp = client.get("/tasks/non-existent")

    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "task with ID non-existent not found"


def test_delete_task(client: TestClient, registry: TaskRegistry) -> None:
    registry.add(Task(task_id="delete-me"))

    resp = client.delete("/tasks/delete-me")

    assert resp.status_code == 204
    assert resp.content == b""
    assert "delete-me" not in registry


def test_delete_unknown_task(client: TestClient) -> None:
    resp = client.delete("/tasks/non-existent")
    assert resp.status_code == 404


@pytest.mark.parametrize("method", ["get", "delete"])
@pytest.mark.parametrize("path", ["/tasks", "/tasks/", "/tasks/%20"])
def test_missing_task_id(client: TestClient, method: str, path: str) -> None:
    resp = getattr(client, method)(path)

    assert resp.status_code == 400
    assert resp.text == "Task ID is required"


def test_full_workflow(client: TestClient) -> None:
    resp = client.post("/tasks")
    assert resp.status_code == 202
    task_id = resp.json()["id"]
    assert task_id

    resp = client.get(f"/tasks/{task_id}")
    assert resp.status_code == 200
    assert resp.json()["status"] in ("pending", "running")

    resp = client.delete(f"/tasks/{task_id}")
    assert resp.status_code == 204

    resp = client.get(f"/tasks/{task_id}")
    assert resp.status_code == 404


def test_created_task_reaches_running(client: TestClient, blocking_sleeper) -> None:
    task_id = client.post("/tasks").json()["id"]

    assert blocking_sleeper.entered.wait(timeout=5)
    data = client.get(f"/tasks/{task_id}").json()
    assert data["status"] == "running"
    assert data["started_at"] != ZERO_TIME
    assert data["completed_at"] == ZERO_TIME


def test_failed_dispatch_leaves_no_task(registry: TaskRegistry, monkeypatch) -> None:
    app = create_app(registry=registry, runner=LifecycleRunner(sleeper=RecordingSleeper()))

    def refuse(task: Task):
        raise RuntimeError("can't start new thread")

    monkeypatch.setattr(app.state.runner, "dispatch", refuse)

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.post("/tasks")

    assert resp.status_code == 500
    assert len(registry) == 0
