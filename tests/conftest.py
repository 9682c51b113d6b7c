# tests/conftest.py

from __future__ import annotations

import os
import tempfile

# Keep rotating log files out of the working tree; must run before taskapi is imported.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="taskapi-logs-"))

import pytest
from fastapi.testclient import TestClient

from taskapi.routes.app import create_app
from taskapi.services.task_manager import TaskRegistry
from taskapi.services.task_runner import LifecycleRunner

from .fakes import BlockingSleeper, RecordingSleeper


@pytest.fixture()
def registry() -> TaskRegistry:
    return TaskRegistry()


@pytest.fixture()
def recording_sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture()
def blocking_sleeper():
    sleeper = BlockingSleeper()
    yield sleeper
    sleeper.release()


@pytest.fixture()
def client(registry: TaskRegistry, blocking_sleeper: BlockingSleeper):
    """
    App wired with a sleeper that never lets a task finish on its own,
    so freshly created tasks are observed as pending or running.
    """
    app = create_app(registry=registry, runner=LifecycleRunner(sleeper=blocking_sleeper))
    with TestClient(app) as c:
        yield c
