from fastapi import Request

from taskapi.services.task_manager import TaskRegistry
from taskapi.services.task_runner import LifecycleRunner


def get_registry(request: Request) -> TaskRegistry:
    return request.app.state.registry


def get_runner(request: Request) -> LifecycleRunner:
    return request.app.state.runner
