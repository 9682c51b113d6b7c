from __future__ import annotations

import random
import threading
import time
from datetime import timedelta
from typing import Callable, Optional

from taskapi.helpers.helpers import format_duration
from taskapi.logging_config import app_logger
from taskapi.models.task import Task

Sleeper = Callable[[timedelta], None]

DEFAULT_MIN_DURATION = timedelta(minutes=3)
DEFAULT_MAX_DURATION = timedelta(minutes=5)


def real_sleep(duration: timedelta) -> None:
    time.sleep(duration.total_seconds())


class LifecycleRunner:
    """
    Drives a task pending -> running -> completed around a simulated
    I/O wait of random length in [min_duration, max_duration].
    """

    def __init__(
        self,
        sleeper: Sleeper = real_sleep,
        min_duration: timedelta = DEFAULT_MIN_DURATION,
        max_duration: timedelta = DEFAULT_MAX_DURATION,
        rng: Optional[random.Random] = None,
    ):
        if min_duration < timedelta(0):
            raise ValueError(f"min_duration must not be negative, got {min_duration}")
        if min_duration > max_duration:
            raise ValueError(
                f"min_duration ({min_duration}) is greater than max_duration ({max_duration})"
            )
        self.sleeper = sleeper
        self.min_duration = min_duration
        self.max_duration = max_duration
        self._rng = rng or random.Random()

    def pick_duration(self) -> timedelta:
        lo = self.min_duration // timedelta(microseconds=1)
        hi = self.max_duration // timedelta(microseconds=1)
        return timedelta(microseconds=self._rng.randint(lo, hi))

    def run(self, task: Task) -> timedelta:
        app_logger.info("task %s: starting simulated I/O bound work", task.id)
        task.begin()

        duration = self.pick_duration()
        self.sleeper(duration)

        task.finish()
        app_logger.info(
            "task %s: completed simulated I/O bound work, duration_simulated=%s status=%s",
            task.id, format_duration(duration), task.status.value,
        )
        return duration

    def dispatch(self, task: Task) -> threading.Thread:
        """Run the task on a detached daemon thread and return immediately."""
        worker = threading.Thread(
            target=self._run_detached, args=(task,), name=f"task-{task.id}", daemon=True
        )
        worker.start()
        return worker

    def _run_detached(self, task: Task) -> None:
        # Nobody joins this thread, so failures are only visible in the log.
        try:
            self.run(task)
        except Exception:
            app_logger.exception("task %s: lifecycle runner failed", task.id)
