from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    task_min_duration_seconds: float
    task_max_duration_seconds: float
    log_dir: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        task_min_duration_seconds=float(os.getenv("TASK_MIN_DURATION_SECONDS", "180")),
        task_max_duration_seconds=float(os.getenv("TASK_MAX_DURATION_SECONDS", "300")),
        log_dir=os.getenv("LOG_DIR", "logs"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
