from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

# Serialized in place of timestamps that have not been set yet.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def round_to_seconds(delta: timedelta) -> timedelta:
    """Round to the nearest whole second, halves away from zero."""
    seconds = delta.total_seconds()
    rounded = math.floor(abs(seconds) + 0.5)
    return timedelta(seconds=rounded if seconds >= 0 else -rounded)


def format_duration(delta: Optional[timedelta]) -> str:
    """
    Compact form of a whole-second duration: "0s", "42s", "3m12s", "1h0m3s".
    None (no duration yet) is rendered as an empty string.
    """
    if delta is None:
        return ""
    total = int(delta.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def or_zero_time(value: Optional[datetime]) -> datetime:
    return value if value is not None else ZERO_TIME
