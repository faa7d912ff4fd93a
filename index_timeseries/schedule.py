"""
Day-offset schedule for walking backward through the index history.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

DEFAULT_START_DAYS = 1
DEFAULT_STOP_DAYS = 70
DEFAULT_STEP_DAYS = 4


def day_offsets(
    start: int = DEFAULT_START_DAYS,
    stop: int = DEFAULT_STOP_DAYS,
    step: int = DEFAULT_STEP_DAYS,
) -> Iterator[int]:
    """
    Yield day offsets `start, start + step, ...` while strictly below `stop`.

    With the defaults this is 1, 5, 9, ..., 69 (18 values).
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    offset = start
    while offset < stop:
        yield offset
        offset += step


def target_time(offset: int, now: Optional[datetime] = None) -> datetime:
    """Return the instant `offset` days before `now` (UTC when naive or omitted)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - timedelta(days=offset)


__all__ = [
    "DEFAULT_START_DAYS",
    "DEFAULT_STEP_DAYS",
    "DEFAULT_STOP_DAYS",
    "day_offsets",
    "target_time",
]
