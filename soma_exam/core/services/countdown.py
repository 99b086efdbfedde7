"""Countdown arithmetic for the exam timer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
import math

from soma_exam.constants.exam_constants import (
    CRITICAL_TIME_THRESHOLD_SECONDS,
    LOW_TIME_THRESHOLD_SECONDS,
)


class CountdownUrgency(Enum):
    NORMAL = "normal"
    LOW = "low"
    CRITICAL = "critical"


def remaining_seconds(now: datetime, start_time: datetime, time_limit_minutes: int) -> int:
    """Whole seconds left in the attempt, never negative.

    Rounds up so the reading only reaches zero once the full limit has elapsed.
    """
    limit_seconds = time_limit_minutes * 60
    elapsed = (now - start_time).total_seconds()
    return max(0, math.ceil(limit_seconds - elapsed))


def format_countdown(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def countdown_urgency(seconds: int) -> CountdownUrgency:
    if seconds < CRITICAL_TIME_THRESHOLD_SECONDS:
        return CountdownUrgency.CRITICAL
    if seconds < LOW_TIME_THRESHOLD_SECONDS:
        return CountdownUrgency.LOW
    return CountdownUrgency.NORMAL


class ExpiryLatch:
    """Single-shot latch: ``trip`` returns True the first time only."""

    def __init__(self) -> None:
        self._tripped = False

    def trip(self) -> bool:
        if self._tripped:
            return False
        self._tripped = True
        return True

    def is_tripped(self) -> bool:
        return self._tripped
