"""Exam-related constants shared across core and UI layers."""

from pathlib import Path

TICK_INTERVAL_MS: int = 1000
LOW_TIME_THRESHOLD_SECONDS: int = 300
CRITICAL_TIME_THRESHOLD_SECONDS: int = 60

MIN_OPTION_COUNT: int = 2
MAX_OPTION_COUNT: int = 8
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D", "E", "F", "G", "H")

DEFAULT_LOCAL_STORAGE_PATH: Path = Path.home() / ".soma_exam" / "local_storage.json"
COMPLETED_MARKER_VALUE: str = "true"
