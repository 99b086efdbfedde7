"""Durable per-browser memory of an in-flight attempt.

The store reuses the key names of the web client's browser ``localStorage``.
Value formats differ: the web client keeps the start time as epoch
milliseconds, this store keeps an ISO-8601 string.

    quiz_{quizId}_student_{studentId}_startTime   ISO-8601 timestamp
    quiz_{quizId}_student_{studentId}_answers     JSON object, question id -> option
    completed_quiz_{quizId}                       "true" once submitted

Values are read if present and initialised otherwise, rewritten on every
mutation and deleted when the attempt reaches a terminal state.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Protocol

from soma_exam.constants.exam_constants import COMPLETED_MARKER_VALUE

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key/value persistence."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._values)


class JsonFileStore:
    """Keeps every key in one JSON document, rewritten atomically on each change."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = Lock()
        self._values = self._read()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._flush()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._values)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Local storage at %s is unreadable; starting empty", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, self._path)


def attempt_key_prefix(quiz_id: int, student_id: int) -> str:
    return f"quiz_{quiz_id}_student_{student_id}"


def start_time_key(quiz_id: int, student_id: int) -> str:
    return f"{attempt_key_prefix(quiz_id, student_id)}_startTime"


def answers_key(quiz_id: int, student_id: int) -> str:
    return f"{attempt_key_prefix(quiz_id, student_id)}_answers"


def completed_key(quiz_id: int) -> str:
    return f"completed_quiz_{quiz_id}"


class AttemptStore:
    """Maps attempt state onto a key/value store."""

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend

    def load_or_init_start_time(self, quiz_id: int, student_id: int, now: datetime) -> datetime:
        """Return the persisted start time, persisting ``now`` if there is none."""
        key = start_time_key(quiz_id, student_id)
        saved = self._backend.get(key)
        if saved is not None:
            try:
                start_time = datetime.fromisoformat(saved)
                if start_time.tzinfo is None:
                    start_time = start_time.replace(tzinfo=timezone.utc)
                return start_time
            except ValueError:
                logger.warning("Ignoring malformed start time %r under %s", saved, key)
        self._backend.set(key, now.isoformat())
        return now

    def load_answers(self, quiz_id: int, student_id: int) -> dict[int, str]:
        key = answers_key(quiz_id, student_id)
        saved = self._backend.get(key)
        if saved is None:
            return {}
        try:
            raw = json.loads(saved)
            return {int(question_id): str(option) for question_id, option in raw.items()}
        except (ValueError, TypeError, AttributeError):
            logger.warning("Ignoring malformed answers under %s", key)
            return {}

    def save_answers(self, quiz_id: int, student_id: int, answers: dict[int, str]) -> None:
        payload = {str(question_id): option for question_id, option in answers.items()}
        self._backend.set(answers_key(quiz_id, student_id), json.dumps(payload))

    def clear_attempt(self, quiz_id: int, student_id: int) -> None:
        self._backend.remove(start_time_key(quiz_id, student_id))
        self._backend.remove(answers_key(quiz_id, student_id))

    def is_completed(self, quiz_id: int) -> bool:
        return self._backend.get(completed_key(quiz_id)) == COMPLETED_MARKER_VALUE

    def mark_completed(self, quiz_id: int) -> None:
        self._backend.set(completed_key(quiz_id), COMPLETED_MARKER_VALUE)
