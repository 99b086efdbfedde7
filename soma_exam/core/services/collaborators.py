"""Contracts for the remote services an exam session depends on."""

from __future__ import annotations

from typing import Protocol

from soma_exam.core.models import (
    Question,
    StudentIdentity,
    SubmissionPayload,
    SubmissionResult,
)


class QuestionSource(Protocol):
    """Read-only access to a quiz's ordered questions.

    Raises ``QuestionLoadError`` (reason not-found, unauthorized or unavailable).
    """

    def load_questions(self, quiz_id: int, pin: str | None = None) -> list[Question]: ...


class SubmissionSink(Protocol):
    """Persists a finished attempt.

    Raises ``SubmissionError``, ``DuplicateAttemptError`` or ``ServiceUnavailableError``.
    """

    def submit(self, payload: SubmissionPayload) -> SubmissionResult: ...


class IdentityRegistrar(Protocol):
    """Turns typed-in identity into a durable student id. Raises ``RegistrationError``."""

    def register(self, identity: StudentIdentity) -> int: ...


class PriorSubmissionChecker(Protocol):
    """Answers whether this student already submitted this quiz."""

    def has_submitted(self, quiz_id: int, identity: StudentIdentity) -> bool: ...
