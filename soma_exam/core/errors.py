"""Exception taxonomy for the exam session.

Every failure the session can meet resolves to one of these types so the UI
can show a message and stay in a safe state. None of them is fatal.
"""

from __future__ import annotations

from enum import Enum


class ExamError(Exception):
    """Base class for all exam session failures."""


class InvalidPhaseError(ExamError):
    """Raised when an operation is not allowed in the current phase."""


class QuizClosedError(InvalidPhaseError):
    """Raised for any attempt operation after the due date has passed."""


class AlreadySubmittedError(InvalidPhaseError):
    """Raised for any attempt operation once the student has finished this quiz."""


class RegistrationError(ExamError):
    """Raised when the identity registrar cannot provide a student id."""


class ServiceUnavailableError(ExamError):
    """Raised when a remote collaborator cannot be reached."""


class SubmissionError(ExamError):
    """Raised when the submission sink rejects or fails to persist an attempt."""


class DuplicateAttemptError(SubmissionError):
    """Raised when the sink already holds an attempt for this student and quiz."""


class LoadFailureReason(Enum):
    """Why the question source could not provide questions."""

    NOT_FOUND = "not-found"
    UNAUTHORIZED = "unauthorized"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


class QuestionLoadError(ExamError):
    """Raised when the question list for a quiz cannot be loaded."""

    def __init__(self, message: str, reason: LoadFailureReason = LoadFailureReason.UNAVAILABLE) -> None:
        super().__init__(message)
        self.reason = reason


class QuizImportError(ExamError):
    """Raised when a quiz definition file cannot be parsed."""
