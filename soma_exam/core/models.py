"""Domain models for the exam session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from soma_exam.core.errors import ExamError


@dataclass(slots=True)
class Quiz:
    """Quiz metadata as published to students."""

    id: int
    title: str
    time_limit_minutes: int
    due_date: datetime
    question_ids: list[int] = field(default_factory=list)
    pin_required: bool = False

    def __post_init__(self) -> None:
        if self.time_limit_minutes <= 0:
            raise ValueError("Time limit must be a positive number of minutes.")

    def is_closed(self, now: datetime) -> bool:
        return self.due_date < now


@dataclass(slots=True)
class Question:
    """Multiple-choice question with two to eight options."""

    id: int
    prompt_text: str
    options: list[str]
    marks: int = 1
    correct_answer: str | None = None  # Never present on the student side
    image_url: str | None = None


@dataclass(slots=True)
class StudentIdentity:
    """Identifying information a student types into the entry gate."""

    first_name: str
    last_name: str
    pin: str | None = None

    def normalized(self, pin_required: bool = False) -> StudentIdentity:
        """Return a trimmed copy, raising ValueError for missing fields."""
        first_name = self.first_name.strip()
        last_name = self.last_name.strip()
        if not first_name or not last_name:
            raise ValueError("First and last name are required.")
        pin = (self.pin or "").strip().upper() or None
        if pin_required and pin is None:
            raise ValueError("This quiz requires a PIN.")
        return StudentIdentity(first_name=first_name, last_name=last_name, pin=pin)


class ExamPhase(Enum):
    """Lifecycle phase of one attempt."""

    ENTRY = "entry"
    CLOSED = "closed"
    IN_PROGRESS = "in-progress"
    REVIEWING = "reviewing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    BLOCKED = "blocked"

    @property
    def is_terminal(self) -> bool:
        return self in (ExamPhase.CLOSED, ExamPhase.SUBMITTED, ExamPhase.BLOCKED)

    @property
    def is_live(self) -> bool:
        return self in (ExamPhase.IN_PROGRESS, ExamPhase.REVIEWING)


class EntryDecision(Enum):
    """Result of checking whether the entry gate may be shown."""

    OPEN = "open"
    CLOSED = "closed"
    BLOCKED = "blocked"


class SubmitTrigger(Enum):
    """What asked for the attempt to be submitted."""

    MANUAL = "manual"
    TIMER = "timer"


@dataclass(slots=True)
class Attempt:
    """Client-side state of one student's pass through one quiz."""

    student_id: int
    quiz_id: int
    start_time: datetime
    answers: dict[int, str] = field(default_factory=dict)
    current_index: int = 0


@dataclass(slots=True)
class QuestionStatus:
    """Review-grid entry for a single question."""

    index: int
    question_id: int
    answered: bool


@dataclass(slots=True)
class SubmissionPayload:
    """What the submission sink receives."""

    student_id: int
    quiz_id: int
    answers: dict[int, str]


@dataclass(slots=True)
class SubmissionResult:
    """Persisted submission as reported by the sink."""

    submission_id: int
    total_score: int = 0
    max_possible_score: int = 0

    @property
    def percentage(self) -> int:
        if self.max_possible_score <= 0:
            return 0
        return round(self.total_score / self.max_possible_score * 100)


class SubmitStatus(Enum):
    SUBMITTED = "submitted"
    FAILED = "failed"
    SUPPRESSED = "suppressed"


@dataclass(slots=True)
class SubmitOutcome:
    """Result of one call to ``ExamSessionController.submit``."""

    status: SubmitStatus
    result: SubmissionResult | None = None
    error: ExamError | None = None
