from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from soma_exam.core.exam_controller import ExamSessionController
from soma_exam.core.models import (
    Question,
    Quiz,
    StudentIdentity,
    SubmissionPayload,
    SubmissionResult,
)
from soma_exam.core.services.attempt_store import AttemptStore, MemoryStore

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeQuestionSource:
    def __init__(self, questions: list[Question], error: Exception | None = None) -> None:
        self.questions = questions
        self.error = error
        self.calls: list[tuple[int, str | None]] = []

    def load_questions(self, quiz_id: int, pin: str | None = None) -> list[Question]:
        self.calls.append((quiz_id, pin))
        if self.error is not None:
            raise self.error
        return list(self.questions)


class FakeSubmissionSink:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.payloads: list[SubmissionPayload] = []
        self.during_submit = None

    def submit(self, payload: SubmissionPayload) -> SubmissionResult:
        self.payloads.append(payload)
        if self.during_submit is not None:
            self.during_submit()
        if self.error is not None:
            raise self.error
        return SubmissionResult(submission_id=len(self.payloads), total_score=1, max_possible_score=2)


class FakeRegistrar:
    def __init__(self, student_id: int = 7, error: Exception | None = None) -> None:
        self.student_id = student_id
        self.error = error
        self.identities: list[StudentIdentity] = []

    def register(self, identity: StudentIdentity) -> int:
        self.identities.append(identity)
        if self.error is not None:
            raise self.error
        return self.student_id


class FakePriorChecker:
    def __init__(self, submitted: bool = False, error: Exception | None = None) -> None:
        self.submitted = submitted
        self.error = error
        self.calls = 0

    def has_submitted(self, quiz_id: int, identity: StudentIdentity) -> bool:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.submitted


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def quiz() -> Quiz:
    return Quiz(
        id=1,
        title="Algebra midterm",
        time_limit_minutes=10,
        due_date=START + timedelta(days=1),
        question_ids=[11, 12, 13],
    )


@pytest.fixture
def questions() -> list[Question]:
    return [
        Question(id=11, prompt_text="What is $2 + 2$?", options=["3", "4"]),
        Question(id=12, prompt_text="Solve \\frac{x}{2} = 3", options=["5", "6", "7"], marks=2),
        Question(id=13, prompt_text="Pick the prime", options=["4", "6", "7", "9"]),
    ]


@pytest.fixture
def identity() -> StudentIdentity:
    return StudentIdentity(first_name="Ada", last_name="Lovelace")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def collaborators(questions):
    return {
        "question_source": FakeQuestionSource(questions),
        "submission_sink": FakeSubmissionSink(),
        "identity_registrar": FakeRegistrar(),
        "prior_submission_checker": FakePriorChecker(),
    }


@pytest.fixture
def make_controller(quiz, collaborators, memory_store, clock):
    def factory(**overrides) -> ExamSessionController:
        options = {
            **collaborators,
            "store": AttemptStore(memory_store),
            "clock": clock,
        }
        options.update(overrides)
        target_quiz = options.pop("quiz", quiz)
        return ExamSessionController(target_quiz, **options)

    return factory
