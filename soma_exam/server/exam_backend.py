"""In-memory storage and grading shared by the API routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from itertools import count
from threading import Lock

from soma_exam.core.errors import DuplicateAttemptError
from soma_exam.core.models import Question, Quiz
from soma_exam.core.quiz_importer import ImportedQuiz


@dataclass(slots=True)
class StudentRecord:
    id: int
    first_name: str
    last_name: str


@dataclass(slots=True)
class AnswerBreakdown:
    answer: str
    correct: bool
    marks_earned: int


@dataclass(slots=True)
class SubmissionRecord:
    id: int
    student_id: int
    quiz_id: int
    total_score: int
    max_possible_score: int
    answers_breakdown: dict[int, AnswerBreakdown]
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _name_key(first_name: str, last_name: str) -> tuple[str, str]:
    return first_name.strip().casefold(), last_name.strip().casefold()


class ExamBackend:
    """Quizzes, students and submissions behind a single lock."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quiz_ids = count(1)
        self._question_ids = count(1)
        self._student_ids = count(1)
        self._submission_ids = count(1)
        self._quizzes: dict[int, Quiz] = {}
        self._quiz_pins: dict[int, str] = {}
        self._questions: dict[int, list[Question]] = {}
        self._students: dict[int, StudentRecord] = {}
        self._students_by_name: dict[tuple[str, str], StudentRecord] = {}
        self._submissions: list[SubmissionRecord] = []

    # --- Quizzes ---

    def add_quiz(
        self,
        title: str,
        time_limit_minutes: int,
        due_date: datetime,
        questions: list[Question],
        pin: str | None = None,
    ) -> Quiz:
        with self._lock:
            quiz_id = next(self._quiz_ids)
            stored = [
                Question(
                    id=next(self._question_ids),
                    prompt_text=question.prompt_text,
                    options=list(question.options),
                    marks=question.marks,
                    correct_answer=question.correct_answer,
                    image_url=question.image_url,
                )
                for question in questions
            ]
            quiz = Quiz(
                id=quiz_id,
                title=title,
                time_limit_minutes=time_limit_minutes,
                due_date=due_date,
                question_ids=[question.id for question in stored],
                pin_required=pin is not None,
            )
            self._quizzes[quiz_id] = quiz
            self._questions[quiz_id] = stored
            if pin is not None:
                self._quiz_pins[quiz_id] = pin.strip().upper()
            return quiz

    def add_imported_quiz(self, imported: ImportedQuiz) -> Quiz:
        return self.add_quiz(
            title=imported.title,
            time_limit_minutes=imported.time_limit_minutes,
            due_date=imported.due_date,
            questions=imported.questions,
            pin=imported.pin,
        )

    def get_quizzes(self) -> list[Quiz]:
        with self._lock:
            return list(self._quizzes.values())

    def get_quiz(self, quiz_id: int) -> Quiz | None:
        with self._lock:
            return self._quizzes.get(quiz_id)

    def get_questions(self, quiz_id: int) -> list[Question]:
        with self._lock:
            return list(self._questions.get(quiz_id, []))

    def pin_matches(self, quiz_id: int, pin: str | None) -> bool:
        with self._lock:
            expected = self._quiz_pins.get(quiz_id)
        if expected is None:
            return True
        return (pin or "").strip().upper() == expected

    # --- Students ---

    def register_student(self, first_name: str, last_name: str) -> StudentRecord:
        """Return the existing record for this name or create one."""
        key = _name_key(first_name, last_name)
        with self._lock:
            existing = self._students_by_name.get(key)
            if existing is not None:
                return existing
            record = StudentRecord(
                id=next(self._student_ids),
                first_name=first_name.strip(),
                last_name=last_name.strip(),
            )
            self._students[record.id] = record
            self._students_by_name[key] = record
            return record

    def get_student(self, student_id: int) -> StudentRecord | None:
        with self._lock:
            return self._students.get(student_id)

    # --- Submissions ---

    def find_submission_by_name(self, quiz_id: int, first_name: str, last_name: str) -> SubmissionRecord | None:
        key = _name_key(first_name, last_name)
        with self._lock:
            student = self._students_by_name.get(key)
            if student is None:
                return None
            return self._find_submission(quiz_id, student.id)

    def record_submission(self, student_id: int, quiz_id: int, answers: dict[int, str]) -> SubmissionRecord:
        """Grade and store an attempt. Raises DuplicateAttemptError on a second attempt."""
        with self._lock:
            if self._find_submission(quiz_id, student_id) is not None:
                raise DuplicateAttemptError("This student has already submitted this quiz.")

            total_score = 0
            max_possible_score = 0
            breakdown: dict[int, AnswerBreakdown] = {}
            for question in self._questions.get(quiz_id, []):
                max_possible_score += question.marks
                answer = answers.get(question.id, "")
                correct = answer == question.correct_answer
                marks_earned = question.marks if correct else 0
                total_score += marks_earned
                breakdown[question.id] = AnswerBreakdown(answer=answer, correct=correct, marks_earned=marks_earned)

            record = SubmissionRecord(
                id=next(self._submission_ids),
                student_id=student_id,
                quiz_id=quiz_id,
                total_score=total_score,
                max_possible_score=max_possible_score,
                answers_breakdown=breakdown,
            )
            self._submissions.append(record)
            return record

    def get_submissions(self, quiz_id: int) -> list[SubmissionRecord]:
        with self._lock:
            return [s for s in self._submissions if s.quiz_id == quiz_id]

    def _find_submission(self, quiz_id: int, student_id: int) -> SubmissionRecord | None:
        return next(
            (s for s in self._submissions if s.quiz_id == quiz_id and s.student_id == student_id),
            None,
        )
