"""FastAPI server exposing the student-facing exam endpoints."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from soma_exam.constants.about import APP_NAME, APP_VERSION
from soma_exam.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from soma_exam.core.errors import DuplicateAttemptError
from soma_exam.core.models import Quiz
from soma_exam.server.exam_backend import ExamBackend, SubmissionRecord

logger = logging.getLogger(__name__)


class StudentPayload(BaseModel):
    """Payload schema for student registration."""

    first_name: str
    last_name: str


class CheckSubmissionPayload(BaseModel):
    """Payload schema for the prior-submission check."""

    quiz_id: int
    first_name: str
    last_name: str
    pin: str | None = None


class SubmissionPayload(BaseModel):
    """Payload schema for a finished attempt."""

    student_id: int
    quiz_id: int
    answers: dict[int, str] = {}


def _quiz_to_dict(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "time_limit_minutes": quiz.time_limit_minutes,
        "due_date": quiz.due_date.isoformat(),
        "question_ids": list(quiz.question_ids),
        "pin_required": quiz.pin_required,
    }


def _submission_to_dict(record: SubmissionRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "student_id": record.student_id,
        "quiz_id": record.quiz_id,
        "total_score": record.total_score,
        "max_possible_score": record.max_possible_score,
        "answers_breakdown": {
            str(question_id): {
                "answer": item.answer,
                "correct": item.correct,
                "marks_earned": item.marks_earned,
            }
            for question_id, item in record.answers_breakdown.items()
        },
        "submitted_at": record.submitted_at.isoformat(),
    }


def _get_backend_dependency(backend: ExamBackend):
    def dependency() -> ExamBackend:
        return backend

    return dependency


def create_api_app(backend: ExamBackend) -> FastAPI:
    """Create a FastAPI application wired to the provided backend."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    backend_dep = _get_backend_dependency(backend)

    def _require_quiz(manager: ExamBackend, quiz_id: int) -> Quiz:
        quiz = manager.get_quiz(quiz_id)
        if quiz is None:
            raise HTTPException(status_code=404, detail="Quiz not found")
        return quiz

    @app.get("/api/quizzes")
    def list_quizzes(manager: ExamBackend = Depends(backend_dep)) -> list[dict[str, object]]:
        return [_quiz_to_dict(quiz) for quiz in manager.get_quizzes()]

    @app.get("/api/quizzes/{quiz_id}")
    def get_quiz(quiz_id: int, manager: ExamBackend = Depends(backend_dep)) -> dict[str, object]:
        return _quiz_to_dict(_require_quiz(manager, quiz_id))

    @app.get("/api/quizzes/{quiz_id}/questions")
    def get_questions(
        quiz_id: int,
        pin: str | None = None,
        manager: ExamBackend = Depends(backend_dep),
    ) -> list[dict[str, object]]:
        _require_quiz(manager, quiz_id)
        if not manager.pin_matches(quiz_id, pin):
            raise HTTPException(status_code=401, detail="Invalid quiz PIN")
        # Correct answers never leave the server.
        return [
            {
                "id": question.id,
                "quiz_id": quiz_id,
                "prompt_text": question.prompt_text,
                "options": list(question.options),
                "marks": question.marks,
                "image_url": question.image_url,
            }
            for question in manager.get_questions(quiz_id)
        ]

    @app.post("/api/students")
    def register_student(
        payload: StudentPayload,
        manager: ExamBackend = Depends(backend_dep),
    ) -> dict[str, object]:
        if not payload.first_name.strip() or not payload.last_name.strip():
            raise HTTPException(status_code=400, detail="First and last name required")
        record = manager.register_student(payload.first_name, payload.last_name)
        return {"id": record.id, "first_name": record.first_name, "last_name": record.last_name}

    @app.post("/api/check-submission")
    def check_submission(
        payload: CheckSubmissionPayload,
        manager: ExamBackend = Depends(backend_dep),
    ) -> dict[str, object]:
        if not payload.first_name.strip() or not payload.last_name.strip():
            raise HTTPException(status_code=400, detail="quiz_id, first_name and last_name required")
        _require_quiz(manager, payload.quiz_id)
        record = manager.find_submission_by_name(payload.quiz_id, payload.first_name, payload.last_name)
        if record is None:
            return {"has_submitted": False}
        return {
            "has_submitted": True,
            "total_score": record.total_score,
            "max_possible_score": record.max_possible_score,
        }

    @app.post("/api/submissions", status_code=201)
    def submit_attempt(
        payload: SubmissionPayload,
        manager: ExamBackend = Depends(backend_dep),
    ) -> dict[str, object]:
        _require_quiz(manager, payload.quiz_id)
        if manager.get_student(payload.student_id) is None:
            raise HTTPException(status_code=400, detail="Unknown student")
        try:
            record = manager.record_submission(payload.student_id, payload.quiz_id, payload.answers)
        except DuplicateAttemptError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        logger.info(
            "Student %s submitted quiz %s: %s/%s",
            record.student_id,
            record.quiz_id,
            record.total_score,
            record.max_possible_score,
        )
        return _submission_to_dict(record)

    return app


def start_api_server(
    backend: ExamBackend,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(backend)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="SomaApiServer", daemon=True)
    thread.start()
    return thread
