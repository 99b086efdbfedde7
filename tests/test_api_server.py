from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
import pytest

from soma_exam.core.models import Question
from soma_exam.server.api_server import create_api_app
from soma_exam.server.exam_backend import ExamBackend

DUE = datetime.now(timezone.utc) + timedelta(days=7)


def _questions() -> list[Question]:
    return [
        Question(id=0, prompt_text="2 + 2?", options=["3", "4"], correct_answer="4", marks=2),
        Question(id=0, prompt_text="Capital of France?", options=["Paris", "Rome"], correct_answer="Paris"),
    ]


@pytest.fixture
def backend() -> ExamBackend:
    backend = ExamBackend()
    backend.add_quiz("Warm-up", 15, DUE, _questions())
    backend.add_quiz("Locked", 15, DUE, _questions(), pin="ab12")
    return backend


@pytest.fixture
def client(backend) -> TestClient:
    return TestClient(create_api_app(backend))


def _register(client: TestClient, first: str = "Ada", last: str = "Lovelace") -> int:
    response = client.post("/api/students", json={"first_name": first, "last_name": last})
    assert response.status_code == 200
    return response.json()["id"]


def test_list_and_get_quiz(client):
    quizzes = client.get("/api/quizzes").json()
    assert [quiz["title"] for quiz in quizzes] == ["Warm-up", "Locked"]

    quiz = client.get("/api/quizzes/1").json()
    assert quiz["time_limit_minutes"] == 15
    assert quiz["question_ids"] == [1, 2]
    assert quiz["pin_required"] is False
    assert client.get("/api/quizzes/2").json()["pin_required"] is True


def test_unknown_quiz_is_404(client):
    response = client.get("/api/quizzes/99")
    assert response.status_code == 404
    assert response.json()["detail"] == "Quiz not found"
    assert client.get("/api/quizzes/99/questions").status_code == 404


def test_questions_never_include_correct_answer(client):
    questions = client.get("/api/quizzes/1/questions").json()

    assert [question["id"] for question in questions] == [1, 2]
    assert all("correct_answer" not in question for question in questions)
    assert questions[0]["marks"] == 2


def test_pin_protected_questions(client):
    assert client.get("/api/quizzes/2/questions").status_code == 401
    assert client.get("/api/quizzes/2/questions", params={"pin": "nope"}).status_code == 401
    assert client.get("/api/quizzes/2/questions", params={"pin": "ab12"}).status_code == 200


def test_registration_is_idempotent_by_name(client):
    first_id = _register(client)
    assert _register(client, " ada ", "LOVELACE") == first_id
    assert _register(client, "Grace", "Hopper") != first_id


def test_registration_requires_names(client):
    response = client.post("/api/students", json={"first_name": " ", "last_name": "Lovelace"})
    assert response.status_code == 400


def test_submission_is_graded_and_recorded_once(client, backend):
    student_id = _register(client)
    payload = {"student_id": student_id, "quiz_id": 1, "answers": {"1": "4", "2": "Rome"}}

    response = client.post("/api/submissions", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert (body["total_score"], body["max_possible_score"]) == (2, 3)
    assert body["answers_breakdown"]["2"] == {"answer": "Rome", "correct": False, "marks_earned": 0}

    duplicate = client.post("/api/submissions", json=payload)
    assert duplicate.status_code == 409
    assert len(backend.get_submissions(1)) == 1


def test_submission_for_unknown_student_is_rejected(client):
    response = client.post("/api/submissions", json={"student_id": 404, "quiz_id": 1, "answers": {}})
    assert response.status_code == 400


def test_check_submission(client):
    check = {"quiz_id": 1, "first_name": "Ada", "last_name": "Lovelace"}
    assert client.post("/api/check-submission", json=check).json() == {"has_submitted": False}

    student_id = _register(client)
    client.post("/api/submissions", json={"student_id": student_id, "quiz_id": 1, "answers": {"1": "4"}})

    body = client.post("/api/check-submission", json=check).json()
    assert body["has_submitted"] is True
    assert body["total_score"] == 2
    assert client.post("/api/check-submission", json={**check, "quiz_id": 2}).json()["has_submitted"] is False


def test_check_submission_accepts_quiz_pin(client):
    check = {"quiz_id": 2, "first_name": "Ada", "last_name": "Lovelace", "pin": "AB12"}
    response = client.post("/api/check-submission", json=check)
    assert response.status_code == 200
    assert response.json() == {"has_submitted": False}
