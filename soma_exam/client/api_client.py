"""HTTP implementation of the exam collaborators against the SOMA REST API."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
import logging
from typing import Any, TypeVar

import httpx

from soma_exam.constants.network_constants import (
    DEFAULT_API_BASE_URL,
    REQUEST_TIMEOUT_SECONDS,
)
from soma_exam.core.errors import (
    DuplicateAttemptError,
    ExamError,
    LoadFailureReason,
    QuestionLoadError,
    RegistrationError,
    ServiceUnavailableError,
    SubmissionError,
)
from soma_exam.core.models import (
    Question,
    Quiz,
    StudentIdentity,
    SubmissionPayload,
    SubmissionResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str):
            return detail
    return response.reason_phrase or f"HTTP {response.status_code}"


def _parse_due_date(raw: str) -> datetime:
    due_date = datetime.fromisoformat(raw)
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=timezone.utc)
    return due_date


def _quiz_from_body(body: dict) -> Quiz:
    return Quiz(
        id=int(body["id"]),
        title=str(body["title"]),
        time_limit_minutes=int(body["time_limit_minutes"]),
        due_date=_parse_due_date(body["due_date"]),
        question_ids=[int(question_id) for question_id in body.get("question_ids", [])],
        pin_required=bool(body.get("pin_required", False)),
    )


def _questions_from_body(body: list) -> list[Question]:
    if not isinstance(body, list):
        raise TypeError("expected a list of questions")
    return [
        Question(
            id=int(item["id"]),
            prompt_text=str(item["prompt_text"]),
            options=[str(option) for option in item["options"]],
            marks=int(item.get("marks", 1)),
            image_url=item.get("image_url"),
        )
        for item in body
    ]


def _submission_result_from_body(body: dict) -> SubmissionResult:
    return SubmissionResult(
        submission_id=int(body["id"]),
        total_score=int(body.get("total_score", 0)),
        max_possible_score=int(body.get("max_possible_score", 0)),
    )


def _decode(response: httpx.Response, error_type: type[ExamError], parse: Callable[[Any], T]) -> T:
    """Parse a successful response body, mapping malformed payloads to ``error_type``."""
    try:
        return parse(response.json())
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Malformed response from %s: %r", response.request.url, exc)
        raise error_type(f"The server sent an unexpected response ({response.status_code}).") from exc


class SomaApiClient:
    """Question source, submission sink, identity registrar and prior-submission
    checker backed by the REST API.

    Pass ``http_client`` to reuse a configured ``httpx.Client`` (tests hand in a
    ``MockTransport`` client or FastAPI's ``TestClient``).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        http_client: httpx.Client | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> SomaApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Quiz metadata ---

    def fetch_quiz(self, quiz_id: int) -> Quiz:
        response = self._request("GET", f"/api/quizzes/{quiz_id}", QuestionLoadError)
        if response.status_code == 404:
            raise QuestionLoadError("This examination does not exist.", LoadFailureReason.NOT_FOUND)
        self._raise_for_status(response, QuestionLoadError)
        return _decode(response, QuestionLoadError, _quiz_from_body)

    # --- QuestionSource ---

    def load_questions(self, quiz_id: int, pin: str | None = None) -> list[Question]:
        params = {"pin": pin} if pin else None
        response = self._request("GET", f"/api/quizzes/{quiz_id}/questions", QuestionLoadError, params=params)
        if response.status_code == 404:
            raise QuestionLoadError(_error_detail(response), LoadFailureReason.NOT_FOUND)
        if response.status_code in (401, 403):
            raise QuestionLoadError(_error_detail(response), LoadFailureReason.UNAUTHORIZED)
        self._raise_for_status(response, QuestionLoadError)
        return _decode(response, QuestionLoadError, _questions_from_body)

    # --- IdentityRegistrar ---

    def register(self, identity: StudentIdentity) -> int:
        response = self._request(
            "POST",
            "/api/students",
            RegistrationError,
            json={"first_name": identity.first_name, "last_name": identity.last_name},
        )
        self._raise_for_status(response, RegistrationError)
        return _decode(response, RegistrationError, lambda body: int(body["id"]))

    # --- PriorSubmissionChecker ---

    def has_submitted(self, quiz_id: int, identity: StudentIdentity) -> bool:
        response = self._request(
            "POST",
            "/api/check-submission",
            ServiceUnavailableError,
            json={
                "quiz_id": quiz_id,
                "first_name": identity.first_name,
                "last_name": identity.last_name,
                "pin": identity.pin,
            },
        )
        self._raise_for_status(response, ServiceUnavailableError)
        return _decode(response, ServiceUnavailableError, lambda body: bool(body["has_submitted"]))

    # --- SubmissionSink ---

    def submit(self, payload: SubmissionPayload) -> SubmissionResult:
        response = self._request(
            "POST",
            "/api/submissions",
            ServiceUnavailableError,
            json={
                "student_id": payload.student_id,
                "quiz_id": payload.quiz_id,
                "answers": {str(question_id): option for question_id, option in payload.answers.items()},
            },
        )
        if response.status_code == 409:
            raise DuplicateAttemptError(_error_detail(response))
        self._raise_for_status(response, SubmissionError)
        return _decode(response, SubmissionError, _submission_result_from_body)

    # --- Helpers ---

    def _request(
        self,
        method: str,
        url: str,
        error_type: type[ExamError],
        **kwargs: object,
    ) -> httpx.Response:
        try:
            return self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise error_type(f"Could not reach the server: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, error_type: type[ExamError]) -> None:
        if response.is_success:
            return
        detail = _error_detail(response)
        if response.status_code >= 500 and error_type is not QuestionLoadError:
            raise ServiceUnavailableError(detail)
        raise error_type(detail)
