"""State machine driving one student's attempt at one quiz."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
import logging

from soma_exam.core.errors import (
    AlreadySubmittedError,
    ExamError,
    InvalidPhaseError,
    LoadFailureReason,
    QuestionLoadError,
    QuizClosedError,
    RegistrationError,
)
from soma_exam.core.models import (
    Attempt,
    EntryDecision,
    ExamPhase,
    Question,
    QuestionStatus,
    Quiz,
    StudentIdentity,
    SubmissionPayload,
    SubmitOutcome,
    SubmitStatus,
    SubmitTrigger,
)
from soma_exam.core.services.attempt_store import AttemptStore
from soma_exam.core.services.collaborators import (
    IdentityRegistrar,
    PriorSubmissionChecker,
    QuestionSource,
    SubmissionSink,
)
from soma_exam.core.services.countdown import ExpiryLatch, remaining_seconds

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExamSessionController:
    """Owns the lifecycle of one attempt: entry, answering, review, timer and submission.

    Phases::

        entry -> closed | blocked | in-progress
        in-progress <-> reviewing
        in-progress | reviewing -> submitting -> submitted
        submitting -> (previous phase) when the sink fails

    ``closed``, ``blocked`` and ``submitted`` are terminal.
    """

    def __init__(
        self,
        quiz: Quiz,
        *,
        question_source: QuestionSource,
        submission_sink: SubmissionSink,
        identity_registrar: IdentityRegistrar,
        prior_submission_checker: PriorSubmissionChecker,
        store: AttemptStore,
        pin_required: bool | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._quiz = quiz
        self._question_source = question_source
        self._submission_sink = submission_sink
        self._identity_registrar = identity_registrar
        self._prior_submission_checker = prior_submission_checker
        self._store = store
        self._pin_required = quiz.pin_required if pin_required is None else pin_required
        self._clock = clock

        self._phase = ExamPhase.ENTRY
        self._phase_before_submit: ExamPhase | None = None
        self._questions: list[Question] = []
        self._attempt: Attempt | None = None
        self._expiry_latch = ExpiryLatch()
        self._last_submit_outcome: SubmitOutcome | None = None

        if self._store.is_completed(quiz.id):
            logger.info("Quiz %s already completed in this browser", quiz.id)
            self._phase = ExamPhase.BLOCKED

    # --- Read-only state ---

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def phase(self) -> ExamPhase:
        return self._phase

    @property
    def pin_required(self) -> bool:
        return self._pin_required

    @property
    def attempt(self) -> Attempt | None:
        return self._attempt

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def last_submit_outcome(self) -> SubmitOutcome | None:
        """Outcome of the most recent submit that reached the sink."""
        return self._last_submit_outcome

    def current_question(self) -> Question:
        attempt = self._require_attempt()
        return self._questions[attempt.current_index]

    def answer_for(self, question_id: int) -> str | None:
        if self._attempt is None:
            return None
        return self._attempt.answers.get(question_id)

    def answered_count(self) -> int:
        return len(self._attempt.answers) if self._attempt else 0

    def review_summary(self) -> list[QuestionStatus]:
        answers = self._attempt.answers if self._attempt else {}
        return [
            QuestionStatus(index=index, question_id=question.id, answered=question.id in answers)
            for index, question in enumerate(self._questions)
        ]

    # --- Entry ---

    def begin_entry(self, now: datetime | None = None) -> EntryDecision:
        """Decide whether the entry gate may accept a student."""
        if self._phase is ExamPhase.BLOCKED:
            return EntryDecision.BLOCKED
        if self._phase is ExamPhase.CLOSED:
            return EntryDecision.CLOSED
        self._require_phase(ExamPhase.ENTRY)
        if self._quiz.is_closed(now or self._clock()):
            self._transition(ExamPhase.CLOSED)
            return EntryDecision.CLOSED
        return EntryDecision.OPEN

    def check_prior_submission(self, identity: StudentIdentity) -> bool:
        """Return True (and block) if this student already finished the quiz.

        A checker failure is treated as "not submitted": the sink re-checks
        duplicates when the attempt is finally submitted.
        """
        if self._phase is ExamPhase.BLOCKED:
            return True
        self._require_phase(ExamPhase.ENTRY)
        if self._store.is_completed(self._quiz.id):
            self._transition(ExamPhase.BLOCKED)
            return True

        try:
            already_submitted = self._prior_submission_checker.has_submitted(self._quiz.id, identity)
        except ExamError as exc:
            logger.warning("Prior-submission check failed for quiz %s, continuing: %s", self._quiz.id, exc)
            return False
        except Exception:
            logger.warning("Prior-submission check raised for quiz %s, continuing", self._quiz.id, exc_info=True)
            return False

        if already_submitted:
            self._store.mark_completed(self._quiz.id)
            self._transition(ExamPhase.BLOCKED)
        return already_submitted

    def start_attempt(self, identity: StudentIdentity) -> Attempt:
        """Register the student, load the questions and start (or resume) the clock."""
        self._require_phase(ExamPhase.ENTRY)
        identity = identity.normalized(pin_required=self._pin_required)

        try:
            student_id = self._identity_registrar.register(identity)
        except RegistrationError:
            raise
        except ExamError as exc:
            raise RegistrationError(str(exc)) from exc

        questions = self._question_source.load_questions(self._quiz.id, identity.pin)
        if not questions:
            raise QuestionLoadError("This examination has no questions yet.", LoadFailureReason.EMPTY)

        start_time = self._store.load_or_init_start_time(self._quiz.id, student_id, self._clock())
        known_ids = {question.id for question in questions}
        answers = {
            question_id: option
            for question_id, option in self._store.load_answers(self._quiz.id, student_id).items()
            if question_id in known_ids
        }

        self._questions = list(questions)
        self._attempt = Attempt(
            student_id=student_id,
            quiz_id=self._quiz.id,
            start_time=start_time,
            answers=answers,
        )
        self._transition(ExamPhase.IN_PROGRESS)
        return self._attempt

    def admit(self, identity: StudentIdentity) -> ExamPhase:
        """Run the entry gate: prior-submission check, then start unless blocked."""
        identity = identity.normalized(pin_required=self._pin_required)
        if self.check_prior_submission(identity):
            return self._phase
        self.start_attempt(identity)
        return self._phase

    # --- Answering & navigation ---

    def select_answer(self, question_id: int, option: str) -> None:
        self._require_phase(ExamPhase.IN_PROGRESS, ExamPhase.REVIEWING)
        attempt = self._require_attempt()
        question = next((q for q in self._questions if q.id == question_id), None)
        if question is None:
            raise ValueError(f"Unknown question id {question_id}")
        if option not in question.options:
            raise ValueError(f"{option!r} is not an option of question {question_id}")

        attempt.answers[question_id] = option
        self._store.save_answers(attempt.quiz_id, attempt.student_id, attempt.answers)

    def navigate(self, step: int) -> int:
        """Move forward (+1) or back (-1) without wrapping around."""
        attempt = self._require_attempt()
        return self.go_to(attempt.current_index + step)

    def go_to(self, index: int) -> int:
        self._require_phase(ExamPhase.IN_PROGRESS, ExamPhase.REVIEWING)
        attempt = self._require_attempt()
        attempt.current_index = max(0, min(index, len(self._questions) - 1))
        return attempt.current_index

    def enter_review(self) -> None:
        self._require_phase(ExamPhase.IN_PROGRESS)
        self._transition(ExamPhase.REVIEWING)

    def exit_review(self) -> None:
        self._require_phase(ExamPhase.REVIEWING)
        self._transition(ExamPhase.IN_PROGRESS)

    # --- Timer ---

    def remaining_seconds(self, now: datetime | None = None) -> int:
        attempt = self._require_attempt()
        return remaining_seconds(now or self._clock(), attempt.start_time, self._quiz.time_limit_minutes)

    def tick(self, now: datetime | None = None) -> int:
        """Return the seconds left and auto-submit the first time it reaches zero."""
        if self._attempt is None:
            return 0
        remaining = self.remaining_seconds(now)
        if remaining == 0 and self._phase.is_live and self._expiry_latch.trip():
            logger.info("Time limit reached for quiz %s, submitting", self._quiz.id)
            self.submit(SubmitTrigger.TIMER)
        return remaining

    # --- Submission ---

    def submit(self, trigger: SubmitTrigger = SubmitTrigger.MANUAL) -> SubmitOutcome:
        """Hand the attempt to the sink at most once per outstanding submission."""
        if self._phase in (ExamPhase.SUBMITTING, ExamPhase.SUBMITTED):
            logger.debug("Ignoring %s submit while %s", trigger.value, self._phase.value)
            return SubmitOutcome(status=SubmitStatus.SUPPRESSED)
        if trigger is SubmitTrigger.MANUAL:
            self._require_phase(ExamPhase.REVIEWING)
        else:
            self._require_phase(ExamPhase.IN_PROGRESS, ExamPhase.REVIEWING)

        attempt = self._require_attempt()
        payload = SubmissionPayload(
            student_id=attempt.student_id,
            quiz_id=attempt.quiz_id,
            answers=dict(attempt.answers),
        )
        self._phase_before_submit = self._phase
        self._transition(ExamPhase.SUBMITTING)

        try:
            result = self._submission_sink.submit(payload)
        except ExamError as exc:
            logger.warning("Submission of quiz %s failed: %s", self._quiz.id, exc)
            self._restore_after_failed_submit()
            self._last_submit_outcome = SubmitOutcome(status=SubmitStatus.FAILED, error=exc)
            return self._last_submit_outcome
        except Exception:
            self._restore_after_failed_submit()
            raise

        self._store.clear_attempt(attempt.quiz_id, attempt.student_id)
        self._store.mark_completed(attempt.quiz_id)
        self._phase_before_submit = None
        self._transition(ExamPhase.SUBMITTED)
        self._last_submit_outcome = SubmitOutcome(status=SubmitStatus.SUBMITTED, result=result)
        return self._last_submit_outcome

    # --- Helpers ---

    def _restore_after_failed_submit(self) -> None:
        self._transition(self._phase_before_submit or ExamPhase.IN_PROGRESS)
        self._phase_before_submit = None

    def _transition(self, phase: ExamPhase) -> None:
        logger.info("Quiz %s: %s -> %s", self._quiz.id, self._phase.value, phase.value)
        self._phase = phase

    def _require_phase(self, *allowed: ExamPhase) -> None:
        if self._phase in allowed:
            return
        if self._phase is ExamPhase.CLOSED:
            raise QuizClosedError(f"Quiz {self._quiz.id} closed on {self._quiz.due_date.isoformat()}")
        if self._phase in (ExamPhase.BLOCKED, ExamPhase.SUBMITTED):
            raise AlreadySubmittedError(f"Quiz {self._quiz.id} has already been submitted")
        expected = ", ".join(phase.value for phase in allowed)
        raise InvalidPhaseError(f"Operation requires phase {expected}; current phase is {self._phase.value}")

    def _require_attempt(self) -> Attempt:
        if self._attempt is None:
            raise InvalidPhaseError("No attempt has been started.")
        return self._attempt
