"""Qt main window walking one student through an examination."""

from __future__ import annotations

import logging

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QMainWindow, QStackedWidget

from soma_exam.constants.exam_constants import TICK_INTERVAL_MS
from soma_exam.constants.ui_constants import (
    BLOCKED_MESSAGE_TEMPLATE,
    BLOCKED_TITLE,
    CLOSED_MESSAGE_TEMPLATE,
    CLOSED_TITLE,
    LOAD_FAILED_TITLE,
    REGISTRATION_FAILED_TITLE,
    SCORE_TEMPLATE,
    SUBMISSION_FAILED_TITLE,
    SUBMITTED_MESSAGE,
    SUBMITTED_TITLE,
    TIME_UP_TEXT,
    WINDOW_TITLE,
)
from soma_exam.core.errors import QuestionLoadError, RegistrationError
from soma_exam.core.exam_controller import ExamSessionController
from soma_exam.core.models import ExamPhase, StudentIdentity, SubmitOutcome, SubmitStatus
from soma_exam.core.services.countdown import countdown_urgency, format_countdown
from soma_exam.styling.styles import Styles
from soma_exam.ui.components.entry_panel import EntryPanel
from soma_exam.ui.components.message_panel import MessagePanel
from soma_exam.ui.components.question_panel import QuestionPanel
from soma_exam.ui.components.review_panel import ReviewPanel
from soma_exam.ui.dialog_helpers import confirm_submit_exam, show_error, show_warning

logger = logging.getLogger(__name__)


class ExamWindow(QMainWindow):
    """Shows whichever panel matches the controller's phase."""

    def __init__(self, controller: ExamSessionController, font_size: int = 14) -> None:
        super().__init__()
        self.setWindowTitle(f"{WINDOW_TITLE} · {controller.quiz.title}")
        self.setStyleSheet(Styles.get_main_window_style())
        self.resize(960, 720)

        self.controller = controller

        self.entry_panel = EntryPanel(
            quiz=controller.quiz,
            pin_required=controller.pin_required,
            on_start=self._handle_start,
            parent=self,
        )
        self.question_panel = QuestionPanel(
            on_select=self._handle_select,
            on_navigate=self._handle_navigate,
            on_jump=self._handle_jump,
            on_review=self._handle_enter_review,
            font_size=font_size,
            parent=self,
        )
        self.question_panel.set_time_limit(controller.quiz.time_limit_minutes)
        self.review_panel = ReviewPanel(
            on_jump=self._handle_jump,
            on_back=self._handle_exit_review,
            on_submit=self._handle_submit,
            parent=self,
        )
        self.message_panel = MessagePanel(self)

        self.stack = QStackedWidget(self)
        for panel in (self.entry_panel, self.question_panel, self.review_panel, self.message_panel):
            self.stack.addWidget(panel)
        self.setCentralWidget(self.stack)

        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(TICK_INTERVAL_MS)
        self.tick_timer.timeout.connect(self._on_tick)

        self.controller.begin_entry()
        self._refresh()

    # --- Entry ---

    def _handle_start(self, identity: StudentIdentity) -> None:
        self.entry_panel.set_busy(True)
        try:
            self.controller.admit(identity)
        except ValueError as exc:
            show_warning(self, REGISTRATION_FAILED_TITLE, str(exc))
        except RegistrationError as exc:
            show_error(self, REGISTRATION_FAILED_TITLE, str(exc))
        except QuestionLoadError as exc:
            logger.warning("Question load failed (%s): %s", exc.reason.value, exc)
            show_error(self, LOAD_FAILED_TITLE, str(exc))
        finally:
            self.entry_panel.set_busy(False)
        self._refresh()

    # --- Answering ---

    def _handle_select(self, question_id: int, option: str) -> None:
        self.controller.select_answer(question_id, option)
        self._refresh()

    def _handle_navigate(self, step: int) -> None:
        self.controller.navigate(step)
        self._refresh()

    def _handle_jump(self, index: int) -> None:
        if self.controller.phase is ExamPhase.REVIEWING:
            self.controller.exit_review()
        self.controller.go_to(index)
        self._refresh()

    def _handle_enter_review(self) -> None:
        self.controller.enter_review()
        self._refresh()

    def _handle_exit_review(self) -> None:
        self.controller.exit_review()
        self._refresh()

    # --- Submission ---

    def _handle_submit(self) -> None:
        total = len(self.controller.questions)
        if not confirm_submit_exam(self, self.controller.answered_count(), total):
            return
        self.review_panel.set_interactive(False)
        try:
            outcome = self.controller.submit()
            self._report_outcome(outcome)
        finally:
            self._refresh()

    def _on_tick(self) -> None:
        previous = self.controller.last_submit_outcome
        remaining = self.controller.tick()
        outcome = self.controller.last_submit_outcome
        if outcome is not None and outcome is not previous:
            self._report_outcome(outcome)
            self._refresh()
            return
        self._show_remaining(remaining)

    def _report_outcome(self, outcome: SubmitOutcome) -> None:
        if outcome.status is SubmitStatus.FAILED:
            show_error(self, SUBMISSION_FAILED_TITLE, str(outcome.error))

    # --- Rendering ---

    def _show_remaining(self, remaining: int) -> None:
        self.question_panel.show_remaining(remaining)
        text = format_countdown(remaining) if remaining > 0 else TIME_UP_TEXT
        self.review_panel.show_remaining(text, Styles.get_timer_style(countdown_urgency(remaining)))

    def _refresh(self) -> None:
        phase = self.controller.phase
        if phase.is_live or phase is ExamPhase.SUBMITTING:
            if not self.tick_timer.isActive():
                self.tick_timer.start()
        else:
            self.tick_timer.stop()

        if phase is ExamPhase.ENTRY:
            self.stack.setCurrentWidget(self.entry_panel)
        elif phase is ExamPhase.IN_PROGRESS:
            self._show_question()
            self.stack.setCurrentWidget(self.question_panel)
        elif phase is ExamPhase.REVIEWING:
            self.review_panel.show_summary(self.controller.review_summary())
            self.review_panel.set_interactive(True)
            self._show_remaining(self.controller.remaining_seconds())
            self.stack.setCurrentWidget(self.review_panel)
        elif phase is ExamPhase.SUBMITTING:
            self.question_panel.set_interactive(False)
            self.review_panel.set_interactive(False)
        elif phase.is_terminal:
            self._show_terminal(phase)

    def _show_question(self) -> None:
        attempt = self.controller.attempt
        if attempt is None:
            return
        question = self.controller.current_question()
        self.question_panel.show_question(
            question,
            attempt.current_index,
            len(self.controller.questions),
            self.controller.answer_for(question.id),
        )
        self.question_panel.show_progress(self.controller.review_summary(), attempt.current_index)
        self.question_panel.set_interactive(True)
        self._show_remaining(self.controller.remaining_seconds())

    def _show_terminal(self, phase: ExamPhase) -> None:
        quiz = self.controller.quiz
        if phase is ExamPhase.CLOSED:
            due = quiz.due_date.astimezone().strftime("%d %b %Y %H:%M")
            self.message_panel.show_message(CLOSED_TITLE, CLOSED_MESSAGE_TEMPLATE.format(due=due))
        elif phase is ExamPhase.BLOCKED:
            self.message_panel.show_message(BLOCKED_TITLE, BLOCKED_MESSAGE_TEMPLATE.format(title=quiz.title))
        else:
            detail = ""
            outcome = self.controller.last_submit_outcome
            if outcome is not None and outcome.result is not None and outcome.result.max_possible_score:
                result = outcome.result
                detail = SCORE_TEMPLATE.format(
                    score=result.total_score,
                    max_score=result.max_possible_score,
                    percentage=result.percentage,
                )
            self.message_panel.show_message(SUBMITTED_TITLE, SUBMITTED_MESSAGE, detail)
        self.stack.setCurrentWidget(self.message_panel)
