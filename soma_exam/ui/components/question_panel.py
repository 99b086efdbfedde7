"""Component for answering one question at a time."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from PySide6.QtWebEngineWidgets import QWebEngineView

from soma_exam.constants.ui_constants import (
    NEXT_BUTTON,
    PREV_BUTTON,
    QUESTION_POSITION_TEMPLATE,
    REVIEW_BUTTON,
    TIME_UP_TEXT,
)
from soma_exam.core.models import Question, QuestionStatus
from soma_exam.core.services.countdown import countdown_urgency, format_countdown
from soma_exam.styling.styles import Styles
from soma_exam.ui.question_renderer import option_button_text, render_question_with_options


class QuestionPanel(QWidget):
    """Timer, rendered question, option buttons, navigation and progress dots."""

    def __init__(
        self,
        on_select: Callable[[int, str], None],
        on_navigate: Callable[[int], None],
        on_jump: Callable[[int], None],
        on_review: Callable[[], None],
        font_size: int = 14,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_select = on_select
        self.on_navigate = on_navigate
        self.on_jump = on_jump
        self.on_review = on_review
        self._font_size = font_size
        self._question: Question | None = None
        self._limit_seconds = 1
        self._option_buttons: list[QPushButton] = []
        self._dot_buttons: list[QPushButton] = []
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.position_label = QLabel("", self)
        header_row.addWidget(self.position_label)
        header_row.addStretch()
        self.timer_label = QLabel("", self)
        header_row.addWidget(self.timer_label)
        layout.addLayout(header_row)

        self.timer_progress = QProgressBar(self)
        self.timer_progress.setRange(0, 1000)
        self.timer_progress.setTextVisible(False)
        layout.addWidget(self.timer_progress)

        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view, stretch=1)

        self.options_layout = QVBoxLayout()
        layout.addLayout(self.options_layout)
        self.option_group = QButtonGroup(self)
        self.option_group.setExclusive(True)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self.on_navigate(-1))
        nav_row.addWidget(self.prev_button)
        nav_row.addStretch()
        self.next_button = QPushButton(NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self.on_navigate(1))
        nav_row.addWidget(self.next_button)
        self.review_button = QPushButton(REVIEW_BUTTON, self)
        self.review_button.setStyleSheet(Styles.get_primary_button_style())
        self.review_button.clicked.connect(self.on_review)
        nav_row.addWidget(self.review_button)
        layout.addLayout(nav_row)

        self.dots_layout = QHBoxLayout()
        layout.addLayout(self.dots_layout)

    def set_time_limit(self, time_limit_minutes: int) -> None:
        self._limit_seconds = max(1, time_limit_minutes * 60)

    def show_question(self, question: Question, index: int, total: int, selected: str | None) -> None:
        if self._question is None or self._question.id != question.id:
            self._question = question
            self.preview_view.setHtml(render_question_with_options(question, self._font_size))
            self._rebuild_option_buttons(question)
        self.position_label.setText(
            QUESTION_POSITION_TEMPLATE.format(current=index + 1, total=total, marks=question.marks)
        )
        for button, option in zip(self._option_buttons, question.options):
            button.setChecked(option == selected)
        self.prev_button.setEnabled(index > 0)
        self.next_button.setEnabled(index < total - 1)

    def show_progress(self, statuses: list[QuestionStatus], current_index: int) -> None:
        if len(self._dot_buttons) != len(statuses):
            self._rebuild_dots(len(statuses))
        for status, dot in zip(statuses, self._dot_buttons):
            dot.setStyleSheet(
                Styles.get_progress_dot_style(answered=status.answered, current=status.index == current_index)
            )

    def show_remaining(self, seconds: int) -> None:
        urgency = countdown_urgency(seconds)
        self.timer_label.setText(format_countdown(seconds) if seconds > 0 else TIME_UP_TEXT)
        self.timer_label.setStyleSheet(Styles.get_timer_style(urgency))
        fraction = max(0.0, min(1.0, seconds / self._limit_seconds))
        self.timer_progress.setValue(int(fraction * 1000))

    def set_interactive(self, enabled: bool) -> None:
        for button in (*self._option_buttons, self.review_button):
            button.setEnabled(enabled)

    def _rebuild_option_buttons(self, question: Question) -> None:
        for button in self._option_buttons:
            self.option_group.removeButton(button)
            self.options_layout.removeWidget(button)
            button.deleteLater()
        self._option_buttons = []
        for idx, option in enumerate(question.options):
            button = QPushButton(option_button_text(idx, option), self)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked=False, value=option: self._handle_select(value))
            self.option_group.addButton(button)
            self.options_layout.addWidget(button)
            self._option_buttons.append(button)

    def _rebuild_dots(self, count: int) -> None:
        while self.dots_layout.count():
            item = self.dots_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._dot_buttons = []
        self.dots_layout.addStretch()
        for idx in range(count):
            dot = QPushButton(str(idx + 1), self)
            dot.clicked.connect(lambda _checked=False, target=idx: self.on_jump(target))
            self.dots_layout.addWidget(dot)
            self._dot_buttons.append(dot)
        self.dots_layout.addStretch()

    def _handle_select(self, option: str) -> None:
        if self._question is not None:
            self.on_select(self._question.id, option)
