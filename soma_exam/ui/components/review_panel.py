"""Component for the answered/unanswered summary shown before submitting."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from soma_exam.constants.ui_constants import (
    ANSWERED_COUNT_TEMPLATE,
    BACK_TO_QUESTIONS_BUTTON,
    SUBMIT_BUTTON,
)
from soma_exam.core.models import QuestionStatus
from soma_exam.styling.styles import Styles

_GRID_COLUMNS = 8


class ReviewPanel(QWidget):
    """Grid of questions; clicking one returns to it."""

    def __init__(
        self,
        on_jump: Callable[[int], None],
        on_back: Callable[[], None],
        on_submit: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_jump = on_jump
        self.on_back = on_back
        self.on_submit = on_submit
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.summary_label = QLabel("", self)
        self.summary_label.setAlignment(Qt.AlignCenter)
        self.summary_label.setStyleSheet(Styles.get_heading_style())
        layout.addWidget(self.summary_label)

        self.timer_label = QLabel("", self)
        self.timer_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.timer_label)

        self.grid = QGridLayout()
        layout.addLayout(self.grid)
        layout.addStretch()

        button_row = QHBoxLayout()
        self.back_button = QPushButton(BACK_TO_QUESTIONS_BUTTON, self)
        self.back_button.clicked.connect(self.on_back)
        button_row.addWidget(self.back_button)
        button_row.addStretch()
        self.submit_button = QPushButton(SUBMIT_BUTTON, self)
        self.submit_button.setStyleSheet(Styles.get_primary_button_style())
        self.submit_button.clicked.connect(self.on_submit)
        button_row.addWidget(self.submit_button)
        layout.addLayout(button_row)

    def show_summary(self, statuses: list[QuestionStatus]) -> None:
        while self.grid.count():
            item = self.grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        for status in statuses:
            cell = QPushButton(str(status.index + 1), self)
            cell.setStyleSheet(Styles.get_progress_dot_style(answered=status.answered, current=False))
            cell.clicked.connect(lambda _checked=False, target=status.index: self.on_jump(target))
            self.grid.addWidget(cell, status.index // _GRID_COLUMNS, status.index % _GRID_COLUMNS)
        answered = sum(1 for status in statuses if status.answered)
        self.summary_label.setText(ANSWERED_COUNT_TEMPLATE.format(answered=answered, total=len(statuses)))

    def show_remaining(self, text: str, style: str) -> None:
        self.timer_label.setText(text)
        self.timer_label.setStyleSheet(style)

    def set_interactive(self, enabled: bool) -> None:
        self.submit_button.setEnabled(enabled)
        self.back_button.setEnabled(enabled)
