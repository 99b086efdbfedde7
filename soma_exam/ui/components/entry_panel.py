"""Component for the exam entry gate."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from soma_exam.constants.ui_constants import (
    CHECKING_STATUS,
    ENTRY_FACTS_TEMPLATE,
    ENTRY_RULES_TEXT,
    FIRST_NAME_PLACEHOLDER,
    LAST_NAME_PLACEHOLDER,
    PIN_PLACEHOLDER,
    START_BUTTON,
)
from soma_exam.core.models import Quiz, StudentIdentity
from soma_exam.styling.styles import Styles


class EntryPanel(QWidget):
    """Collects the student's name (and PIN) before the attempt starts."""

    def __init__(
        self,
        quiz: Quiz,
        pin_required: bool,
        on_start: Callable[[StudentIdentity], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz = quiz
        self.pin_required = pin_required
        self.on_start = on_start
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addStretch()

        heading = QLabel(self.quiz.title, self)
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet(Styles.get_heading_style())
        layout.addWidget(heading)

        facts = QLabel(
            ENTRY_FACTS_TEMPLATE.format(
                minutes=self.quiz.time_limit_minutes,
                due=self.quiz.due_date.astimezone().strftime("%d %b %Y %H:%M"),
            ),
            self,
        )
        facts.setAlignment(Qt.AlignCenter)
        facts.setStyleSheet(Styles.get_secondary_text_style())
        layout.addWidget(facts)

        rules = QLabel(ENTRY_RULES_TEXT, self)
        rules.setWordWrap(True)
        layout.addWidget(rules)

        form = QFormLayout()
        self.first_name_input = QLineEdit(self)
        self.first_name_input.setPlaceholderText(FIRST_NAME_PLACEHOLDER)
        form.addRow(FIRST_NAME_PLACEHOLDER, self.first_name_input)

        self.last_name_input = QLineEdit(self)
        self.last_name_input.setPlaceholderText(LAST_NAME_PLACEHOLDER)
        form.addRow(LAST_NAME_PLACEHOLDER, self.last_name_input)

        self.pin_input = QLineEdit(self)
        self.pin_input.setPlaceholderText(PIN_PLACEHOLDER)
        if self.pin_required:
            form.addRow(PIN_PLACEHOLDER, self.pin_input)
        else:
            self.pin_input.setVisible(False)
        layout.addLayout(form)

        self.start_button = QPushButton(START_BUTTON, self)
        self.start_button.setStyleSheet(Styles.get_primary_button_style())
        self.start_button.clicked.connect(self._handle_start)
        layout.addWidget(self.start_button)

        for line_edit in (self.first_name_input, self.last_name_input, self.pin_input):
            line_edit.textChanged.connect(self._update_start_enabled)
            line_edit.returnPressed.connect(self._handle_start)

        self.status_label = QLabel("", self)
        self.status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.status_label)
        layout.addStretch()
        self._update_start_enabled()

    def set_busy(self, busy: bool) -> None:
        self.status_label.setText(CHECKING_STATUS if busy else "")
        self.start_button.setEnabled(not busy and self._inputs_complete())

    def _inputs_complete(self) -> bool:
        names_ok = bool(self.first_name_input.text().strip() and self.last_name_input.text().strip())
        pin_ok = not self.pin_required or bool(self.pin_input.text().strip())
        return names_ok and pin_ok

    def _update_start_enabled(self) -> None:
        self.start_button.setEnabled(self._inputs_complete())

    def _handle_start(self) -> None:
        if not self._inputs_complete():
            return
        self.on_start(
            StudentIdentity(
                first_name=self.first_name_input.text(),
                last_name=self.last_name_input.text(),
                pin=self.pin_input.text() if self.pin_required else None,
            )
        )
