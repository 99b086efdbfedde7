"""Component for terminal states: closed, already taken, submitted."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from soma_exam.styling.styles import Styles


class MessagePanel(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addStretch()
        self.title_label = QLabel("", self)
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setWordWrap(True)
        self.title_label.setStyleSheet(Styles.get_heading_style())
        layout.addWidget(self.title_label)
        self.body_label = QLabel("", self)
        self.body_label.setAlignment(Qt.AlignCenter)
        self.body_label.setWordWrap(True)
        layout.addWidget(self.body_label)
        self.detail_label = QLabel("", self)
        self.detail_label.setAlignment(Qt.AlignCenter)
        self.detail_label.setStyleSheet(Styles.get_score_style())
        layout.addWidget(self.detail_label)
        layout.addStretch()

    def show_message(self, title: str, body: str, detail: str = "") -> None:
        self.title_label.setText(title)
        self.body_label.setText(body)
        self.detail_label.setText(detail)
        self.detail_label.setVisible(bool(detail))
