"""Helper functions for common dialog patterns in the exam window."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget

from soma_exam.constants.ui_constants import SUBMIT_CONFIRM_TEMPLATE, SUBMIT_CONFIRM_TITLE


def confirm_submit_exam(parent: QWidget, answered: int, total: int) -> bool:
    """Ask the student to confirm the final, one-time submission.

    Args:
        parent: Parent widget for the dialog
        answered: Number of answered questions
        total: Number of questions in the quiz

    Returns:
        True if the student confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        SUBMIT_CONFIRM_TITLE,
        SUBMIT_CONFIRM_TEMPLATE.format(answered=answered, total=total),
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget, title: str, message: str) -> None:
    """Show error dialog."""
    QMessageBox.critical(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    """Show warning dialog."""
    QMessageBox.warning(parent, title, message)
