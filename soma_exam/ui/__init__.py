"""Qt UI components for the student exam application."""

from .dialog_helpers import confirm_submit_exam, show_error, show_warning
from .exam_window import ExamWindow
from .question_renderer import option_button_text, render_question_with_options

__all__ = [
    "ExamWindow",
    "confirm_submit_exam",
    "show_error",
    "show_warning",
    "option_button_text",
    "render_question_with_options",
]
