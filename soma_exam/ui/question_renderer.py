"""Question rendering utilities for the exam window."""

from __future__ import annotations

from soma_exam.constants.exam_constants import OPTION_LETTERS
from soma_exam.core.markdown_math_renderer import normalize_math_text, renderer
from soma_exam.core.models import Question


def render_question_with_options(question: Question, font_size: int = 14) -> str:
    """Render a question, its image and its lettered options as HTML.

    Args:
        question: The question to display (prompt supports Markdown and LaTeX)
        font_size: Font size in points for the question text (default 14)

    Returns:
        HTML string ready for display in QWebEngineView
    """
    markdown_lines = [question.prompt_text.strip() or "(No question text)"]
    if question.image_url:
        markdown_lines.append(f"![]({question.image_url})")
    for letter, option in zip(OPTION_LETTERS, question.options):
        # Options are normalised individually; the letter prefix stays outside the maths.
        markdown_lines.append(f"**{letter}.** {normalize_math_text(option) or '(empty)'}")
    markdown = "\n\n".join(markdown_lines)
    return renderer.render_full_document(markdown, font_size=font_size)


def option_button_text(index: int, option: str) -> str:
    """Label for an option button; maths delimiters are stripped since buttons cannot typeset."""
    label = option.strip()
    for opening, closing in (("\\(", "\\)"), ("\\[", "\\]"), ("$$", "$$"), ("$", "$")):
        if not (label.startswith(opening) and label.endswith(closing)):
            continue
        inner = label[len(opening):-len(closing)]
        if inner.strip() and closing not in inner:
            label = inner.strip()
        break
    return f"{OPTION_LETTERS[index]}.  {label}"
