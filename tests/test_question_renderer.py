import pytest

pytest.importorskip("PySide6.QtWebEngineWidgets")

from soma_exam.core.models import Question
from soma_exam.ui.question_renderer import option_button_text, render_question_with_options


def test_option_button_text_strips_single_delimiter_pair():
    assert option_button_text(0, "\\(x^2\\)") == "A.  x^2"
    assert option_button_text(1, "$$y$$") == "B.  y"
    assert option_button_text(2, "$a$ and $b$") == "C.  $a$ and $b$"
    assert option_button_text(7, " plain ") == "H.  plain"


def test_render_question_with_options_letters_each_option():
    question = Question(
        id=1,
        prompt_text="Which is \\frac{1}{2}?",
        options=["0.5", "\\sqrt{4}"],
        image_url="https://example.org/half.png",
    )
    document = render_question_with_options(question, font_size=16)

    assert "<strong>A.</strong> 0.5" in document
    assert "<strong>B.</strong> \\(\\sqrt{4}\\)" in document
    assert 'src="https://example.org/half.png"' in document
    assert "font-size: 16pt" in document
