from datetime import datetime, timezone

import pytest

from soma_exam.core.errors import QuizImportError
from soma_exam.core.quiz_importer import load_quiz_from_file, parse_quiz_text

HEADER = "TITLE: Algebra\nTIMELIMIT: 20\nDUE: 2026-12-01T17:00:00\n"


def test_parse_header_and_questions():
    imported = parse_quiz_text(
        HEADER
        + "PIN: ab12\n"
        "\n"
        "Q: What is $2 + 2$?\n"
        "A: 3\n"
        "B: 4\n"
        "CORRECT: b\n"
        "MARKS: 2\n"
        "---\n"
        "Q: Which graph is a parabola?\n"
        "The answer is visual.\n"
        "A: Line\n"
        "B: Curve\n"
        "C: Circle\n"
        "CORRECT: B\n"
        "IMAGE: https://example.org/graphs.png\n"
    )

    assert imported.title == "Algebra"
    assert imported.time_limit_minutes == 20
    assert imported.due_date == datetime(2026, 12, 1, 17, 0, tzinfo=timezone.utc)
    assert imported.pin == "AB12"
    first, second = imported.questions
    assert first.options == ["3", "4"]
    assert first.correct_answer == "4"
    assert first.marks == 2
    assert second.prompt_text == "Which graph is a parabola?\nThe answer is visual."
    assert second.marks == 1
    assert second.image_url == "https://example.org/graphs.png"


def test_quiz_without_pin_is_open():
    imported = parse_quiz_text(HEADER + "\nQ: x\nA: 1\nB: 2\nCORRECT: A\n")
    assert imported.pin is None


@pytest.mark.parametrize(
    "body, message",
    [
        ("Q: x\nA: 1\nB: 2\n", "CORRECT is required"),
        ("Q: x\nA: 1\nC: 2\nCORRECT: A\n", "consecutive letters"),
        ("Q: x\nA: 1\nCORRECT: A\n", "between 2 and 8"),
        ("Q: x\nA: 1\nB: 2\nCORRECT: D\n", "CORRECT must be one of"),
        ("Q: x\nA: 1\nB: 2\nCORRECT: A\nMARKS: 0\n", "MARKS must be a positive integer"),
        ("A: 1\nB: 2\nCORRECT: A\n", "text missing"),
    ],
)
def test_invalid_question_blocks(body, message):
    with pytest.raises(QuizImportError, match=message):
        parse_quiz_text(HEADER + "\n" + body)


@pytest.mark.parametrize(
    "header, message",
    [
        ("TIMELIMIT: 20\nDUE: 2026-12-01T17:00:00\n", "TITLE is required"),
        ("TITLE: T\nTIMELIMIT: soon\nDUE: 2026-12-01T17:00:00\n", "TIMELIMIT must be an integer"),
        ("TITLE: T\nTIMELIMIT: 20\nDUE: next week\n", "DUE must be an ISO-8601"),
    ],
)
def test_invalid_header(header, message):
    with pytest.raises(QuizImportError, match=message):
        parse_quiz_text(header + "\nQ: x\nA: 1\nB: 2\nCORRECT: A\n")


def test_header_only_file_is_rejected():
    with pytest.raises(QuizImportError, match="did not contain any questions"):
        parse_quiz_text(HEADER)


def test_load_quiz_from_file_records_source(tmp_path):
    path = tmp_path / "algebra.txt"
    path.write_text(HEADER + "\nQ: x\nA: 1\nB: 2\nCORRECT: A\n", encoding="utf-8")

    imported = load_quiz_from_file(path)
    assert imported.source_path == path
    assert len(imported.questions) == 1
