"""Utilities for importing quizzes from a human-friendly text file.

File format: a header block, then question blocks separated by blank lines
or '---'.

    TITLE: Quiz title
    TIMELIMIT: minutes per attempt
    DUE: ISO-8601 timestamp (timezone optional, UTC assumed)
    PIN: access code     (optional; omit for an open quiz)
    ---
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    ...                  (two to eight options, A-H, in order)
    CORRECT: letter
    MARKS: positive integer (optional, defaults to 1)
    IMAGE: URL           (optional)

Example:

    TITLE: Arithmetic warm-up
    TIMELIMIT: 10
    DUE: 2026-12-01T17:00:00+00:00

    Q: What is $2 + 2$?
    A: 3
    B: 4
    CORRECT: B
    MARKS: 2
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from soma_exam.constants.exam_constants import (
    MAX_OPTION_COUNT,
    MIN_OPTION_COUNT,
    OPTION_LETTERS,
)
from soma_exam.core.errors import QuizImportError
from soma_exam.core.models import Question

_HEADER_KEYS = ("TITLE", "TIMELIMIT", "DUE", "PIN")


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    title: str
    time_limit_minutes: int
    due_date: datetime
    questions: list[Question]
    pin: str | None = None
    source_path: Path | None = None


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    imported = parse_quiz_text(text)
    imported.source_path = file_path
    return imported


def parse_quiz_text(text: str) -> ImportedQuiz:
    blocks = _split_blocks(text)
    if not blocks:
        raise QuizImportError("Quiz file is empty.")

    header = _parse_header(blocks[0])
    questions = [_parse_block(block, position) for position, block in enumerate(blocks[1:], start=1)]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return ImportedQuiz(questions=questions, **header)


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return blocks


def _parse_header(block: str) -> dict[str, object]:
    values: dict[str, str] = {}
    for raw_line in block.splitlines():
        key, sep, value = raw_line.strip().partition(":")
        key = key.strip().upper()
        if not sep or key not in _HEADER_KEYS:
            raise QuizImportError(f"Quiz file must start with a header block; got '{raw_line.strip()}'.")
        values[key] = value.strip()

    title = values.get("TITLE", "")
    if not title:
        raise QuizImportError("TITLE is required.")
    time_limit = _parse_positive_int(values.get("TIMELIMIT", ""), "TIMELIMIT")
    raw_due = values.get("DUE", "")
    try:
        due_date = datetime.fromisoformat(raw_due)
    except ValueError as exc:
        raise QuizImportError("DUE must be an ISO-8601 timestamp.") from exc
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=timezone.utc)
    pin = values.get("PIN", "").upper() or None
    return {"title": title, "time_limit_minutes": time_limit, "due_date": due_date, "pin": pin}


def _parse_block(block: str, position: int) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    marks = 1
    image_url: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("MARKS:"):
            marks = _parse_positive_int(line.split(":", 1)[1].strip(), "MARKS")
            current_section = None
            continue

        if upper.startswith("IMAGE:"):
            image_url = line.split(":", 1)[1].strip() or None
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError(f"Question {position}: text missing (Q: ...)")

    letters = OPTION_LETTERS[: len(options)]
    if set(options) != set(letters):
        raise QuizImportError(f"Question {position}: options must use consecutive letters starting at A.")
    if not MIN_OPTION_COUNT <= len(options) <= MAX_OPTION_COUNT:
        raise QuizImportError(
            f"Question {position}: needs between {MIN_OPTION_COUNT} and {MAX_OPTION_COUNT} options."
        )
    option_list = [options[letter].strip() for letter in letters]
    if any(not opt for opt in option_list):
        raise QuizImportError(f"Question {position}: option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError(f"Question {position}: CORRECT is required.")
    if correct_letter not in letters:
        raise QuizImportError(f"Question {position}: CORRECT must be one of {', '.join(letters)}.")

    return Question(
        id=position,  # reassigned by the backend when the quiz is stored
        prompt_text=question_text,
        options=option_list,
        marks=marks,
        correct_answer=option_list[letters.index(correct_letter)],
        image_url=image_url,
    )


def _parse_positive_int(raw_value: str, label: str) -> int:
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{label} must be an integer.") from exc
    if parsed_value <= 0:
        raise QuizImportError(f"{label} must be a positive integer.")
    return parsed_value
