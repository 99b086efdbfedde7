"""Static metadata describing the SOMA exam client."""

APP_NAME = "SOMA Exam"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "SOMA Exam is the student side of the SOMA assessment platform. "
    "Enter your name, answer the multiple-choice questions before the timer runs out, "
    "review your answers and submit once."
)

QUIZ_FILE_HELP_TEXT = (
    "Quiz files start with a header block followed by question blocks:\n\n"
    "TITLE: Kinematics check\n"
    "TIMELIMIT: 20\n"
    "DUE: 2026-12-01T17:00:00+00:00\n"
    "PIN: PHY101\n"
    "---\n"
    "Q: A car accelerates from rest at $2\\,m/s^2$. How far does it travel in 3 s?\n"
    "A: 6 m\nB: 9 m\nC: 12 m\nD: 18 m\n"
    "CORRECT: B\nMARKS: 2"
)
