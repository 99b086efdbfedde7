"""Qt UI constants used across exam widgets."""

WINDOW_TITLE: str = "SOMA Examination"

ENTRY_FACTS_TEMPLATE: str = "{minutes} minutes · closes {due}"
ENTRY_RULES_TEXT: str = (
    "You have one attempt. The timer starts as soon as you begin and keeps running "
    "if you close the window. Your answers are submitted automatically when time runs out."
)
FIRST_NAME_PLACEHOLDER: str = "First name"
LAST_NAME_PLACEHOLDER: str = "Last name"
PIN_PLACEHOLDER: str = "Quiz PIN"
START_BUTTON: str = "Begin Examination"
CHECKING_STATUS: str = "Checking…"

PREV_BUTTON: str = "Previous"
NEXT_BUTTON: str = "Next"
REVIEW_BUTTON: str = "Review & Submit"
BACK_TO_QUESTIONS_BUTTON: str = "Back to Questions"
SUBMIT_BUTTON: str = "Submit Examination"
QUESTION_POSITION_TEMPLATE: str = "Question {current} of {total} · {marks} mark(s)"
ANSWERED_COUNT_TEMPLATE: str = "{answered} of {total} answered"
TIME_UP_TEXT: str = "Time is up"

CLOSED_TITLE: str = "Examination Closed"
CLOSED_MESSAGE_TEMPLATE: str = "This examination closed on {due}."
BLOCKED_TITLE: str = "This test has already been taken."
BLOCKED_MESSAGE_TEMPLATE: str = (
    'You have already submitted your answers for "{title}". '
    "Each student is allowed only one attempt."
)
SUBMITTED_TITLE: str = "Examination Submitted"
SUBMITTED_MESSAGE: str = "Your answers have been recorded. Thank you for completing the examination."
SCORE_TEMPLATE: str = "{score} / {max_score} marks ({percentage}%)"

SUBMIT_CONFIRM_TITLE: str = "Submit Examination"
SUBMIT_CONFIRM_TEMPLATE: str = (
    "You have answered {answered} of {total} questions. "
    "Submit now? You cannot change your answers afterwards."
)
SUBMISSION_FAILED_TITLE: str = "Submission failed"
REGISTRATION_FAILED_TITLE: str = "Could not start the examination"
LOAD_FAILED_TITLE: str = "Failed to load"
