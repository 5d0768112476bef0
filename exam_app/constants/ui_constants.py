"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "ExamQt"
ANSWER_PLACEHOLDER: str = "Type your answers here..."
INSTRUCTIONS_TEXT: str = "Read all questions carefully. Submit your answers in the space provided below."
CONTENT_MISSING_MESSAGE: str = "Exam content not available. Please contact your teacher."

SUBMIT_BUTTON: str = "Submit Exam"
SUBMITTING_BUTTON: str = "Submitting..."
RETRY_BUTTON: str = "Retry Submit"
CANCEL_BUTTON: str = "Cancel"

LOADING_MESSAGE: str = "Loading exam..."
UNTIMED_LABEL: str = "Time Left: N/A"
TIME_LEFT_TEMPLATE: str = "Time Left: {remaining}"

TIME_UP_MESSAGE: str = "Time's up! Submitting your attempt."
SUBMIT_SUCCESS_MESSAGE: str = "Exam submitted successfully!"
SUBMIT_FAILED_MESSAGE: str = "Could not submit exam."
LOAD_FAILED_MESSAGE: str = "Could not load exam details."
CONFIRM_CANCEL_MESSAGE: str = "Leaving now discards your attempt. Continue?"
NO_LIVE_EXAMS_MESSAGE: str = "No exams are available right now."
PICK_EXAM_TITLE: str = "Available Exams"
PICK_EXAM_LABEL: str = "Choose the exam to start:"
