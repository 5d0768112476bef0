"""Exam-session constants shared across UI, client and core layers."""

TICK_INTERVAL_SECONDS: float = 1.0
LOW_TIME_WARNING_SECONDS: int = 300
SAMPLE_EXAMS_PATH: str = "exam_app/data/sample_exams.txt"

EMPTY_ANSWER_MESSAGE: str = "Please write your answers before submitting."
