"""Qt UI components for the student exam application."""

from .dialog_helpers import (
    choose_exam,
    confirm_leave_exam,
    show_error,
    show_info,
    show_warning,
)
from .session_runner import SessionRunner
from .take_exam_window import TakeExamWindow

__all__ = [
    "SessionRunner",
    "TakeExamWindow",
    "choose_exam",
    "confirm_leave_exam",
    "show_error",
    "show_info",
    "show_warning",
]
