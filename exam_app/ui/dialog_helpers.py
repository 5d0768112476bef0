"""Helper functions for common dialog patterns in the exam UI."""

from __future__ import annotations

from PySide6.QtWidgets import QInputDialog, QMessageBox, QWidget

from exam_app.constants.ui_constants import (
    CONFIRM_CANCEL_MESSAGE,
    PICK_EXAM_LABEL,
    PICK_EXAM_TITLE,
)
from exam_app.core.models import ExamDefinition


def confirm_leave_exam(parent: QWidget | None) -> bool:
    """Ask before abandoning an attempt.

    Returns:
        True if the student confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Leave Exam",
        CONFIRM_CANCEL_MESSAGE,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def choose_exam(parent: QWidget | None, exams: list[ExamDefinition]) -> ExamDefinition | None:
    """Let the student pick one of the live exams.

    Returns:
        The chosen exam, or None if the dialog was cancelled
    """
    labels = []
    for exam in exams:
        duration = f"{exam.duration_minutes} min" if exam.is_timed else "untimed"
        labels.append(f"{exam.title} ({exam.subject or 'General'}, {duration})")
    label, accepted = QInputDialog.getItem(parent, PICK_EXAM_TITLE, PICK_EXAM_LABEL, labels, 0, False)
    if not accepted or label not in labels:
        return None
    return exams[labels.index(label)]


def show_error(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)


def show_warning(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
