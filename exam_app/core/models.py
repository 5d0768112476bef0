"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exam_app.core.errors import SubmissionError


class AttemptStatus(str, Enum):
    """Lifecycle of a single exam attempt."""

    LOADING = "loading"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    SUBMIT_FAILED = "submit_failed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (AttemptStatus.SUBMITTED, AttemptStatus.ABORTED)


@dataclass(slots=True, frozen=True)
class ExamDefinition:
    """Exam metadata as published to students. Never mutated once loaded."""

    exam_id: str
    title: str
    subject: str | None = None
    class_name: str | None = None
    duration_minutes: int | None = None  # None means untimed
    content: str | None = None
    file_url: str | None = None
    file_name: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        # A zero or negative duration never started a clock in the portal.
        if self.duration_minutes is not None and self.duration_minutes <= 0:
            object.__setattr__(self, "duration_minutes", None)

    @property
    def is_timed(self) -> bool:
        return self.duration_minutes is not None

    @property
    def has_content(self) -> bool:
        return bool(self.content or self.file_url)


@dataclass(slots=True, frozen=True)
class SubmissionPayload:
    """Finalized answer handed to the submission gateway."""

    exam_id: str
    student_id: str
    answer_text: str


@dataclass(slots=True, frozen=True)
class SubmissionReceipt:
    """Acknowledgement returned by the gateway for an accepted submission."""

    submission_id: str
    submitted_at: datetime


@dataclass(slots=True, frozen=True)
class SubmissionOutcome:
    """Result of one submission episode."""

    succeeded: bool
    automatic: bool
    answer_text: str
    resolved_at: datetime
    receipt: SubmissionReceipt | None = None
    error: SubmissionError | None = None


@dataclass(slots=True)
class ExamAttempt:
    """Session-local attempt state. Owned and mutated only by the session controller."""

    exam_id: str
    student_id: str
    answer_text: str = ""
    status: AttemptStatus = AttemptStatus.LOADING
    deadline: datetime | None = None
    remaining_seconds: int | None = None
    submitted_automatically: bool | None = None
    submission_outcome: SubmissionOutcome | None = None


@dataclass(slots=True, frozen=True)
class AttemptSnapshot:
    """Immutable copy of an attempt handed to listeners and callers."""

    exam_id: str
    student_id: str
    answer_text: str
    status: AttemptStatus
    deadline: datetime | None
    remaining_seconds: int | None
    submitted_automatically: bool | None
    submission_outcome: SubmissionOutcome | None

    @classmethod
    def of(cls, attempt: ExamAttempt) -> "AttemptSnapshot":
        return cls(
            exam_id=attempt.exam_id,
            student_id=attempt.student_id,
            answer_text=attempt.answer_text,
            status=attempt.status,
            deadline=attempt.deadline,
            remaining_seconds=attempt.remaining_seconds,
            submitted_automatically=attempt.submitted_automatically,
            submission_outcome=attempt.submission_outcome,
        )
