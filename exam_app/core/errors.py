"""Exception hierarchy for exam sessions and their collaborators."""

from __future__ import annotations

from enum import Enum


class ExamSessionError(Exception):
    """Base class for failures surfaced to the session's caller.

    ``recoverable`` tells the caller whether to offer a retry (True) or to show
    the message and leave the exam (False).
    """

    recoverable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LoadFailureReason(str, Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    UNAVAILABLE = "unavailable"
    INVALID = "invalid"


class ExamLoadError(ExamSessionError):
    """The exam definition could not be fetched. The session is aborted."""

    recoverable = False

    def __init__(self, message: str, reason: LoadFailureReason = LoadFailureReason.UNAVAILABLE) -> None:
        super().__init__(message)
        self.reason = reason


class AnswerValidationError(ExamSessionError, ValueError):
    """A manual submission was rejected locally before reaching the gateway."""


class SubmissionFailureKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    TRANSIENT = "transient"


class SubmissionError(ExamSessionError):
    """The submission gateway refused or failed to accept the attempt."""

    def __init__(
        self,
        message: str,
        kind: SubmissionFailureKind = SubmissionFailureKind.TRANSIENT,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        return self.kind is SubmissionFailureKind.TRANSIENT


class ExamImportError(Exception):
    """Raised when an exam seed file cannot be parsed."""
