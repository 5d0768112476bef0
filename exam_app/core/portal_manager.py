"""Business logic for the exam backend shared between the API and the launcher."""

from __future__ import annotations

from threading import Lock

from exam_app.core.models import ExamDefinition, SubmissionPayload
from exam_app.core.services.exam_repository import ExamRepository
from exam_app.core.services.submission_ledger import RecordedSubmission, SubmissionLedger


class ExamPortalManager:
    """Facade for backend services: the live exam repository and the submission ledger."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._repository = ExamRepository()
        self._ledger = SubmissionLedger()

    # --- Exam Repository Delegation ---

    def load_exams(self, exams: list[ExamDefinition]) -> None:
        with self._lock:
            self._repository.load_exams(exams)

    def publish_exam(self, exam: ExamDefinition) -> None:
        with self._lock:
            self._repository.add_exam(exam)

    def get_live_exams(self) -> list[ExamDefinition]:
        with self._lock:
            return self._repository.get_exams()

    def get_live_exam(self, exam_id: str) -> ExamDefinition:
        with self._lock:
            return self._repository.get_exam(exam_id)

    def get_exam_count(self) -> int:
        with self._lock:
            return self._repository.get_exam_count()

    # --- Submission Ledger Delegation ---

    def record_submission(self, payload: SubmissionPayload) -> RecordedSubmission:
        """Record an attempt for a live exam. Empty answers are accepted."""
        with self._lock:
            if not self._repository.has_exam(payload.exam_id):
                raise KeyError(f"Exam '{payload.exam_id}' not found")
            return self._ledger.record(payload)

    def get_submissions(self, exam_id: str | None = None, student_id: str | None = None) -> list[RecordedSubmission]:
        with self._lock:
            return self._ledger.get_submissions(exam_id=exam_id, student_id=student_id)

    def get_submission_count(self) -> int:
        with self._lock:
            return self._ledger.count()
