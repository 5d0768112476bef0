"""Service for recording exam submissions received by the backend."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from exam_app.core.models import SubmissionPayload


@dataclass(slots=True, frozen=True)
class RecordedSubmission:
    """One accepted submission. Every POST is recorded; retries produce new entries."""

    submission_id: str
    exam_id: str
    student_id: str
    answer_text: str
    submitted_at: datetime


class SubmissionLedger:
    """Append-only record of submissions."""

    def __init__(self) -> None:
        self._entries: list[RecordedSubmission] = []

    def record(self, payload: SubmissionPayload) -> RecordedSubmission:
        entry = RecordedSubmission(
            submission_id=uuid4().hex,
            exam_id=payload.exam_id,
            student_id=payload.student_id,
            answer_text=payload.answer_text,
            submitted_at=datetime.now(timezone.utc),
        )
        self._entries.append(entry)
        return entry

    def get_submissions(self, exam_id: str | None = None, student_id: str | None = None) -> list[RecordedSubmission]:
        return [
            entry
            for entry in self._entries
            if (exam_id is None or entry.exam_id == exam_id)
            and (student_id is None or entry.student_id == student_id)
        ]

    def count(self) -> int:
        return len(self._entries)
