"""Service for storing the exams that are live for students."""

from __future__ import annotations

from exam_app.core.models import ExamDefinition


class ExamRepository:
    """Holds live exam definitions keyed by id, in publication order."""

    def __init__(self) -> None:
        self._exams: dict[str, ExamDefinition] = {}

    def load_exams(self, exams: list[ExamDefinition]) -> None:
        """Replace the live exams with a new list."""
        prepared: dict[str, ExamDefinition] = {}
        for exam in exams:
            self._validate(exam)
            if exam.exam_id in prepared:
                raise ValueError(f"Duplicate exam id '{exam.exam_id}'.")
            prepared[exam.exam_id] = exam
        self._exams = prepared

    def add_exam(self, exam: ExamDefinition) -> None:
        self._validate(exam)
        if exam.exam_id in self._exams:
            raise ValueError(f"Exam '{exam.exam_id}' already exists.")
        self._exams[exam.exam_id] = exam

    def get_exam(self, exam_id: str) -> ExamDefinition:
        try:
            return self._exams[exam_id]
        except KeyError:
            raise KeyError(f"Exam '{exam_id}' not found") from None

    def has_exam(self, exam_id: str) -> bool:
        return exam_id in self._exams

    def get_exams(self) -> list[ExamDefinition]:
        return list(self._exams.values())

    def get_exam_count(self) -> int:
        return len(self._exams)

    @staticmethod
    def _validate(exam: ExamDefinition) -> None:
        if not exam.exam_id.strip():
            raise ValueError("Exam id must not be empty.")
        if not exam.title.strip():
            raise ValueError("Exam title must not be empty.")
