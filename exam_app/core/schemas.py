"""Wire schemas shared by the exam backend and the HTTP client adapters.

Field names on the wire follow the portal's JSON (camelCase); the domain
models keep Python names.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from exam_app.core.models import ExamDefinition, SubmissionPayload, SubmissionReceipt


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ExamDefinitionSchema(_WireModel):
    """A live exam as returned by ``/student/live-exams``."""

    id: str
    title: str
    subject: str | None = None
    class_name: str | None = Field(default=None, alias="className")
    exam_duration_minutes: int | None = Field(default=None, alias="examDurationMinutes")
    exam_content: str | None = Field(default=None, alias="examContent")
    file_url: str | None = Field(default=None, alias="fileUrl")
    file_name: str | None = Field(default=None, alias="fileName")
    description: str | None = None

    @classmethod
    def from_domain(cls, definition: ExamDefinition) -> "ExamDefinitionSchema":
        return cls(
            id=definition.exam_id,
            title=definition.title,
            subject=definition.subject,
            class_name=definition.class_name,
            exam_duration_minutes=definition.duration_minutes,
            exam_content=definition.content,
            file_url=definition.file_url,
            file_name=definition.file_name,
            description=definition.description,
        )

    def to_domain(self) -> ExamDefinition:
        return ExamDefinition(
            exam_id=self.id,
            title=self.title,
            subject=self.subject,
            class_name=self.class_name,
            duration_minutes=self.exam_duration_minutes,
            content=self.exam_content,
            file_url=self.file_url,
            file_name=self.file_name,
            description=self.description,
        )


class SubmissionRequest(_WireModel):
    """Body of ``POST /student/submit-exam``."""

    student_user_id: str = Field(alias="studentUserId", min_length=1)
    exam_resource_id: str = Field(alias="examResourceId", min_length=1)
    submission_text: str = Field(default="", alias="submissionText")

    @classmethod
    def from_domain(cls, payload: SubmissionPayload) -> "SubmissionRequest":
        return cls(
            student_user_id=payload.student_id,
            exam_resource_id=payload.exam_id,
            submission_text=payload.answer_text,
        )

    def to_domain(self) -> SubmissionPayload:
        return SubmissionPayload(
            exam_id=self.exam_resource_id,
            student_id=self.student_user_id,
            answer_text=self.submission_text,
        )


class SubmissionReceiptSchema(_WireModel):
    """Acknowledgement returned for an accepted submission."""

    id: str
    exam_resource_id: str = Field(alias="examResourceId")
    student_user_id: str = Field(alias="studentUserId")
    submission_date: datetime = Field(alias="submissionDate")

    def to_domain(self) -> SubmissionReceipt:
        return SubmissionReceipt(submission_id=self.id, submitted_at=self.submission_date)
