"""Contracts for the collaborators an exam session depends on."""

from __future__ import annotations

from typing import Mapping, Protocol

from exam_app.core.models import ExamDefinition, SubmissionPayload, SubmissionReceipt


class AuthContext(Protocol):
    """Supplies request credentials. Opaque to the session controller."""

    def headers(self) -> Mapping[str, str]: ...


class ExamDefinitionLoader(Protocol):
    """Fetches exam metadata. Raises ``ExamLoadError`` when unavailable."""

    async def load(self, exam_id: str) -> ExamDefinition: ...


class SubmissionGateway(Protocol):
    """Accepts a finalized attempt. Raises ``SubmissionError`` on refusal or failure."""

    async def submit(self, payload: SubmissionPayload) -> SubmissionReceipt: ...
