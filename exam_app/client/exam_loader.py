"""HTTP implementation of the exam definition loader."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from exam_app.client.api_client import error_message
from exam_app.core.contracts import AuthContext
from exam_app.core.errors import ExamLoadError, LoadFailureReason
from exam_app.core.models import ExamDefinition
from exam_app.core.schemas import ExamDefinitionSchema

logger = logging.getLogger(__name__)

_LIVE_EXAMS_PATH = "/student/live-exams"
_EXAM_LIST = TypeAdapter(list[ExamDefinitionSchema])


class HttpExamDefinitionLoader:
    """Fetches live exams from the student API."""

    def __init__(self, client: httpx.AsyncClient, auth: AuthContext) -> None:
        self._client = client
        self._auth = auth

    async def load(self, exam_id: str) -> ExamDefinition:
        response = await self._get(f"{_LIVE_EXAMS_PATH}/{quote(exam_id, safe='')}")
        try:
            schema = ExamDefinitionSchema.model_validate(response.json())
        except ValueError as exc:
            raise ExamLoadError("The exam service returned an unreadable exam.", LoadFailureReason.INVALID) from exc
        return schema.to_domain()

    async def list_live_exams(self) -> list[ExamDefinition]:
        response = await self._get(_LIVE_EXAMS_PATH)
        try:
            schemas = _EXAM_LIST.validate_python(response.json())
        except ValueError as exc:
            raise ExamLoadError("The exam service returned an unreadable exam list.", LoadFailureReason.INVALID) from exc
        return [schema.to_domain() for schema in schemas]

    async def _get(self, path: str) -> httpx.Response:
        try:
            response = await self._client.get(path, headers=dict(self._auth.headers()))
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", path, exc)
            raise ExamLoadError("Could not reach the exam service.", LoadFailureReason.UNAVAILABLE) from exc

        if response.status_code == 404:
            raise ExamLoadError(error_message(response, "Exam not found or not available."), LoadFailureReason.NOT_FOUND)
        if response.status_code in (401, 403):
            raise ExamLoadError(
                error_message(response, "You are not allowed to open this exam."),
                LoadFailureReason.UNAUTHORIZED,
            )
        if response.is_error:
            raise ExamLoadError(
                error_message(response, "Failed to fetch exam details."),
                LoadFailureReason.UNAVAILABLE,
            )
        return response
