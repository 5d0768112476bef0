"""HTTP implementation of the submission gateway."""

from __future__ import annotations

import logging

import httpx

from exam_app.client.api_client import error_message
from exam_app.core.contracts import AuthContext
from exam_app.core.errors import SubmissionError, SubmissionFailureKind
from exam_app.core.models import SubmissionPayload, SubmissionReceipt
from exam_app.core.schemas import SubmissionReceiptSchema, SubmissionRequest

logger = logging.getLogger(__name__)

_SUBMIT_PATH = "/student/submit-exam"
_VALIDATION_STATUSES = frozenset({400, 404, 409, 422})
_UNAUTHORIZED_STATUSES = frozenset({401, 403})


class HttpSubmissionGateway:
    """Posts finalized attempts to the student API. One call per invocation, no retries."""

    def __init__(self, client: httpx.AsyncClient, auth: AuthContext) -> None:
        self._client = client
        self._auth = auth

    async def submit(self, payload: SubmissionPayload) -> SubmissionReceipt:
        body = SubmissionRequest.from_domain(payload).model_dump(by_alias=True)
        try:
            response = await self._client.post(_SUBMIT_PATH, json=body, headers=dict(self._auth.headers()))
        except httpx.TimeoutException as exc:
            raise SubmissionError("The exam service did not answer in time.") from exc
        except httpx.HTTPError as exc:
            logger.warning("POST %s failed: %s", _SUBMIT_PATH, exc)
            raise SubmissionError("Could not reach the exam service.") from exc

        status = response.status_code
        if status in _VALIDATION_STATUSES:
            raise SubmissionError(
                error_message(response, "The exam service rejected the submission."),
                SubmissionFailureKind.VALIDATION,
                status_code=status,
            )
        if status in _UNAUTHORIZED_STATUSES:
            raise SubmissionError(
                error_message(response, "You are not allowed to submit this exam."),
                SubmissionFailureKind.UNAUTHORIZED,
                status_code=status,
            )
        if response.is_error:
            raise SubmissionError(
                error_message(response, "Failed to submit exam attempt."),
                SubmissionFailureKind.TRANSIENT,
                status_code=status,
            )

        try:
            return SubmissionReceiptSchema.model_validate(response.json()).to_domain()
        except ValueError as exc:
            raise SubmissionError(
                "The exam service returned an unreadable receipt.",
                status_code=status,
            ) from exc
