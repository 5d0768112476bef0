"""FastAPI server that exposes the student exam endpoints."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, Header, HTTPException
import uvicorn

from exam_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from exam_app.constants.network_constants import API_PREFIX, DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.portal_manager import ExamPortalManager
from exam_app.core.schemas import ExamDefinitionSchema, SubmissionReceiptSchema, SubmissionRequest

logger = logging.getLogger(__name__)


def _get_portal_manager_dependency(portal_manager: ExamPortalManager):
    def dependency() -> ExamPortalManager:
        return portal_manager

    return dependency


def _get_student_dependency(api_token: str | None):
    def dependency(
        x_user_email: str | None = Header(default=None),
        authorization: str | None = Header(default=None),
    ) -> str:
        if not x_user_email or not x_user_email.strip():
            raise HTTPException(status_code=401, detail="Authentication required.")
        if api_token is not None and authorization != f"Bearer {api_token}":
            raise HTTPException(status_code=401, detail="Invalid or missing API token.")
        return x_user_email.strip()

    return dependency


def _not_found(exc: KeyError) -> HTTPException:
    message = exc.args[0] if exc.args else "Not found"
    return HTTPException(status_code=404, detail=str(message))


def create_api_app(portal_manager: ExamPortalManager, api_token: str | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided portal manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    manager_dep = _get_portal_manager_dependency(portal_manager)
    student_dep = _get_student_dependency(api_token)

    @app.get(f"{API_PREFIX}/student/live-exams", response_model=list[ExamDefinitionSchema])
    def list_live_exams(
        _student: str = Depends(student_dep),
        manager: ExamPortalManager = Depends(manager_dep),
    ) -> list[ExamDefinitionSchema]:
        return [ExamDefinitionSchema.from_domain(exam) for exam in manager.get_live_exams()]

    @app.get(f"{API_PREFIX}/student/live-exams/{{exam_id}}", response_model=ExamDefinitionSchema)
    def get_live_exam(
        exam_id: str,
        _student: str = Depends(student_dep),
        manager: ExamPortalManager = Depends(manager_dep),
    ) -> ExamDefinitionSchema:
        try:
            exam = manager.get_live_exam(exam_id)
        except KeyError as exc:
            raise _not_found(exc) from exc
        return ExamDefinitionSchema.from_domain(exam)

    @app.post(f"{API_PREFIX}/student/submit-exam", response_model=SubmissionReceiptSchema, status_code=201)
    def submit_exam(
        payload: SubmissionRequest,
        student: str = Depends(student_dep),
        manager: ExamPortalManager = Depends(manager_dep),
    ) -> SubmissionReceiptSchema:
        try:
            recorded = manager.record_submission(payload.to_domain())
        except KeyError as exc:
            raise _not_found(exc) from exc
        logger.info(
            "Recorded submission %s for exam %s from %s (%d chars)",
            recorded.submission_id,
            recorded.exam_id,
            student,
            len(recorded.answer_text),
        )
        return SubmissionReceiptSchema(
            id=recorded.submission_id,
            exam_resource_id=recorded.exam_id,
            student_user_id=recorded.student_id,
            submission_date=recorded.submitted_at,
        )

    return app


def start_api_server(
    portal_manager: ExamPortalManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    api_token: str | None = None,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(portal_manager, api_token=api_token)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="ExamApiServer", daemon=True)
    thread.start()
    return thread
