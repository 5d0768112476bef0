"""
Tests for the httpx loader and gateway.

Happy paths run against the real FastAPI app through httpx.ASGITransport;
failure modes use httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest

from conftest import FakeClock, ManualTimer
from exam_app.client.api_client import create_http_client
from exam_app.client.auth import StudentAuthContext
from exam_app.client.exam_loader import HttpExamDefinitionLoader
from exam_app.client.submission_gateway import HttpSubmissionGateway
from exam_app.core.errors import ExamLoadError, LoadFailureReason, SubmissionError, SubmissionFailureKind
from exam_app.core.models import AttemptStatus, ExamDefinition, SubmissionPayload
from exam_app.core.portal_manager import ExamPortalManager
from exam_app.core.services.exam_session import ExamSession
from exam_app.server.api_server import create_api_app

API_URL = "http://testserver/api"
AUTH = StudentAuthContext(email="alice@example.com")


@pytest.fixture
def manager():
    portal = ExamPortalManager()
    portal.load_exams([
        ExamDefinition(
            exam_id="algebra-midterm",
            title="Algebra Midterm",
            subject="Mathematics",
            class_name="Grade 9A",
            duration_minutes=1,
            content="Solve for x.",
        ),
        ExamDefinition(exam_id="reflection", title="Reading Reflection", file_url="https://files.example/r.pdf"),
    ])
    return portal


def _asgi_client(app):
    return create_http_client(API_URL, transport=httpx.ASGITransport(app=app))


def _mock_client(handler):
    return create_http_client(API_URL, transport=httpx.MockTransport(handler))


class TestLoaderAgainstApp:

    def test_load_maps_wire_fields(self, manager):
        async def scenario():
            async with _asgi_client(create_api_app(manager)) as client:
                return await HttpExamDefinitionLoader(client, AUTH).load("algebra-midterm")

        definition = asyncio.run(scenario())

        assert definition == manager.get_live_exam("algebra-midterm")
        assert definition.class_name == "Grade 9A"
        assert definition.duration_minutes == 1

    def test_list_live_exams(self, manager):
        async def scenario():
            async with _asgi_client(create_api_app(manager)) as client:
                return await HttpExamDefinitionLoader(client, AUTH).list_live_exams()

        exams = asyncio.run(scenario())

        assert [exam.exam_id for exam in exams] == ["algebra-midterm", "reflection"]
        assert exams[1].is_timed is False

    def test_unknown_exam_is_not_found(self, manager):
        async def scenario():
            async with _asgi_client(create_api_app(manager)) as client:
                await HttpExamDefinitionLoader(client, AUTH).load("missing exam")

        with pytest.raises(ExamLoadError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.reason is LoadFailureReason.NOT_FOUND
        assert "missing exam" in excinfo.value.message

    def test_wrong_token_is_unauthorized(self, manager):
        async def scenario():
            async with _asgi_client(create_api_app(manager, api_token="s3cret")) as client:
                auth = StudentAuthContext(email="alice@example.com", token="wrong")
                await HttpExamDefinitionLoader(client, auth).load("algebra-midterm")

        with pytest.raises(ExamLoadError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.reason is LoadFailureReason.UNAUTHORIZED


class TestLoaderFailures:

    @pytest.mark.parametrize(
        "response, reason",
        [
            (httpx.Response(500, json={"message": "Database down"}), LoadFailureReason.UNAVAILABLE),
            (httpx.Response(403), LoadFailureReason.UNAUTHORIZED),
            (httpx.Response(200, json={"id": "e1"}), LoadFailureReason.INVALID),
            (httpx.Response(200, text="<html>"), LoadFailureReason.INVALID),
        ],
    )
    def test_response_is_classified(self, response, reason):
        async def scenario():
            async with _mock_client(lambda request: response) as client:
                await HttpExamDefinitionLoader(client, AUTH).load("e1")

        with pytest.raises(ExamLoadError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.reason is reason

    def test_connection_error_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def scenario():
            async with _mock_client(handler) as client:
                await HttpExamDefinitionLoader(client, AUTH).load("e1")

        with pytest.raises(ExamLoadError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.reason is LoadFailureReason.UNAVAILABLE

    def test_server_message_is_used(self):
        async def scenario():
            async with _mock_client(lambda request: httpx.Response(500, json={"message": "Database down"})) as client:
                await HttpExamDefinitionLoader(client, AUTH).load("e1")

        with pytest.raises(ExamLoadError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.message == "Database down"


class TestGateway:

    def test_submission_against_app(self, manager):
        async def scenario():
            async with _asgi_client(create_api_app(manager)) as client:
                gateway = HttpSubmissionGateway(client, AUTH)
                return await gateway.submit(SubmissionPayload("algebra-midterm", "stu-1", "x = 5"))

        receipt = asyncio.run(scenario())

        recorded = manager.get_submissions()
        assert len(recorded) == 1
        assert receipt.submission_id == recorded[0].submission_id
        assert recorded[0].answer_text == "x = 5"

    def test_request_body_and_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                201,
                json={
                    "id": "sub-1",
                    "examResourceId": "e1",
                    "studentUserId": "stu-1",
                    "submissionDate": "2026-03-02T09:05:00Z",
                },
            )

        async def scenario():
            async with _mock_client(handler) as client:
                auth = StudentAuthContext(email="alice@example.com", token="tok")
                return await HttpSubmissionGateway(client, auth).submit(SubmissionPayload("e1", "stu-1", "answer"))

        receipt = asyncio.run(scenario())

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/student/submit-exam"
        assert request.headers["X-User-Email"] == "alice@example.com"
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.read()) == {"studentUserId": "stu-1", "examResourceId": "e1", "submissionText": "answer"}
        assert receipt.submission_id == "sub-1"

    @pytest.mark.parametrize(
        "status, kind",
        [
            (422, SubmissionFailureKind.VALIDATION),
            (404, SubmissionFailureKind.VALIDATION),
            (401, SubmissionFailureKind.UNAUTHORIZED),
            (500, SubmissionFailureKind.TRANSIENT),
            (503, SubmissionFailureKind.TRANSIENT),
        ],
    )
    def test_error_statuses_are_classified(self, status, kind):
        async def scenario():
            async with _mock_client(lambda request: httpx.Response(status)) as client:
                await HttpSubmissionGateway(client, AUTH).submit(SubmissionPayload("e1", "stu-1", "answer"))

        with pytest.raises(SubmissionError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.kind is kind
        assert excinfo.value.status_code == status

    @pytest.mark.parametrize("error_type", [httpx.ConnectError, httpx.ReadTimeout])
    def test_transport_errors_are_transient(self, error_type):
        def handler(request):
            raise error_type("no answer", request=request)

        async def scenario():
            async with _mock_client(handler) as client:
                await HttpSubmissionGateway(client, AUTH).submit(SubmissionPayload("e1", "stu-1", "answer"))

        with pytest.raises(SubmissionError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.is_transient
        assert excinfo.value.status_code is None

    def test_unreadable_receipt_is_transient(self):
        async def scenario():
            async with _mock_client(lambda request: httpx.Response(201, json={"ok": True})) as client:
                await HttpSubmissionGateway(client, AUTH).submit(SubmissionPayload("e1", "stu-1", "answer"))

        with pytest.raises(SubmissionError) as excinfo:
            asyncio.run(scenario())

        assert excinfo.value.is_transient


def test_expired_session_submits_once_over_http(manager):
    clock = FakeClock()
    timer = ManualTimer()

    async def scenario():
        async with _asgi_client(create_api_app(manager)) as client:
            session = ExamSession(
                exam_id="algebra-midterm",
                student_id="stu-1",
                loader=HttpExamDefinitionLoader(client, AUTH),
                gateway=HttpSubmissionGateway(client, AUTH),
                timer=timer,
                clock=clock,
            )
            await session.start()
            session.update_answer("x = 5")
            clock.advance(60)
            timer.tick()
            late_click = session.submit()
            return await late_click

    snapshot = asyncio.run(scenario())

    assert snapshot.status is AttemptStatus.SUBMITTED
    assert snapshot.submitted_automatically is True
    recorded = manager.get_submissions(exam_id="algebra-midterm", student_id="stu-1")
    assert len(recorded) == 1
    assert recorded[0].answer_text == "x = 5"
    assert snapshot.submission_outcome.receipt.submission_id == recorded[0].submission_id
