"""Runs an exam session on a private asyncio loop and bridges it to Qt.

Architecture note:
    The session controller expects a single thread of control. The runner
    gives it one: a daemon thread with its own event loop, the same way the
    backend server runs beside the Qt loop. Widgets never touch the session
    directly; every action is posted onto the loop with
    ``call_soon_threadsafe`` and every state change comes back as a Qt signal,
    which Qt delivers to widgets on the GUI thread through a queued connection.
"""

from __future__ import annotations

import asyncio
import logging
from threading import Event, Thread
from typing import Callable

from PySide6.QtCore import QObject, Signal

from exam_app.client.api_client import create_http_client
from exam_app.client.auth import StudentAuthContext
from exam_app.client.exam_loader import HttpExamDefinitionLoader
from exam_app.client.submission_gateway import HttpSubmissionGateway
from exam_app.core.errors import AnswerValidationError, ExamLoadError
from exam_app.core.models import AttemptSnapshot, AttemptStatus
from exam_app.core.services.exam_session import ExamSession
from exam_app.utils.settings import ClientSettings

logger = logging.getLogger(__name__)

_SHUTDOWN_JOIN_SECONDS = 5.0


class SessionRunner(QObject):
    """Owns the event loop thread and the exam session living on it."""

    snapshot_changed = Signal(object)
    definition_loaded = Signal(object)
    load_failed = Signal(object)
    validation_failed = Signal(str)

    def __init__(self, settings: ClientSettings, exam_id: str, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._settings = settings
        self._exam_id = exam_id
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop: asyncio.Event | None = None
        self._session: ExamSession | None = None
        self._thread: Thread | None = None
        self._ready = Event()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Session runner already started.")
        self._thread = Thread(target=self._run_loop, name="ExamSessionLoop", daemon=True)
        self._thread.start()
        self._ready.wait()

    # --- Called from the GUI thread ---

    def update_answer(self, text: str) -> None:
        self._post(lambda session: session.update_answer(text))

    def submit(self) -> None:
        self._post(self._submit_on_loop)

    def cancel(self) -> None:
        self._post(lambda session: session.cancel())

    def shutdown(self) -> None:
        if self._loop is not None and self._stop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._stop.set)
        if self._thread is not None:
            self._thread.join(timeout=_SHUTDOWN_JOIN_SECONDS)

    def _post(self, action: Callable[[ExamSession], object]) -> None:
        loop = self._loop
        session = self._session
        if loop is None or session is None or loop.is_closed():
            logger.debug("Session loop not running; dropping action")
            return
        loop.call_soon_threadsafe(action, session)

    # --- Loop thread ---

    def _run_loop(self) -> None:
        try:
            asyncio.run(self._main())
        finally:
            self._ready.set()

    async def _main(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        settings = self._settings
        auth = StudentAuthContext(email=settings.student_email, token=settings.api_token)

        async with create_http_client(settings.api_url, settings.request_timeout_seconds) as client:
            session = ExamSession(
                exam_id=self._exam_id,
                student_id=settings.student_id,
                loader=HttpExamDefinitionLoader(client, auth),
                gateway=HttpSubmissionGateway(client, auth),
            )
            session.add_listener(self._forward_snapshot)
            self._session = session
            self._ready.set()

            try:
                await session.start()
            except ExamLoadError as exc:
                self.load_failed.emit(exc)

            await self._stop.wait()
            if session.status is AttemptStatus.SUBMITTING:
                # Leaving must not drop an attempt that is already on its way.
                await asyncio.wait([session.submit()])
            session.close()

    def _forward_snapshot(self, snapshot: AttemptSnapshot) -> None:
        if snapshot.status is AttemptStatus.READY and self._session is not None:
            self.definition_loaded.emit(self._session.definition)
        self.snapshot_changed.emit(snapshot)

    def _submit_on_loop(self, session: ExamSession) -> None:
        try:
            session.submit()
        except AnswerValidationError as exc:
            self.validation_failed.emit(exc.message)
