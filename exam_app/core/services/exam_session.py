"""Controller for a single timed exam attempt.

Architecture note:
    The session is one finite-state machine driven from one asyncio event loop.
    Timer expiry and the student's submit button both end up in ``submit()``,
    and ``submit()`` decides what to do by looking at the current status only.
    The transition to ``submitting`` happens synchronously inside that call, so
    whichever trigger runs first wins and every later trigger sees
    ``submitting`` (or a terminal status) and gets the existing result back.
    Remaining time is never decremented; every tick recomputes it from the
    deadline fixed at load time, so irregular tick delivery cannot drift.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import Callable

from exam_app.constants.exam_constants import EMPTY_ANSWER_MESSAGE
from exam_app.core.contracts import ExamDefinitionLoader, SubmissionGateway
from exam_app.core.errors import AnswerValidationError, ExamLoadError, LoadFailureReason, SubmissionError
from exam_app.core.models import (
    AttemptSnapshot,
    AttemptStatus,
    ExamAttempt,
    ExamDefinition,
    SubmissionOutcome,
    SubmissionPayload,
)
from exam_app.core.services.countdown_timer import AsyncioCountdownTimer, CountdownTimer
from exam_app.core.timing import compute_deadline, remaining_seconds, utc_now

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AttemptSnapshot], None]

_CANCELLABLE = (AttemptStatus.LOADING, AttemptStatus.READY, AttemptStatus.IN_PROGRESS)


def _consume_exception(task: asyncio.Future) -> None:
    # Timer-driven submissions have no awaiter; _deliver has already logged the error.
    if not task.cancelled():
        task.exception()


class ExamSession:
    """Owns one student's attempt at one exam for the lifetime of the page."""

    def __init__(
        self,
        exam_id: str,
        student_id: str,
        loader: ExamDefinitionLoader,
        gateway: SubmissionGateway,
        timer: CountdownTimer | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._attempt = ExamAttempt(exam_id=exam_id, student_id=student_id)
        self._loader = loader
        self._gateway = gateway
        self._timer: CountdownTimer = timer if timer is not None else AsyncioCountdownTimer()
        self._timer.on_tick(self._handle_tick)
        self._clock = clock
        self._definition: ExamDefinition | None = None
        self._load_error: ExamLoadError | None = None
        self._load_started: bool = False
        self._submission: asyncio.Future[AttemptSnapshot] | None = None
        self._listeners: list[SnapshotListener] = []

    # --- Read-only state ---

    @property
    def status(self) -> AttemptStatus:
        return self._attempt.status

    @property
    def definition(self) -> ExamDefinition | None:
        return self._definition

    @property
    def load_error(self) -> ExamLoadError | None:
        return self._load_error

    def snapshot(self) -> AttemptSnapshot:
        return AttemptSnapshot.of(self._attempt)

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    # --- Lifecycle ---

    async def start(self) -> AttemptSnapshot:
        """Load the definition and start the clock. The exam is in progress on return."""
        if self._load_started:
            raise RuntimeError("Exam session has already been started.")
        self._load_started = True
        exam_id = self._attempt.exam_id
        logger.info("Loading exam %s for student %s", exam_id, self._attempt.student_id)

        try:
            definition = await self._loader.load(exam_id)
        except ExamLoadError as exc:
            if self._attempt.status is not AttemptStatus.LOADING:
                return self.snapshot()
            logger.warning("Exam %s could not be loaded: %s", exam_id, exc.message)
            self._load_error = exc
            self._transition(AttemptStatus.ABORTED)
            raise
        except Exception as exc:
            if self._attempt.status is not AttemptStatus.LOADING:
                return self.snapshot()
            logger.exception("Unexpected error while loading exam %s", exam_id)
            self._load_error = ExamLoadError("Could not load the exam.", LoadFailureReason.UNAVAILABLE)
            self._transition(AttemptStatus.ABORTED)
            raise self._load_error from exc

        if self._attempt.status is not AttemptStatus.LOADING:
            logger.info("Exam %s arrived after the session was cancelled; ignoring it", exam_id)
            return self.snapshot()

        self._definition = definition
        if definition.is_timed:
            now = self._clock()
            deadline = compute_deadline(now, definition.duration_minutes)
            self._attempt.deadline = deadline
            self._attempt.remaining_seconds = remaining_seconds(deadline, now)
            self._timer.arm(deadline)
        else:
            logger.info("Exam %s has no duration; running untimed", exam_id)
        self._transition(AttemptStatus.READY)

        # Opening the exam starts it. There is no separate begin step.
        if self._attempt.status is AttemptStatus.READY:
            self._transition(AttemptStatus.IN_PROGRESS)
        return self.snapshot()

    def update_answer(self, text: str) -> bool:
        """Replace the answer text. Ignored once the attempt has left ``in_progress``."""
        if self._attempt.status is not AttemptStatus.IN_PROGRESS:
            logger.debug("Answer edit ignored in status %s", self._attempt.status.value)
            return False
        self._attempt.answer_text = text
        return True

    def cancel(self) -> bool:
        """Abort the attempt without contacting the gateway.

        A submission already in flight is left to resolve. Returns True if the
        session was aborted.
        """
        status = self._attempt.status
        if status in _CANCELLABLE:
            self._timer.disarm()
            self._transition(AttemptStatus.ABORTED)
            return True
        if status is AttemptStatus.SUBMITTING:
            logger.info("Cancel ignored for exam %s: submission in flight", self._attempt.exam_id)
        return False

    def close(self) -> None:
        self._timer.disarm()

    # --- Submission arbitration ---

    def submit(self, *, automatic: bool = False) -> asyncio.Future[AttemptSnapshot]:
        """Single entry point for user and timer submissions.

        Returns an awaitable resolving to the attempt snapshot once the
        submission settles. Repeated calls while a submission is in flight, or
        after it has succeeded, return the existing result without contacting
        the gateway again. A manual submission with an empty answer raises
        ``AnswerValidationError`` and leaves the attempt in progress.
        """
        status = self._attempt.status
        trigger = "automatic" if automatic else "manual"

        if status in (AttemptStatus.SUBMITTING, AttemptStatus.SUBMITTED) and self._submission is not None:
            logger.info("Duplicate %s submit for exam %s ignored (%s)", trigger, self._attempt.exam_id, status.value)
            return self._submission

        if status is AttemptStatus.IN_PROGRESS:
            if not automatic and not self._attempt.answer_text.strip():
                raise AnswerValidationError(EMPTY_ANSWER_MESSAGE)
        elif status is not AttemptStatus.SUBMIT_FAILED:
            logger.debug("Submit ignored in status %s", status.value)
            settled = asyncio.get_running_loop().create_future()
            settled.set_result(self.snapshot())
            return settled

        return self._begin_submission(automatic)

    def _begin_submission(self, automatic: bool) -> asyncio.Future[AttemptSnapshot]:
        self._timer.disarm()
        attempt = self._attempt
        attempt.submitted_automatically = automatic
        payload = SubmissionPayload(
            exam_id=attempt.exam_id,
            student_id=attempt.student_id,
            answer_text=attempt.answer_text,
        )
        # The task only runs after this call returns, by which time the status
        # is already ``submitting``.
        self._submission = asyncio.ensure_future(self._deliver(payload, automatic))
        self._submission.add_done_callback(_consume_exception)
        self._transition(AttemptStatus.SUBMITTING)
        return self._submission

    async def _deliver(self, payload: SubmissionPayload, automatic: bool) -> AttemptSnapshot:
        logger.info(
            "Submitting attempt for exam %s (automatic=%s, %d chars)",
            payload.exam_id,
            automatic,
            len(payload.answer_text),
        )
        try:
            receipt = await self._gateway.submit(payload)
        except SubmissionError as exc:
            logger.warning("Submission for exam %s failed (%s): %s", payload.exam_id, exc.kind.value, exc.message)
            self._settle(SubmissionOutcome(
                succeeded=False,
                automatic=automatic,
                answer_text=payload.answer_text,
                resolved_at=self._clock(),
                error=exc,
            ))
            return self.snapshot()
        except Exception:
            logger.exception("Unexpected error while submitting exam %s", payload.exam_id)
            self._settle(SubmissionOutcome(
                succeeded=False,
                automatic=automatic,
                answer_text=payload.answer_text,
                resolved_at=self._clock(),
                error=SubmissionError("Unexpected error while submitting the exam."),
            ))
            raise

        logger.info("Exam %s submitted as %s", payload.exam_id, receipt.submission_id)
        self._settle(SubmissionOutcome(
            succeeded=True,
            automatic=automatic,
            answer_text=payload.answer_text,
            resolved_at=self._clock(),
            receipt=receipt,
        ))
        return self.snapshot()

    def _settle(self, outcome: SubmissionOutcome) -> None:
        self._attempt.submission_outcome = outcome
        self._transition(AttemptStatus.SUBMITTED if outcome.succeeded else AttemptStatus.SUBMIT_FAILED)

    # --- Clock ---

    def _handle_tick(self) -> None:
        attempt = self._attempt
        if attempt.status is not AttemptStatus.IN_PROGRESS or attempt.deadline is None:
            return
        attempt.remaining_seconds = remaining_seconds(attempt.deadline, self._clock())
        if attempt.remaining_seconds > 0:
            self._notify()
            return
        # No tick may follow expiry, whatever the submission outcome.
        self._timer.disarm()
        logger.info("Time is up for exam %s; submitting automatically", attempt.exam_id)
        self.submit(automatic=True)

    # --- Internals ---

    def _transition(self, status: AttemptStatus) -> None:
        previous = self._attempt.status
        self._attempt.status = status
        logger.debug("Exam %s: %s -> %s", self._attempt.exam_id, previous.value, status.value)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
