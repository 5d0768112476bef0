import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from exam_app.core.models import ExamDefinition, SubmissionReceipt
from exam_app.core.services.exam_session import ExamSession

START_TIME = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# FAKE COLLABORATORS
# ============================================================================

class FakeClock:
    """Clock the tests move by hand."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ManualTimer:
    """Countdown timer whose ticks are fired by the test."""

    def __init__(self):
        self.armed = False
        self.arm_count = 0
        self.deadline = None
        self.emitted = 0
        self._callbacks = []

    @property
    def is_armed(self) -> bool:
        return self.armed

    def arm(self, deadline):
        self.armed = True
        self.arm_count += 1
        self.deadline = deadline

    def on_tick(self, callback):
        self._callbacks.append(callback)

    def disarm(self):
        self.armed = False

    def tick(self) -> bool:
        """Emit one tick if armed. Returns whether a tick was emitted."""
        if not self.armed:
            return False
        self.emitted += 1
        for callback in list(self._callbacks):
            callback()
        return True


class FakeLoader:
    def __init__(self, definition=None, error=None, hold=False):
        self.definition = definition
        self.error = error
        self.hold = hold
        self.calls = []
        self.released = False
        self._gate = None

    async def load(self, exam_id):
        self.calls.append(exam_id)
        if self.hold and not self.released:
            self._gate = asyncio.Event()
            await self._gate.wait()
        if self.error is not None:
            raise self.error
        return self.definition

    def release(self):
        self.released = True
        if self._gate is not None:
            self._gate.set()


class FakeGateway:
    """Records payloads; can hold the response and fail a given number of times.

    A held call waits until ``release()``; calls made after release go straight through.
    """

    def __init__(self, errors=None, hold=False):
        self.payloads = []
        self.errors = list(errors or [])
        self.hold = hold
        self.released = False
        self._gates = []

    async def submit(self, payload):
        self.payloads.append(payload)
        if self.hold and not self.released:
            gate = asyncio.Event()
            self._gates.append(gate)
            await gate.wait()
        if self.errors:
            raise self.errors.pop(0)
        return SubmissionReceipt(
            submission_id=f"sub-{len(self.payloads)}",
            submitted_at=START_TIME,
        )

    def release(self):
        self.released = True
        for gate in self._gates:
            gate.set()


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def timed_exam():
    return ExamDefinition(
        exam_id="algebra-midterm",
        title="Algebra Midterm",
        subject="Mathematics",
        class_name="Grade 9A",
        duration_minutes=10,
        content="Solve for x: 3x + 7 = 22.",
    )


@pytest.fixture
def untimed_exam():
    return ExamDefinition(exam_id="reflection", title="Reading Reflection", duration_minutes=None)


@pytest.fixture
def make_session(clock, timer):
    """Build a session for student ``stu-1`` with the shared clock and timer."""

    def factory(loader, gateway, exam_id="algebra-midterm"):
        return ExamSession(
            exam_id=exam_id,
            student_id="stu-1",
            loader=loader,
            gateway=gateway,
            timer=timer,
            clock=clock,
        )

    return factory
