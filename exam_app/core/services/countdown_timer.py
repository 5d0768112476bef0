"""Countdown timer that drives the exam session clock."""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import Callable, Protocol

from exam_app.constants.exam_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class CountdownTimer(Protocol):
    """Emits one tick per interval while armed and nothing once disarmed.

    The timer knows nothing about remaining time; listeners derive it from the deadline.
    """

    @property
    def is_armed(self) -> bool: ...

    def arm(self, deadline: datetime) -> None: ...

    def on_tick(self, callback: TickCallback) -> None: ...

    def disarm(self) -> None: ...


class AsyncioCountdownTimer:
    """Countdown timer scheduled on the running asyncio event loop."""

    def __init__(self, interval_seconds: float = TICK_INTERVAL_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        self._interval = interval_seconds
        self._callbacks: list[TickCallback] = []
        self._handle: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    def on_tick(self, callback: TickCallback) -> None:
        self._callbacks.append(callback)

    def arm(self, deadline: datetime) -> None:
        """Start ticking. Must be called from a coroutine running on the target loop."""
        if self.is_armed:
            return
        self._loop = asyncio.get_running_loop()
        logger.debug("Countdown armed until %s", deadline.isoformat())
        self._schedule_next()

    def disarm(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug("Countdown disarmed")

    def _schedule_next(self) -> None:
        assert self._loop is not None
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._handle is None:
            return
        # Reschedule first so a callback that disarms also cancels the next tick.
        self._schedule_next()
        for callback in list(self._callbacks):
            if self._handle is None:
                break
            callback()
