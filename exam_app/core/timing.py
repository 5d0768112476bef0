"""Pure time arithmetic for exam deadlines and countdown display."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import math


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compute_deadline(started_at: datetime, duration_minutes: int) -> datetime:
    """Return the absolute point in time at which the attempt must be submitted."""
    if duration_minutes <= 0:
        raise ValueError("Duration must be a positive number of minutes.")
    return started_at + timedelta(minutes=duration_minutes)


def remaining_seconds(deadline: datetime, now: datetime) -> int:
    """Whole seconds left until ``deadline``, rounded up and clamped to zero.

    Rounding up means zero is only reported once the deadline has really passed.
    """
    remaining = (deadline - now).total_seconds()
    if remaining <= 0:
        return 0
    return math.ceil(remaining)


def format_mm_ss(seconds: int | None) -> str:
    if seconds is None:
        return "N/A"
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
