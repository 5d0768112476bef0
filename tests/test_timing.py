from datetime import datetime, timedelta, timezone

import pytest

from exam_app.core.models import AttemptStatus, ExamDefinition
from exam_app.core.timing import compute_deadline, format_mm_ss, remaining_seconds, utc_now

T0 = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


def test_deadline_is_start_plus_duration():
    assert compute_deadline(T0, 45) == T0 + timedelta(minutes=45)


@pytest.mark.parametrize("minutes", [0, -5])
def test_deadline_requires_positive_duration(minutes):
    with pytest.raises(ValueError):
        compute_deadline(T0, minutes)


@pytest.mark.parametrize(
    "offset_seconds, expected",
    [
        (0, 600),
        (0.5, 600),
        (1, 599),
        (599.9, 1),
        (600, 0),
        (900, 0),
    ],
)
def test_remaining_seconds_rounds_up_and_clamps(offset_seconds, expected):
    deadline = T0 + timedelta(minutes=10)
    assert remaining_seconds(deadline, T0 + timedelta(seconds=offset_seconds)) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [(600, "10:00"), (299, "04:59"), (59, "00:59"), (0, "00:00"), (3600, "60:00"), (-3, "00:00"), (None, "N/A")],
)
def test_format_mm_ss(seconds, expected):
    assert format_mm_ss(seconds) == expected


def test_utc_now_is_timezone_aware():
    assert utc_now().tzinfo is not None


@pytest.mark.parametrize("duration", [0, -10])
def test_non_positive_duration_means_untimed(duration):
    exam = ExamDefinition(exam_id="e1", title="Exam", duration_minutes=duration)
    assert exam.duration_minutes is None
    assert not exam.is_timed


def test_content_detection():
    assert not ExamDefinition(exam_id="e1", title="Exam").has_content
    assert ExamDefinition(exam_id="e1", title="Exam", file_url="https://example.org/p.pdf").has_content
    assert ExamDefinition(exam_id="e1", title="Exam", content="Q1").has_content


def test_terminal_statuses():
    terminal = {status for status in AttemptStatus if status.is_terminal}
    assert terminal == {AttemptStatus.SUBMITTED, AttemptStatus.ABORTED}
