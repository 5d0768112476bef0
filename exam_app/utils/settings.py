"""Runtime settings for the exam client, resolved from arguments and environment."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from exam_app.constants.network_constants import DEFAULT_API_URL, REQUEST_TIMEOUT_SECONDS

_ENV_PREFIX = "EXAM_APP_"


@dataclass(slots=True, frozen=True)
class ClientSettings:
    """Values the desktop client needs to talk to the exam backend."""

    api_url: str
    student_id: str
    student_email: str
    api_token: str | None = None
    request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS

    @classmethod
    def resolve(
        cls,
        *,
        api_url: str | None = None,
        student_id: str | None = None,
        student_email: str | None = None,
        api_token: str | None = None,
        request_timeout_seconds: float | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "ClientSettings":
        """Build settings, preferring explicit values over ``EXAM_APP_*`` variables."""
        env = os.environ if environ is None else environ

        def pick(value: str | None, name: str) -> str | None:
            if value:
                return value
            return env.get(_ENV_PREFIX + name) or None

        resolved_student = pick(student_id, "STUDENT_ID")
        if not resolved_student:
            raise ValueError("A student id is required (argument or EXAM_APP_STUDENT_ID).")
        resolved_email = pick(student_email, "STUDENT_EMAIL") or f"{resolved_student}@students.local"

        timeout = request_timeout_seconds
        if timeout is None:
            raw_timeout = env.get(_ENV_PREFIX + "REQUEST_TIMEOUT")
            timeout = float(raw_timeout) if raw_timeout else REQUEST_TIMEOUT_SECONDS
        if timeout <= 0:
            raise ValueError("Request timeout must be a positive number of seconds.")

        return cls(
            api_url=(pick(api_url, "API_URL") or DEFAULT_API_URL).rstrip("/"),
            student_id=resolved_student,
            student_email=resolved_email,
            api_token=pick(api_token, "API_TOKEN"),
            request_timeout_seconds=timeout,
        )
