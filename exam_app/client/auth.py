"""Auth context providers for requests made on behalf of a student."""

from __future__ import annotations

from dataclasses import dataclass

from exam_app.constants.network_constants import USER_EMAIL_HEADER


@dataclass(slots=True, frozen=True)
class StudentAuthContext:
    """Identifies the student by e-mail header, with an optional bearer token."""

    email: str
    token: str | None = None

    def headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            USER_EMAIL_HEADER: self.email,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
