"""Network configuration constants for the exam application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
API_PREFIX: str = "/api"
DEFAULT_API_URL: str = f"http://127.0.0.1:{DEFAULT_PORT}{API_PREFIX}"
REQUEST_TIMEOUT_SECONDS: float = 10.0
USER_EMAIL_HEADER: str = "X-User-Email"
