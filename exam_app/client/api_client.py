"""Shared httpx plumbing for the exam backend adapters."""

from __future__ import annotations

import httpx

from exam_app.constants.network_constants import REQUEST_TIMEOUT_SECONDS


def create_http_client(
    api_url: str,
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the async client both adapters share. Paths are relative to ``api_url``."""
    return httpx.AsyncClient(
        base_url=api_url.rstrip("/"),
        timeout=httpx.Timeout(timeout_seconds),
        transport=transport,
    )


def error_message(response: httpx.Response, fallback: str) -> str:
    """Extract the server's message from an error response, if it sent one."""
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        for key in ("detail", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback
