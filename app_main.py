"""Application entry point for the ExamQt student client."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import socket
import sys
import time

from PySide6.QtWidgets import QApplication

from exam_app.client.api_client import create_http_client
from exam_app.client.auth import StudentAuthContext
from exam_app.client.exam_loader import HttpExamDefinitionLoader
from exam_app.constants.exam_constants import SAMPLE_EXAMS_PATH
from exam_app.constants.network_constants import API_PREFIX, DEFAULT_HOST, DEFAULT_PORT
from exam_app.constants.ui_constants import LOAD_FAILED_MESSAGE, NO_LIVE_EXAMS_MESSAGE
from exam_app.core.errors import ExamImportError, ExamLoadError
from exam_app.core.exam_importer import load_exams_from_file
from exam_app.core.models import ExamDefinition
from exam_app.core.portal_manager import ExamPortalManager
from exam_app.server.api_server import start_api_server
from exam_app.ui import SessionRunner, TakeExamWindow, choose_exam, show_error, show_info
from exam_app.utils.logging_config import configure_logging
from exam_app.utils.settings import ClientSettings

_SERVER_STARTUP_TIMEOUT_SECONDS = 10.0


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Take a timed online exam.")
    parser.add_argument("--exam-id", help="Exam to open; omit to pick from the live exams")
    parser.add_argument("--student-id", help="Student user id (or EXAM_APP_STUDENT_ID)")
    parser.add_argument("--email", help="Student e-mail sent as X-User-Email (or EXAM_APP_STUDENT_EMAIL)")
    parser.add_argument("--api-url", help="Base URL of the student API (or EXAM_APP_API_URL)")
    parser.add_argument("--token", help="Bearer token for the student API (or EXAM_APP_API_TOKEN)")
    parser.add_argument("--serve", action="store_true", help="Start the bundled exam backend first")
    parser.add_argument("--exams-file", type=Path, help="Seed file for the bundled backend")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port for the bundled backend")
    return parser.parse_args(argv)


def _wait_for_port(port: int, timeout_seconds: float) -> bool:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        try:
            with socket.create_connection(("127.0.0.1", port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False


def _start_bundled_backend(args: argparse.Namespace, logger) -> str:
    exams_file = args.exams_file or Path(__file__).resolve().parent / SAMPLE_EXAMS_PATH
    imported = load_exams_from_file(exams_file)
    manager = ExamPortalManager()
    manager.load_exams(imported.exams)
    start_api_server(portal_manager=manager, host=DEFAULT_HOST, port=args.port, api_token=args.token)
    if not _wait_for_port(args.port, _SERVER_STARTUP_TIMEOUT_SECONDS):
        logger.warning("Exam backend did not open port %d in time", args.port)
    logger.info("Serving %d exam(s) from %s", len(imported.exams), exams_file)
    return f"http://127.0.0.1:{args.port}{API_PREFIX}"


async def _fetch_live_exams(settings: ClientSettings) -> list[ExamDefinition]:
    auth = StudentAuthContext(email=settings.student_email, token=settings.api_token)
    async with create_http_client(settings.api_url, settings.request_timeout_seconds) as client:
        return await HttpExamDefinitionLoader(client, auth).list_live_exams()


def _pick_exam_id(settings: ClientSettings) -> str | None:
    try:
        exams = asyncio.run(_fetch_live_exams(settings))
    except ExamLoadError as exc:
        show_error(None, "Exams Unavailable", exc.message or LOAD_FAILED_MESSAGE)
        return None
    if not exams:
        show_info(None, "No Exams", NO_LIVE_EXAMS_MESSAGE)
        return None
    chosen = choose_exam(None, exams)
    return chosen.exam_id if chosen is not None else None


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, optionally start the backend, and launch the exam window."""
    logger = configure_logging()
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logger.info("Starting ExamQt…")

    app = QApplication(sys.argv)

    api_url = args.api_url
    if args.serve:
        try:
            served_url = _start_bundled_backend(args, logger)
        except (ExamImportError, OSError, ValueError) as exc:
            show_error(None, "Backend Not Started", str(exc))
            sys.exit(1)
        api_url = api_url or served_url

    try:
        settings = ClientSettings.resolve(
            api_url=api_url,
            student_id=args.student_id,
            student_email=args.email,
            api_token=args.token,
        )
    except ValueError as exc:
        show_error(None, "Configuration Error", str(exc))
        sys.exit(2)

    exam_id = args.exam_id or _pick_exam_id(settings)
    if not exam_id:
        logger.info("No exam selected; exiting")
        return

    runner = SessionRunner(settings=settings, exam_id=exam_id)
    window = TakeExamWindow(runner=runner)
    window.show()
    runner.start()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
