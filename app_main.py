"""Application entry point for the SOMA exam client."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
import time

from PySide6.QtWidgets import QApplication

from soma_exam.client.api_client import SomaApiClient
from soma_exam.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION, QUIZ_FILE_HELP_TEXT
from soma_exam.constants.exam_constants import DEFAULT_LOCAL_STORAGE_PATH
from soma_exam.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from soma_exam.core.errors import ExamError
from soma_exam.core.exam_controller import ExamSessionController
from soma_exam.core.quiz_importer import load_quiz_from_file
from soma_exam.core.services.attempt_store import AttemptStore, JsonFileStore
from soma_exam.server.api_server import start_api_server
from soma_exam.server.exam_backend import ExamBackend
from soma_exam.ui.exam_window import ExamWindow
from soma_exam.utils.logging_config import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="soma-exam",
        description=f"{APP_NAME} {APP_VERSION}. {APP_ABOUT_TEXT}",
        epilog=QUIZ_FILE_HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--quiz-id", type=int, default=1, help="Quiz to sit (default: 1)")
    parser.add_argument("--api-url", default=None, help="Base URL of the exam API")
    parser.add_argument(
        "--storage",
        type=Path,
        default=DEFAULT_LOCAL_STORAGE_PATH,
        help="File holding the in-progress attempt and completion markers",
    )
    parser.add_argument(
        "--serve",
        type=Path,
        metavar="QUIZ_FILE",
        default=None,
        help="Start a local API server with this quiz file before opening the window",
    )
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port for --serve")
    parser.add_argument("--font-size", type=int, default=14, help="Question font size in points")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, optionally start the local API server, and launch the Qt UI."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logger = configure_logging()
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    api_url = args.api_url or f"http://{DEFAULT_HOST}:{args.port}"
    if args.serve is not None:
        backend = ExamBackend()
        try:
            quiz = backend.add_imported_quiz(load_quiz_from_file(args.serve))
        except ExamError as exc:
            logger.error("Could not load %s: %s", args.serve, exc)
            sys.exit(1)
        start_api_server(backend, host=DEFAULT_HOST, port=args.port)
        logger.info("Serving quiz %s (%s) at %s", quiz.id, quiz.title, api_url)
        # Give uvicorn a moment to bind before the first request.
        time.sleep(0.5)

    client = SomaApiClient(api_url)
    try:
        quiz = client.fetch_quiz(args.quiz_id)
    except ExamError as exc:
        logger.error("Could not load quiz %s from %s: %s", args.quiz_id, api_url, exc)
        client.close()
        sys.exit(1)

    controller = ExamSessionController(
        quiz,
        question_source=client,
        submission_sink=client,
        identity_registrar=client,
        prior_submission_checker=client,
        store=AttemptStore(JsonFileStore(args.storage)),
    )

    app = QApplication(sys.argv[:1])
    window = ExamWindow(controller, font_size=args.font_size)
    window.show()
    exit_code = app.exec()
    client.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
