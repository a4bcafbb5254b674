"""Application entry point for the Fintrex Quiz player client."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from fintrex_quiz.client.backend_client import BackendClient
from fintrex_quiz.config import settings
from fintrex_quiz.constants.about import APP_NAME, APP_VERSION
from fintrex_quiz.constants.ui_constants import QUESTION_BANK_ERROR_MESSAGE, QUESTION_BANK_ERROR_TITLE
from fintrex_quiz.core.question_bank import QuestionBankError, load_question_bank
from fintrex_quiz.core.services.session_store import JsonFileSessionStore
from fintrex_quiz.ui import PlayerMainWindow, show_error
from fintrex_quiz.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, load the question bank, and launch the Qt UI."""
    logger = configure_logging(settings.LOG_LEVEL)
    logger.info("Starting Fintrex Quiz player (backend %s)", settings.BACKEND_URL)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    try:
        question_bank = load_question_bank(settings.QUESTION_BANK_PATH)
    except QuestionBankError as exc:
        logger.error("Could not load question bank: %s", exc)
        show_error(None, QUESTION_BANK_ERROR_TITLE, QUESTION_BANK_ERROR_MESSAGE)
        sys.exit(1)

    client = BackendClient(settings.BACKEND_URL, timeout=settings.REQUEST_TIMEOUT_SECONDS)
    store = JsonFileSessionStore(settings.STORAGE_DIR)
    window = PlayerMainWindow(client=client, store=store, question_bank=question_bank, config=settings)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
