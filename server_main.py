"""Entry point for the Fintrex Quiz backend."""

from __future__ import annotations

from fintrex_quiz.config import settings
from fintrex_quiz.server.api_server import build_registry, run_api_server
from fintrex_quiz.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, connect the player store, and serve the API."""
    logger = configure_logging(settings.LOG_LEVEL)
    logger.info("Starting Fintrex Quiz backend (winner threshold %d)", settings.WINNER_THRESHOLD)

    registry = build_registry(settings)
    run_api_server(registry, host=settings.HOST, port=settings.PORT, cors_origins=settings.CORS_ORIGINS)


if __name__ == "__main__":
    main()
