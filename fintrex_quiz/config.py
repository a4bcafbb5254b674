"""Environment-driven settings for the backend and the player client."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from fintrex_quiz.constants.network_constants import (
    DEFAULT_BACKEND_URL,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from fintrex_quiz.constants.quiz_constants import (
    DEFAULT_WINNER_THRESHOLD,
    QUESTIONS_PER_SESSION,
    QUIZ_DURATION_SECONDS,
)

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_list(name: str, default: tuple[str, ...]) -> list[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Deployment values, read once from the process environment."""

    def __init__(self) -> None:
        self.LOG_LEVEL: str = os.environ.get("FINTREX_LOG_LEVEL", "INFO")
        self.MONGO_URI: str | None = os.environ.get("MONGO_URI")
        self.DB_NAME: str = os.environ.get("DB_NAME", "fintrex_quiz")
        self.PLAYER_COLLECTION: str = os.environ.get("FINTREX_PLAYER_COLLECTION", "players")
        self.WINNER_THRESHOLD: int = _env_int("FINTREX_WINNER_THRESHOLD", DEFAULT_WINNER_THRESHOLD)
        self.QUESTIONS_PER_SESSION: int = _env_int("FINTREX_QUESTIONS_PER_SESSION", QUESTIONS_PER_SESSION)
        self.QUIZ_DURATION_SECONDS: int = _env_int("FINTREX_QUIZ_DURATION_SECONDS", QUIZ_DURATION_SECONDS)
        self.BACKEND_URL: str = os.environ.get("FINTREX_BACKEND_URL", DEFAULT_BACKEND_URL)
        self.REQUEST_TIMEOUT_SECONDS: float = float(
            os.environ.get("FINTREX_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_SECONDS)
        )
        self.CORS_ORIGINS: list[str] = _env_list("FINTREX_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        self.STORAGE_DIR: Path = Path(
            os.environ.get("FINTREX_STORAGE_DIR", Path.home() / ".fintrex_quiz")
        )
        self.QUESTION_BANK_PATH: Path | None = (
            Path(os.environ["FINTREX_QUESTION_BANK"]) if os.environ.get("FINTREX_QUESTION_BANK") else None
        )
        self.HOST: str = os.environ.get("HOST", DEFAULT_HOST)
        self.PORT: int = _env_int("PORT", DEFAULT_PORT)


settings = Settings()
