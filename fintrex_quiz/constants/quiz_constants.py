"""Quiz-related constants shared across UI and core layers."""

QUESTIONS_PER_SESSION: int = 10
QUIZ_DURATION_SECONDS: int = 360
DEFAULT_WINNER_THRESHOLD: int = 7
OPTIONS_PER_QUESTION: int = 4
TICK_INTERVAL_MS: int = 1000

SESSION_KEY_PREFIX: str = "fintrex_quiz_"
PLAYER_STORAGE_KEY: str = "fintrex_player"
