"""Network configuration constants for the quiz application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 4000
DEFAULT_BACKEND_URL: str = "http://localhost:4000"
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 10.0
DEFAULT_CORS_ORIGINS: tuple[str, ...] = (
    "http://localhost:5173",
    "https://fintrexquiz.vercel.app",
)
