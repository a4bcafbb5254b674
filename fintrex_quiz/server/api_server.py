"""FastAPI server exposing authentication, results and leaderboards."""

from __future__ import annotations

from datetime import datetime
import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, StrictInt
import uvicorn

from fintrex_quiz.config import Settings, settings as default_settings
from fintrex_quiz.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from fintrex_quiz.constants.network_constants import DEFAULT_CORS_ORIGINS, DEFAULT_HOST, DEFAULT_PORT
from fintrex_quiz.core.errors import (
    AlreadyPlayedError,
    AlreadyRecordedError,
    IdentityConflictError,
    InvalidFormatError,
    NotFoundError,
    QuizError,
    UnreachableError,
)
from fintrex_quiz.core.models import PlayerRecord
from fintrex_quiz.core.player_registry import PlayerRegistry
from fintrex_quiz.core.services.player_repository import (
    InMemoryPlayerRepository,
    MongoPlayerRepository,
)

logger = logging.getLogger(__name__)

HEALTH_TEXT = "OK - Fintrex Quiz backend is alive"

_STATUS_BY_ERROR: dict[type[QuizError], int] = {
    InvalidFormatError: 400,
    AlreadyPlayedError: 403,
    AlreadyRecordedError: 403,
    NotFoundError: 404,
    IdentityConflictError: 409,
    UnreachableError: 503,
}


class AuthenticatePayload(BaseModel):
    """Payload schema for the login / register-on-first-use flow."""

    nic: str
    mobile: str
    name: str = ""


class ResultPayload(BaseModel):
    """Payload schema for a finished quiz."""

    nic: str
    score: StrictInt


class PlayerOut(BaseModel):
    nic: str
    name: str
    mobile: str
    score: int
    outcome: str
    has_played: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: PlayerRecord) -> "PlayerOut":
        return cls(
            nic=record.nic,
            name=record.name,
            mobile=record.mobile,
            score=record.score,
            outcome=record.outcome.value,
            has_played=record.has_played,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class AuthenticateOut(BaseModel):
    user: PlayerOut


def _get_registry_dependency(registry: PlayerRegistry):
    def dependency() -> PlayerRegistry:
        return registry

    return dependency


def _to_http_error(exc: QuizError) -> HTTPException:
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR.items() if isinstance(exc, error_type)),
        500,
    )
    return HTTPException(status_code=status_code, detail=str(exc))


def create_api_app(
    registry: PlayerRegistry,
    cors_origins: list[str] | tuple[str, ...] = DEFAULT_CORS_ORIGINS,
) -> FastAPI:
    """Create a FastAPI application wired to the provided player registry."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    registry_dep = _get_registry_dependency(registry)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        return HEALTH_TEXT

    @app.post("/api/auth/authenticate", response_model=AuthenticateOut)
    def authenticate(
        payload: AuthenticatePayload,
        manager: PlayerRegistry = Depends(registry_dep),
    ) -> AuthenticateOut:
        try:
            record = manager.authenticate(payload.nic, payload.mobile, payload.name)
        except QuizError as exc:
            logger.info("Authentication rejected for %s: %s", payload.nic, exc)
            raise _to_http_error(exc) from exc
        return AuthenticateOut(user=PlayerOut.from_record(record))

    @app.post("/api/result", response_model=PlayerOut)
    def submit_result(
        payload: ResultPayload,
        manager: PlayerRegistry = Depends(registry_dep),
    ) -> PlayerOut:
        try:
            record = manager.submit_result(payload.nic, payload.score)
        except QuizError as exc:
            logger.info("Result rejected for %s: %s", payload.nic, exc)
            raise _to_http_error(exc) from exc
        return PlayerOut.from_record(record)

    @app.get("/api/winners", response_model=list[PlayerOut])
    def winners(manager: PlayerRegistry = Depends(registry_dep)) -> list[PlayerOut]:
        try:
            return [PlayerOut.from_record(record) for record in manager.winners()]
        except QuizError as exc:
            raise _to_http_error(exc) from exc

    @app.get("/api/losers", response_model=list[PlayerOut])
    def losers(manager: PlayerRegistry = Depends(registry_dep)) -> list[PlayerOut]:
        try:
            return [PlayerOut.from_record(record) for record in manager.losers()]
        except QuizError as exc:
            raise _to_http_error(exc) from exc

    return app


def build_registry(config: Settings = default_settings) -> PlayerRegistry:
    """Pick the player store from configuration."""
    if config.MONGO_URI:
        repository = MongoPlayerRepository.from_uri(
            config.MONGO_URI, config.DB_NAME, config.PLAYER_COLLECTION
        )
    else:
        logger.warning("MONGO_URI is not set; player records are kept in memory only.")
        repository = InMemoryPlayerRepository()
    return PlayerRegistry(
        repository,
        winner_threshold=config.WINNER_THRESHOLD,
        max_score=config.QUESTIONS_PER_SESSION,
    )


def run_api_server(
    registry: PlayerRegistry,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    cors_origins: list[str] | tuple[str, ...] = DEFAULT_CORS_ORIGINS,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(registry, cors_origins=cors_origins)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info("Server running on port %d", port)
    server.run()
