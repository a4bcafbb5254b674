"""HTTP client the player window uses to talk to the backend."""

from __future__ import annotations

import logging
from threading import Thread
from typing import Any, Callable

import requests

from fintrex_quiz.constants.network_constants import (
    DEFAULT_BACKEND_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from fintrex_quiz.core.errors import (
    AlreadyPlayedError,
    AlreadyRecordedError,
    IdentityConflictError,
    InvalidFormatError,
    NotFoundError,
    QuizError,
    UnreachableError,
)

logger = logging.getLogger(__name__)


class BackendClient:
    """Thin wrapper over the backend's JSON endpoints.

    Non-2xx answers are turned back into the matching :class:`QuizError`
    subclass; transport failures become :class:`UnreachableError`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = session or requests.Session()

    def authenticate(self, nic: str, mobile: str, name: str = "") -> dict[str, Any]:
        body = self._request("POST", "/api/auth/authenticate", {"nic": nic, "name": name, "mobile": mobile})
        user = body.get("user") if isinstance(body, dict) else None
        if not isinstance(user, dict):
            raise UnreachableError("Unexpected response from /api/auth/authenticate")
        return user

    def submit_result(self, nic: str, score: int) -> dict[str, Any]:
        return self._request("POST", "/api/result", {"nic": nic, "score": score})

    def winners(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/winners")

    def losers(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/losers")

    def health(self) -> bool:
        try:
            response = self._http.get(f"{self.base_url}/health", timeout=self.timeout)
        except requests.RequestException:
            return False
        return response.ok

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._http.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UnreachableError(f"Server not reachable: {exc}") from exc

        if response.ok:
            try:
                return response.json()
            except ValueError as exc:
                raise UnreachableError(f"Unexpected response from {url}") from exc
        raise _error_from_response(path, response)


def _error_from_response(path: str, response: requests.Response) -> QuizError:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    message = detail if isinstance(detail, str) else f"Request failed with status {response.status_code}"

    status = response.status_code
    if status == 400:
        return InvalidFormatError(message)
    if status == 403:
        if path == "/api/result":
            return AlreadyRecordedError(message)
        return AlreadyPlayedError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return IdentityConflictError(message)
    return UnreachableError(message)


class ResultReporter:
    """Fire-and-forget delivery of a final score.

    The quiz reaches its review screen whether or not delivery succeeds;
    failures are logged and passed to ``on_failure`` when one is given.
    """

    def __init__(
        self,
        client: BackendClient,
        on_failure: Callable[[QuizError], None] | None = None,
    ) -> None:
        self._client = client
        self._on_failure = on_failure

    def report(self, nic: str, score: int) -> Thread:
        thread = Thread(
            target=self.deliver,
            args=(nic, score),
            name="QuizResultReporter",
            daemon=True,
        )
        thread.start()
        return thread

    def deliver(self, nic: str, score: int) -> bool:
        try:
            self._client.submit_result(nic, score)
        except AlreadyRecordedError:
            logger.info("Result for %s was already recorded", nic)
            return True
        except QuizError as exc:
            logger.error("Save failed for %s: %s", nic, exc)
            if self._on_failure is not None:
                self._on_failure(exc)
            return False
        logger.info("Saved result %d for %s", score, nic)
        return True
