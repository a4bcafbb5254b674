"""Service owning one player's quiz session, its clock and its persistence."""

from __future__ import annotations

import logging
import random
from threading import Lock
import time
from typing import Callable, Sequence

from fintrex_quiz.constants.quiz_constants import (
    QUESTIONS_PER_SESSION,
    QUIZ_DURATION_SECONDS,
    SESSION_KEY_PREFIX,
)
from fintrex_quiz.core import session_state
from fintrex_quiz.core.errors import InvalidStateError
from fintrex_quiz.core.models import Question, QuizSession, SessionPhase
from fintrex_quiz.core.services.session_store import SessionStore
from fintrex_quiz.core.session_codec import SessionDecodeError, decode_session, encode_session

logger = logging.getLogger(__name__)

SessionCallback = Callable[[QuizSession], None]


def epoch_ms() -> int:
    return int(time.time() * 1000)


class QuizSessionManager:
    """Runs the state machine for one player and persists every transition.

    The manager keeps no countdown of its own. Whoever owns the periodic
    trigger (a ``QTimer`` in the player window) calls :meth:`tick`; expiry is
    recomputed from the session's start timestamp each time.
    """

    def __init__(
        self,
        session_id: str,
        store: SessionStore,
        question_count: int = QUESTIONS_PER_SESSION,
        duration_seconds: int = QUIZ_DURATION_SECONDS,
        clock: Callable[[], int] = epoch_ms,
        on_expired: SessionCallback | None = None,
        on_completed: SessionCallback | None = None,
    ) -> None:
        if not session_id:
            raise ValueError("Session id must not be empty.")
        self._lock = Lock()
        self._store = store
        self._clock = clock
        self._rng = random.Random()
        self._question_count = question_count
        self._duration_seconds = duration_seconds
        self._session = QuizSession(session_id=session_id, duration_seconds=duration_seconds)
        self.on_expired = on_expired
        self.on_completed = on_completed

    @property
    def storage_key(self) -> str:
        return f"{SESSION_KEY_PREFIX}{self._session.session_id}"

    @property
    def session(self) -> QuizSession:
        with self._lock:
            return self._session

    @property
    def phase(self) -> SessionPhase:
        return self.session.phase

    def set_shuffle_seed(self, seed: int | None) -> None:
        self._rng.seed(seed)

    def start(self, question_bank: Sequence[Question], now_ms: int | None = None) -> QuizSession:
        now_ms = self._now(now_ms)
        with self._lock:
            self._session = session_state.start(
                self._session,
                question_bank,
                now_ms,
                rng=self._rng,
                question_count=self._question_count,
                duration_seconds=self._duration_seconds,
            )
            self._persist()
            session = self._session
        logger.info(
            "Session %s started with %d questions", session.session_id, session.question_count
        )
        return session

    def select_option(self, option: str) -> bool:
        with self._lock:
            try:
                self._session = session_state.select_option(self._session, option)
            except InvalidStateError as exc:
                logger.debug("Ignoring selection: %s", exc)
                return False
            self._persist()
            return True

    def submit_answer(self, selected_option: str | None = None, now_ms: int | None = None) -> bool:
        """Submit ``selected_option`` (or the pending one).

        Returns ``False`` without changing anything when the session is not in
        progress or no option is chosen.
        """
        now_ms = self._now(now_ms)
        with self._lock:
            previous = self._session
            option = selected_option if selected_option is not None else previous.pending_option
            try:
                self._session = session_state.submit_answer(previous, option, now_ms)
            except InvalidStateError as exc:
                logger.info("Rejected answer for session %s: %s", previous.session_id, exc)
                return False
            self._persist()
            session = self._session
        self._notify_transition(previous, session)
        return session.phase is not SessionPhase.EXPIRED

    def tick(self, now_ms: int | None = None) -> int:
        """Expire the session once its time is up; return the remaining seconds."""
        now_ms = self._now(now_ms)
        with self._lock:
            previous = self._session
            self._session = session_state.tick(previous, now_ms)
            if self._session is not previous:
                self._persist()
            session = self._session
        self._notify_transition(previous, session)
        return session_state.remaining_seconds(session, now_ms)

    def remaining_seconds(self, now_ms: int | None = None) -> int:
        return session_state.remaining_seconds(self.session, self._now(now_ms))

    def serialize(self) -> str:
        return encode_session(self.session)

    def restore(self, blob: str | None = None) -> QuizSession:
        """Load the session from ``blob`` or, when omitted, from the store.

        Missing or malformed data yields a fresh ``NOT_STARTED`` session; the
        store entry is cleared only when the bad data came from the store. A
        terminal session is restored as-is; callers treat it as finished.
        """
        with self._lock:
            raw = blob if blob is not None else self._store.load(self.storage_key)
            fresh = QuizSession(
                session_id=self._session.session_id, duration_seconds=self._duration_seconds
            )
            if raw is None:
                self._session = fresh
                return self._session
            try:
                restored = decode_session(raw)
            except SessionDecodeError as exc:
                logger.warning("Discarding stored session %s: %s", self.storage_key, exc)
                if blob is None:
                    self._store.clear(self.storage_key)
                self._session = fresh
                return self._session
            if restored.session_id != fresh.session_id:
                logger.warning(
                    "Stored session belongs to %s, expected %s; discarding",
                    restored.session_id,
                    fresh.session_id,
                )
                if blob is None:
                    self._store.clear(self.storage_key)
                self._session = fresh
                return self._session
            self._session = restored
            logger.info("Restored session %s in phase %s", restored.session_id, restored.phase.value)
            return restored

    def reset(self) -> None:
        with self._lock:
            self._session = session_state.reset(self._session)
            self._store.clear(self.storage_key)

    def _now(self, now_ms: int | None) -> int:
        return self._clock() if now_ms is None else now_ms

    def _persist(self) -> None:
        try:
            self._store.save(self.storage_key, encode_session(self._session))
        except OSError as exc:
            logger.error("Could not persist session %s: %s", self.storage_key, exc)

    def _notify_transition(self, previous: QuizSession, current: QuizSession) -> None:
        if previous.phase is current.phase:
            return
        if current.phase is SessionPhase.EXPIRED:
            logger.info("Session %s expired with score %d", current.session_id, current.score)
            if self.on_expired is not None:
                self.on_expired(current)
        elif current.phase is SessionPhase.COMPLETED:
            logger.info("Session %s completed with score %d", current.session_id, current.score)
            if self.on_completed is not None:
                self.on_completed(current)
