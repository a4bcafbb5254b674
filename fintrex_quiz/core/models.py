"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from fintrex_quiz.constants.quiz_constants import QUIZ_DURATION_SECONDS


class SessionPhase(Enum):
    """Lifecycle stage of one quiz attempt."""

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    EXPIRED = "Expired"
    COMPLETED = "Completed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.EXPIRED, SessionPhase.COMPLETED)


class Outcome(Enum):
    """Leaderboard classification of a finished player."""

    WON = "WON"
    LOST = "LOST"


@dataclass(slots=True, frozen=True)
class Question:
    """Multiple-choice question; ``correct_option`` is one of ``options``."""

    text: str
    options: tuple[str, ...]
    correct_option: str

    def __post_init__(self) -> None:
        if self.correct_option not in self.options:
            raise ValueError(f"Correct option {self.correct_option!r} is not among the options.")


@dataclass(slots=True, frozen=True)
class AnsweredQuestion:
    """One submitted answer, kept for the review screen."""

    question: str
    selected_option: str
    correct_option: str

    @property
    def is_correct(self) -> bool:
        return self.selected_option == self.correct_option


@dataclass(slots=True, frozen=True)
class QuizSession:
    """Immutable snapshot of a player's quiz attempt.

    Elapsed time is never stored: it is derived from ``started_at_ms`` so a
    session restored after a restart reports a consistent remaining time.
    """

    session_id: str = ""
    selected_questions: tuple[Question, ...] = ()
    current_index: int = 0
    answers: tuple[AnsweredQuestion, ...] = ()
    score: int = 0
    started_at_ms: int | None = None
    duration_seconds: int = QUIZ_DURATION_SECONDS
    pending_option: str | None = None
    phase: SessionPhase = SessionPhase.NOT_STARTED

    @property
    def question_count(self) -> int:
        return len(self.selected_questions)

    @property
    def current_question(self) -> Question | None:
        if self.phase is not SessionPhase.IN_PROGRESS:
            return None
        if not 0 <= self.current_index < len(self.selected_questions):
            return None
        return self.selected_questions[self.current_index]

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class PlayerRecord:
    """Backend record of a player; ``nic`` and ``mobile`` are each unique."""

    nic: str
    mobile: str
    name: str = ""
    score: int = 0
    outcome: Outcome = Outcome.LOST
    has_played: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
