"""Pure transitions of the quiz session state machine.

Every function takes a :class:`QuizSession` and returns a new one; nothing
here touches storage, timers or the network. Illegal transitions raise
:class:`InvalidStateError` and leave the input untouched, which is what makes
double submissions and late ticks harmless.

    NOT_STARTED -> IN_PROGRESS -> EXPIRED | COMPLETED -> (reset) NOT_STARTED
"""

from __future__ import annotations

from dataclasses import replace
import random
from typing import Sequence

from fintrex_quiz.constants.quiz_constants import QUESTIONS_PER_SESSION, QUIZ_DURATION_SECONDS
from fintrex_quiz.core.errors import InvalidStateError
from fintrex_quiz.core.models import AnsweredQuestion, Outcome, Question, QuizSession, SessionPhase
from fintrex_quiz.core.player_gate import determine_outcome


def start(
    session: QuizSession,
    question_bank: Sequence[Question],
    now_ms: int,
    rng: random.Random | None = None,
    question_count: int = QUESTIONS_PER_SESSION,
    duration_seconds: int = QUIZ_DURATION_SECONDS,
) -> QuizSession:
    """Draw the questions for a new attempt and start the clock."""
    if session.phase is not SessionPhase.NOT_STARTED:
        raise InvalidStateError(f"Cannot start a session that is {session.phase.value}.")
    if not question_bank:
        raise ValueError("Question bank must contain at least one question.")
    if question_count <= 0:
        raise ValueError("Question count must be a positive integer.")
    if duration_seconds <= 0:
        raise ValueError("Quiz duration must be a positive integer.")

    rng = rng or random.Random()
    drawn = rng.sample(list(question_bank), min(question_count, len(question_bank)))
    selected = tuple(_shuffle_options(question, rng) for question in drawn)

    return QuizSession(
        session_id=session.session_id,
        selected_questions=selected,
        current_index=0,
        answers=(),
        score=0,
        started_at_ms=now_ms,
        duration_seconds=duration_seconds,
        pending_option=None,
        phase=SessionPhase.IN_PROGRESS,
    )


def select_option(session: QuizSession, option: str) -> QuizSession:
    """Highlight an option of the current question without submitting it."""
    question = _require_current_question(session)
    if option not in question.options:
        raise ValueError(f"{option!r} is not an option of the current question.")
    return replace(session, pending_option=option)


def submit_answer(
    session: QuizSession,
    selected_option: str | None,
    now_ms: int | None = None,
) -> QuizSession:
    """Record the answer to the current question and advance.

    When ``now_ms`` shows the countdown already ran out, the session expires
    instead and the late answer is dropped.
    """
    question = _require_current_question(session)
    if selected_option is None:
        raise InvalidStateError("No option selected.")
    if selected_option not in question.options:
        raise ValueError(f"{selected_option!r} is not an option of the current question.")
    if now_ms is not None and remaining_seconds(session, now_ms) == 0:
        return replace(session, phase=SessionPhase.EXPIRED, pending_option=None)

    answer = AnsweredQuestion(
        question=question.text,
        selected_option=selected_option,
        correct_option=question.correct_option,
    )
    answers = session.answers + (answer,)
    score = session.score + (1 if answer.is_correct else 0)

    if session.current_index + 1 == session.question_count:
        return replace(
            session,
            answers=answers,
            score=score,
            current_index=session.current_index + 1,
            pending_option=None,
            phase=SessionPhase.COMPLETED,
        )
    return replace(
        session,
        answers=answers,
        score=score,
        current_index=session.current_index + 1,
        pending_option=None,
    )


def remaining_seconds(session: QuizSession, now_ms: int) -> int:
    """Whole seconds left on the countdown, derived from the fixed start time."""
    if session.started_at_ms is None:
        return session.duration_seconds
    elapsed = (now_ms - session.started_at_ms) // 1000
    return max(0, min(session.duration_seconds, session.duration_seconds - elapsed))


def tick(session: QuizSession, now_ms: int) -> QuizSession:
    """Expire an in-progress session whose countdown has reached zero.

    Returns ``session`` itself whenever nothing changes, so callers can detect
    the one real expiry with an identity check.
    """
    if session.phase is not SessionPhase.IN_PROGRESS:
        return session
    if remaining_seconds(session, now_ms) > 0:
        return session
    return replace(session, phase=SessionPhase.EXPIRED, pending_option=None)


def reset(session: QuizSession) -> QuizSession:
    return QuizSession(session_id=session.session_id)


def is_winner(score: int, threshold: int) -> bool:
    return determine_outcome(score, threshold) is Outcome.WON


def format_time(seconds: int) -> str:
    """Format a countdown as ``m:ss``."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def _require_current_question(session: QuizSession) -> Question:
    if session.phase is not SessionPhase.IN_PROGRESS:
        raise InvalidStateError(f"Session is {session.phase.value}, not InProgress.")
    question = session.current_question
    if question is None:
        raise InvalidStateError("Session has no current question.")
    return question


def _shuffle_options(question: Question, rng: random.Random) -> Question:
    options = list(question.options)
    rng.shuffle(options)
    return Question(text=question.text, options=tuple(options), correct_option=question.correct_option)
