"""JSON encoding of quiz sessions for the client-side session store."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt

from fintrex_quiz.core.models import AnsweredQuestion, Question, QuizSession, SessionPhase

BLOB_VERSION = 1


class SessionDecodeError(ValueError):
    """Raised when a persisted blob does not describe a valid session."""


class QuestionBlob(BaseModel):
    text: str
    options: list[str] = Field(min_length=1)
    correct_option: str


class AnswerBlob(BaseModel):
    question: str
    selected_option: str
    correct_option: str


class SessionBlob(BaseModel):
    """Wire shape of a persisted session."""

    version: Literal[1] = BLOB_VERSION
    session_id: str
    selected_questions: list[QuestionBlob]
    current_index: NonNegativeInt
    answers: list[AnswerBlob]
    score: NonNegativeInt
    started_at_ms: int | None
    duration_seconds: PositiveInt
    pending_option: str | None = None
    phase: Literal["NotStarted", "InProgress", "Expired", "Completed"]


def encode_session(session: QuizSession) -> str:
    blob = SessionBlob(
        session_id=session.session_id,
        selected_questions=[
            QuestionBlob(text=q.text, options=list(q.options), correct_option=q.correct_option)
            for q in session.selected_questions
        ],
        current_index=session.current_index,
        answers=[
            AnswerBlob(
                question=a.question,
                selected_option=a.selected_option,
                correct_option=a.correct_option,
            )
            for a in session.answers
        ],
        score=session.score,
        started_at_ms=session.started_at_ms,
        duration_seconds=session.duration_seconds,
        pending_option=session.pending_option,
        phase=session.phase.value,
    )
    return blob.model_dump_json()


def decode_session(raw: str | bytes) -> QuizSession:
    """Decode and sanity-check a persisted session.

    Raises :class:`SessionDecodeError` for anything that is not a session this
    application could have written.
    """
    try:
        blob = SessionBlob.model_validate_json(raw)
        session = QuizSession(
            session_id=blob.session_id,
            selected_questions=tuple(
                Question(text=q.text, options=tuple(q.options), correct_option=q.correct_option)
                for q in blob.selected_questions
            ),
            current_index=blob.current_index,
            answers=tuple(
                AnsweredQuestion(
                    question=a.question,
                    selected_option=a.selected_option,
                    correct_option=a.correct_option,
                )
                for a in blob.answers
            ),
            score=blob.score,
            started_at_ms=blob.started_at_ms,
            duration_seconds=blob.duration_seconds,
            pending_option=blob.pending_option,
            phase=SessionPhase(blob.phase),
        )
    except ValueError as exc:
        raise SessionDecodeError(f"Malformed session blob: {exc}") from exc

    _check_consistency(session)
    return session


def _check_consistency(session: QuizSession) -> None:
    if session.phase is SessionPhase.NOT_STARTED:
        return
    if session.started_at_ms is None:
        raise SessionDecodeError("Started session has no start timestamp.")
    if session.current_index > session.question_count:
        raise SessionDecodeError("Current index is past the last question.")
    if len(session.answers) != session.current_index:
        raise SessionDecodeError("Answer count does not match the current index.")
    if session.score != sum(1 for answer in session.answers if answer.is_correct):
        raise SessionDecodeError("Score does not match the recorded answers.")
    if session.phase is SessionPhase.COMPLETED and session.current_index != session.question_count:
        raise SessionDecodeError("Completed session has unanswered questions.")
    if session.phase is SessionPhase.IN_PROGRESS:
        if session.current_index >= session.question_count:
            raise SessionDecodeError("In-progress session has no question left.")
        question = session.selected_questions[session.current_index]
        if session.pending_option is not None and session.pending_option not in question.options:
            raise SessionDecodeError("Pending option is not an option of the current question.")
