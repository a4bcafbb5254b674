"""Tests for the pure quiz session transitions."""

import random

import pytest

from fintrex_quiz.core import session_state
from fintrex_quiz.core.errors import InvalidStateError
from fintrex_quiz.core.models import QuizSession, SessionPhase


def started(bank, now_ms=0, seed=7, **kwargs):
    return session_state.start(
        QuizSession(session_id="123456789V"), bank, now_ms, rng=random.Random(seed), **kwargs
    )


class TestStart:
    def test_selects_ten_unique_questions_from_bank(self, question_bank):
        session = started(question_bank)
        source = {q.text: q for q in question_bank}

        assert session.phase is SessionPhase.IN_PROGRESS
        assert session.question_count == 10
        assert len({q.text for q in session.selected_questions}) == 10
        for question in session.selected_questions:
            source_question = source[question.text]
            assert sorted(question.options) == sorted(source_question.options)
            assert question.correct_option == source_question.correct_option

    def test_initial_fields(self, question_bank):
        session = started(question_bank, now_ms=1234)
        assert session.current_index == 0
        assert session.score == 0
        assert session.answers == ()
        assert session.pending_option is None
        assert session.started_at_ms == 1234
        assert session.session_id == "123456789V"

    def test_seeded_source_is_reproducible(self, question_bank):
        assert started(question_bank, seed=3) == started(question_bank, seed=3)

    def test_small_bank_uses_every_question(self, question_bank):
        session = started(question_bank[:3])
        assert session.question_count == 3

    def test_question_count_is_configurable(self, question_bank):
        assert started(question_bank, question_count=5).question_count == 5

    def test_empty_bank_is_rejected(self):
        with pytest.raises(ValueError):
            started([])

    def test_cannot_start_twice(self, question_bank):
        session = started(question_bank)
        with pytest.raises(InvalidStateError):
            session_state.start(session, question_bank, 0)


class TestSubmitAnswer:
    def test_correct_answer_scores_and_advances(self, question_bank):
        session = started(question_bank)
        question = session.current_question
        after = session_state.submit_answer(session, question.correct_option, now_ms=1000)

        assert after.score == 1
        assert after.current_index == 1
        assert after.answers[0].question == question.text
        assert after.answers[0].is_correct
        assert after.phase is SessionPhase.IN_PROGRESS

    def test_wrong_answer_advances_without_scoring(self, question_bank):
        session = started(question_bank)
        question = session.current_question
        wrong = next(o for o in question.options if o != question.correct_option)
        after = session_state.submit_answer(session, wrong, now_ms=1000)
        assert after.score == 0
        assert after.answers[0].selected_option == wrong
        assert after.answers[0].correct_option == question.correct_option

    def test_submission_clears_pending_selection(self, question_bank):
        session = started(question_bank)
        option = session.current_question.options[0]
        session = session_state.select_option(session, option)
        assert session.pending_option == option
        after = session_state.submit_answer(session, option, now_ms=1000)
        assert after.pending_option is None

    def test_single_question_scenario(self, single_question_bank):
        session = started(single_question_bank)
        after = session_state.submit_answer(session, "B", now_ms=1000)
        assert after.score == 1
        assert after.phase is SessionPhase.COMPLETED
        with pytest.raises(InvalidStateError):
            session_state.submit_answer(after, "A", now_ms=2000)

    def test_answering_every_question_completes(self, question_bank):
        session = started(question_bank)
        for _ in range(session.question_count):
            session = session_state.submit_answer(session, session.current_question.correct_option, 1000)
        assert session.phase is SessionPhase.COMPLETED
        assert session.score == 10
        assert len(session.answers) == 10

    def test_no_option_is_invalid_state(self, question_bank):
        session = started(question_bank)
        with pytest.raises(InvalidStateError):
            session_state.submit_answer(session, None, now_ms=1000)

    def test_not_started_is_invalid_state(self):
        with pytest.raises(InvalidStateError):
            session_state.submit_answer(QuizSession(session_id="x"), "A")

    def test_unknown_option_is_rejected(self, question_bank):
        session = started(question_bank)
        with pytest.raises(ValueError):
            session_state.submit_answer(session, "not an option", now_ms=1000)

    def test_late_answer_expires_session(self, question_bank):
        session = started(question_bank, now_ms=0, duration_seconds=60)
        after = session_state.submit_answer(session, session.current_question.correct_option, now_ms=60_000)
        assert after.phase is SessionPhase.EXPIRED
        assert after.score == 0
        assert after.answers == ()

    def test_late_answer_clears_pending_selection(self, question_bank):
        session = started(question_bank, now_ms=0, duration_seconds=60)
        option = session.current_question.options[0]
        session = session_state.select_option(session, option)
        after = session_state.submit_answer(session, option, now_ms=61_000)
        assert after.phase is SessionPhase.EXPIRED
        assert after.pending_option is None
        assert after == session_state.tick(session, 61_000)


class TestTick:
    def test_expires_at_duration(self, question_bank):
        session = started(question_bank, now_ms=0, duration_seconds=360)

        assert session_state.tick(session, 359_999) is session
        expired = session_state.tick(session, 360_000)
        assert expired.phase is SessionPhase.EXPIRED
        assert session_state.tick(expired, 400_000) is expired

    def test_expired_session_keeps_score_and_answers(self, question_bank):
        session = started(question_bank, now_ms=0, duration_seconds=360)
        session = session_state.submit_answer(session, session.current_question.correct_option, 1000)
        expired = session_state.tick(session, 361_000)
        assert expired.score == 1
        assert expired.answers == session.answers

    def test_tick_after_completion_is_noop(self, single_question_bank):
        session = session_state.submit_answer(started(single_question_bank), "B", now_ms=1000)
        assert session_state.tick(session, 10_000_000) is session

    def test_tick_before_start_is_noop(self):
        session = QuizSession(session_id="x")
        assert session_state.tick(session, 10_000_000) is session

    def test_remaining_seconds_is_derived_and_clamped(self, question_bank):
        session = started(question_bank, now_ms=10_000, duration_seconds=360)
        assert session_state.remaining_seconds(session, 10_000) == 360
        assert session_state.remaining_seconds(session, 11_999) == 359
        assert session_state.remaining_seconds(session, 5_000) == 360
        assert session_state.remaining_seconds(session, 10_000_000) == 0


class TestHelpers:
    def test_reset_returns_fresh_session(self, question_bank):
        session = session_state.reset(started(question_bank))
        assert session == QuizSession(session_id="123456789V")

    def test_select_option_requires_current_option(self, question_bank):
        session = started(question_bank)
        with pytest.raises(ValueError):
            session_state.select_option(session, "nope")

    @pytest.mark.parametrize("seconds,expected", [(360, "6:00"), (65, "1:05"), (9, "0:09"), (-3, "0:00")])
    def test_format_time(self, seconds, expected):
        assert session_state.format_time(seconds) == expected

    def test_is_winner(self):
        assert session_state.is_winner(7, 7)
        assert not session_state.is_winner(6, 7)
