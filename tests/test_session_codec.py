"""Tests for session blob decoding and the file-backed store."""

import json
import random

import pytest

from fintrex_quiz.core import session_state
from fintrex_quiz.core.models import QuizSession, SessionPhase
from fintrex_quiz.core.services.session_store import JsonFileSessionStore
from fintrex_quiz.core.session_codec import SessionDecodeError, decode_session, encode_session


@pytest.fixture
def in_progress(question_bank):
    session = session_state.start(
        QuizSession(session_id="123456789V"), question_bank, 5_000, rng=random.Random(1)
    )
    session = session_state.submit_answer(session, session.current_question.correct_option, 6_000)
    return session_state.select_option(session, session.current_question.options[0])


class TestCodec:
    def test_encode_decode_preserves_session(self, in_progress):
        assert decode_session(encode_session(in_progress)) == in_progress

    def test_blob_is_versioned_json(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        assert payload["version"] == 1
        assert payload["phase"] == "InProgress"
        assert payload["started_at_ms"] == 5_000

    @pytest.mark.parametrize("raw", ["", "[]", "null", '{"session_id": "x"}', "not json"])
    def test_garbage_is_rejected(self, raw):
        with pytest.raises(SessionDecodeError):
            decode_session(raw)

    def test_unknown_version_is_rejected(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["version"] = 2
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_unknown_phase_is_rejected(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["phase"] = "Paused"
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_score_must_match_answers(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["score"] = 0
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_index_must_match_answer_count(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["current_index"] = 3
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_completed_session_must_answer_every_question(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["phase"] = "Completed"
        payload["pending_option"] = None
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_fully_answered_completed_session_decodes(self, single_question_bank):
        session = session_state.start(QuizSession(session_id="123456789V"), single_question_bank, 0)
        session = session_state.submit_answer(session, "B", 1_000)
        assert decode_session(encode_session(session)) == session

    def test_started_session_needs_timestamp(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["started_at_ms"] = None
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_pending_option_must_belong_to_question(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["pending_option"] = "something else"
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_answer_must_be_among_options(self, in_progress):
        payload = json.loads(encode_session(in_progress))
        payload["selected_questions"][0]["correct_option"] = "missing"
        with pytest.raises(SessionDecodeError):
            decode_session(json.dumps(payload))

    def test_not_started_session_decodes(self):
        session = QuizSession(session_id="123456789V")
        assert decode_session(encode_session(session)).phase is SessionPhase.NOT_STARTED


class TestJsonFileSessionStore:
    def test_missing_key_loads_none(self, tmp_path):
        assert JsonFileSessionStore(tmp_path).load("fintrex_quiz_123456789V") is None

    def test_save_load_clear(self, tmp_path):
        store = JsonFileSessionStore(tmp_path / "nested")
        store.save("fintrex_quiz_123456789V", '{"a": 1}')
        assert store.load("fintrex_quiz_123456789V") == '{"a": 1}'
        assert (tmp_path / "nested" / "fintrex_quiz_123456789V.json").exists()
        store.clear("fintrex_quiz_123456789V")
        assert store.load("fintrex_quiz_123456789V") is None

    def test_clear_missing_key_is_silent(self, tmp_path):
        JsonFileSessionStore(tmp_path).clear("nothing")

    def test_unsafe_characters_stay_inside_directory(self, tmp_path):
        store = JsonFileSessionStore(tmp_path)
        store.save("../escape", "x")
        assert [p.name for p in tmp_path.iterdir()] == [".._escape.json"]

    def test_overwrite_leaves_no_temp_file(self, tmp_path):
        store = JsonFileSessionStore(tmp_path)
        store.save("key", "one")
        store.save("key", "two")
        assert store.load("key") == "two"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["key.json"]

    def test_empty_key_is_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileSessionStore(tmp_path).load("")
