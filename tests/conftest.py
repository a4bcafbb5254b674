"""Shared fixtures for the quiz tests."""

import pytest

from fintrex_quiz.core.models import Question
from fintrex_quiz.core.player_registry import PlayerRegistry
from fintrex_quiz.core.services.player_repository import InMemoryPlayerRepository
from fintrex_quiz.core.services.session_store import MemorySessionStore


def make_question(number: int) -> Question:
    return Question(
        text=f"Question {number}?",
        options=(f"A{number}", f"B{number}", f"C{number}", f"D{number}"),
        correct_option=f"B{number}",
    )


@pytest.fixture
def question_bank():
    return [make_question(n) for n in range(1, 16)]


@pytest.fixture
def single_question_bank():
    return [Question(text="Q1", options=("A", "B", "C", "D"), correct_option="B")]


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def repository():
    return InMemoryPlayerRepository()


@pytest.fixture
def registry(repository):
    return PlayerRegistry(repository, winner_threshold=7, max_score=10)
