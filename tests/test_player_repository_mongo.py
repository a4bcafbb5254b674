"""Tests for the MongoDB player repository against an in-process fake collection."""

from datetime import datetime, timedelta, timezone

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from fintrex_quiz.core.errors import (
    AlreadyRecordedError,
    IdentityConflictError,
    NotFoundError,
    UnreachableError,
)
from fintrex_quiz.core.models import Outcome, PlayerRecord
from fintrex_quiz.core.services.player_repository import MongoPlayerRepository


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    def sort(self, key, direction):
        self._documents.sort(key=lambda d: d[key], reverse=direction == -1)
        return self

    def __iter__(self):
        return iter(self._documents)


class FakeCollection:
    """Implements just enough of ``pymongo.collection.Collection`` for the repository."""

    def __init__(self):
        self.documents = []
        self.indexes = []

    def create_index(self, keys, unique=False):
        self.indexes.append((keys, unique))

    def _matches(self, document, query):
        for key, expected in query.items():
            if key == "$or":
                if not any(self._matches(document, clause) for clause in expected):
                    return False
            elif document.get(key) != expected:
                return False
        return True

    def find_one(self, query, projection=None):
        for document in self.documents:
            if self._matches(document, query):
                return dict(document)
        return None

    def insert_one(self, document):
        for existing in self.documents:
            if existing["nic"] == document["nic"] or existing["mobile"] == document["mobile"]:
                raise DuplicateKeyError("E11000 duplicate key error")
        self.documents.append(dict(document))

    def find_one_and_update(self, query, update, return_document=None):
        for document in self.documents:
            if self._matches(document, query):
                document.update(update["$set"])
                return dict(document)
        return None

    def find(self, query):
        return FakeCursor([dict(d) for d in self.documents if self._matches(d, query)])


class DownCollection:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("no servers available")

        return fail


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def repo(collection):
    return MongoPlayerRepository(collection)


def player(nic="123456789V", mobile="0712345678", **kwargs):
    return PlayerRecord(nic=nic, mobile=mobile, **kwargs)


class TestMongoPlayerRepository:
    def test_ensure_indexes_declares_unique_keys(self, repo, collection):
        repo.ensure_indexes()
        unique = [keys[0][0] for keys, is_unique in collection.indexes if is_unique]
        assert sorted(unique) == ["mobile", "nic"]

    def test_insert_and_find(self, repo, collection):
        repo.insert(player(name="Nimal"))
        assert collection.documents[0]["outcome"] == "LOST"
        found = repo.find_by_identity_or_mobile("000000000V", "0712345678")
        assert found.nic == "123456789V"
        assert found.name == "Nimal"
        assert repo.find_by_identity("999999999V") is None

    def test_duplicate_insert_is_identity_conflict(self, repo):
        repo.insert(player())
        with pytest.raises(IdentityConflictError):
            repo.insert(player(nic="987654321V"))

    def test_update_name(self, repo):
        repo.insert(player(name="Old"))
        assert repo.update_name("123456789V", "New").name == "New"
        with pytest.raises(NotFoundError):
            repo.update_name("987654321V", "Nobody")

    def test_commit_result_once(self, repo):
        repo.insert(player())
        committed = repo.commit_result(
            player(score=8, outcome=Outcome.WON, has_played=True)
        )
        assert committed.has_played is True
        assert committed.outcome is Outcome.WON
        with pytest.raises(AlreadyRecordedError):
            repo.commit_result(player(score=1, has_played=True))
        assert repo.find_by_identity("123456789V").score == 8

    def test_commit_result_for_unknown_player(self, repo):
        with pytest.raises(NotFoundError):
            repo.commit_result(player(score=3, has_played=True))

    def test_list_by_outcome_newest_first(self, repo):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for offset, (nic, mobile) in enumerate(
            [("111111111V", "0711111111"), ("222222222V", "0722222222"), ("333333333V", "0733333333")]
        ):
            repo.insert(player(nic, mobile))
            repo.commit_result(
                player(
                    nic,
                    mobile,
                    score=9,
                    outcome=Outcome.WON,
                    has_played=True,
                    updated_at=base + timedelta(minutes=offset),
                )
            )
        repo.insert(player("444444444V", "0744444444"))

        assert [r.nic for r in repo.list_by_outcome(Outcome.WON)] == [
            "333333333V",
            "222222222V",
            "111111111V",
        ]
        assert repo.list_by_outcome(Outcome.LOST) == []

    def test_naive_datetimes_become_utc(self, repo, collection):
        repo.insert(player())
        collection.documents[0]["created_at"] = datetime(2024, 5, 1, 12, 0)
        assert repo.find_by_identity("123456789V").created_at.tzinfo is timezone.utc

    def test_store_outage_is_unreachable(self):
        repo = MongoPlayerRepository(DownCollection())
        with pytest.raises(UnreachableError):
            repo.find_by_identity("123456789V")
        with pytest.raises(UnreachableError):
            repo.insert(player())
        with pytest.raises(UnreachableError):
            repo.list_by_outcome(Outcome.WON)
