"""Storage of player records for the backend.

Both repositories enforce the same contract: ``nic`` and ``mobile`` are each
unique, and :meth:`commit_result` flips ``has_played`` from false to true at
most once per player even when two submissions race.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
import itertools
import logging
from threading import Lock
from typing import Any, Iterator, Protocol

from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from fintrex_quiz.core.errors import (
    AlreadyRecordedError,
    IdentityConflictError,
    NotFoundError,
    UnreachableError,
)
from fintrex_quiz.core.models import Outcome, PlayerRecord

logger = logging.getLogger(__name__)


class PlayerRepository(Protocol):
    def find_by_identity_or_mobile(self, nic: str, mobile: str) -> PlayerRecord | None: ...

    def find_by_identity(self, nic: str) -> PlayerRecord | None: ...

    def insert(self, record: PlayerRecord) -> PlayerRecord: ...

    def update_name(self, nic: str, name: str) -> PlayerRecord: ...

    def commit_result(self, record: PlayerRecord) -> PlayerRecord: ...

    def list_by_outcome(self, outcome: Outcome) -> list[PlayerRecord]: ...


class InMemoryPlayerRepository:
    """Lock-guarded dictionaries; suitable for tests and single-process runs."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._records: dict[str, PlayerRecord] = {}
        self._nic_by_mobile: dict[str, str] = {}
        self._revisions: dict[str, int] = {}
        self._revision_counter = itertools.count(1)

    def find_by_identity_or_mobile(self, nic: str, mobile: str) -> PlayerRecord | None:
        with self._lock:
            record = self._records.get(nic)
            if record is None and mobile in self._nic_by_mobile:
                record = self._records[self._nic_by_mobile[mobile]]
            return replace(record) if record is not None else None

    def find_by_identity(self, nic: str) -> PlayerRecord | None:
        with self._lock:
            record = self._records.get(nic)
            return replace(record) if record is not None else None

    def insert(self, record: PlayerRecord) -> PlayerRecord:
        with self._lock:
            if record.nic in self._records or record.mobile in self._nic_by_mobile:
                raise IdentityConflictError("NIC or Mobile already in use")
            stored = replace(record)
            self._records[stored.nic] = stored
            self._nic_by_mobile[stored.mobile] = stored.nic
            self._touch(stored.nic)
            return replace(stored)

    def update_name(self, nic: str, name: str) -> PlayerRecord:
        with self._lock:
            record = self._records.get(nic)
            if record is None:
                raise NotFoundError("Player not found")
            record.name = name
            record.updated_at = datetime.now(timezone.utc)
            self._touch(nic)
            return replace(record)

    def commit_result(self, record: PlayerRecord) -> PlayerRecord:
        with self._lock:
            stored = self._records.get(record.nic)
            if stored is None:
                raise NotFoundError("Player not found")
            if stored.has_played:
                raise AlreadyRecordedError("Result already recorded")
            stored.score = record.score
            stored.outcome = record.outcome
            stored.has_played = True
            stored.updated_at = record.updated_at
            self._touch(record.nic)
            return replace(stored)

    def list_by_outcome(self, outcome: Outcome) -> list[PlayerRecord]:
        with self._lock:
            # Players who logged in but never finished are not listed.
            matches = [
                record
                for record in self._records.values()
                if record.has_played and record.outcome is outcome
            ]
            matches.sort(key=lambda r: self._revisions[r.nic], reverse=True)
            return [replace(record) for record in matches]

    def _touch(self, nic: str) -> None:
        self._revisions[nic] = next(self._revision_counter)


class MongoPlayerRepository:
    """Player records in a MongoDB collection with unique indexes."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    @classmethod
    def from_uri(cls, uri: str, db_name: str, collection_name: str = "players") -> "MongoPlayerRepository":
        client = MongoClient(uri, serverSelectionTimeoutMS=5000, tz_aware=True)
        repository = cls(client[db_name][collection_name])
        repository.ensure_indexes()
        logger.info("Using MongoDB collection %s.%s", db_name, collection_name)
        return repository

    def ensure_indexes(self) -> None:
        with _store_errors():
            self._collection.create_index([("nic", ASCENDING)], unique=True)
            self._collection.create_index([("mobile", ASCENDING)], unique=True)
            self._collection.create_index([("outcome", ASCENDING), ("updated_at", DESCENDING)])

    def find_by_identity_or_mobile(self, nic: str, mobile: str) -> PlayerRecord | None:
        with _store_errors():
            document = self._collection.find_one({"$or": [{"nic": nic}, {"mobile": mobile}]})
        return _to_record(document) if document else None

    def find_by_identity(self, nic: str) -> PlayerRecord | None:
        with _store_errors():
            document = self._collection.find_one({"nic": nic})
        return _to_record(document) if document else None

    def insert(self, record: PlayerRecord) -> PlayerRecord:
        try:
            with _store_errors():
                self._collection.insert_one(_to_document(record))
        except DuplicateKeyError as exc:
            raise IdentityConflictError("NIC or Mobile already in use") from exc
        return record

    def update_name(self, nic: str, name: str) -> PlayerRecord:
        with _store_errors():
            document = self._collection.find_one_and_update(
                {"nic": nic},
                {"$set": {"name": name, "updated_at": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise NotFoundError("Player not found")
        return _to_record(document)

    def commit_result(self, record: PlayerRecord) -> PlayerRecord:
        with _store_errors():
            document = self._collection.find_one_and_update(
                {"nic": record.nic, "has_played": False},
                {
                    "$set": {
                        "score": record.score,
                        "outcome": record.outcome.value,
                        "has_played": True,
                        "updated_at": record.updated_at,
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
            if document is None:
                if self._collection.find_one({"nic": record.nic}, {"_id": 1}) is None:
                    raise NotFoundError("Player not found")
                raise AlreadyRecordedError("Result already recorded")
        return _to_record(document)

    def list_by_outcome(self, outcome: Outcome) -> list[PlayerRecord]:
        with _store_errors():
            # Players who logged in but never finished are not listed.
            cursor = self._collection.find({"outcome": outcome.value, "has_played": True}).sort(
                "updated_at", DESCENDING
            )
            return [_to_record(document) for document in cursor]


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as exc:
        logger.error("Player store failure: %s", exc)
        raise UnreachableError("Player store is unavailable") from exc


def _to_document(record: PlayerRecord) -> dict[str, Any]:
    return {
        "nic": record.nic,
        "mobile": record.mobile,
        "name": record.name,
        "score": record.score,
        "outcome": record.outcome.value,
        "has_played": record.has_played,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


def _to_record(document: dict[str, Any]) -> PlayerRecord:
    return PlayerRecord(
        nic=document["nic"],
        mobile=document["mobile"],
        name=document.get("name", ""),
        score=int(document.get("score", 0)),
        outcome=Outcome(document.get("outcome", Outcome.LOST.value)),
        has_played=bool(document.get("has_played", False)),
        created_at=_as_utc(document.get("created_at")),
        updated_at=_as_utc(document.get("updated_at")),
    )


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
