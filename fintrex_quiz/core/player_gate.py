"""Pure validation and one-attempt rules applied to player records."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import re

from fintrex_quiz.core.errors import (
    AlreadyPlayedError,
    AlreadyRecordedError,
    IdentityConflictError,
    NotFoundError,
)
from fintrex_quiz.core.models import Outcome, PlayerRecord

# Legacy NIC: nine digits plus V or X. New NIC: twelve digits.
_NIC_PATTERN = re.compile(r"^([0-9]{9}[vVxX]|[0-9]{12})$")
_MOBILE_PATTERN = re.compile(r"^07[0-9]{8}$")


def is_valid_identity(nic: object) -> bool:
    return isinstance(nic, str) and _NIC_PATTERN.fullmatch(nic) is not None


def is_valid_mobile(mobile: object) -> bool:
    return isinstance(mobile, str) and _MOBILE_PATTERN.fullmatch(mobile) is not None


def determine_outcome(score: int, threshold: int) -> Outcome:
    """Classify a final score against the configured winner threshold."""
    return Outcome.WON if score >= threshold else Outcome.LOST


def admit(
    record: PlayerRecord | None,
    nic: str,
    mobile: str,
    name: str = "",
) -> PlayerRecord:
    """Return the record a player may start a quiz with.

    ``record`` is whatever the store found under either key. Both keys must
    point at that same record, and the player must not have played yet. A
    non-empty name that differs from the stored one replaces it. The
    ``has_played`` flag is never touched here.
    """
    cleaned_name = (name or "").strip()
    if record is None:
        return PlayerRecord(nic=nic, mobile=mobile, name=cleaned_name)

    if record.nic != nic or record.mobile != mobile:
        raise IdentityConflictError("NIC or Mobile already registered to a different user")
    if record.has_played:
        raise AlreadyPlayedError("Already played!")
    if cleaned_name and cleaned_name != record.name:
        return replace(record, name=cleaned_name, updated_at=datetime.now(timezone.utc))
    return record


def record_result(record: PlayerRecord | None, score: int, threshold: int) -> PlayerRecord:
    """Return ``record`` with its single result applied."""
    if record is None:
        raise NotFoundError("Player not found")
    if record.has_played:
        raise AlreadyRecordedError("Result already recorded")
    return replace(
        record,
        score=score,
        outcome=determine_outcome(score, threshold),
        has_played=True,
        updated_at=datetime.now(timezone.utc),
    )
