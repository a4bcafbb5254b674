"""Backend business logic for player admission, results and leaderboards."""

from __future__ import annotations

import logging

from fintrex_quiz.constants.quiz_constants import DEFAULT_WINNER_THRESHOLD, QUESTIONS_PER_SESSION
from fintrex_quiz.core import player_gate
from fintrex_quiz.core.errors import InvalidFormatError
from fintrex_quiz.core.models import Outcome, PlayerRecord
from fintrex_quiz.core.services.player_repository import PlayerRepository

logger = logging.getLogger(__name__)


class PlayerRegistry:
    """Facade the HTTP handlers call: validation, the gate, then the store."""

    def __init__(
        self,
        repository: PlayerRepository,
        winner_threshold: int = DEFAULT_WINNER_THRESHOLD,
        max_score: int = QUESTIONS_PER_SESSION,
    ) -> None:
        if not 0 <= winner_threshold <= max_score:
            raise ValueError("Winner threshold must be between 0 and the maximum score.")
        self._repository = repository
        self.winner_threshold = winner_threshold
        self.max_score = max_score

    def authenticate(self, nic: str, mobile: str, name: str = "") -> PlayerRecord:
        """Log a player in, registering them on first use."""
        nic = (nic or "").strip()
        mobile = (mobile or "").strip()
        if not player_gate.is_valid_identity(nic):
            raise InvalidFormatError("Invalid NIC format")
        if not player_gate.is_valid_mobile(mobile):
            raise InvalidFormatError("Invalid Mobile Number")

        existing = self._repository.find_by_identity_or_mobile(nic, mobile)
        admitted = player_gate.admit(existing, nic, mobile, name)
        if existing is None:
            record = self._repository.insert(admitted)
            logger.info("Registered player %s", nic)
            return record
        if admitted.name != existing.name:
            return self._repository.update_name(nic, admitted.name)
        return existing

    def submit_result(self, nic: str, score: int) -> PlayerRecord:
        """Store the one result a player is allowed."""
        if not player_gate.is_valid_identity(nic):
            raise InvalidFormatError("Invalid NIC format")
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= self.max_score:
            raise InvalidFormatError("Invalid score")

        existing = self._repository.find_by_identity(nic)
        updated = player_gate.record_result(existing, score, self.winner_threshold)
        record = self._repository.commit_result(updated)
        logger.info("Recorded score %d (%s) for %s", record.score, record.outcome.value, nic)
        return record

    def winners(self) -> list[PlayerRecord]:
        return self._repository.list_by_outcome(Outcome.WON)

    def losers(self) -> list[PlayerRecord]:
        return self._repository.list_by_outcome(Outcome.LOST)
