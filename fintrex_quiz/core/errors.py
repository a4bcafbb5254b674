"""Error taxonomy shared by the session manager, the backend and the client."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for every domain error raised by the quiz application."""


class InvalidFormatError(QuizError):
    """Raised when an identity, mobile number or score fails validation."""


class IdentityConflictError(QuizError):
    """Raised when the NIC and the mobile number belong to different players."""


class AlreadyPlayedError(QuizError):
    """Raised when a player who already finished tries to play again."""


class AlreadyRecordedError(QuizError):
    """Raised when a result is submitted for a player whose result is stored."""


class NotFoundError(QuizError):
    """Raised when a result is submitted for an unknown identity."""


class InvalidStateError(QuizError):
    """Raised when a session operation is invoked outside its legal phase."""


class UnreachableError(QuizError):
    """Raised when the backing store or the backend cannot be reached."""
