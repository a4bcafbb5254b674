"""Background login request for the player window."""

from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from fintrex_quiz.client.backend_client import BackendClient
from fintrex_quiz.core.errors import QuizError


class LoginSignals(QObject):
    """Signals emitted by :class:`LoginTask`; delivered on the GUI thread."""

    succeeded = Signal(dict)
    failed = Signal(object)


class LoginTask(QRunnable):
    """Calls ``BackendClient.authenticate`` off the GUI thread.

    Exactly one of ``signals.succeeded`` (the player dict) or
    ``signals.failed`` (the :class:`QuizError`) is emitted per run.
    """

    def __init__(self, client: BackendClient, nic: str, mobile: str, name: str = "") -> None:
        super().__init__()
        self.signals = LoginSignals()
        self._client = client
        self._nic = nic
        self._mobile = mobile
        self._name = name

    def run(self) -> None:
        try:
            player = self._client.authenticate(self._nic, self._mobile, self._name)
        except QuizError as exc:
            self.signals.failed.emit(exc)
            return
        self.signals.succeeded.emit(player)
