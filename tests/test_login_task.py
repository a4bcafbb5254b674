"""Tests for the background login request used by the player window."""

import pytest

from fintrex_quiz.core.errors import AlreadyPlayedError, UnreachableError
from fintrex_quiz.ui.login_task import LoginTask


class StubClient:
    def __init__(self, player=None, error=None):
        self.player = player
        self.error = error
        self.calls = []

    def authenticate(self, nic, mobile, name=""):
        self.calls.append((nic, mobile, name))
        if self.error is not None:
            raise self.error
        return self.player


@pytest.fixture
def outcomes():
    return {"succeeded": [], "failed": []}


def make_task(client, outcomes):
    task = LoginTask(client, "123456789V", "0712345678", "Nimal")
    task.signals.succeeded.connect(outcomes["succeeded"].append)
    task.signals.failed.connect(outcomes["failed"].append)
    return task


class TestLoginTask:
    def test_success_emits_player(self, outcomes):
        client = StubClient(player={"nic": "123456789V", "name": "Nimal"})
        make_task(client, outcomes).run()
        assert outcomes["succeeded"] == [{"nic": "123456789V", "name": "Nimal"}]
        assert outcomes["failed"] == []
        assert client.calls == [("123456789V", "0712345678", "Nimal")]

    @pytest.mark.parametrize("error", [AlreadyPlayedError("Already played!"), UnreachableError("down")])
    def test_failure_emits_error(self, outcomes, error):
        make_task(StubClient(error=error), outcomes).run()
        assert outcomes["succeeded"] == []
        assert outcomes["failed"] == [error]
