"""Qt main window guiding a player from login through review."""

from __future__ import annotations

from enum import Enum, auto
import json
import logging

from PySide6.QtCore import QThreadPool, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QMainWindow, QStackedWidget

from fintrex_quiz.client.backend_client import BackendClient, ResultReporter
from fintrex_quiz.config import Settings, settings as default_settings
from fintrex_quiz.constants.quiz_constants import PLAYER_STORAGE_KEY, TICK_INTERVAL_MS
from fintrex_quiz.constants.ui_constants import (
    CORRECT_TITLE,
    SERVER_UNREACHABLE_MESSAGE,
    TIME_UP_MESSAGE,
    TIME_UP_TITLE,
    WINDOW_TITLE,
    WRONG_TITLE,
)
from fintrex_quiz.core.errors import QuizError, UnreachableError
from fintrex_quiz.core.models import QuizSession, SessionPhase
from fintrex_quiz.core.player_gate import is_valid_identity
from fintrex_quiz.core.question_bank import QuestionBank
from fintrex_quiz.core.services.quiz_session import QuizSessionManager
from fintrex_quiz.core.services.session_store import SessionStore
from fintrex_quiz.core.session_state import is_winner
from fintrex_quiz.ui.components.auth_panel import AuthPanel
from fintrex_quiz.ui.components.quiz_panel import QuizPanel
from fintrex_quiz.ui.components.review_panel import ReviewPanel
from fintrex_quiz.ui.components.start_panel import StartPanel
from fintrex_quiz.ui.dialog_helpers import confirm_logout, show_info, show_warning
from fintrex_quiz.ui.login_task import LoginTask

logger = logging.getLogger(__name__)


class PlayerMode(Enum):
    """High-level screen shown to the player."""

    AUTH = auto()
    START = auto()
    QUIZ = auto()
    REVIEW = auto()


class PlayerMainWindow(QMainWindow):
    """Main Qt window orchestrating login, quiz and review screens."""

    def __init__(
        self,
        client: BackendClient,
        store: SessionStore,
        question_bank: QuestionBank,
        config: Settings = default_settings,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(720, 560)

        self.client = client
        self.store = store
        self.question_bank = question_bank
        self.config = config
        self.reporter = ResultReporter(client)

        self._mode = PlayerMode.AUTH
        self._player: dict | None = None
        self._session_manager: QuizSessionManager | None = None
        self._login_task: LoginTask | None = None

        self._build_ui()
        self._configure_tick_timer()
        self._restore_saved_player()

    def _build_ui(self) -> None:
        self.mode_stack = QStackedWidget(self)
        self.setCentralWidget(self.mode_stack)

        self.auth_panel = AuthPanel(on_submit=self._handle_login, parent=self)
        self.start_panel = StartPanel(
            on_start=self._handle_start_quiz,
            on_logout=self._handle_logout,
            parent=self,
        )
        self.quiz_panel = QuizPanel(
            on_option_selected=self._handle_option_selected,
            on_submit=self._handle_submit_answer,
            parent=self,
        )
        self.review_panel = ReviewPanel(on_logout=self._handle_logout, parent=self)

        self.mode_stack.addWidget(self.auth_panel)
        self.mode_stack.addWidget(self.start_panel)
        self.mode_stack.addWidget(self.quiz_panel)
        self.mode_stack.addWidget(self.review_panel)
        self._set_mode(PlayerMode.AUTH)

    def _configure_tick_timer(self) -> None:
        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(TICK_INTERVAL_MS)
        self.tick_timer.timeout.connect(self._handle_tick)

    def _set_mode(self, mode: PlayerMode) -> None:
        self._mode = mode
        index_map = {
            PlayerMode.AUTH: 0,
            PlayerMode.START: 1,
            PlayerMode.QUIZ: 2,
            PlayerMode.REVIEW: 3,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    # --- Login ---

    def _restore_saved_player(self) -> None:
        raw = self.store.load(PLAYER_STORAGE_KEY)
        if raw is None:
            return
        try:
            player = json.loads(raw)
        except ValueError:
            player = None
        if not isinstance(player, dict) or not is_valid_identity(player.get("nic")):
            logger.warning("Discarding malformed saved player")
            self.store.clear(PLAYER_STORAGE_KEY)
            return
        self._enter_player(player)

    def _handle_login(self, nic: str, name: str, mobile: str) -> None:
        if self._login_task is not None:
            return
        self.auth_panel.set_busy(True)
        task = LoginTask(self.client, nic, mobile, name)
        task.signals.succeeded.connect(self._handle_login_succeeded)
        task.signals.failed.connect(self._handle_login_failed)
        self._login_task = task
        QThreadPool.globalInstance().start(task)

    def _handle_login_succeeded(self, player: dict) -> None:
        self._login_task = None
        self.auth_panel.set_busy(False)
        self.store.save(PLAYER_STORAGE_KEY, json.dumps(player))
        self._enter_player(player)

    def _handle_login_failed(self, exc: QuizError) -> None:
        self._login_task = None
        self.auth_panel.set_busy(False)
        if isinstance(exc, UnreachableError):
            logger.error("Authentication failed: %s", exc)
            self.auth_panel.set_error(SERVER_UNREACHABLE_MESSAGE)
        else:
            self.auth_panel.set_error(str(exc))

    def _enter_player(self, player: dict) -> None:
        self._player = player
        manager = QuizSessionManager(
            session_id=player["nic"],
            store=self.store,
            question_count=self.config.QUESTIONS_PER_SESSION,
            duration_seconds=self.config.QUIZ_DURATION_SECONDS,
            on_expired=self._handle_expired,
            on_completed=self._handle_completed,
        )
        self._session_manager = manager
        session = manager.restore()

        if session.phase is SessionPhase.IN_PROGRESS:
            self._show_quiz(session)
        elif session.is_terminal:
            # Delivery is at-least-once; the backend rejects a duplicate.
            self.reporter.report(session.session_id, session.score)
            self._show_review(session)
        else:
            self.start_panel.set_player_name(player.get("name", ""))
            self._set_mode(PlayerMode.START)

    # --- Quiz ---

    def _handle_start_quiz(self) -> None:
        if self._session_manager is None:
            return
        session = self._session_manager.start(self.question_bank.questions)
        self._show_quiz(session)

    def _show_quiz(self, session: QuizSession) -> None:
        self.quiz_panel.show_session(session)
        self._set_mode(PlayerMode.QUIZ)
        self._handle_tick()
        if self._session_manager is not None and self._session_manager.phase is SessionPhase.IN_PROGRESS:
            self.tick_timer.start()

    def _handle_tick(self) -> None:
        if self._session_manager is None:
            self.tick_timer.stop()
            return
        remaining = self._session_manager.tick()
        self.quiz_panel.set_time_left(remaining)
        if self._session_manager.phase is not SessionPhase.IN_PROGRESS:
            self.tick_timer.stop()

    def _handle_option_selected(self, option: str) -> None:
        if self._session_manager is not None:
            self._session_manager.select_option(option)

    def _handle_submit_answer(self) -> None:
        manager = self._session_manager
        if manager is None:
            return
        if not manager.submit_answer():
            return

        last_answer = manager.session.answers[-1]
        show_info(self, "Result", CORRECT_TITLE if last_answer.is_correct else WRONG_TITLE)

        session = manager.session
        if session.phase is SessionPhase.IN_PROGRESS:
            self.quiz_panel.show_session(session)
        elif session.is_terminal:
            self._show_review(session)

    def _handle_completed(self, session: QuizSession) -> None:
        self.tick_timer.stop()
        self.reporter.report(session.session_id, session.score)

    def _handle_expired(self, session: QuizSession) -> None:
        self.tick_timer.stop()
        self.reporter.report(session.session_id, session.score)
        show_warning(self, TIME_UP_TITLE, TIME_UP_MESSAGE)
        self._show_review(session)

    def _show_review(self, session: QuizSession) -> None:
        self.review_panel.show_result(session, is_winner(session.score, self.config.WINNER_THRESHOLD))
        self._set_mode(PlayerMode.REVIEW)

    # --- Logout / teardown ---

    def _handle_logout(self) -> None:
        manager = self._session_manager
        if manager is not None and manager.phase is SessionPhase.IN_PROGRESS:
            if not confirm_logout(self):
                return
        self.tick_timer.stop()
        if manager is not None:
            manager.reset()
        self.store.clear(PLAYER_STORAGE_KEY)
        self._session_manager = None
        self._player = None
        self.auth_panel.reset_state()
        self._set_mode(PlayerMode.AUTH)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.tick_timer.stop()
        super().closeEvent(event)
