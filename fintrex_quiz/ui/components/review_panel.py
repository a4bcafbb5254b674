"""Component for the end-of-quiz result and answer review."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from fintrex_quiz.constants.ui_constants import (
    FINAL_SCORE_TEMPLATE,
    LOGOUT_BUTTON,
    LOST_TITLE,
    REVIEW_HEADING,
    WON_TITLE,
)
from fintrex_quiz.core.models import QuizSession

_CORRECT_COLOR = QColor("#15803d")
_WRONG_COLOR = QColor("#b91c1c")


class ReviewPanel(QWidget):
    """Shows whether the player won, their score, and every answer given."""

    def __init__(self, on_logout: Callable[[], None], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_logout = on_logout
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel("", self)
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setStyleSheet("font-size: 22pt; font-weight: bold;")
        layout.addWidget(self.title_label)

        self.score_label = QLabel("", self)
        self.score_label.setAlignment(Qt.AlignCenter)
        self.score_label.setStyleSheet("font-size: 18pt;")
        layout.addWidget(self.score_label)

        review_heading = QLabel(REVIEW_HEADING, self)
        review_heading.setAlignment(Qt.AlignCenter)
        layout.addWidget(review_heading)

        self.answer_list = QListWidget(self)
        self.answer_list.setWordWrap(True)
        layout.addWidget(self.answer_list, stretch=1)

        self.logout_button = QPushButton(LOGOUT_BUTTON, self)
        self.logout_button.clicked.connect(self.on_logout)
        layout.addWidget(self.logout_button)

    def show_result(self, session: QuizSession, is_winner: bool) -> None:
        self.title_label.setText(WON_TITLE if is_winner else LOST_TITLE)
        self.score_label.setText(
            FINAL_SCORE_TEMPLATE.format(score=session.score, total=session.question_count)
        )
        self.answer_list.clear()
        for number, answer in enumerate(session.answers, start=1):
            lines = [f"Q{number}: {answer.question}", f"Your answer: {answer.selected_option}"]
            if not answer.is_correct:
                lines.append(f"Correct answer: {answer.correct_option}")
            item = QListWidgetItem("\n".join(lines), self.answer_list)
            item.setForeground(_CORRECT_COLOR if answer.is_correct else _WRONG_COLOR)
