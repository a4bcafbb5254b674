"""Component for answering questions against the clock."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from fintrex_quiz.constants.quiz_constants import OPTIONS_PER_QUESTION
from fintrex_quiz.constants.ui_constants import (
    QUESTION_PROGRESS_TEMPLATE,
    SUBMIT_ANSWER_BUTTON,
    TIME_LEFT_TEMPLATE,
)
from fintrex_quiz.core.models import QuizSession
from fintrex_quiz.core.question_renderer import renderer
from fintrex_quiz.core.session_state import format_time


class QuizPanel(QWidget):
    """Shows the current question, its options, the countdown and submit."""

    def __init__(
        self,
        on_option_selected: Callable[[str], None],
        on_submit: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_option_selected = on_option_selected
        self.on_submit = on_submit
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.progress_label = QLabel("", self)
        header_row.addWidget(self.progress_label)
        header_row.addStretch()
        self.time_label = QLabel("", self)
        self.time_label.setStyleSheet("font-weight: bold;")
        header_row.addWidget(self.time_label)
        layout.addLayout(header_row)

        self.question_label = QLabel("", self)
        self.question_label.setTextFormat(Qt.RichText)
        self.question_label.setWordWrap(True)
        self.question_label.setStyleSheet("font-size: 16pt;")
        layout.addWidget(self.question_label)

        self.option_group = QButtonGroup(self)
        self.option_group.setExclusive(True)
        self.option_buttons: list[QPushButton] = []
        for idx in range(OPTIONS_PER_QUESTION):
            button = QPushButton("", self)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked=False, i=idx: self._handle_option_click(i))
            self.option_group.addButton(button, idx)
            self.option_buttons.append(button)
            layout.addWidget(button)

        self.submit_button = QPushButton(SUBMIT_ANSWER_BUTTON, self)
        self.submit_button.setEnabled(False)
        self.submit_button.clicked.connect(self.on_submit)
        layout.addWidget(self.submit_button)
        layout.addStretch()

    def _handle_option_click(self, index: int) -> None:
        self.submit_button.setEnabled(True)
        self.on_option_selected(self.option_buttons[index].text())

    def show_session(self, session: QuizSession) -> None:
        question = session.current_question
        if question is None:
            return
        self.progress_label.setText(
            QUESTION_PROGRESS_TEMPLATE.format(
                current=session.current_index + 1, total=session.question_count
            )
        )
        self.question_label.setText(renderer.render_fragment(question.text))

        # Exclusive groups refuse to uncheck the last checked button.
        self.option_group.setExclusive(False)
        for button, option in zip(self.option_buttons, question.options):
            button.setText(option)
            button.setChecked(option == session.pending_option)
        self.option_group.setExclusive(True)
        self.submit_button.setEnabled(session.pending_option is not None)

    def set_time_left(self, seconds: int) -> None:
        self.time_label.setText(TIME_LEFT_TEMPLATE.format(time=format_time(seconds)))
