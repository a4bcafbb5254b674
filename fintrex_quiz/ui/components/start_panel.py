"""Component for the screen shown before the quiz clock starts."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from fintrex_quiz.constants.ui_constants import (
    LOGOUT_BUTTON,
    START_BUTTON,
    START_HEADING,
    START_SUBHEADING,
)


class StartPanel(QWidget):
    """Greets the player and starts the quiz on request."""

    def __init__(
        self,
        on_start: Callable[[], None],
        on_logout: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_start = on_start
        self.on_logout = on_logout
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addStretch()

        heading = QLabel(START_HEADING, self)
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet("font-size: 28pt; font-weight: bold;")
        layout.addWidget(heading)

        subheading = QLabel(START_SUBHEADING, self)
        subheading.setAlignment(Qt.AlignCenter)
        subheading.setStyleSheet("font-size: 18pt;")
        layout.addWidget(subheading)

        self.player_label = QLabel("", self)
        self.player_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.player_label)

        self.start_button = QPushButton(START_BUTTON, self)
        self.start_button.setStyleSheet("font-size: 18pt; font-weight: bold; padding: 12px;")
        self.start_button.clicked.connect(self.on_start)
        layout.addWidget(self.start_button)

        self.logout_button = QPushButton(LOGOUT_BUTTON, self)
        self.logout_button.clicked.connect(self.on_logout)
        layout.addWidget(self.logout_button)
        layout.addStretch()

    def set_player_name(self, name: str) -> None:
        self.player_label.setText(f"Welcome, {name}!" if name else "")
