"""Component for the player login form."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from fintrex_quiz.constants.ui_constants import (
    AUTH_HEADING,
    AUTH_MOBILE_LABEL,
    AUTH_MOBILE_PLACEHOLDER,
    AUTH_NAME_LABEL,
    AUTH_NAME_PLACEHOLDER,
    AUTH_NIC_LABEL,
    AUTH_NIC_PLACEHOLDER,
    AUTH_SUBMIT_BUTTON,
    INVALID_MOBILE_MESSAGE,
    INVALID_NIC_MESSAGE,
)
from fintrex_quiz.core.player_gate import is_valid_identity, is_valid_mobile


class AuthPanel(QWidget):
    """Collects NIC, name and mobile number, checking formats locally first."""

    def __init__(
        self,
        on_submit: Callable[[str, str, str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_submit = on_submit
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        heading = QLabel(AUTH_HEADING, self)
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet("font-size: 20pt; font-weight: bold;")
        layout.addWidget(heading)

        form = QFormLayout()
        self.nic_input = QLineEdit(self)
        self.nic_input.setPlaceholderText(AUTH_NIC_PLACEHOLDER)
        form.addRow(AUTH_NIC_LABEL, self.nic_input)

        self.name_input = QLineEdit(self)
        self.name_input.setPlaceholderText(AUTH_NAME_PLACEHOLDER)
        form.addRow(AUTH_NAME_LABEL, self.name_input)

        self.mobile_input = QLineEdit(self)
        self.mobile_input.setPlaceholderText(AUTH_MOBILE_PLACEHOLDER)
        form.addRow(AUTH_MOBILE_LABEL, self.mobile_input)
        layout.addLayout(form)

        self.error_label = QLabel("", self)
        self.error_label.setAlignment(Qt.AlignCenter)
        self.error_label.setStyleSheet("color: #dc2626; font-weight: bold;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        self.submit_button = QPushButton(AUTH_SUBMIT_BUTTON, self)
        self.submit_button.clicked.connect(self._handle_submit)
        layout.addWidget(self.submit_button)
        layout.addStretch()

    def _handle_submit(self) -> None:
        self.set_error("")
        nic = self.nic_input.text().strip()
        name = self.name_input.text().strip()
        mobile = self.mobile_input.text().strip()

        if not is_valid_identity(nic):
            self.set_error(INVALID_NIC_MESSAGE)
            return
        if not is_valid_mobile(mobile):
            self.set_error(INVALID_MOBILE_MESSAGE)
            return
        self.on_submit(nic, name, mobile)

    def set_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.setVisible(bool(message))

    def set_busy(self, busy: bool) -> None:
        self.submit_button.setEnabled(not busy)

    def reset_state(self) -> None:
        self.nic_input.clear()
        self.name_input.clear()
        self.mobile_input.clear()
        self.set_error("")
        self.set_busy(False)
