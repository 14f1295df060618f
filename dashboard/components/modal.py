from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout

from dashboard.theme import DashboardTheme


def _header(title: str, accent: str, on_close) -> QHBoxLayout:
    header_layout = QHBoxLayout()
    header_layout.setSpacing(8)

    marker = QLabel("●")
    marker.setStyleSheet(f"color: {accent}; font-size: 20px;")
    header_layout.addWidget(marker)

    title_label = QLabel(title)
    title_label.setObjectName("modal_title")
    header_layout.addWidget(title_label)
    header_layout.addStretch()

    close_btn = QPushButton("×")
    close_btn.setObjectName("modal_close")
    close_btn.setFlat(True)
    close_btn.setCursor(Qt.CursorShape.PointingHandCursor)
    close_btn.clicked.connect(on_close)
    header_layout.addWidget(close_btn)
    return header_layout


class ConfirmationModal(QDialog):
    confirmed = Signal()
    cancelled = Signal()

    def __init__(self, title: str, message: str, parent=None, *, yes_text: str = "Yes", no_text: str = "No"):
        super().__init__(parent)
        self.setObjectName("modal_dialog")
        self.setModal(True)
        self.setFixedSize(600, 300)
        self.setup_ui(title, message, yes_text, no_text)

    def setup_ui(self, title: str, message: str, yes_text: str, no_text: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(24)

        layout.addLayout(_header(title, DashboardTheme.INFO, self._on_no))

        message_label = QLabel(message)
        message_label.setObjectName("modal_message")
        message_label.setWordWrap(True)
        message_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(message_label)

        layout.addStretch()

        buttons_layout = QHBoxLayout()
        buttons_layout.setSpacing(16)

        yes_btn = QPushButton(yes_text)
        yes_btn.setObjectName("secondary_button")
        yes_btn.setFixedHeight(48)
        yes_btn.clicked.connect(self._on_yes)
        buttons_layout.addWidget(yes_btn, 1)

        no_btn = QPushButton(no_text)
        no_btn.setObjectName("primary_button")
        no_btn.setFixedHeight(48)
        no_btn.clicked.connect(self._on_no)
        buttons_layout.addWidget(no_btn, 1)

        layout.addLayout(buttons_layout)

    def _on_yes(self):
        self.confirmed.emit()
        self.accept()

    def _on_no(self):
        self.cancelled.emit()
        self.reject()


class MessageModal(QDialog):
    """Outcome dialog; the accent colour follows the notice severity."""

    TITLES = {"success": "Success", "info": "Notice", "warn": "Warning", "error": "Error"}

    def __init__(self, severity: str, message: str, parent=None, title: Optional[str] = None):
        super().__init__(parent)
        self.setObjectName("modal_dialog")
        self.setModal(True)
        self.setFixedSize(480, 240)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(24)

        accent = DashboardTheme.SEVERITY_COLORS.get(severity, DashboardTheme.INFO)
        layout.addLayout(_header(title or self.TITLES.get(severity, "Notice"), accent, self.accept))

        self.message_label = QLabel(message)
        self.message_label.setObjectName("modal_message")
        self.message_label.setWordWrap(True)
        self.message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.message_label)
        layout.addStretch()

        ok_btn = QPushButton("OK")
        ok_btn.setObjectName("primary_button")
        ok_btn.setFixedHeight(48)
        ok_btn.clicked.connect(self.accept)
        layout.addWidget(ok_btn)
