from PySide6.QtCore import QSize, Qt
from PySide6.QtWidgets import QPushButton


class PrimaryButton(QPushButton):
    def __init__(self, text: str, width: int = 200, height: int = 48, parent=None):
        super().__init__(text, parent)
        self.setObjectName("primary_button")
        self.setFixedSize(QSize(width, height))
        self.setCursor(Qt.CursorShape.PointingHandCursor)


class SecondaryButton(QPushButton):
    def __init__(self, text: str, width: int = 200, height: int = 48, parent=None):
        super().__init__(text, parent)
        self.setObjectName("secondary_button")
        self.setFixedSize(QSize(width, height))
        self.setCursor(Qt.CursorShape.PointingHandCursor)
