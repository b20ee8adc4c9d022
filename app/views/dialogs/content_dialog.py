from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QHBoxLayout, QPushButton, QTextBrowser, QVBoxLayout


class ContentDialog(QDialog):
    """Popup surfacing a door's content, as rich text or plain text."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Door")
        self.setWindowModality(Qt.WindowModal)
        self.resize(420, 300)

        root = QVBoxLayout(self)

        top = QHBoxLayout()
        top.addStretch(1)
        self.btn_close = QPushButton("✕")
        self.btn_close.setFlat(True)
        self.btn_close.setFixedWidth(32)
        top.addWidget(self.btn_close)
        root.addLayout(top)

        self.body = QTextBrowser()
        self.body.setOpenExternalLinks(True)
        root.addWidget(self.body)

        self.btn_close.clicked.connect(self.accept)

    def set_content(self, content: str, markup: bool) -> None:
        if markup:
            self.body.setHtml(content)
        else:
            self.body.setPlainText(content)
