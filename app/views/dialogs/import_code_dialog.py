from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)


class ImportCodeDialog(QDialog):
    def __init__(self, parent=None, edit_default: bool = True) -> None:
        super().__init__(parent)
        self.setWindowTitle("Import Code")
        self.resize(520, 120)

        root = QVBoxLayout(self)
        root.addWidget(QLabel("Paste a calendar code (the part after the last '/'):"))

        self.code = QLineEdit()
        self.code.setPlaceholderText("paste code here")
        root.addWidget(self.code)

        self.edit_box = QCheckBox("Open in edit mode")
        self.edit_box.setChecked(edit_default)
        root.addWidget(self.edit_box)

        btns = QHBoxLayout()
        self.btn_ok = QPushButton("Import")
        self.btn_cancel = QPushButton("Cancel")
        btns.addWidget(self.btn_ok)
        btns.addStretch(1)
        btns.addWidget(self.btn_cancel)
        root.addLayout(btns)

        self.btn_ok.clicked.connect(self._on_accept)
        self.btn_cancel.clicked.connect(self.reject)
        self.code.returnPressed.connect(self._on_accept)

    def _on_accept(self) -> None:
        if not self.code.text().strip():
            return
        self.accept()

    def values(self) -> tuple[str, bool]:
        return self.code.text().strip(), self.edit_box.isChecked()
