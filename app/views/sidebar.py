"""EditSidebar: calendar-level controls and the selected door's property form."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QDate, Qt, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QCheckBox,
    QColorDialog,
    QComboBox,
    QDateEdit,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from app.views.constants import BORDER_RADIUS_RANGE, DOOR_SIZE_RANGE, SIDEBAR_WIDTH_PX
from app.views.door_painter import parse_css_color
from core.models import OPENING_SIDES, OUTLINES, Door


class EditSidebar(QWidget):
    """Edit-mode side panel.

    Emits intent signals only; the main window applies them to the view-model.
    """

    nameChanged = Signal(str)
    backgroundRequested = Signal()
    copyRequested = Signal(bool)  # edit link?
    importRequested = Signal(str)
    doorChanged = Signal(int, dict)  # door id, field patch
    selectionClosed = Signal()
    collapseToggled = Signal(bool)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(SIDEBAR_WIDTH_PX)
        self._door_id: int | None = None
        self._collapsed = False

        root = QVBoxLayout(self)
        self.btn_toggle = QPushButton("❮")
        self.btn_toggle.setFixedWidth(28)
        root.addWidget(self.btn_toggle, 0, Qt.AlignRight)

        self._body = QWidget()
        body = QVBoxLayout(self._body)
        body.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._body)

        self.title = QLabel()
        self.title.setStyleSheet("font-weight: bold;")
        body.addWidget(self.title)

        form = QFormLayout()
        self.name_edit = QLineEdit()
        form.addRow("Calendar name", self.name_edit)
        self.btn_background = QPushButton("Choose…")
        form.addRow("Background image", self.btn_background)
        body.addLayout(form)

        self.share_code = QLineEdit()
        self.share_code.setReadOnly(True)
        self.btn_copy_share = QPushButton("Copy")
        body.addWidget(QLabel("Share code (read-only)"))
        body.addLayout(self._with_button(self.share_code, self.btn_copy_share))

        self.edit_code = QLineEdit()
        self.edit_code.setReadOnly(True)
        self.btn_copy_edit = QPushButton("Copy")
        body.addWidget(QLabel("Edit-mode link"))
        body.addLayout(self._with_button(self.edit_code, self.btn_copy_edit))

        self.import_edit = QLineEdit()
        self.import_edit.setPlaceholderText("paste code here")
        body.addWidget(QLabel("Import code"))
        body.addWidget(self.import_edit)

        self.door_box = QGroupBox()
        body.addWidget(self.door_box)
        self._build_door_form()
        self.door_box.setVisible(False)
        body.addStretch(1)

        self.btn_toggle.clicked.connect(self._on_toggle)
        self.name_edit.textEdited.connect(self.nameChanged.emit)
        self.btn_background.clicked.connect(self.backgroundRequested.emit)
        self.btn_copy_share.clicked.connect(lambda *_: self.copyRequested.emit(False))
        self.btn_copy_edit.clicked.connect(lambda *_: self.copyRequested.emit(True))
        self.import_edit.returnPressed.connect(
            lambda: self.importRequested.emit(self.import_edit.text())
        )

    @staticmethod
    def _with_button(field: QLineEdit, button: QPushButton) -> QHBoxLayout:
        row = QHBoxLayout()
        row.addWidget(field, 1)
        row.addWidget(button)
        return row

    def _build_door_form(self) -> None:
        form = QFormLayout(self.door_box)

        self.content_edit = QLineEdit()
        form.addRow("Content", self.content_edit)
        self.label_edit = QLineEdit()
        form.addRow("Closed label", self.label_edit)
        self.show_number = QCheckBox("Show number on door")
        form.addRow(self.show_number)

        self.btn_color = QPushButton()
        form.addRow("Color", self.btn_color)

        self.date_edit = QDateEdit()
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        form.addRow("Open date", self.date_edit)

        self.radius_slider = QSlider(Qt.Horizontal)
        self.radius_slider.setRange(*BORDER_RADIUS_RANGE)
        form.addRow("Border radius", self.radius_slider)

        self.width_spin = QSpinBox()
        self.width_spin.setRange(*DOOR_SIZE_RANGE)
        form.addRow("Size (width)", self.width_spin)
        self.height_spin = QSpinBox()
        self.height_spin.setRange(*DOOR_SIZE_RANGE)
        form.addRow("Size (height)", self.height_spin)

        self.outline_combo = QComboBox()
        for value in OUTLINES:
            self.outline_combo.addItem(value.capitalize(), value)
        form.addRow("Outline", self.outline_combo)

        self.side_combo = QComboBox()
        for value in OPENING_SIDES:
            self.side_combo.addItem(value.capitalize(), value)
        form.addRow("Opening side", self.side_combo)

        self.projected = QCheckBox("Background projected")
        form.addRow(self.projected)

        self.btn_close_door = QPushButton("Close")
        form.addRow(self.btn_close_door)

        self.content_edit.textEdited.connect(lambda t: self._emit(content=t))
        self.label_edit.textEdited.connect(lambda t: self._emit(closed_label=t))
        self.show_number.toggled.connect(lambda v: self._emit(show_number=v))
        self.btn_color.clicked.connect(self._pick_color)
        self.date_edit.dateChanged.connect(
            lambda d: self._emit(opening_date=d.toString("yyyy-MM-dd"))
        )
        self.radius_slider.valueChanged.connect(lambda v: self._emit(border_radius=v))
        self.width_spin.valueChanged.connect(lambda v: self._emit(w=v))
        self.height_spin.valueChanged.connect(lambda v: self._emit(h=v))
        self.outline_combo.currentIndexChanged.connect(
            lambda _i: self._emit(outline=self.outline_combo.currentData())
        )
        self.side_combo.currentIndexChanged.connect(
            lambda _i: self._emit(opening_side=self.side_combo.currentData())
        )
        self.projected.toggled.connect(lambda v: self._emit(background=v))
        self.btn_close_door.clicked.connect(self.selectionClosed.emit)

    # Public API
    def set_calendar(self, name: str) -> None:
        self.title.setText(f"Edit Mode — {name}")
        if self.name_edit.text() != name:
            self.name_edit.setText(name)

    def set_codes(self, share_path: str, edit_path: str) -> None:
        self.share_code.setText(share_path)
        self.edit_code.setText(edit_path)

    def clear_import(self) -> None:
        self.import_edit.clear()

    def show_door(self, door: Door | None) -> None:
        """Populate the form for `door` (hidden when None) without echoing signals."""
        self._door_id = door.id if door is not None else None
        self.door_box.setVisible(door is not None)
        if door is None:
            return
        self.door_box.setTitle(f"Door {door.id} settings")
        widgets = self.door_box.findChildren(QWidget)
        for w in widgets:
            w.blockSignals(True)
        try:
            self.content_edit.setText(door.content)
            self.label_edit.setText(door.closed_label)
            self.show_number.setChecked(door.show_number)
            self._set_color_swatch(door.color)
            local = door.opening_date.astimezone()
            self.date_edit.setDate(QDate(local.year, local.month, local.day))
            self.radius_slider.setValue(int(door.border_radius))
            self.width_spin.setValue(int(door.w))
            self.height_spin.setValue(int(door.h))
            self.outline_combo.setCurrentIndex(max(0, self.outline_combo.findData(door.outline)))
            self.side_combo.setCurrentIndex(max(0, self.side_combo.findData(door.opening_side)))
            self.projected.setChecked(door.background)
        finally:
            for w in widgets:
                w.blockSignals(False)

    # Internals
    def _emit(self, **changes: Any) -> None:
        if self._door_id is not None:
            self.doorChanged.emit(self._door_id, changes)

    def _set_color_swatch(self, color: str) -> None:
        self.btn_color.setText(color)
        self.btn_color.setStyleSheet(f"background-color: {parse_css_color(color).name()};")

    def _pick_color(self) -> None:
        current = parse_css_color(self.btn_color.text())
        chosen: QColor = QColorDialog.getColor(current, self, "Door color")
        if chosen.isValid():
            value = chosen.name()
            self._set_color_swatch(value)
            self._emit(color=value)

    def _on_toggle(self) -> None:
        self._collapsed = not self._collapsed
        self._body.setVisible(not self._collapsed)
        self.btn_toggle.setText("❯" if self._collapsed else "❮")
        self.setMinimumWidth(0 if self._collapsed else SIDEBAR_WIDTH_PX)
        self.collapseToggled.emit(self._collapsed)
