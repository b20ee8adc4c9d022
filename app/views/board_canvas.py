"""BoardCanvas: paints the board and turns mouse input into view-model calls."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QTimer, QVariantAnimation, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget
from loguru import logger

from app.viewmodels.board_vm import BoardVM
from app.views.constants import (
    BOARD_FALLBACK_RGBA,
    CANVAS_BACKDROP_RGBA,
    MEASURE_DEBOUNCE_MS,
    OPEN_ANIMATION_MS,
)
from app.views.door_painter import paint_door
from core.services.coordinate_mapper import Point
from core.services.unlock_service import ClickOutcome


class BoardCanvas(QWidget):
    """Renders the fitted board centred in the widget.

    Signals:
        doorClicked(int, object): door id and the resulting `ClickOutcome`.
        doorMoved(int): a drag moved the door.
        dragFinished(int): a drag session ended.
    """

    doorClicked = Signal(int, object)
    doorMoved = Signal(int)
    dragFinished = Signal(int)

    def __init__(self, vm: BoardVM, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._vm = vm
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(120, 80)

        self._bg_image: QImage | None = None
        self._bg_scaled: QPixmap | None = None
        self._bg_scaled_key: tuple[int, int] | None = None

        self._open_progress: dict[int, float] = {}
        self._animations: dict[int, QVariantAnimation] = {}

        self._press_door: int | None = None
        self._dragged = False

        self._measure_timer = QTimer(self)
        self._measure_timer.setSingleShot(True)
        self._measure_timer.setInterval(MEASURE_DEBOUNCE_MS)
        self._measure_timer.timeout.connect(self._apply_measure)

    # Public API
    def set_background_image(self, image: QImage | None) -> None:
        """Swap the decoded backdrop; the previous image is released."""
        self._bg_image = image
        self._bg_scaled = None
        self._bg_scaled_key = None
        self.update()

    def reset_doors(self) -> None:
        """Forget per-door animation state after the board was replaced."""
        animations = list(self._animations.values())
        self._animations.clear()
        for anim in animations:
            anim.stop()
        self._open_progress.clear()
        self._press_door = None
        self._dragged = False
        self.update()

    def board_origin(self) -> QPointF:
        """Top-left of the board inside the widget (the board is centred)."""
        size = self._vm.display_size
        return QPointF(
            max(0, (self.width() - size.width) / 2), max(0, (self.height() - size.height) / 2)
        )

    def to_board(self, pos: QPointF) -> Point:
        origin = self.board_origin()
        return Point(pos.x() - origin.x(), pos.y() - origin.y())

    # Geometry
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        # Restarting the timer coalesces bursts; the last size wins
        self._measure_timer.start()

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._measure_timer.start()

    def _apply_measure(self) -> None:
        self._vm.set_available_size(max(1, self.width()), max(1, self.height()))
        self.update()

    def _scaled_background(self) -> QPixmap | None:
        if self._bg_image is None or self._bg_image.isNull():
            return None
        size = self._vm.display_size
        key = (size.width, size.height)
        if self._bg_scaled is None or self._bg_scaled_key != key:
            self._bg_scaled = QPixmap.fromImage(
                self._bg_image.scaled(
                    size.width, size.height, Qt.IgnoreAspectRatio, Qt.SmoothTransformation
                )
            )
            self._bg_scaled_key = key
        return self._bg_scaled

    # Painting
    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor(*CANVAS_BACKDROP_RGBA))
            origin = self.board_origin()
            painter.translate(origin)

            size = self._vm.display_size
            background = self._scaled_background()
            if background is not None:
                painter.drawPixmap(0, 0, background)
            else:
                painter.fillRect(0, 0, size.width, size.height, QColor(*BOARD_FALLBACK_RGBA))

            selected = self._vm.selected_id if self._vm.edit_mode else None
            for dvm in self._vm.door_view_models():
                door_id = dvm.door.id
                progress = self._open_progress.get(door_id, 1.0 if dvm.is_open else 0.0)
                paint_door(painter, dvm, background, progress, selected=door_id == selected)
        except Exception as ex:  # pragma: no cover - UI best effort
            logger.error("Board paint failed: {}", ex)
        finally:
            painter.end()

    # Mouse input
    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        point = self.to_board(event.position())
        self._press_door = self._vm.door_at(point)
        self._dragged = False
        if self._press_door is not None and self._vm.edit_mode:
            self._vm.begin_drag(self._press_door, point)
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if not self._vm.drag.is_active:
            return
        if self._vm.drag_to(self.to_board(event.position())):
            self._dragged = True
            self.doorMoved.emit(self._vm.drag.door_id)
            self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        dragged_id = self._vm.drag.door_id if self._dragged else None
        self._vm.end_drag()
        pressed = self._press_door
        self._press_door = None
        if dragged_id is not None:
            self.dragFinished.emit(dragged_id)
        released_on = self._vm.door_at(self.to_board(event.position()))
        if pressed is not None and (released_on == pressed or dragged_id == pressed):
            self._click(pressed)
        event.accept()

    def _click(self, door_id: int) -> None:
        outcome = self._vm.click_door(door_id)
        if outcome is ClickOutcome.OPENING:
            self._animate_open(door_id)
        self.update()
        self.doorClicked.emit(door_id, outcome)

    def _animate_open(self, door_id: int) -> None:
        old = self._animations.pop(door_id, None)
        if old is not None:
            old.stop()
        anim = QVariantAnimation(self)
        anim.setStartValue(0.0)
        anim.setEndValue(1.0)
        anim.setDuration(OPEN_ANIMATION_MS)
        anim.valueChanged.connect(lambda v, i=door_id: self._on_progress(i, float(v)))
        anim.finished.connect(lambda i=door_id: self._animations.pop(i, None))
        self._open_progress[door_id] = 0.0
        self._animations[door_id] = anim
        anim.start(QVariantAnimation.DeleteWhenStopped)

    def _on_progress(self, door_id: int, value: float) -> None:
        self._open_progress[door_id] = value
        self.update()
