"""QPainter routines for drawing a single door."""

from __future__ import annotations

import math

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QPainter, QPainterPath, QPen, QPixmap, QTransform

from app.viewmodels.door_vm import DoorVM
from app.views.constants import (
    DOOR_BACK_RGBA,
    DOOR_INTERIOR_RGBA,
    HINGE_ANGLE_DEG,
    LABEL_FONT_RATIO,
    LOCKED_OVERLAY_RGBA,
    OUTLINE_DOUBLE_RGBA,
    OUTLINE_GLOW_RGBA,
    OUTLINE_THICK_RGBA,
    OUTLINE_THIN_RGBA,
    SELECTION_RGBA,
)


def parse_css_color(value: str, fallback: str = "#09a2e9") -> QColor:
    """Parse a CSS colour; ``#rrggbbaa`` is reordered for Qt's ``#aarrggbb``."""
    text = (value or "").strip()
    if len(text) == 9 and text.startswith("#"):
        try:
            r, g, b, a = (int(text[i : i + 2], 16) for i in (1, 3, 5, 7))
            return QColor(r, g, b, a)
        except ValueError:
            pass
    color = QColor(text)
    return color if color.isValid() else QColor(fallback)


def hinge_transform(rect: QRectF, side: str, progress: float) -> QTransform:
    """Flatten a 3D hinge rotation into a 2D scale about the hinge edge.

    `progress` runs 0 (closed) to 1 (fully open); past 90 degrees the factor
    turns negative and the panel shows its back beyond the hinge.
    """
    factor = math.cos(math.radians(HINGE_ANGLE_DEG * max(0.0, min(1.0, progress))))
    if side == "left":
        hinge, sx, sy = QPointF(rect.left(), rect.center().y()), factor, 1.0
    elif side == "top":
        hinge, sx, sy = QPointF(rect.center().x(), rect.top()), 1.0, factor
    elif side == "bottom":
        hinge, sx, sy = QPointF(rect.center().x(), rect.bottom()), 1.0, factor
    else:
        hinge, sx, sy = QPointF(rect.right(), rect.center().y()), factor, 1.0
    t = QTransform()
    t.translate(hinge.x(), hinge.y())
    t.scale(sx if abs(sx) > 1e-3 else 1e-3, sy if abs(sy) > 1e-3 else 1e-3)
    t.translate(-hinge.x(), -hinge.y())
    return t


def _rounded(rect: QRectF, radius: float) -> QPainterPath:
    path = QPainterPath()
    path.addRoundedRect(rect, radius, radius)
    return path


def paint_door(
    painter: QPainter,
    dvm: DoorVM,
    background: QPixmap | None,
    progress: float,
    selected: bool = False,
) -> None:
    """Draw `dvm` in board coordinates (origin = board top-left)."""
    r = dvm.rect
    rect = QRectF(r.left, r.top, r.width, r.height)
    radius = dvm.radius
    door = dvm.door
    path = _rounded(rect, radius)

    painter.save()
    painter.setRenderHint(QPainter.Antialiasing, True)

    if progress > 0:
        painter.fillPath(path, QColor(*DOOR_INTERIOR_RGBA))

    painter.setTransform(hinge_transform(rect, door.opening_side, progress), True)
    front_visible = math.cos(math.radians(HINGE_ANGLE_DEG * progress)) > 0
    if front_visible:
        painter.save()
        painter.setClipPath(path)
        if door.background and background is not None and not background.isNull():
            offset = dvm.background_offset
            # The shared backdrop is the full display box shifted by the door's position
            painter.drawPixmap(QPointF(rect.left() + offset.x, rect.top() + offset.y), background)
        else:
            painter.fillPath(path, parse_css_color(door.color))
        if dvm.is_locked:
            painter.fillPath(path, QColor(*LOCKED_OVERLAY_RGBA))
        label = dvm.label
        if label:
            font = QFont(painter.font())
            font.setPixelSize(max(8, int(rect.height() * LABEL_FONT_RATIO)))
            font.setBold(True)
            painter.setFont(font)
            painter.setPen(QColor(255, 255, 255))
            painter.drawText(rect, Qt.AlignCenter, label)
        painter.restore()
    else:
        painter.fillPath(path, QColor(*DOOR_BACK_RGBA))
    painter.restore()

    _paint_outline(painter, dvm, rect, radius)
    if selected:
        painter.save()
        pen = QPen(QColor(*SELECTION_RGBA), 2, Qt.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(_rounded(rect.adjusted(-3, -3, 3, 3), radius + 3))
        painter.restore()


def _paint_outline(painter: QPainter, dvm: DoorVM, rect: QRectF, radius: float) -> None:
    width = dvm.outline_width
    style = dvm.door.outline
    if width <= 0 or style == "none":
        return
    painter.save()
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(Qt.NoBrush)
    half = width / 2
    if style == "thin":
        painter.setPen(QPen(QColor(*OUTLINE_THIN_RGBA), width))
        painter.drawPath(_rounded(rect.adjusted(half, half, -half, -half), radius))
    elif style == "thick":
        painter.setPen(QPen(QColor(*OUTLINE_THICK_RGBA), width))
        painter.drawPath(_rounded(rect.adjusted(half, half, -half, -half), radius))
    elif style == "double":
        line = max(1.0, width / 3)
        painter.setPen(QPen(QColor(*OUTLINE_DOUBLE_RGBA), line))
        outer = line / 2
        inner = width - line / 2
        painter.drawPath(_rounded(rect.adjusted(outer, outer, -outer, -outer), radius))
        painter.drawPath(_rounded(rect.adjusted(inner, inner, -inner, -inner), radius))
    elif style == "glow":
        base = QColor(*OUTLINE_GLOW_RGBA)
        steps = max(1, width // 2)
        for i in range(steps):
            color = QColor(base)
            color.setAlpha(int(base.alpha() * (1 - i / steps) / 2))
            painter.setPen(QPen(color, 2))
            grow = i * 2 + 1
            painter.drawPath(_rounded(rect.adjusted(-grow, -grow, grow, grow), radius + grow))
    painter.restore()
