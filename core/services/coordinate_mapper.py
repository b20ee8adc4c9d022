"""Conversion between base (logical) space and display (pixel) space.

Door geometry is stored in a fixed base canvas `BASE_WIDTH` wide whose
height follows the background image's aspect ratio. Everything here is pure
and recomputed on demand from the current inputs; nothing is cached.

Degenerate inputs (zero or negative sizes, NaN) never propagate: scales fall
back to ``(1.0, 1.0)`` and boxes to at least 1x1.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from core.models import Door

BASE_WIDTH: int = 1920
FALLBACK_ASPECT: float = 1920 / 1080

# Outline styles: (base thickness, minimum on-screen thickness)
OUTLINE_THICKNESS: dict[str, tuple[float, int]] = {
    "thin": (2, 1),
    "thick": (6, 2),
    "double": (4, 2),
    "glow": (12, 6),
}


@dataclass(frozen=True)
class Point:
    """2D point, in whichever space the caller is working in."""

    x: float
    y: float

    def __iter__(self):
        return iter((self.x, self.y))


@dataclass(frozen=True)
class Size:
    width: int
    height: int


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float


def _positive(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def scale_factors(
    base_width: float, base_height: float, display_width: float, display_height: float
) -> tuple[float, float]:
    """Return ``(scale_x, scale_y)`` mapping base to display, or ``(1, 1)``."""
    if not all(_positive(v) for v in (base_width, base_height, display_width, display_height)):
        return 1.0, 1.0
    return display_width / base_width, display_height / base_height


def base_height_for(aspect: float | None, base_width: int = BASE_WIDTH) -> int:
    """Height of the base canvas for a background `aspect` (width / height)."""
    if aspect is None or not _positive(aspect):
        aspect = FALLBACK_ASPECT
    return max(1, round(base_width / aspect))


@dataclass(frozen=True)
class Viewport:
    """Current base and display box sizes; all mapping derives from these."""

    base_width: float
    base_height: float
    display_width: float
    display_height: float

    @property
    def scale(self) -> tuple[float, float]:
        return scale_factors(
            self.base_width, self.base_height, self.display_width, self.display_height
        )

    @property
    def display_size(self) -> Size:
        return Size(int(self.display_width), int(self.display_height))

    def to_display(self, point: Point) -> Point:
        sx, sy = self.scale
        return Point(point.x * sx, point.y * sy)

    def to_base(self, point: Point) -> Point:
        sx, sy = self.scale
        return Point(point.x / sx, point.y / sy)


def to_display(point: Point, viewport: Viewport) -> Point:
    """Map a base-space point into display space."""
    return viewport.to_display(point)


def to_base(point: Point, viewport: Viewport) -> Point:
    """Map a display-space point (e.g. a pointer) into base space."""
    return viewport.to_base(point)


def fit_viewport(
    base_aspect: float | None,
    available_width: float,
    available_height: float,
    base_width: int = BASE_WIDTH,
) -> Size:
    """Largest box with the base aspect that fits the available box.

    Uses the uniform scale ``min(aw / bw, ah / bh)`` and rounds to whole
    pixels. The result never exceeds a non-degenerate available box and is
    never smaller than 1x1.
    """
    bw = base_width if _positive(base_width) else BASE_WIDTH
    bh = base_height_for(base_aspect, bw)
    aw = available_width if _positive(available_width) else 0
    ah = available_height if _positive(available_height) else 0

    scale = min(aw / bw, ah / bh)
    width = round(bw * scale)
    height = round(bh * scale)
    # rounding may overshoot by one pixel on fractional available sizes
    if aw >= 1:
        width = min(width, math.floor(aw))
    if ah >= 1:
        height = min(height, math.floor(ah))
    return Size(max(1, width), max(1, height))


def door_display_rect(door: Door, viewport: Viewport) -> Rect:
    """Display-space rectangle occupied by `door`."""
    sx, sy = viewport.scale
    return Rect(door.x * sx, door.y * sy, door.w * sx, door.h * sy)


def background_size(viewport: Viewport) -> Size:
    """Size the shared background image is drawn at, for board and doors alike."""
    return viewport.display_size


def background_offset(door: Door, viewport: Viewport) -> Point:
    """Offset of the shared background inside `door` so it lines up with the board.

    Each door is a window onto one continuously sized backdrop, so the image
    is shifted by the door's own display position.
    """
    rect = door_display_rect(door, viewport)
    return Point(-rect.left, -rect.top)


def scaled_radius(radius: float, viewport: Viewport) -> float:
    """Corner radius in display pixels."""
    sx, sy = viewport.scale
    return max(0.0, radius * min(sx, sy))


def outline_width(outline: str, viewport: Viewport) -> int:
    """On-screen stroke (or glow blur) width for an outline style; 0 for none."""
    thickness = OUTLINE_THICKNESS.get(outline)
    if thickness is None:
        return 0
    base, floor = thickness
    sx, sy = viewport.scale
    return max(floor, round(base * min(sx, sy)))
