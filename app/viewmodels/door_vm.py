"""Lightweight view model wrapper around `Door` for painting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.models import Door
from core.services.coordinate_mapper import (
    Point,
    Rect,
    Size,
    Viewport,
    background_offset,
    background_size,
    door_display_rect,
    outline_width,
    scaled_radius,
)
from core.services.unlock_service import DoorState, evaluate


def looks_like_markup(content: str) -> bool:
    """True when door content should be rendered as rich text."""
    return content.strip().startswith("<")


@dataclass
class DoorVM:
    """Expose display-space properties of one door for the renderer."""

    door: Door
    viewport: Viewport
    now: datetime

    @property
    def rect(self) -> Rect:
        return door_display_rect(self.door, self.viewport)

    @property
    def state(self) -> DoorState:
        return evaluate(self.door, self.now)

    @property
    def is_locked(self) -> bool:
        return self.state is DoorState.LOCKED

    @property
    def is_open(self) -> bool:
        return self.state is DoorState.UNLOCKED_OPEN

    @property
    def label(self) -> str:
        """Number or closed label shown on the door front."""
        return self.door.label

    @property
    def radius(self) -> float:
        return scaled_radius(self.door.border_radius, self.viewport)

    @property
    def outline_width(self) -> int:
        return outline_width(self.door.outline, self.viewport)

    @property
    def background_offset(self) -> Point:
        """Where the shared backdrop is drawn relative to the door's top-left."""
        return background_offset(self.door, self.viewport)

    @property
    def background_size(self) -> Size:
        return background_size(self.viewport)

    @property
    def content_is_markup(self) -> bool:
        return looks_like_markup(self.door.content)
