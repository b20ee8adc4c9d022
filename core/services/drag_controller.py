"""Edit-mode drag session translating pointer moves into door patches."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from core.services.coordinate_mapper import Point, Viewport
from core.services.door_registry import DoorRegistry


@dataclass(frozen=True)
class _DragSession:
    door_id: int
    offset_x: float
    offset_y: float


class DragController:
    """One drag at a time, keyed by door id.

    Pointer positions are display-space coordinates relative to the board's
    top-left corner. The viewport is fetched on every event so that a resize
    in the middle of a drag still maps the pointer correctly.
    """

    def __init__(
        self,
        registry: DoorRegistry,
        viewport_provider: Callable[[], Viewport],
        edit_mode_provider: Callable[[], bool],
    ) -> None:
        self._registry = registry
        self._viewport = viewport_provider
        self._edit_mode = edit_mode_provider
        self._session: _DragSession | None = None

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def door_id(self) -> int | None:
        return self._session.door_id if self._session else None

    def begin(self, door_id: int, pointer: Point) -> bool:
        """Grab `door_id` at `pointer`; replaces any previous session.

        Returns:
            True if a session was started.
        """
        self._session = None
        if not self._edit_mode():
            return False
        door = self._registry.get(door_id)
        if door is None:
            logger.debug("Drag ignored, door {} not found", door_id)
            return False
        at = self._viewport().to_base(pointer)
        self._session = _DragSession(door_id, at.x - door.x, at.y - door.y)
        return True

    def update(self, pointer: Point) -> bool:
        """Move the grabbed door so it follows `pointer`; no-op without a session."""
        session = self._session
        if session is None:
            return False
        at = self._viewport().to_base(pointer)
        return self._registry.patch(
            session.door_id,
            x=max(0.0, at.x - session.offset_x),
            y=max(0.0, at.y - session.offset_y),
        )

    def end(self) -> None:
        self._session = None
