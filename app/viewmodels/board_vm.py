"""ViewModel for a calendar board session."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from loguru import logger

from app.viewmodels.door_vm import DoorVM
from core.models import DEFAULT_NAME, BoardState
from core.services.coordinate_mapper import (
    BASE_WIDTH,
    Point,
    Size,
    Viewport,
    base_height_for,
    fit_viewport,
)
from core.services.door_registry import DEFAULT_MONTH, DoorRegistry, default_doors
from core.services.drag_controller import DragController
from core.services.interfaces import BackgroundInfo, RevealScheduler
from core.services.unlock_service import ClickOutcome, resolve_click

DEFAULT_REVEAL_DELAY_MS = 700


def _now() -> datetime:
    return datetime.now().astimezone()


class BoardVM:
    """Main board view-model.

    Owns the door registry and the session-level state around it: edit mode,
    selection, the revealed content, the background and the fitted viewport.
    Mediates between the persistence gateway and the views.
    """

    def __init__(
        self,
        gateway,
        scheduler: RevealScheduler,
        clock: Callable[[], datetime] | None = None,
        reveal_delay_ms: int = DEFAULT_REVEAL_DELAY_MS,
        default_name: str = DEFAULT_NAME,
        default_month: int = DEFAULT_MONTH,
        on_reveal: Callable[[str], None] | None = None,
    ) -> None:
        """Create a BoardVM.

        Args:
            gateway: Gateway with `read(location)`, `export(state, edit)` and
                `import_code(text)` methods.
            scheduler: Event-loop timer used for the deferred reveal.
            clock: Returns the current aware datetime (defaults to local now).
            reveal_delay_ms: Delay between a door flipping open and its content showing.
            default_name: Calendar name used when starting from defaults.
            default_month: Month the default doors open in.
            on_reveal: Called with the content whenever a door's content is surfaced.
        """
        self._gateway = gateway
        self._scheduler = scheduler
        self._clock = clock or _now
        self._reveal_delay_ms = max(0, int(reveal_delay_ms))
        self._default_name = default_name
        self._default_month = default_month
        self._on_reveal = on_reveal

        self.registry = DoorRegistry()
        self.edit_mode: bool = False
        self.selected_id: int | None = None
        self.name: str = default_name
        self.background: str | None = None
        self.background_info: BackgroundInfo | None = None
        self.revealed_content: str | None = None

        self._available = Size(BASE_WIDTH, base_height_for(None))
        self._pending_reveal: Any = None
        self._bg_token = 0
        self._disposed = False
        self.drag = DragController(self.registry, self.viewport, lambda: self.edit_mode)

    # Hydration
    def load_defaults(self) -> None:
        """Reset to the stock 24-door board for the current year."""
        year = self._clock().year
        self._apply_state(
            BoardState(doors=default_doors(year, self._default_month), name=self._default_name)
        )

    def load_location(self, location: str | None) -> None:
        """Hydrate from a startup location; falls back to the default board."""
        result = self._gateway.read(location)
        if result.state is not None:
            self._apply_state(result.state)
        else:
            self.load_defaults()
        self.edit_mode = result.edit_mode
        logger.info(
            "Board loaded | doors={} edit_mode={} name={!r}",
            len(self.registry),
            self.edit_mode,
            self.name,
        )

    def handle_import_code(self, text: str, edit: bool = False) -> bool:
        """Replace the board with a pasted code.

        The current board is left untouched when the code is invalid. Edit
        mode is only switched on when `edit` is True, never switched off.
        """
        state = self._gateway.import_code(text)
        if state is None:
            logger.warning("Import rejected, code is not a valid board")
            return False
        self._apply_state(state)
        if edit:
            self.edit_mode = True
        logger.info("Imported board | doors={} name={!r}", len(self.registry), self.name)
        return True

    def export_code(self, edit: bool = False) -> str:
        """Return the share path for the current board (view or edit form)."""
        return self._gateway.export(self.snapshot(), edit)

    def snapshot(self) -> BoardState:
        return BoardState(
            doors=list(self.registry.doors), background=self.background, name=self.name
        )

    def _apply_state(self, state: BoardState) -> None:
        self._cancel_pending_reveal()
        self.drag.end()
        self.registry.replace_all(state.doors)
        if self.background_info is not None and self.background_info.reference != state.background:
            self.background_info = None
        self.background = state.background
        self.name = state.name
        self.selected_id = None
        self.revealed_content = None

    # Door interaction
    def click_door(self, door_id: int) -> ClickOutcome | None:
        """Run the unlock machine (view mode) or select the door (edit mode)."""
        door = self.registry.get(door_id)
        if door is None:
            return None
        outcome = resolve_click(door, self._clock(), self.edit_mode)
        if outcome is ClickOutcome.SELECTED:
            self.selected_id = door_id
        elif outcome is ClickOutcome.LOCKED:
            logger.debug("Door {} is still locked", door_id)
        elif outcome is ClickOutcome.OPENING:
            self.registry.patch(door_id, is_open=True)
            self._schedule_reveal(door_id)
        else:
            self._cancel_pending_reveal()
            self._reveal(door.content)
        return outcome

    def door_at(self, point: Point) -> int | None:
        """Topmost door under a board-relative display point."""
        for dvm in reversed(self.door_view_models()):
            r = dvm.rect
            if r.left <= point.x < r.left + r.width and r.top <= point.y < r.top + r.height:
                return dvm.door.id
        return None

    def door_view_models(self) -> list[DoorVM]:
        """Per-door presentation snapshot evaluated against the clock right now."""
        now = self._clock()
        viewport = self.viewport()
        return [DoorVM(door, viewport, now) for door in self.registry.doors]

    def update_door(self, door_id: int, **changes: Any) -> bool:
        return self.registry.patch(door_id, **changes)

    def select_door(self, door_id: int | None) -> None:
        self.selected_id = door_id if door_id in self.registry.ids() else None

    def set_name(self, name: str) -> None:
        self.name = name or ""

    def close_reveal(self) -> None:
        self.revealed_content = None

    def set_reveal_listener(self, callback: Callable[[str], None] | None) -> None:
        """Register the view callback invoked when content is surfaced."""
        self._on_reveal = callback

    # Dragging
    def begin_drag(self, door_id: int, pointer: Point) -> bool:
        return self.drag.begin(door_id, pointer)

    def drag_to(self, pointer: Point) -> bool:
        return self.drag.update(pointer)

    def end_drag(self) -> None:
        self.drag.end()

    # Deferred reveal
    def _schedule_reveal(self, door_id: int) -> None:
        self._cancel_pending_reveal()
        self._pending_reveal = self._scheduler.schedule(
            self._reveal_delay_ms, lambda: self._on_reveal_due(door_id)
        )

    def _cancel_pending_reveal(self) -> None:
        if self._pending_reveal is not None:
            self._scheduler.cancel(self._pending_reveal)
            self._pending_reveal = None

    def _on_reveal_due(self, door_id: int) -> None:
        self._pending_reveal = None
        if self._disposed:
            return
        door = self.registry.get(door_id)
        if door is None or not door.is_open:
            return
        self._reveal(door.content)

    def _reveal(self, content: str) -> None:
        self.revealed_content = content
        if self._on_reveal is not None:
            self._on_reveal(content)

    @property
    def has_pending_reveal(self) -> bool:
        return self._pending_reveal is not None

    # Background image
    def request_background(self) -> int:
        """Start a background swap; returns the token the load must report back."""
        self._bg_token += 1
        return self._bg_token

    def apply_background(self, token: int, info: BackgroundInfo) -> bool:
        """Adopt a decoded image if it is the newest request.

        Returns:
            False when the load was superseded; the caller should drop the image.
        """
        if token != self._bg_token or self._disposed:
            logger.debug("Background load {} superseded by {}", token, self._bg_token)
            return False
        self.background = info.reference
        self.background_info = info
        logger.info("Background set: {} ({}x{})", info.reference, info.width, info.height)
        return True

    def background_failed(self, token: int, reference: str) -> None:
        """A load failed; the current background stays as it is."""
        logger.warning("Background image could not be decoded: {} (token {})", reference, token)

    # Geometry
    @property
    def aspect(self) -> float | None:
        """Natural aspect of the current background, if known."""
        info = self.background_info
        if info is None or info.reference != self.background or info.aspect <= 0:
            return None
        return info.aspect

    @property
    def base_height(self) -> int:
        return base_height_for(self.aspect)

    def set_available_size(self, width: int, height: int) -> None:
        self._available = Size(int(width), int(height))

    @property
    def display_size(self) -> Size:
        return fit_viewport(self.aspect, self._available.width, self._available.height)

    def viewport(self) -> Viewport:
        display = self.display_size
        return Viewport(BASE_WIDTH, self.base_height, display.width, display.height)

    # Lifecycle
    def dispose(self) -> None:
        """Cancel pending timers; late callbacks become no-ops."""
        self._cancel_pending_reveal()
        self.drag.end()
        self._disposed = True

    @property
    def door_count(self) -> int:
        return len(self.registry)
