"""Core service interfaces and shared data structures.

This module defines the small protocols and dataclasses passed between the
core services, the view-models and the infrastructure layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from core.models import BoardState


class RevealScheduler(Protocol):
    """Schedules a one-shot callback on the UI event loop."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> object:
        """Run `callback` once after `delay_ms`; return a cancellable handle."""
        ...

    def cancel(self, handle: object) -> None:
        """Cancel a handle returned by `schedule`; unknown handles are ignored."""
        ...


@dataclass(frozen=True)
class BackgroundInfo:
    """A decoded background image as seen by the core.

    Attributes:
        reference: Path or URL the image was loaded from.
        width: Natural pixel width.
        height: Natural pixel height.
    """

    reference: str
    width: int
    height: int

    @property
    def aspect(self) -> float:
        """Natural aspect ratio (width / height)."""
        return self.width / self.height if self.height > 0 else 0.0


@dataclass
class LocationState:
    """Outcome of reading the startup location.

    Attributes:
        state: Decoded board, or None when defaults should be used.
        edit_mode: Whether the location requested edit mode.
        code: The raw code segment, if any was present.
    """

    state: BoardState | None
    edit_mode: bool
    code: str | None = None
