"""Core domain models for calendar doors and the persisted board state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

OPENING_SIDES: tuple[str, ...] = ("right", "left", "top", "bottom")
OUTLINES: tuple[str, ...] = ("none", "thin", "thick", "double", "glow")

DEFAULT_COLOR = "#09a2e9ff"
DEFAULT_NAME = "My Calendar"


@dataclass
class Door:
    """A single calendar panel.

    Geometry (`x`, `y`, `w`, `h`) is always expressed in base space.
    `is_open` is session-local and never serialized.
    """

    id: int
    x: float
    y: float
    opening_date: datetime
    w: float = 120
    h: float = 90
    color: str = DEFAULT_COLOR
    border_radius: float = 0
    opening_side: str = "right"
    outline: str = "thin"
    background: bool = True
    show_number: bool = True
    closed_label: str = ""
    content: str = ""
    is_open: bool = field(default=False, compare=False)

    @property
    def label(self) -> str:
        """Text shown on the closed door."""
        return str(self.id) if self.show_number else (self.closed_label or "")


@dataclass
class BoardState:
    """The unit of serialization: doors in z-order, background and name."""

    doors: list[Door] = field(default_factory=list)
    background: str | None = None
    name: str = DEFAULT_NAME

    def __post_init__(self) -> None:
        # An empty reference means no background
        if not self.background:
            self.background = None
