"""The single mutable collection of doors for a board session.

All mutation goes through `patch` (one door, one atomic update) or
`replace_all` (hydration/import). Edit-form input is normalised here rather
than rejected: sizes are floored, radii and positions clamped.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import fields, replace
from datetime import date, datetime, tzinfo
import math
from typing import Any

from loguru import logger

from core.models import OPENING_SIDES, OUTLINES, Door
from core.utils import local_midnight, parse_date_input

DEFAULT_DOOR_COUNT = 24
DEFAULT_MONTH = 12
GRID_COLUMNS = 6
MIN_DOOR_SIZE = 20
MAX_BORDER_RADIUS = 48

_PATCHABLE = {f.name for f in fields(Door)} - {"id"}


def default_doors(
    year: int, month: int = DEFAULT_MONTH, tz: tzinfo | None = None
) -> list[Door]:
    """Build the stock 24-door grid; door k opens on day k of `month`."""
    doors: list[Door] = []
    for i in range(DEFAULT_DOOR_COUNT):
        doors.append(
            Door(
                id=i + 1,
                x=(i % GRID_COLUMNS) * 150 + 20,
                y=(i // GRID_COLUMNS) * 120 + 20,
                content=str(i + 1),
                opening_date=local_midnight(date(year, month, i + 1), tz),
            )
        )
    return doors


def _to_int(value: Any, fallback: int) -> int:
    """Lenient integer parse in the spirit of a browser number field."""
    if isinstance(value, bool):
        return fallback
    try:
        if isinstance(value, (int, float)):
            return int(value) if math.isfinite(value) else fallback
        return int(float(str(value).strip()))
    except (ValueError, TypeError, OverflowError):
        return fallback


def _to_float(value: Any, fallback: float) -> float:
    if isinstance(value, bool):
        return fallback
    try:
        result = float(value)
    except (ValueError, TypeError, OverflowError):
        return fallback
    return result if math.isfinite(result) else fallback


class DoorRegistry:
    """Ordered, id-keyed store of `Door` objects.

    Order is significant: it is the paint, hit-test and tab order.
    """

    def __init__(self, doors: Iterable[Door] = ()) -> None:
        self._doors: list[Door] = []
        self.replace_all(doors)

    @classmethod
    def with_defaults(cls, year: int, month: int = DEFAULT_MONTH) -> DoorRegistry:
        return cls(default_doors(year, month))

    # Read access
    @property
    def doors(self) -> tuple[Door, ...]:
        """Snapshot of the doors in order."""
        return tuple(self._doors)

    def get(self, door_id: int) -> Door | None:
        for door in self._doors:
            if door.id == door_id:
                return door
        return None

    def ids(self) -> list[int]:
        return [d.id for d in self._doors]

    def __len__(self) -> int:
        return len(self._doors)

    def __iter__(self) -> Iterator[Door]:
        return iter(tuple(self._doors))

    # Mutation
    def replace_all(self, doors: Iterable[Door]) -> None:
        """Replace every door; session `is_open` flags are reset.

        Raises:
            ValueError: If two doors share an id.
        """
        new_doors = [replace(d, is_open=False) for d in doors]
        ids = [d.id for d in new_doors]
        if len(ids) != len(set(ids)):
            raise ValueError("door ids must be unique")
        self._doors = new_doors

    def reset_open_flags(self) -> None:
        self._doors = [replace(d, is_open=False) if d.is_open else d for d in self._doors]

    def patch(self, door_id: int, **changes: Any) -> bool:
        """Apply `changes` to one door as a single update.

        Returns:
            True if the door exists and was updated, False otherwise.

        Raises:
            ValueError: On an unknown field or an invalid enum value.
        """
        unknown = set(changes) - _PATCHABLE
        if unknown:
            raise ValueError(f"unknown door field(s): {', '.join(sorted(unknown))}")

        for index, door in enumerate(self._doors):
            if door.id == door_id:
                normalized = {k: self._normalize(k, v, door) for k, v in changes.items()}
                self._doors[index] = replace(door, **normalized)
                return True
        logger.warning("Patch ignored, door {} not found", door_id)
        return False

    @staticmethod
    def _normalize(name: str, value: Any, door: Door) -> Any:
        if name in ("w", "h"):
            return max(MIN_DOOR_SIZE, _to_int(value, MIN_DOOR_SIZE))
        if name in ("x", "y"):
            return max(0.0, _to_float(value, getattr(door, name)))
        if name == "border_radius":
            return min(MAX_BORDER_RADIUS, max(0, _to_int(value, 0)))
        if name == "opening_side":
            if value not in OPENING_SIDES:
                raise ValueError(f"invalid opening side: {value!r}")
            return value
        if name == "outline":
            if value not in OUTLINES:
                raise ValueError(f"invalid outline: {value!r}")
            return value
        if name == "opening_date":
            if isinstance(value, datetime):
                return value if value.tzinfo is not None else value.astimezone()
            parsed = parse_date_input(value)
            if parsed is None:
                raise ValueError(f"invalid opening date: {value!r}")
            return parsed
        if name in ("background", "show_number", "is_open"):
            return bool(value)
        if name in ("color", "closed_label", "content"):
            return "" if value is None else str(value)
        return value
