"""Door unlock state machine.

A door is `LOCKED` until local midnight of its opening date, then
`UNLOCKED_CLOSED` until clicked in view mode, then `UNLOCKED_OPEN`. The
time boundary is evaluated against the supplied clock on every call, so a
door due today becomes clickable on the next interaction without a reload.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from core.models import Door


class DoorState(Enum):
    LOCKED = "locked"
    UNLOCKED_CLOSED = "unlocked_closed"
    UNLOCKED_OPEN = "unlocked_open"


class ClickOutcome(Enum):
    """What a click on a door should do."""

    SELECTED = "selected"  # edit mode: pick the door for the property form
    LOCKED = "locked"  # too early: nothing happens
    OPENING = "opening"  # first open: flip the door, reveal after the settle delay
    REVEALED = "revealed"  # already open: show the content right away


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.astimezone()


def is_unlockable(door: Door, now: datetime) -> bool:
    """True once `now` has reached the door's opening date."""
    return _aware(now) >= _aware(door.opening_date)


def evaluate(door: Door, now: datetime) -> DoorState:
    """Current state of `door` at time `now`."""
    if not is_unlockable(door, now):
        return DoorState.LOCKED
    return DoorState.UNLOCKED_OPEN if door.is_open else DoorState.UNLOCKED_CLOSED


def resolve_click(door: Door, now: datetime, edit_mode: bool) -> ClickOutcome:
    """Decide the transition for a click on `door`.

    In edit mode a click only ever selects; the unlock machine is untouched.
    """
    if edit_mode:
        return ClickOutcome.SELECTED
    state = evaluate(door, now)
    if state is DoorState.LOCKED:
        return ClickOutcome.LOCKED
    if state is DoorState.UNLOCKED_CLOSED:
        return ClickOutcome.OPENING
    return ClickOutcome.REVEALED
