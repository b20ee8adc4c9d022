from __future__ import annotations

from datetime import datetime, timedelta, timezone

from conftest import make_door
from core.services.unlock_service import (
    ClickOutcome,
    DoorState,
    evaluate,
    is_unlockable,
    resolve_click,
)

OPENS = datetime(2026, 12, 10, tzinfo=timezone.utc)


def test_locked_before_opening_date():
    door = make_door(10, opening_date=OPENS)
    assert not is_unlockable(door, OPENS - timedelta(seconds=1))
    assert evaluate(door, OPENS - timedelta(days=3)) is DoorState.LOCKED


def test_unlocks_exactly_at_opening():
    door = make_door(10, opening_date=OPENS)
    assert is_unlockable(door, OPENS)
    assert evaluate(door, OPENS) is DoorState.UNLOCKED_CLOSED


def test_open_flag_only_counts_once_unlockable():
    door = make_door(10, opening_date=OPENS, is_open=True)
    assert evaluate(door, OPENS - timedelta(hours=1)) is DoorState.LOCKED
    assert evaluate(door, OPENS + timedelta(hours=1)) is DoorState.UNLOCKED_OPEN


def test_evaluation_tracks_the_clock():
    door = make_door(10, opening_date=OPENS)
    before, after = OPENS - timedelta(minutes=1), OPENS + timedelta(minutes=1)
    assert evaluate(door, before) is DoorState.LOCKED
    assert evaluate(door, after) is DoorState.UNLOCKED_CLOSED


def test_compares_across_timezones():
    berlin = timezone(timedelta(hours=1))
    door = make_door(1, opening_date=datetime(2026, 12, 1, tzinfo=berlin))
    assert is_unlockable(door, datetime(2026, 11, 30, 23, 0, tzinfo=timezone.utc))
    assert not is_unlockable(door, datetime(2026, 11, 30, 22, 59, tzinfo=timezone.utc))


def test_resolve_click_transitions():
    door = make_door(10, opening_date=OPENS)
    later = OPENS + timedelta(days=1)
    assert resolve_click(door, OPENS - timedelta(days=1), False) is ClickOutcome.LOCKED
    assert resolve_click(door, later, False) is ClickOutcome.OPENING
    door.is_open = True
    assert resolve_click(door, later, False) is ClickOutcome.REVEALED


def test_edit_mode_click_only_selects():
    locked = make_door(10, opening_date=OPENS)
    assert resolve_click(locked, OPENS - timedelta(days=1), True) is ClickOutcome.SELECTED
    assert resolve_click(locked, OPENS + timedelta(days=1), True) is ClickOutcome.SELECTED
