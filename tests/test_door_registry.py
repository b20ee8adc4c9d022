from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from conftest import make_door
from core.services.door_registry import (
    MAX_BORDER_RADIUS,
    MIN_DOOR_SIZE,
    DoorRegistry,
    default_doors,
)
from core.services.unlock_service import DoorState, evaluate

UTC = timezone.utc


def test_default_board_layout():
    doors = default_doors(2026, tz=UTC)
    assert [d.id for d in doors] == list(range(1, 25))
    assert (doors[0].x, doors[0].y) == (20, 20)
    assert (doors[5].x, doors[5].y) == (770, 20)
    assert (doors[6].x, doors[6].y) == (20, 140)
    assert all((d.w, d.h) == (120, 90) for d in doors)
    assert [d.content for d in doors[:3]] == ["1", "2", "3"]
    for door in doors:
        assert door.opening_date == datetime(2026, 12, door.id, tzinfo=UTC)


def test_default_month_is_configurable():
    doors = default_doors(2027, month=11, tz=UTC)
    assert doors[23].opening_date.date() == date(2027, 11, 24)


def test_door_24_unlocked_closed_after_all_openings():
    registry = DoorRegistry.with_defaults(2026)
    door = registry.get(24)
    assert evaluate(door, datetime(2027, 1, 2, tzinfo=UTC)) is DoorState.UNLOCKED_CLOSED


def test_snapshot_is_ordered_and_immutable_view():
    registry = DoorRegistry([make_door(3), make_door(1), make_door(2)])
    assert registry.ids() == [3, 1, 2]
    snapshot = registry.doors
    registry.patch(1, x=999)
    assert snapshot[1].x == 10
    assert registry.get(1).x == 999
    assert len(registry) == 3
    assert [d.id for d in registry] == [3, 1, 2]


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        DoorRegistry([make_door(1), make_door(1)])


def test_replace_all_resets_open_flags():
    registry = DoorRegistry([make_door(1)])
    registry.patch(1, is_open=True)
    assert registry.get(1).is_open
    registry.replace_all([make_door(1, is_open=True), make_door(2)])
    assert not registry.get(1).is_open
    assert registry.ids() == [1, 2]


def test_reset_open_flags():
    registry = DoorRegistry([make_door(1), make_door(2)])
    registry.patch(2, is_open=True)
    registry.reset_open_flags()
    assert not any(d.is_open for d in registry)


@pytest.mark.parametrize(
    "value, expected",
    [("abc", MIN_DOOR_SIZE), (5, MIN_DOOR_SIZE), ("150", 150), (77.9, 77), (None, MIN_DOOR_SIZE)],
)
def test_size_input_is_clamped_not_rejected(value, expected):
    registry = DoorRegistry([make_door(1)])
    assert registry.patch(1, w=value, h=value)
    door = registry.get(1)
    assert door.w == expected and door.h == expected


@pytest.mark.parametrize("value, expected", [(-3, 0), (10, 10), (500, MAX_BORDER_RADIUS), ("x", 0)])
def test_border_radius_clamped(value, expected):
    registry = DoorRegistry([make_door(1)])
    registry.patch(1, border_radius=value)
    assert registry.get(1).border_radius == expected


def test_negative_position_clamped():
    registry = DoorRegistry([make_door(1)])
    registry.patch(1, x=-50, y=-0.5)
    assert (registry.get(1).x, registry.get(1).y) == (0, 0)


def test_patch_is_atomic_across_fields():
    registry = DoorRegistry([make_door(1)])
    registry.patch(1, color="#ff0000ff", content="hello", outline="double", opening_side="left")
    door = registry.get(1)
    assert (door.color, door.content, door.outline, door.opening_side) == (
        "#ff0000ff",
        "hello",
        "double",
        "left",
    )


def test_patch_opening_date_from_form_value():
    registry = DoorRegistry([make_door(1)])
    registry.patch(1, opening_date="2026-12-05")
    opened = registry.get(1).opening_date
    assert opened.tzinfo is not None
    assert (opened.year, opened.month, opened.day, opened.hour) == (2026, 12, 5, 0)


def test_patch_unknown_door_returns_false():
    registry = DoorRegistry([make_door(1)])
    assert registry.patch(42, x=1) is False


@pytest.mark.parametrize(
    "changes",
    [{"nope": 1}, {"id": 5}, {"outline": "sparkle"}, {"opening_side": "up"}, {"opening_date": "soon"}],
)
def test_patch_invalid_fields_raise(changes):
    registry = DoorRegistry([make_door(1)])
    with pytest.raises(ValueError):
        registry.patch(1, **changes)
    assert registry.get(1) == make_door(1)


def test_huge_numeric_input_falls_back():
    registry = DoorRegistry([make_door(1, x=30, y=40)])
    assert registry.patch(1, x=10**400, y="1e400", w=10**400, border_radius=10**400)
    door = registry.get(1)
    assert (door.x, door.y) == (30, 40)
    assert door.w == MIN_DOOR_SIZE
    assert door.border_radius == 0
