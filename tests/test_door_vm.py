from __future__ import annotations

from datetime import timedelta

from conftest import AFTER_ALL_OPENINGS, make_door
from app.viewmodels.door_vm import DoorVM, looks_like_markup
from core.services.coordinate_mapper import Point, Size, Viewport
from core.services.unlock_service import DoorState

HALF = Viewport(1920, 1080, 960, 540)


def test_geometry_in_display_space():
    dvm = DoorVM(make_door(1, x=400, y=200, w=100, h=60, border_radius=16), HALF, AFTER_ALL_OPENINGS)
    r = dvm.rect
    assert (r.left, r.top, r.width, r.height) == (200, 100, 50, 30)
    assert dvm.radius == 8
    assert dvm.background_offset == Point(-200, -100)
    assert dvm.background_size == Size(960, 540)
    assert dvm.outline_width == 1


def test_state_follows_clock():
    door = make_door(3, opening_date=AFTER_ALL_OPENINGS + timedelta(hours=1))
    assert DoorVM(door, HALF, AFTER_ALL_OPENINGS).state is DoorState.LOCKED
    assert DoorVM(door, HALF, AFTER_ALL_OPENINGS + timedelta(hours=2)).is_locked is False


def test_label_prefers_number_then_closed_label():
    assert DoorVM(make_door(5), HALF, AFTER_ALL_OPENINGS).label == "5"
    hidden = make_door(5, show_number=False, closed_label="Surprise")
    assert DoorVM(hidden, HALF, AFTER_ALL_OPENINGS).label == "Surprise"
    assert DoorVM(make_door(5, show_number=False), HALF, AFTER_ALL_OPENINGS).label == ""


def test_markup_detection():
    assert looks_like_markup("  <p>Hello</p>")
    assert not looks_like_markup("1 < 2")
    assert DoorVM(make_door(1, content="<img src='x.png'>"), HALF, AFTER_ALL_OPENINGS).content_is_markup
