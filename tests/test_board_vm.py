from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_door
from app.viewmodels.board_vm import DEFAULT_REVEAL_DELAY_MS, BoardVM
from core.models import BoardState
from core.services import codec
from core.services.coordinate_mapper import Point, Size
from core.services.interfaces import BackgroundInfo
from core.services.unlock_service import ClickOutcome
from infrastructure.persistence_gateway import PersistenceGateway


@pytest.fixture
def vm(scheduler, clock) -> BoardVM:
    board = BoardVM(PersistenceGateway(), scheduler, clock=clock)
    board.load_location(None)
    return board


def _code_of(path: str) -> str:
    return path.rsplit("/", 1)[1]


def test_startup_without_location_loads_default_board(vm):
    assert vm.door_count == 24
    assert vm.registry.ids() == list(range(1, 25))
    assert vm.edit_mode is False
    assert vm.name == "My Calendar"


def test_startup_in_edit_mode_from_location(scheduler, clock):
    board = BoardVM(PersistenceGateway(), scheduler, clock=clock)
    board.load_location("/editmode")
    assert board.edit_mode is True
    assert board.door_count == 24


def test_startup_from_code(scheduler, clock):
    code = codec.encode(BoardState(doors=[make_door(4)], background="a.png", name="Mine"))
    board = BoardVM(PersistenceGateway(), scheduler, clock=clock)
    board.load_location(f"/{code}")
    assert board.registry.ids() == [4]
    assert (board.name, board.background) == ("Mine", "a.png")


def test_first_click_opens_then_reveals_after_delay(vm, scheduler):
    revealed: list[str] = []
    vm.set_reveal_listener(revealed.append)

    assert vm.click_door(24) is ClickOutcome.OPENING
    assert vm.registry.get(24).is_open
    assert vm.revealed_content is None and revealed == []
    assert [delay for delay, _ in scheduler.pending.values()] == [DEFAULT_REVEAL_DELAY_MS]

    scheduler.fire_all()
    assert vm.revealed_content == "24"
    assert revealed == ["24"]


def test_second_click_reveals_immediately(vm, scheduler):
    vm.click_door(3)
    handle = next(iter(scheduler.pending))
    assert vm.click_door(3) is ClickOutcome.REVEALED
    assert vm.revealed_content == "3"
    assert handle in scheduler.cancelled
    assert not vm.has_pending_reveal


def test_future_door_never_opens(vm, clock):
    vm.registry.replace_all([make_door(1, opening_date=clock.now + timedelta(days=2))])
    for _ in range(5):
        assert vm.click_door(1) is ClickOutcome.LOCKED
    assert not vm.registry.get(1).is_open
    assert vm.revealed_content is None


def test_door_unlocks_when_clock_passes_opening(vm, clock):
    vm.registry.replace_all([make_door(1, opening_date=clock.now + timedelta(minutes=5))])
    assert vm.click_door(1) is ClickOutcome.LOCKED
    clock.advance(minutes=6)
    assert vm.click_door(1) is ClickOutcome.OPENING


def test_newer_opening_cancels_pending_reveal(vm, scheduler):
    revealed: list[str] = []
    vm.set_reveal_listener(revealed.append)
    vm.click_door(1)
    vm.click_door(2)
    assert len(scheduler.pending) == 1
    scheduler.fire_all()
    assert revealed == ["2"]


def test_edit_mode_click_selects_without_opening(vm, scheduler):
    vm.edit_mode = True
    assert vm.click_door(5) is ClickOutcome.SELECTED
    assert vm.selected_id == 5
    assert not vm.registry.get(5).is_open
    assert scheduler.pending == {}


def test_click_unknown_door(vm):
    assert vm.click_door(99) is None


def test_dispose_cancels_pending_reveal(vm, scheduler):
    revealed: list[str] = []
    vm.set_reveal_listener(revealed.append)
    vm.click_door(1)
    _delay, callback = next(iter(scheduler.pending.values()))
    vm.dispose()
    assert scheduler.pending == {}
    callback()  # a timer that slipped through is a no-op
    assert revealed == [] and vm.revealed_content is None


def test_export_import_cycle_reproduces_moved_recolored_door(vm, scheduler, clock):
    vm.update_door(7, color="#ff0000ff", x=640, y=410)
    path = vm.export_code(edit=False)
    assert path.startswith("/") and not path.startswith("/editmode/")

    other = BoardVM(PersistenceGateway(), scheduler, clock=clock)
    other.load_location(None)
    assert other.handle_import_code(_code_of(path))
    assert other.registry.get(7) == vm.registry.get(7)
    assert other.registry.doors == vm.registry.doors
    assert other.edit_mode is False


def test_edit_export_path(vm):
    path = vm.export_code(edit=True)
    assert path.startswith("/editmode/")
    assert codec.decode(_code_of(path)) == vm.snapshot()


def test_import_with_edit_switches_mode_but_never_off(vm):
    code = _code_of(vm.export_code())
    assert vm.handle_import_code(code, edit=True)
    assert vm.edit_mode is True
    assert vm.handle_import_code(code, edit=False)
    assert vm.edit_mode is True


def test_import_replaces_name_background_and_resets_session(vm, scheduler):
    vm.click_door(1)
    vm.select_door(2)
    code = codec.encode(BoardState(doors=[make_door(9)], background="b.jpg", name="Other"))
    assert vm.handle_import_code(f" {code} ")
    assert vm.registry.ids() == [9]
    assert (vm.name, vm.background) == ("Other", "b.jpg")
    assert vm.selected_id is None
    assert scheduler.pending == {}


def test_invalid_import_leaves_state_untouched(vm):
    before = vm.snapshot()
    assert vm.handle_import_code("definitely not a code") is False
    assert vm.snapshot() == before


def test_door_at_hits_topmost_door(vm):
    vm.registry.replace_all(
        [make_door(1, x=0, y=0, w=200, h=200), make_door(2, x=100, y=100, w=200, h=200)]
    )
    vm.set_available_size(1920, 1080)
    assert vm.door_at(Point(50, 50)) == 1
    assert vm.door_at(Point(150, 150)) == 2
    assert vm.door_at(Point(1000, 1000)) is None


def test_drag_only_in_edit_mode(vm):
    vm.set_available_size(960, 540)
    assert not vm.begin_drag(1, Point(15, 15))
    vm.edit_mode = True
    assert vm.begin_drag(1, Point(15, 15))
    vm.drag_to(Point(-100, -100))
    vm.end_drag()
    door = vm.registry.get(1)
    assert (door.x, door.y) == (0, 0)


def test_background_swap_keeps_only_newest_load(vm):
    first = vm.request_background()
    second = vm.request_background()
    assert not vm.apply_background(first, BackgroundInfo("old.png", 400, 300))
    assert vm.background is None and vm.aspect is None
    assert vm.apply_background(second, BackgroundInfo("new.png", 1000, 1000))
    assert vm.background == "new.png"
    assert vm.aspect == 1.0
    assert vm.base_height == 1920


def test_failed_background_keeps_previous(vm):
    token = vm.request_background()
    vm.apply_background(token, BackgroundInfo("keep.png", 800, 400))
    failed = vm.request_background()
    vm.background_failed(failed, "broken.png")
    assert vm.background == "keep.png"
    assert vm.aspect == 2.0


def test_viewport_follows_available_size_and_aspect(vm):
    vm.set_available_size(960, 1000)
    assert vm.display_size == Size(960, 540)
    token = vm.request_background()
    vm.apply_background(token, BackgroundInfo("square.png", 50, 50))
    assert vm.display_size == Size(960, 960)
    viewport = vm.viewport()
    assert (viewport.base_width, viewport.base_height) == (1920, 1920)


def test_door_view_models_reflect_state(vm, clock):
    future = clock.now + timedelta(days=1)
    vm.registry.replace_all([make_door(1), make_door(2, opening_date=future)])
    vm.click_door(1)
    states = {dvm.door.id: (dvm.is_open, dvm.is_locked) for dvm in vm.door_view_models()}
    assert states == {1: (True, False), 2: (False, True)}


def test_default_month_and_name_from_settings(scheduler):
    board = BoardVM(
        PersistenceGateway(),
        scheduler,
        clock=lambda: datetime(2030, 6, 1, tzinfo=timezone.utc),
        default_name="Summer",
        default_month=7,
    )
    board.load_defaults()
    assert board.name == "Summer"
    first = board.registry.get(1).opening_date
    assert (first.year, first.month, first.day) == (2030, 7, 1)
