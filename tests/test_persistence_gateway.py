from __future__ import annotations

import pytest

from conftest import make_door
from core.models import BoardState
from core.services import codec
from infrastructure.persistence_gateway import PersistenceGateway, export_path, parse_location


@pytest.fixture
def code() -> str:
    return codec.encode(BoardState(doors=[make_door(1), make_door(2)], name="Shared"))


def test_bare_code_is_view_mode(code):
    result = parse_location(f"/{code}")
    assert result.edit_mode is False
    assert result.state is not None and result.state.name == "Shared"
    assert result.code == code


def test_edit_prefix_with_code(code):
    result = parse_location(f"/editmode/{code}")
    assert result.edit_mode is True
    assert [d.id for d in result.state.doors] == [1, 2]


@pytest.mark.parametrize("location", ["/editmode", "/edit", "/editmode/"])
def test_edit_marker_without_code_uses_defaults(location):
    result = parse_location(location)
    assert result.edit_mode is True
    assert result.state is None


@pytest.mark.parametrize("location", [None, "", "/", "/not-a-real-code", "/%%%"])
def test_missing_or_malformed_code_falls_back(location):
    result = parse_location(location)
    assert result.state is None
    assert result.edit_mode is False


def test_full_url_with_query_and_fragment(code):
    result = parse_location(f"https://calendar.example/editmode/{code}?utm=1#top")
    assert result.edit_mode is True
    assert result.state.name == "Shared"
    bare = parse_location(f"/{code}?x=1")
    assert bare.state is not None


def test_export_path_forms():
    assert export_path("abc") == "/abc"
    assert export_path("abc", edit=True) == "/editmode/abc"


def test_gateway_export_then_read_round_trips():
    gateway = PersistenceGateway()
    state = BoardState(doors=[make_door(5, color="#123456ff")], background="bg.png", name="N")
    view = gateway.read(gateway.export(state))
    edit = gateway.read(gateway.export(state, edit=True))
    assert view.state == state and not view.edit_mode
    assert edit.state == state and edit.edit_mode


def test_import_code_trims_and_rejects_garbage(code):
    gateway = PersistenceGateway()
    assert gateway.import_code(f"  {code}\n").name == "Shared"
    assert gateway.import_code("garbage") is None
    assert gateway.import_code(None) is None
