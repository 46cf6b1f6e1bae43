import pytest

from wizmap.core.tool_manager import AppMode, ToolType
from wizmap.ui.events import MouseEventHandler, DragState, LEFT_BUTTON, RIGHT_BUTTON


def px(fine, scale=1.0):
    """Canvas position in the middle of a fine cell"""
    return ((fine[0] * 40 + 20) * scale, (fine[1] * 40 + 20) * scale)


@pytest.fixture
def handler(session):
    return MouseEventHandler(session)


def record(signal):
    calls = []
    signal.connect(lambda *args: calls.append(args))
    return calls


def test_positions_are_unscaled(session):
    handler = MouseEventHandler(session, scale=0.5)
    assert handler.to_fine(px((10, 10), 0.5)) == (10, 10)
    assert handler.to_fine((0, 0)) == (0, 0)


def test_path_drag_and_erase(handler, session):
    changed = record(handler.paths_changed)
    session.set_drawing_tool(ToolType.PATH)

    assert handler.on_mouse_press(px((10, 10)), LEFT_BUTTON)
    assert handler.state == DragState.DRAWING
    handler.on_mouse_move(px((10, 13)))
    handler.on_mouse_move(px((10, 14)))  # edge cell, ignored
    assert handler.on_mouse_release(px((10, 13)), LEFT_BUTTON)
    assert handler.state == DragState.IDLE
    assert set(session.paths.cells()) == {(3, 3), (3, 4)}

    handler.on_mouse_press(px((11, 14)), RIGHT_BUTTON)
    handler.on_mouse_release(px((11, 14)), RIGHT_BUTTON)
    assert set(session.paths.cells()) == {(3, 3)}
    assert len(changed) == 3


def test_tile_drag_places_on_paths(handler, session):
    changed = record(handler.map_changed)
    session.add_path_point((10, 10), first_click=True)
    session.select_tile('map_statue')

    handler.on_mouse_press(px((9, 10)), LEFT_BUTTON)
    handler.on_mouse_move(px((1, 1)))
    handler.on_mouse_release(px((1, 1)), LEFT_BUTTON)

    assert session.map_data.placed_tiles() == {(10, 10): 'map_statue'}
    assert len(changed) == 1

    handler.on_mouse_press(px((10, 10)), RIGHT_BUTTON)
    assert session.map_data.placed_tiles() == {}


def test_release_without_press(handler):
    assert not handler.on_mouse_release(px((0, 0)), LEFT_BUTTON)
    assert not handler.on_mouse_press(px((0, 0)), 3)


def test_comment_mode_clicks(handler, session, corridor_paths):
    session.load(session.map_data, corridor_paths)
    session.set_app_mode(AppMode.COMMENT)
    changed = record(handler.arrows_changed)

    assert handler.on_mouse_press(px((10, 10)), LEFT_BUTTON)
    handler.on_mouse_move(px((10, 19)))
    assert handler.preview_valid()
    assert handler.preview_color() == '#ff0000'
    handler.on_mouse_move(px((13, 13)))
    assert handler.preview_color() == '#ff4444'
    handler.on_mouse_move(px((10, 19)))
    assert handler.on_mouse_press(px((10, 19)), LEFT_BUTTON)
    handler.on_mouse_press(px((10, 19)), RIGHT_BUTTON)

    assert len(session.map_data.arrows) == 1
    assert handler.state == DragState.IDLE

    # Right click with no arrow in progress removes nearby arrows
    handler.on_mouse_press(px((10, 18)), RIGHT_BUTTON)
    assert session.map_data.arrows == []
    assert len(changed) == 2


def test_hover_and_leave(handler):
    hovered = record(handler.hover_changed)

    handler.on_mouse_move(px((4, 4)))
    handler.on_mouse_move((4 * 40 + 30, 4 * 40 + 30))
    handler.on_mouse_move(px((5, 4)))
    handler.on_mouse_leave()

    assert hovered == [((4, 4),), ((5, 4),), (None,)]
    assert not handler.preview_valid()


def test_leave_ends_drag(handler, session):
    session.set_drawing_tool(ToolType.PATH)
    handler.on_mouse_press(px((10, 10)), LEFT_BUTTON)
    handler.on_mouse_leave()
    assert handler.state == DragState.IDLE
    assert not handler.on_mouse_move(px((13, 10)))
    assert (4, 3) not in session.paths


def test_wheel(handler, session):
    assert not handler.on_wheel(120)
    session.select_tile('map_door2')
    assert handler.on_wheel(120)
    assert session.tile_rotation == 90
