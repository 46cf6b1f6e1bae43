import pytest

from wizmap.core.arrows import (
    Arrow, ArrowState, ArrowValidator, arrows_near,
    is_valid_anchor, is_straight, crosses_wall, segment_rejection,
    SEGMENT_CORNER, SEGMENT_OFF_PATH, SEGMENT_ZERO_LENGTH, SEGMENT_DIAGONAL
)


def _ids():
    counter = iter(range(1000))
    return lambda: f"arrow-{next(counter)}"


@pytest.fixture
def validator(corridor_paths):
    return ArrowValidator(corridor_paths, color='#00ff00', thickness=10, id_factory=_ids())


def test_anchor_rules(corridor_paths):
    assert is_valid_anchor((10, 10), corridor_paths)   # centre of (3, 3)
    assert is_valid_anchor((10, 9), corridor_paths)    # top edge of (3, 3)
    assert not is_valid_anchor((9, 9), corridor_paths)  # corner
    assert not is_valid_anchor((1, 1), corridor_paths)  # not a path block


def test_straight_segments():
    assert is_straight((10, 10), (10, 19))
    assert is_straight((10, 10), (13, 10))
    assert not is_straight((10, 10), (13, 13))
    assert not is_straight((10, 10), (10, 10))


def test_wall_crossing_only_flags_diagonals(corridor_paths):
    assert not crosses_wall((10, 10), (10, 19), corridor_paths)
    assert not crosses_wall((10, 10), (10, 10), corridor_paths)
    assert crosses_wall((10, 10), (13, 13), corridor_paths)


def test_segment_rejection_reasons(corridor_paths):
    assert segment_rejection((10, 10), (10, 19), corridor_paths) is None
    assert segment_rejection((10, 10), (10, 10), corridor_paths) == SEGMENT_ZERO_LENGTH
    assert segment_rejection((10, 13), (13, 13), corridor_paths) is None
    assert segment_rejection((10, 10), (13, 13), corridor_paths) == SEGMENT_DIAGONAL
    assert segment_rejection((10, 10), (10, 30), corridor_paths) == SEGMENT_OFF_PATH
    assert segment_rejection((10, 10), (9, 12), corridor_paths) == SEGMENT_CORNER


def test_idle_ignores_invalid_start(validator):
    assert not validator.accept_point((1, 1))
    assert validator.state == ArrowState.IDLE
    assert not validator.accept_point((9, 9))
    assert validator.state == ArrowState.IDLE


def test_two_point_arrow(validator):
    finished = []
    validator.on_arrow_finished = finished.append

    assert validator.accept_point((10, 10))
    assert validator.state == ArrowState.DRAWING
    assert validator.accept_point((10, 19))

    arrow = validator.finalize()
    assert arrow.points == ((10, 10), (10, 19))
    assert arrow.color == '#00ff00'
    assert arrow.thickness == 10
    assert arrow.id == 'arrow-0'
    assert finished == [arrow]
    assert validator.state == ArrowState.IDLE
    assert validator.points == []


def test_rejected_points_keep_the_arrow(validator):
    validator.accept_point((10, 10))
    validator.accept_point((10, 13))

    assert not validator.accept_point((13, 16))  # diagonal
    assert not validator.accept_point((10, 13))  # zero length
    assert not validator.accept_point((10, 40))  # off path
    assert validator.state == ArrowState.DRAWING
    assert validator.points == [(10, 10), (10, 13)]

    assert validator.accept_point((13, 13))  # turn into the side cell
    assert validator.finalize().points == ((10, 10), (10, 13), (13, 13))


def test_single_point_finalize_discards(validator):
    validator.accept_point((10, 10))
    assert validator.finalize() is None
    assert validator.state == ArrowState.IDLE


def test_finalize_when_idle_is_noop(validator):
    assert validator.finalize() is None


def test_cancel_discards_points(validator):
    validator.accept_point((10, 10))
    validator.accept_point((10, 19))
    validator.cancel()
    assert validator.state == ArrowState.IDLE
    assert validator.finalize() is None


def test_preview_check(validator):
    assert validator.is_valid_next((10, 10))
    assert not validator.is_valid_next((1, 1))
    validator.accept_point((10, 10))
    assert validator.is_valid_next((10, 16))
    assert not validator.is_valid_next((13, 13))


def test_arrow_json_round_trip():
    arrow = Arrow(id='arrow-1', points=((10, 10), (10, 19), (13, 19)),
                  color='#123456', thickness=10, timestamp=42)
    data = arrow.to_json()
    assert data['points'] == [{'x': 10, 'y': 10}, {'x': 10, 'y': 19}, {'x': 13, 'y': 19}]
    assert Arrow.from_json(data) == arrow


def test_arrows_near_uses_manhattan_distance():
    a = Arrow(id='a', points=((10, 10), (10, 19)))
    b = Arrow(id='b', points=((40, 40), (43, 40)))
    assert arrows_near([a, b], (11, 10)) == [a]
    assert arrows_near([a, b], (11, 11)) == []
    assert arrows_near([a, b], (43, 41)) == [b]
