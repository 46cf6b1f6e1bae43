import pytest

from wizmap.core.arrows import Arrow
from wizmap.core.map_data import MapData, MapFormatError, LAYER_COMMENTS


def test_default_map_layout():
    map_data = MapData()
    assert (map_data.width, map_data.height, map_data.tile_size) == (81, 81, 40)
    assert [layer.id for layer in map_data.layers] == ['layer-1', 'comment-layer-1']
    assert map_data.comment_layer().type == LAYER_COMMENTS
    assert len(map_data.tile_layer().tiles) == 81
    assert len(map_data.tile_layer().tiles[0]) == 81
    assert map_data.arrows == []


def test_set_tile_is_idempotent():
    map_data = MapData()
    assert map_data.set_tile((7, 4), 'map_statue')
    assert not map_data.set_tile((7, 4), 'map_statue')
    assert map_data.get_tile((7, 4)) == 'map_statue'
    assert map_data.placed_tiles() == {(7, 4): 'map_statue'}
    assert map_data.clear_tile((7, 4))
    assert not map_data.clear_tile((7, 4))


def test_json_round_trip_keeps_tiles_and_arrows():
    map_data = MapData(id='123456', name='Dungeon', map_id='123456')
    map_data.set_tile((7, 3), 'map_door2')
    map_data.arrows.append(Arrow(id='arrow-1', points=((10, 10), (10, 19)), timestamp=5))

    data = map_data.to_json()
    assert data['tileSize'] == 40
    assert data['mapId'] == '123456'

    loaded = MapData.from_json(data)
    assert loaded.name == 'Dungeon'
    assert loaded.get_tile((7, 3)) == 'map_door2'
    assert loaded.arrows == map_data.arrows


def test_missing_fields_raise():
    with pytest.raises(MapFormatError):
        MapData.from_json({'layers': []})
    with pytest.raises(MapFormatError):
        MapData.from_json({'name': 'No layers'})
    with pytest.raises(MapFormatError):
        MapData.from_json(['not', 'a', 'map'])


def test_loading_adds_missing_comment_layer_and_defaults():
    data = {
        'mapId': 777777,
        'name': 'Old map',
        'width': 9,
        'height': 9,
        'layers': [{'id': 'layer-1', 'name': 'Background', 'tiles': [[None] * 9 for _ in range(9)]}],
    }
    loaded = MapData.from_json(data)
    assert loaded.tile_size == 40
    assert loaded.id == '777777'
    assert loaded.map_id == '777777'
    assert loaded.comment_layer() is not None
    assert len(loaded.comment_layer().tiles) == 9


def test_legacy_comment_layer_arrows_migrate():
    data = {
        'id': '100002',
        'name': 'Legacy',
        'width': 9,
        'height': 9,
        'layers': [{'id': 'layer-1', 'name': 'Background', 'tiles': [[None] * 9 for _ in range(9)]}],
        'commentLayer': {'arrows': [
            {'id': 'arrow-9', 'points': [{'x': 1, 'y': 1}, {'x': 1, 'y': 4}], 'color': '#0000ff', 'thickness': 10}
        ]},
    }
    loaded = MapData.from_json(data)
    assert [a.id for a in loaded.arrows] == ['arrow-9']
    assert loaded.arrows[0].points == ((1, 1), (1, 4))
    assert loaded.arrows[0].color == '#0000ff'


def test_stored_grid_is_fitted_to_map_size():
    data = {
        'name': 'Small',
        'width': 9,
        'height': 9,
        'layers': [{'id': 'layer-1', 'name': 'Background',
                    'tiles': [['a', None, 'b'] + ['y'] * 9] + [[None] * 3] * 2}],
    }
    loaded = MapData.from_json(data)
    tiles = loaded.tile_layer().tiles
    assert len(tiles) == 9
    assert all(len(row) == 9 for row in tiles)
    assert tiles[0][0] == 'a'
    assert tiles[8][8] is None

    assert loaded.set_tile((7, 7), 'map_statue')
    assert loaded.get_tile((7, 7)) == 'map_statue'


def test_malformed_layers_raise_format_error():
    with pytest.raises(MapFormatError):
        MapData.from_json({'name': 'x', 'layers': ['oops']})
    with pytest.raises(MapFormatError):
        MapData.from_json({'name': 'x', 'layers': [{'type': 'comments', 'arrows': [{'points': []}]}]})
    with pytest.raises(MapFormatError):
        MapData.from_json({'name': 'x', 'width': 'wide', 'layers': []})
