import pytest
from PyQt6 import QtCore

from wizmap.core.catalog import TileCatalog
from wizmap.core.session import EditorSession
from wizmap.core.paths import PathGraph
from wizmap.core.tool_manager import ToolManager
from wizmap.core import logging as wizmap_logging


ATLAS_HEIGHT = 512

TILE_METADATA = {
    'tiles': [
        {'name': 'map_door1', 'x': 0, 'y': 0, 'width': 40, 'height': 40},
        {'name': 'map_door2', 'x': 40, 'y': 0, 'width': 20, 'height': 40},
        {'name': 'map_switch_wall1', 'x': 60, 'y': 0, 'width': 20, 'height': 40},
        {'name': 'map_statue', 'x': 80, 'y': 40, 'width': 40, 'height': 40},
        {'name': 'map_water_current_1', 'x': 0, 'y': 80, 'width': 40, 'height': 40},
        {'name': 'map_water_current_2', 'x': 40, 'y': 80, 'width': 40, 'height': 40},
        {'name': 'map_water_current_3', 'x': 80, 'y': 80, 'width': 40, 'height': 40},
        {'name': 'player_icon', 'x': 120, 'y': 80, 'width': 40, 'height': 40},
    ]
}


@pytest.fixture(scope='session')
def qapp():
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    return app


@pytest.fixture(autouse=True)
def no_file_logging():
    wizmap_logging.set_logging_enabled(False)
    yield
    wizmap_logging.set_logging_enabled(True)


@pytest.fixture
def catalog():
    return TileCatalog.from_metadata(TILE_METADATA, ATLAS_HEIGHT)


@pytest.fixture
def tools(qapp):
    return ToolManager()


@pytest.fixture
def session(catalog, tools):
    return EditorSession(catalog, tools=tools)


@pytest.fixture
def corridor_paths():
    # Vertical corridor (3,3)-(3,6) plus a side cell at (4,4)
    return PathGraph([(3, 3), (3, 4), (3, 5), (3, 6), (4, 4)])
