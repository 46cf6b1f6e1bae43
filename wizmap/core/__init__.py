"""
Core editing logic for Wizmap
"""

from .grid import (
    CellKind, EdgeSide, GridGeometry,
    pixel_to_fine, fine_to_logical, sub_position, classify
)
from .catalog import TileCatalog, TileClass, Tile, TextureRegion
from .placement import PlacementMode, PlacementResult, can_place
from .paths import PathGraph, WallSides
from .arrows import Arrow, ArrowState, ArrowValidator
from .offsets import compute_offsets, arrow_pixel_points
from .map_data import MapData, TileLayer, MapFormatError
from .storage import MapStore
from .tool_manager import ToolManager, ToolType, AppMode
from .session import EditorSession

__all__ = [
    'CellKind',
    'EdgeSide',
    'GridGeometry',
    'pixel_to_fine',
    'fine_to_logical',
    'sub_position',
    'classify',
    'TileCatalog',
    'TileClass',
    'Tile',
    'TextureRegion',
    'PlacementMode',
    'PlacementResult',
    'can_place',
    'PathGraph',
    'WallSides',
    'Arrow',
    'ArrowState',
    'ArrowValidator',
    'compute_offsets',
    'arrow_pixel_points',
    'MapData',
    'TileLayer',
    'MapFormatError',
    'MapStore',
    'ToolManager',
    'ToolType',
    'AppMode',
    'EditorSession',
]
