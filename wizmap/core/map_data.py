"""
Map Data - Tile layers, the comment layer, and JSON conversion

Map documents use camelCase keys (tileSize, mapId) so files written by
earlier versions of the editor load unchanged.
"""
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from .arrows import Arrow
from .grid import FineCoordinate, GridGeometry
from .constants import (
    DEFAULT_MAP_WIDTH, DEFAULT_MAP_HEIGHT, DEFAULT_TILE_SIZE,
    DEFAULT_MAP_ID, DEFAULT_MAP_NAME
)


LAYER_TILES = 'tiles'
LAYER_COMMENTS = 'comments'


class MapFormatError(ValueError):
    """A map document is missing required fields or cannot be parsed"""


def empty_grid(width: int, height: int) -> List[List[Optional[str]]]:
    return [[None] * width for _ in range(height)]


def fit_grid(tiles: List, width: int, height: int) -> List[List[Optional[str]]]:
    """
    Copy a stored tile grid, padding with None or trimming so it is
    exactly height rows of width cells.
    """
    grid = empty_grid(width, height)
    for y, row in enumerate(tiles[:height]):
        for x, tile_id in enumerate(list(row)[:width]):
            grid[y][x] = tile_id
    return grid


@dataclass
class TileLayer:
    """One layer of tile ids, height rows of width cells"""
    id: str
    name: str
    tiles: List[List[Optional[str]]]
    visible: bool = True
    opacity: float = 1.0
    type: str = LAYER_TILES
    arrows: List[Arrow] = field(default_factory=list)

    @property
    def is_comment_layer(self) -> bool:
        return self.type == LAYER_COMMENTS

    def to_json(self) -> Dict:
        data = {
            'id': self.id,
            'name': self.name,
            'tiles': [row[:] for row in self.tiles],
            'visible': self.visible,
            'opacity': self.opacity,
            'type': self.type,
        }
        if self.is_comment_layer:
            data['arrows'] = [arrow.to_json() for arrow in self.arrows]
        return data

    @classmethod
    def from_json(cls, data: Dict, width: int, height: int) -> 'TileLayer':
        return cls(
            id=data.get('id', 'layer-1'),
            name=data.get('name', 'Layer'),
            tiles=fit_grid(data.get('tiles') or [], width, height),
            visible=data.get('visible', True),
            opacity=data.get('opacity', 1.0),
            type=data.get('type') or LAYER_TILES,
            arrows=[Arrow.from_json(a) for a in data.get('arrows') or []],
        )


def new_comment_layer(width: int, height: int) -> TileLayer:
    return TileLayer(
        id='comment-layer-1',
        name='Comments',
        tiles=empty_grid(width, height),
        type=LAYER_COMMENTS,
    )


@dataclass
class MapData:
    """A map: fixed size grid with tile layers and one comment layer"""
    id: str = DEFAULT_MAP_ID
    name: str = DEFAULT_MAP_NAME
    width: int = DEFAULT_MAP_WIDTH
    height: int = DEFAULT_MAP_HEIGHT
    tile_size: int = DEFAULT_TILE_SIZE
    map_id: Optional[str] = DEFAULT_MAP_ID
    layers: List[TileLayer] = field(default_factory=list)

    def __post_init__(self):
        if not self.layers:
            self.layers = [TileLayer(
                id='layer-1',
                name='Background',
                tiles=empty_grid(self.width, self.height),
            )]
        self.ensure_comment_layer()

    @property
    def geometry(self) -> GridGeometry:
        return GridGeometry(self.width, self.height, self.tile_size)

    # =========================================================================
    # LAYERS
    # =========================================================================

    def tile_layer(self) -> TileLayer:
        """The layer tile edits go to (the first tile layer)"""
        for layer in self.layers:
            if not layer.is_comment_layer:
                return layer
        layer = TileLayer(id='layer-1', name='Background', tiles=empty_grid(self.width, self.height))
        self.layers.insert(0, layer)
        return layer

    def comment_layer(self) -> Optional[TileLayer]:
        for layer in self.layers:
            if layer.is_comment_layer:
                return layer
        return None

    def ensure_comment_layer(self) -> TileLayer:
        layer = self.comment_layer()
        if layer is None:
            layer = new_comment_layer(self.width, self.height)
            self.layers.append(layer)
        return layer

    @property
    def arrows(self) -> List[Arrow]:
        return self.ensure_comment_layer().arrows

    # =========================================================================
    # TILES
    # =========================================================================

    def get_tile(self, fine: FineCoordinate) -> Optional[str]:
        x, y = fine
        return self.tile_layer().tiles[y][x]

    def set_tile(self, fine: FineCoordinate, tile_id: Optional[str]) -> bool:
        """
        Write a tile id (or None) into the tile layer.

        Returns:
            True if the cell changed
        """
        x, y = fine
        row = self.tile_layer().tiles[y]
        if row[x] == tile_id:
            return False
        row[x] = tile_id
        return True

    def clear_tile(self, fine: FineCoordinate) -> bool:
        return self.set_tile(fine, None)

    def placed_tiles(self) -> Dict[FineCoordinate, str]:
        """All non-empty cells of the tile layer"""
        placed = {}
        for y, row in enumerate(self.tile_layer().tiles):
            for x, tile_id in enumerate(row):
                if tile_id:
                    placed[(x, y)] = tile_id
        return placed

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_json(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'tileSize': self.tile_size,
            'mapId': self.map_id,
            'layers': [layer.to_json() for layer in self.layers],
        }

    @classmethod
    def from_json(cls, data: Dict) -> 'MapData':
        """
        Load a map document.

        Adds a comment layer when missing and migrates arrows from the
        legacy top-level 'commentLayer' field.

        Raises:
            MapFormatError: if 'name' or 'layers' is missing, or a layer
                or arrow entry is malformed
        """
        if not isinstance(data, dict) or not data.get('name') or 'layers' not in data:
            raise MapFormatError("Invalid map file format. Missing required fields.")

        try:
            width = int(data.get('width') or DEFAULT_MAP_WIDTH)
            height = int(data.get('height') or DEFAULT_MAP_HEIGHT)
            layers = [TileLayer.from_json(layer, width, height) for layer in data['layers']]

            legacy = data.get('commentLayer')
            legacy_arrows = [Arrow.from_json(a) for a in legacy.get('arrows') or []] if legacy else []
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise MapFormatError(f"Invalid map file format: {e!r}") from e

        had_comment_layer = any(layer.is_comment_layer for layer in layers)
        map_data = cls(
            id=str(data.get('id') or data.get('mapId') or DEFAULT_MAP_ID),
            name=data['name'],
            width=width,
            height=height,
            tile_size=data.get('tileSize') or DEFAULT_TILE_SIZE,
            map_id=str(data.get('mapId') or data.get('id') or DEFAULT_MAP_ID),
            layers=layers,
        )

        if legacy_arrows and not had_comment_layer:
            map_data.comment_layer().arrows = legacy_arrows

        return map_data
