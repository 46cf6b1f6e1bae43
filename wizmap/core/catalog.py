"""
Tile Catalog - Tile definitions, categories, and edge/normal classification

Replaces a global tile loader with a catalog object that is constructed once
and handed to whoever needs it. Tile classification is driven by declarative
rule tables and evaluated once per tile when the catalog is loaded.
"""
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
import json

from .logging import log


class TileClass(Enum):
    """Placement class of a tile"""
    NORMAL = "normal"  # Occupies block CENTER cells
    EDGE = "edge"      # Doors, switch walls: occupies EDGE cells, rotatable display


@dataclass(frozen=True)
class TextureRegion:
    """Region of the texture atlas, top-left origin"""
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Tile:
    """A single tile definition from the atlas metadata"""
    id: str
    name: str
    category: str
    tile_class: TileClass
    texture: TextureRegion

    @property
    def is_edge(self) -> bool:
        return self.tile_class == TileClass.EDGE


# Category rules, first match wins.
# Each rule is (category, substrings that must match one, substrings that must not match)
CATEGORY_RULES: List[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = [
    ('passages', ('switch_wall',), ()),
    ('passages', ('door2', 'door3', 'door4'), ()),
    ('passages', ('gate',), ('switch_iron_gate',)),
    ('switches', ('switch', 'button'), ()),
    ('objects', ('statue', 'treasure'), ()),
    ('traps', ('alarm_floor',), ()),
    ('connections', ('door', 'pitfall', 'floor', 'wall'), ()),
    ('water', ('water', 'current'), ()),
    ('enemies', ('enemy', 'golem'), ()),
    ('traps', ('trap',), ()),
]

# Exact-name categories
CATEGORY_NAMES: Dict[str, str] = {
    'player_icon': 'player',
}

DEFAULT_CATEGORY = 'misc'

# Identifiers containing any of these are edge-class tiles
EDGE_TILE_PATTERNS: Tuple[str, ...] = ('switch_wall', 'door2', 'door3', 'door4')

# Door tiles rotate in 90 degree steps on wheel input
ROTATABLE_PATTERNS: Tuple[str, ...] = ('door',)
ROTATABLE_EXCLUDES: Tuple[str, ...] = ('gate_switch',)

WATER_VARIANT_PATTERN = 'water_current'


def categorize(tile_id: str) -> str:
    """
    Get the palette category for a tile identifier.

    Args:
        tile_id: Sprite name from the atlas (e.g., "map_door2")

    Returns:
        Category name, 'misc' if no rule matched
    """
    if tile_id in CATEGORY_NAMES:
        return CATEGORY_NAMES[tile_id]

    for category, includes, excludes in CATEGORY_RULES:
        if any(part in tile_id for part in includes) and not any(part in tile_id for part in excludes):
            return category

    return DEFAULT_CATEGORY


def classify_tile_id(tile_id: str) -> TileClass:
    """Evaluate the edge rule table for a tile identifier"""
    name = tile_id.lower()
    if any(pattern in name for pattern in EDGE_TILE_PATTERNS):
        return TileClass.EDGE
    return TileClass.NORMAL


def format_tile_name(tile_id: str) -> str:
    """'map_door2_open' -> 'Door2 Open'"""
    name = tile_id.replace('map_', '', 1).replace('_', ' ')
    return ' '.join(word[:1].upper() + word[1:] for word in name.split(' '))


class TileCatalog:
    """
    Catalog of every tile in the texture atlas.

    Provides the edge/normal classification the placement rules depend on,
    texture regions for the renderer, and palette helpers.
    """

    def __init__(self, tiles: Optional[List[Tile]] = None):
        self._tiles: Dict[str, Tile] = {}
        self._classes: Dict[str, TileClass] = {}

        for tile in tiles or []:
            self.add_tile(tile)

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def from_metadata(cls, data: Dict, atlas_height: int) -> 'TileCatalog':
        """
        Build a catalog from atlas metadata.

        The metadata uses a bottom-left origin, so each region is flipped
        to a top-left origin: y = atlas_height - y - height.

        Args:
            data: Dictionary with a 'tiles' list of {name, x, y, width, height}
            atlas_height: Height of the atlas image in pixels

        Returns:
            TileCatalog instance
        """
        catalog = cls()

        for entry in data.get('tiles', []):
            tile_id = entry['name']
            flipped_y = atlas_height - entry['y'] - entry['height']
            catalog.add_tile(Tile(
                id=tile_id,
                name=format_tile_name(tile_id),
                category=categorize(tile_id),
                tile_class=classify_tile_id(tile_id),
                texture=TextureRegion(entry['x'], flipped_y, entry['width'], entry['height']),
            ))

        log(f"Loaded {len(catalog)} tiles from metadata", "[TileCatalog]")
        return catalog

    @classmethod
    def from_file(cls, path: str, atlas_height: int) -> 'TileCatalog':
        """Load a catalog from a tiles_meta.json file"""
        with open(Path(path), 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_metadata(data, atlas_height)

    def add_tile(self, tile: Tile) -> None:
        """Register a tile, replacing any tile with the same id"""
        self._tiles[tile.id] = tile
        self._classes[tile.id] = tile.tile_class

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, tile_id: str) -> Optional[Tile]:
        return self._tiles.get(tile_id)

    def tiles(self) -> List[Tile]:
        return list(self._tiles.values())

    def classify(self, tile_id: str) -> TileClass:
        """
        Get the placement class for a tile identifier.

        Unknown identifiers are classified by the rule table so that map
        files referencing tiles missing from the atlas still behave.
        """
        tile_class = self._classes.get(tile_id)
        if tile_class is None:
            return classify_tile_id(tile_id)
        return tile_class

    def is_edge_tile(self, tile_id: str) -> bool:
        return self.classify(tile_id) == TileClass.EDGE

    def is_rotatable(self, tile_id: str) -> bool:
        """Door tiles can be rotated for display"""
        name = tile_id.lower()
        return (any(pattern in name for pattern in ROTATABLE_PATTERNS) and
                not any(pattern in name for pattern in ROTATABLE_EXCLUDES))

    def texture_region(self, tile_id: str) -> Optional[TextureRegion]:
        tile = self._tiles.get(tile_id)
        return tile.texture if tile else None

    def by_category(self) -> Dict[str, List[Tile]]:
        """Group tiles by palette category, keeping atlas order"""
        groups: Dict[str, List[Tile]] = {}
        for tile in self._tiles.values():
            groups.setdefault(tile.category, []).append(tile)
        return groups

    def water_variants(self) -> List[Tile]:
        return [tile for tile in self._tiles.values() if WATER_VARIANT_PATTERN in tile.id]

    def next_variant(self, tile_id: str, direction: int) -> Optional[str]:
        """
        Cycle through water current variants.

        Args:
            tile_id: Currently selected tile
            direction: 1 for next, -1 for previous

        Returns:
            Id of the neighbouring variant (wrapping around), or None if
            `tile_id` is not a water current tile
        """
        variants = [tile.id for tile in self.water_variants()]
        if tile_id not in variants:
            return None

        index = (variants.index(tile_id) + direction) % len(variants)
        return variants[index]

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, tile_id: str) -> bool:
        return tile_id in self._tiles
