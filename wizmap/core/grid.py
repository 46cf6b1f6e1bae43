"""
Grid Addressing - Fine/logical coordinate mapping and sub-position classification

The drawable map is a fine grid (81x81 by default). Every 3x3 block of fine
cells forms one logical cell, so the logical grid is 27x27. Inside a block
each fine cell is classified by its sub-position:

    X E X
    E N E      X = CORNER, E = EDGE, N = CENTER
    X E X

Classification depends on the fine coordinates only, never on map content.
"""
from typing import Optional, Tuple
from enum import Enum

from .constants import (
    BLOCK_SIZE, DEFAULT_MAP_WIDTH, DEFAULT_MAP_HEIGHT, DEFAULT_TILE_SIZE,
    MAX_CANVAS_SIZE
)


FineCoordinate = Tuple[int, int]
LogicalCoordinate = Tuple[int, int]
SubPosition = Tuple[int, int]


class CellKind(Enum):
    """Sub-position class of a fine cell within its 3x3 block"""
    CORNER = "corner"  # Never placeable
    CENTER = "center"  # Normal tiles, path membership
    EDGE = "edge"      # Edge-class tiles (doors, switch walls)


class EdgeSide(Enum):
    """Which side of its block an EDGE cell sits on"""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


_EDGE_SIDES = {
    (1, 0): EdgeSide.TOP,
    (2, 1): EdgeSide.RIGHT,
    (1, 2): EdgeSide.BOTTOM,
    (0, 1): EdgeSide.LEFT,
}


def pixel_to_fine(px: float, py: float, tile_size: int = DEFAULT_TILE_SIZE) -> FineCoordinate:
    """
    Convert a pixel position to a fine cell.

    No clamping is done, callers must bounds-check the result.
    """
    return int(px // tile_size), int(py // tile_size)


def fine_to_logical(fine: FineCoordinate) -> LogicalCoordinate:
    """Map a fine cell to the logical cell (3x3 block) containing it"""
    return fine[0] // BLOCK_SIZE, fine[1] // BLOCK_SIZE


def sub_position(fine: FineCoordinate) -> SubPosition:
    """Position of a fine cell inside its block, each axis in {0, 1, 2}"""
    return fine[0] % BLOCK_SIZE, fine[1] % BLOCK_SIZE


def classify(fine: FineCoordinate) -> CellKind:
    """
    Classify a fine cell as CORNER, CENTER or EDGE.

    Args:
        fine: Fine cell (x, y)

    Returns:
        CellKind for the cell's sub-position
    """
    sub_x, sub_y = sub_position(fine)
    if sub_x != 1 and sub_y != 1:
        return CellKind.CORNER
    if sub_x == 1 and sub_y == 1:
        return CellKind.CENTER
    return CellKind.EDGE


def is_corner(fine: FineCoordinate) -> bool:
    return classify(fine) == CellKind.CORNER


def block_origin(fine: FineCoordinate) -> FineCoordinate:
    """Top-left fine cell of the block containing `fine`"""
    logical_x, logical_y = fine_to_logical(fine)
    return logical_x * BLOCK_SIZE, logical_y * BLOCK_SIZE


def block_center(fine: FineCoordinate) -> FineCoordinate:
    """CENTER fine cell of the block containing `fine`"""
    origin_x, origin_y = block_origin(fine)
    return origin_x + 1, origin_y + 1


def block_top_edge(fine: FineCoordinate) -> FineCoordinate:
    """Top EDGE fine cell of the block containing `fine`"""
    origin_x, origin_y = block_origin(fine)
    return origin_x + 1, origin_y


def logical_center(logical: LogicalCoordinate) -> FineCoordinate:
    """CENTER fine cell of a logical cell"""
    return logical[0] * BLOCK_SIZE + 1, logical[1] * BLOCK_SIZE + 1


def edge_side(fine: FineCoordinate) -> Optional[EdgeSide]:
    """Side of the block an EDGE cell lies on, None for CENTER/CORNER cells"""
    return _EDGE_SIDES.get(sub_position(fine))


def needs_rotation(fine: FineCoordinate) -> bool:
    """Edge tiles on the top/bottom edge are drawn rotated by 90 degrees"""
    return edge_side(fine) in (EdgeSide.TOP, EdgeSide.BOTTOM)


def fine_center_pixel(fine: FineCoordinate, tile_size: int = DEFAULT_TILE_SIZE) -> Tuple[float, float]:
    """Pixel position of the centre of a fine cell"""
    return fine[0] * tile_size + tile_size / 2, fine[1] * tile_size + tile_size / 2


class GridGeometry:
    """
    Fixed bounds of a map's fine grid.

    The map grid itself belongs to MapData; this only answers range and
    scaling questions so that callers can reject out-of-range cells before
    asking for a placement decision.
    """

    def __init__(self, width: int = DEFAULT_MAP_WIDTH, height: int = DEFAULT_MAP_HEIGHT,
                 tile_size: int = DEFAULT_TILE_SIZE):
        self.width = width
        self.height = height
        self.tile_size = tile_size

    @property
    def logical_width(self) -> int:
        return self.width // BLOCK_SIZE

    @property
    def logical_height(self) -> int:
        return self.height // BLOCK_SIZE

    def in_bounds(self, fine: FineCoordinate) -> bool:
        """Check if a fine cell lies inside the map"""
        x, y = fine
        return 0 <= x < self.width and 0 <= y < self.height

    def logical_in_bounds(self, logical: LogicalCoordinate) -> bool:
        x, y = logical
        return 0 <= x < self.logical_width and 0 <= y < self.logical_height

    def scale_factor(self, max_canvas_size: int = MAX_CANVAS_SIZE) -> float:
        """
        Scale applied to the canvas so the whole map fits in `max_canvas_size`.

        Args:
            max_canvas_size: Largest allowed canvas edge in pixels

        Returns:
            1.0 if the map already fits, otherwise the shrink factor
        """
        max_dimension = max(self.width, self.height) * self.tile_size
        if max_dimension > max_canvas_size:
            return max_canvas_size / max_dimension
        return 1.0

    def canvas_to_fine(self, cx: float, cy: float, scale: float = 1.0) -> FineCoordinate:
        """Convert scaled canvas pixels to a fine cell"""
        return pixel_to_fine(cx / scale, cy / scale, self.tile_size)

    def __repr__(self) -> str:
        return f"GridGeometry({self.width}x{self.height}, tile_size={self.tile_size})"
