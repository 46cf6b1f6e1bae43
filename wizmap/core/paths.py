"""
Path Graph - Walkable logical cells and the walls derived from them

A path is a set of logical cells. Each path cell gets a wall on every side
whose neighbouring cell is not a path cell, so two adjacent path cells are
always open towards each other.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from .grid import LogicalCoordinate
from .constants import LOGICAL_CELL_SIZE, WALL_WIDTH
from .logging import log_paths


# Neighbour offsets per side
SIDE_OFFSETS: Dict[str, Tuple[int, int]] = {
    'top': (0, -1),
    'right': (1, 0),
    'bottom': (0, 1),
    'left': (-1, 0),
}

OPPOSITE_SIDE: Dict[str, str] = {
    'top': 'bottom',
    'right': 'left',
    'bottom': 'top',
    'left': 'right',
}


@dataclass(frozen=True)
class WallSides:
    """Which sides of a path cell are walled off"""
    top: bool
    right: bool
    bottom: bool
    left: bool

    def side(self, name: str) -> bool:
        return getattr(self, name)

    @property
    def open_sides(self) -> List[str]:
        return [name for name in SIDE_OFFSETS if not self.side(name)]


class PathGraph:
    """
    Set of path cells with adjacency and wall queries.

    Wall state is cached per cell and the cache is dropped on every
    membership change.
    """

    def __init__(self, cells: Optional[Iterable[LogicalCoordinate]] = None):
        # dict keeps insertion order for stable serialization
        self._cells: Dict[LogicalCoordinate, None] = {}
        self._wall_cache: Dict[LogicalCoordinate, WallSides] = {}

        for cell in cells or []:
            self._cells[tuple(cell)] = None

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    def add(self, logical: LogicalCoordinate) -> bool:
        """
        Add a path cell.

        Returns:
            True if the cell was added, False if it was already a path cell
        """
        logical = tuple(logical)
        if logical in self._cells:
            return False
        self._cells[logical] = None
        self._wall_cache.clear()
        log_paths(f"Added path cell {logical}")
        return True

    def remove(self, logical: LogicalCoordinate) -> bool:
        """
        Remove a path cell.

        Returns:
            True if the cell was removed, False if it was not a path cell
        """
        logical = tuple(logical)
        if logical not in self._cells:
            return False
        del self._cells[logical]
        self._wall_cache.clear()
        log_paths(f"Removed path cell {logical}")
        return True

    def contains(self, logical: LogicalCoordinate) -> bool:
        return tuple(logical) in self._cells

    def clear(self) -> None:
        self._cells.clear()
        self._wall_cache.clear()

    def cells(self) -> List[LogicalCoordinate]:
        return list(self._cells)

    def __contains__(self, logical) -> bool:
        return self.contains(logical)

    def __iter__(self) -> Iterator[LogicalCoordinate]:
        return iter(list(self._cells))

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PathGraph):
            return False
        return set(self._cells) == set(other._cells)

    def __repr__(self) -> str:
        return f"PathGraph({len(self._cells)} cells)"

    # =========================================================================
    # CONNECTIVITY
    # =========================================================================

    @staticmethod
    def neighbor(logical: LogicalCoordinate, side: str) -> LogicalCoordinate:
        dx, dy = SIDE_OFFSETS[side]
        return logical[0] + dx, logical[1] + dy

    def has_connection(self, logical: LogicalCoordinate, side: str) -> bool:
        """Check if there is a path cell next to `logical` on `side`"""
        return self.neighbor(logical, side) in self._cells

    def neighbors(self, logical: LogicalCoordinate) -> List[LogicalCoordinate]:
        """Path cells 4-adjacent to `logical`"""
        return [self.neighbor(logical, side) for side in SIDE_OFFSETS
                if self.has_connection(logical, side)]

    def wall_sides(self, logical: LogicalCoordinate) -> WallSides:
        """
        Get the wall state of a path cell.

        Only meaningful for cells in the path set.
        """
        logical = tuple(logical)
        walls = self._wall_cache.get(logical)
        if walls is None:
            walls = WallSides(
                top=not self.has_connection(logical, 'top'),
                right=not self.has_connection(logical, 'right'),
                bottom=not self.has_connection(logical, 'bottom'),
                left=not self.has_connection(logical, 'left'),
            )
            self._wall_cache[logical] = walls
        return walls

    def all_wall_sides(self) -> Dict[LogicalCoordinate, WallSides]:
        return {cell: self.wall_sides(cell) for cell in self._cells}

    def wall_rects(self, cell_size: int = LOGICAL_CELL_SIZE,
                   wall_width: int = WALL_WIDTH) -> List[Tuple[int, int, int, int]]:
        """
        Pixel rectangles (x, y, width, height) for every closed side.

        Walls are drawn inside the cell along its edges.
        """
        rects = []
        for cell in self._cells:
            walls = self.wall_sides(cell)
            cell_x = cell[0] * cell_size
            cell_y = cell[1] * cell_size

            if walls.top:
                rects.append((cell_x, cell_y, cell_size, wall_width))
            if walls.right:
                rects.append((cell_x + cell_size - wall_width, cell_y, wall_width, cell_size))
            if walls.bottom:
                rects.append((cell_x, cell_y + cell_size - wall_width, cell_size, wall_width))
            if walls.left:
                rects.append((cell_x, cell_y, wall_width, cell_size))
        return rects

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_json(self) -> List[Dict[str, int]]:
        """Serialize to a list of {x, y} logical coordinates"""
        return [{'x': x, 'y': y} for x, y in self._cells]

    @classmethod
    def from_json(cls, data: Optional[List[Dict]]) -> 'PathGraph':
        return cls((int(point['x']), int(point['y'])) for point in data or [])
