"""
Arrow Offsets - Pushes overlapping arrows apart for drawing

Arrows are processed in collection order. A point of arrow i that lies
within one cell (Chebyshev) of any point of an earlier arrow is shifted
perpendicular to its incoming segment. Even-indexed arrows go to one side,
odd-indexed arrows to the other, and every further pair is pushed one step
further out. The first point of an arrow is never shifted.
"""
from typing import Dict, List, Sequence, Tuple
import math

from .arrows import Arrow
from .grid import FineCoordinate, fine_center_pixel
from .constants import ARROW_OFFSET_DISTANCE, DEFAULT_TILE_SIZE


Offset = Tuple[float, float]


def perpendicular_offset(start: FineCoordinate, end: FineCoordinate,
                         distance: float) -> Offset:
    """
    Unit perpendicular of start -> end, scaled by `distance`.

    Returns (0, 0) for a zero-length segment.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = math.sqrt(dx * dx + dy * dy)
    if length == 0:
        return 0.0, 0.0
    return -dy / length * distance, dx / length * distance


def _touches(point: FineCoordinate, arrow: Arrow) -> bool:
    return any(abs(x - point[0]) <= 1 and abs(y - point[1]) <= 1 for x, y in arrow.points)


def compute_offsets(arrows: Sequence[Arrow],
                    distance: float = ARROW_OFFSET_DISTANCE) -> Dict[str, List[Offset]]:
    """
    Compute per-point pixel offsets for a collection of arrows.

    Args:
        arrows: Finished arrows in collection order
        distance: Pixel distance between neighbouring parallel arrows

    Returns:
        Dict mapping arrow id to one (dx, dy) offset per point
    """
    offsets: Dict[str, List[Offset]] = {}

    for arrow_index, arrow in enumerate(arrows):
        earlier = arrows[:arrow_index]
        side = 1 if arrow_index % 2 == 0 else -1
        magnitude = side * (arrow_index // 2 + 1)

        arrow_offsets: List[Offset] = []
        for i, point in enumerate(arrow.points):
            offset = (0.0, 0.0)
            if i > 0 and any(_touches(point, other) for other in earlier):
                perp_x, perp_y = perpendicular_offset(arrow.points[i - 1], point, distance)
                offset = (perp_x * magnitude, perp_y * magnitude)
            arrow_offsets.append(offset)

        offsets[arrow.id] = arrow_offsets

    return offsets


def arrow_pixel_points(arrow: Arrow, offsets: Sequence[Offset] = (),
                       tile_size: int = DEFAULT_TILE_SIZE) -> List[Tuple[float, float]]:
    """
    Pixel polyline for an arrow: each fine cell centre plus its offset.

    Missing offsets count as (0, 0).
    """
    pixels = []
    for i, point in enumerate(arrow.points):
        center_x, center_y = fine_center_pixel(point, tile_size)
        off_x, off_y = offsets[i] if i < len(offsets) else (0.0, 0.0)
        pixels.append((center_x + off_x, center_y + off_y))
    return pixels
