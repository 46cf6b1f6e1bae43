"""
Arrow Validator - Multi-segment comment arrows confined to path cells

An arrow is drawn click by click. Every point must sit on a non-corner cell
of a path block, and every segment must be a straight horizontal or
vertical run. Rejected clicks leave the arrow being drawn untouched.
"""
from typing import Callable, Container, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from enum import Enum
import time
import uuid

from .grid import CellKind, FineCoordinate, LogicalCoordinate, classify, fine_to_logical
from .constants import DEFAULT_ARROW_COLOR, DEFAULT_ARROW_THICKNESS
from .logging import log_arrows


class ArrowState(Enum):
    """Arrow drawing state"""
    IDLE = "idle"        # No arrow in progress
    DRAWING = "drawing"  # At least one point accepted


# Segment rejection reasons
SEGMENT_OK = "ok"
SEGMENT_OFF_PATH = "off_path"
SEGMENT_CORNER = "corner"
SEGMENT_ZERO_LENGTH = "zero_length"
SEGMENT_DIAGONAL = "diagonal"
SEGMENT_CROSSES_WALL = "crosses_wall"


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_arrow_id() -> str:
    return f"arrow-{_now_ms()}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class Arrow:
    """A finished comment arrow"""
    id: str
    points: Tuple[FineCoordinate, ...]
    color: str = DEFAULT_ARROW_COLOR
    thickness: int = DEFAULT_ARROW_THICKNESS
    timestamp: int = field(default_factory=_now_ms)

    def to_json(self) -> Dict:
        return {
            'id': self.id,
            'points': [{'x': x, 'y': y} for x, y in self.points],
            'color': self.color,
            'thickness': self.thickness,
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_json(cls, data: Dict) -> 'Arrow':
        return cls(
            id=data['id'],
            points=tuple((int(p['x']), int(p['y'])) for p in data.get('points', [])),
            color=data.get('color', DEFAULT_ARROW_COLOR),
            thickness=data.get('thickness', DEFAULT_ARROW_THICKNESS),
            timestamp=data.get('timestamp', 0),
        )


# =============================================================================
# VALIDATION RULES
# =============================================================================

def anchor_rejection(point: FineCoordinate, paths: Container[LogicalCoordinate]) -> Optional[str]:
    """Reason a point cannot anchor an arrow, or None if it can"""
    if classify(point) == CellKind.CORNER:
        return SEGMENT_CORNER
    if fine_to_logical(point) not in paths:
        return SEGMENT_OFF_PATH
    return None


def is_valid_anchor(point: FineCoordinate, paths: Container[LogicalCoordinate]) -> bool:
    """A point is a valid anchor if it is on a path block and not a corner"""
    return anchor_rejection(point, paths) is None


def is_straight(start: FineCoordinate, end: FineCoordinate) -> bool:
    """Exactly one axis changes, by a non-zero amount"""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    return (dx == 0) != (dy == 0)


def crosses_wall(start: FineCoordinate, end: FineCoordinate,
                 paths: Container[LogicalCoordinate]) -> bool:
    """
    Check if a segment passes through a wall.

    Only diagonal segments count as crossing. Straight segments are
    accepted without looking at the walls between their end points.
    """
    if start == end:
        return False
    return not is_straight(start, end)


def segment_rejection(last: FineCoordinate, point: FineCoordinate,
                      paths: Container[LogicalCoordinate]) -> Optional[str]:
    """
    Reason the segment last -> point cannot be appended, or None if it can.
    """
    reason = anchor_rejection(point, paths)
    if reason:
        return reason

    if point == last:
        return SEGMENT_ZERO_LENGTH

    if not is_straight(last, point):
        return SEGMENT_DIAGONAL

    if crosses_wall(last, point, paths):
        return SEGMENT_CROSSES_WALL

    return None


# =============================================================================
# ARROW DRAWING STATE MACHINE
# =============================================================================

class ArrowValidator:
    """
    Holds the single in-progress arrow and validates each new point.

    Finished arrows are handed to `on_arrow_finished` and returned from
    finalize(); this class keeps no collection of its own.
    """

    def __init__(self, paths: Container[LogicalCoordinate],
                 color: str = DEFAULT_ARROW_COLOR,
                 thickness: int = DEFAULT_ARROW_THICKNESS,
                 id_factory: Callable[[], str] = new_arrow_id):
        self.paths = paths
        self.color = color
        self.thickness = thickness
        self._id_factory = id_factory

        self.state = ArrowState.IDLE
        self._points: List[FineCoordinate] = []

        self.on_arrow_finished: Optional[Callable[[Arrow], None]] = None

    @property
    def points(self) -> List[FineCoordinate]:
        """Accepted points of the arrow being drawn"""
        return list(self._points)

    @property
    def last_point(self) -> Optional[FineCoordinate]:
        return self._points[-1] if self._points else None

    def is_drawing(self) -> bool:
        return self.state == ArrowState.DRAWING

    def check_point(self, point: FineCoordinate) -> Optional[str]:
        """
        Reason `point` would be rejected right now, or None if it would be accepted.
        """
        if self.state == ArrowState.IDLE:
            return anchor_rejection(point, self.paths)
        return segment_rejection(self._points[-1], point, self.paths)

    def is_valid_next(self, point: FineCoordinate) -> bool:
        """Preview check used to colour the segment under the cursor"""
        return self.check_point(point) is None

    def accept_point(self, point: FineCoordinate) -> bool:
        """
        Start an arrow at `point` or extend the current one.

        Args:
            point: Clicked fine cell

        Returns:
            True if the point was accepted
        """
        point = tuple(point)
        reason = self.check_point(point)
        if reason:
            log_arrows(f"Rejected point {point}: {reason}")
            return False

        if self.state == ArrowState.IDLE:
            self.state = ArrowState.DRAWING
            self._points = [point]
            log_arrows(f"Started arrow at {point}")
        else:
            self._points.append(point)
            log_arrows(f"Added breakpoint {point}, {len(self._points)} points")
        return True

    def finalize(self) -> Optional[Arrow]:
        """
        Finish the arrow being drawn.

        Returns:
            The finished Arrow, or None if fewer than two points were accepted
        """
        if self.state == ArrowState.IDLE:
            return None

        points = tuple(self._points)
        self._reset()

        if len(points) < 2:
            log_arrows("Discarded single-point arrow")
            return None

        arrow = Arrow(id=self._id_factory(), points=points,
                      color=self.color, thickness=self.thickness)
        log_arrows(f"Finished arrow {arrow.id} with {len(points)} points")

        if self.on_arrow_finished:
            self.on_arrow_finished(arrow)
        return arrow

    def cancel(self) -> None:
        """Discard the arrow being drawn"""
        if self.state == ArrowState.DRAWING:
            log_arrows("Arrow cancelled")
        self._reset()

    def _reset(self) -> None:
        self.state = ArrowState.IDLE
        self._points = []


def arrows_near(arrows: Sequence[Arrow], point: FineCoordinate, distance: int = 1) -> List[Arrow]:
    """Arrows with any point within Manhattan `distance` of `point`"""
    return [
        arrow for arrow in arrows
        if any(abs(x - point[0]) + abs(y - point[1]) <= distance for x, y in arrow.points)
    ]
