"""
Placement Classifier - Decides where a click may place a tile or path cell

The classifier never mutates anything. It resolves a clicked fine cell into
a canonical target cell and says whether the placement is legal:

- Corners are never legal.
- Paths are recorded at block CENTER cells only.
- Normal tiles accept any non-corner click in a block and land on its CENTER.
- Edge tiles accept EDGE clicks as-is; a CENTER click means the block's
  top edge.
"""
from typing import Container, Optional
from dataclasses import dataclass
from enum import Enum

from .grid import (
    CellKind, FineCoordinate, LogicalCoordinate,
    classify, block_center, block_top_edge, fine_to_logical
)
from .catalog import TileClass
from .logging import log_placement


class PlacementMode(Enum):
    """What a placement click is trying to do"""
    TILE = "tile"
    PATH = "path"


# Rejection reasons
REASON_OK = "ok"
REASON_CORNER = "corner"
REASON_OFF_PATH = "off_path"
REASON_NOT_CENTER = "not_center"
REASON_CLASS_MISMATCH = "class_mismatch"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement decision"""
    target: Optional[FineCoordinate]
    legal: bool
    reason: str = REASON_OK

    @property
    def logical_target(self) -> Optional[LogicalCoordinate]:
        if self.target is None:
            return None
        return fine_to_logical(self.target)

    def __bool__(self) -> bool:
        return self.legal


def _rejected(reason: str, target: Optional[FineCoordinate] = None) -> PlacementResult:
    return PlacementResult(target=target, legal=False, reason=reason)


def required_kind(tile_class: Optional[TileClass], mode: PlacementMode) -> CellKind:
    """Cell kind a resolved target must have for the given tool"""
    if mode == PlacementMode.TILE and tile_class == TileClass.EDGE:
        return CellKind.EDGE
    return CellKind.CENTER


def resolve_target(fine: FineCoordinate, tile_class: Optional[TileClass],
                   mode: PlacementMode) -> Optional[FineCoordinate]:
    """
    Map a click to the cell it should affect, before the legality gate.

    Returns:
        Target fine cell, or None if the click cannot resolve to one
    """
    kind = classify(fine)

    if kind == CellKind.CORNER:
        return None

    if mode == PlacementMode.PATH:
        return fine if kind == CellKind.CENTER else None

    if tile_class == TileClass.EDGE:
        if kind == CellKind.CENTER:
            # Centre clicks are a request for the top edge
            return block_top_edge(fine)
        return fine

    # Normal tiles always land on the block centre
    return block_center(fine)


def can_place(fine: FineCoordinate,
              tile_class: Optional[TileClass],
              mode: PlacementMode,
              paths: Optional[Container[LogicalCoordinate]] = None,
              path_only: bool = False) -> PlacementResult:
    """
    Decide whether a placement at `fine` is legal.

    Args:
        fine: Clicked fine cell (already bounds-checked by the caller)
        tile_class: Class of the selected tile, ignored in PATH mode
        mode: TILE or PATH
        paths: Current path cells, needed when `path_only` is set
        path_only: Only allow TILE placement inside path cells

    Returns:
        PlacementResult with the canonical target on success
    """
    if mode == PlacementMode.TILE and path_only:
        if paths is None or fine_to_logical(fine) not in paths:
            log_placement(f"Rejected {fine}: tile placement restricted to path areas")
            return _rejected(REASON_OFF_PATH)

    kind = classify(fine)
    if kind == CellKind.CORNER:
        log_placement(f"Rejected {fine}: corner position")
        return _rejected(REASON_CORNER)

    target = resolve_target(fine, tile_class, mode)
    if target is None:
        log_placement(f"Rejected {fine}: paths can only be placed on center positions")
        return _rejected(REASON_NOT_CENTER)

    # Re-check the resolved target against the tool's required cell kind
    if classify(target) != required_kind(tile_class, mode):
        log_placement(f"Rejected {fine}: target {target} does not fit a {mode.value} placement")
        return _rejected(REASON_CLASS_MISMATCH, target)

    return PlacementResult(target=target, legal=True)
