"""
Editor Session - Owns the map being edited and applies editing operations

This module ties the pure decision code to the editable state:
- Tile placement and removal through the placement classifier
- Path cell editing with per-drag de-duplication
- Comment arrow drawing, removal, and offsets for the renderer
- Selected tile, display rotation, and dirty tracking

All operations run synchronously for one input event. Rejected operations
are no-ops that leave a trace in the debug log.
"""
from typing import Callable, Dict, List, Optional, Set, Tuple

from .arrows import Arrow, ArrowValidator, arrows_near
from .catalog import TileCatalog
from .constants import BLOCK_SIZE, DEFAULT_ARROW_COLOR, DEFAULT_ARROW_THICKNESS
from .grid import FineCoordinate, LogicalCoordinate, GridGeometry, fine_to_logical
from .map_data import MapData
from .offsets import Offset, compute_offsets
from .paths import PathGraph, WallSides
from .placement import PlacementMode, PlacementResult, can_place
from .tool_manager import AppMode, ToolManager, ToolType
from .logging import log_session


class EditorSession:
    """
    Editing state for one open map.

    Callbacks (all optional, called without arguments):
        on_map_changed: A tile cell changed
        on_paths_changed: The path set changed
        on_arrows_changed: The arrow collection changed
    """

    def __init__(self, catalog: TileCatalog,
                 map_data: Optional[MapData] = None,
                 paths: Optional[PathGraph] = None,
                 tools: Optional[ToolManager] = None,
                 place_on_path_only: bool = True,
                 arrow_color: str = DEFAULT_ARROW_COLOR,
                 arrow_thickness: int = DEFAULT_ARROW_THICKNESS):
        self.catalog = catalog
        self.map_data = map_data or MapData()
        self.paths = paths if paths is not None else PathGraph()
        self.tools = tools or ToolManager()

        self.place_on_path_only = place_on_path_only
        self.selected_tile: Optional[str] = None
        self.tile_rotation: int = 0  # Display rotation of the selected tile, degrees
        self.dirty = False

        # Path cells already handled in the current drag
        self._processed_cells: Set[LogicalCoordinate] = set()

        self.arrows = ArrowValidator(self.paths, arrow_color, arrow_thickness)

        # Leaving comment mode discards the arrow being drawn
        self.tools.register_deactivate_callback(ToolType.ARROW, self.cancel_arrow)

        self.on_map_changed: Optional[Callable[[], None]] = None
        self.on_paths_changed: Optional[Callable[[], None]] = None
        self.on_arrows_changed: Optional[Callable[[], None]] = None

    @classmethod
    def from_settings(cls, catalog: TileCatalog, settings, **kwargs) -> 'EditorSession':
        """Create a session using values from EditorSettings"""
        return cls(
            catalog,
            place_on_path_only=settings.place_on_path_only,
            arrow_color=settings.arrow_color,
            arrow_thickness=settings.arrow_thickness,
            **kwargs
        )

    @property
    def geometry(self) -> GridGeometry:
        return self.map_data.geometry

    @property
    def app_mode(self) -> AppMode:
        return self.tools.app_mode

    def load(self, map_data: MapData, paths: PathGraph):
        """Replace the edited map, discarding any arrow in progress"""
        self.arrows.cancel()
        self.map_data = map_data
        self.paths = paths
        self.arrows.paths = paths
        self._processed_cells.clear()
        self.dirty = False
        log_session(f"Loaded map '{map_data.name}' with {len(paths)} path cells")
        self._notify(self.on_map_changed)
        self._notify(self.on_paths_changed)
        self._notify(self.on_arrows_changed)

    def mark_clean(self):
        self.dirty = False

    def _changed(self, callback):
        self.dirty = True
        self._notify(callback)

    @staticmethod
    def _notify(callback):
        if callback:
            callback()

    # =========================================================================
    # TOOLS
    # =========================================================================

    def select_tile(self, tile_id: Optional[str]):
        """
        Select a tile from the palette.

        Selecting a tile switches the drawing tool to TILE.
        """
        self.selected_tile = tile_id
        self.tile_rotation = 0
        if tile_id and self.tools.app_mode == AppMode.EDIT:
            self.tools.activate_tool(ToolType.TILE)

    def set_drawing_tool(self, tool: ToolType) -> bool:
        return self.tools.activate_tool(tool)

    def set_app_mode(self, mode: AppMode):
        """Switch between edit and comment mode"""
        self.tools.set_app_mode(mode)
        if mode == AppMode.COMMENT:
            # Tiles cannot be placed while commenting
            self.selected_tile = None

    def set_arrow_color(self, color: str):
        self.arrows.color = color

    def begin_drag(self):
        """A new press-drag operation starts"""
        self._processed_cells.clear()

    def end_drag(self):
        self._processed_cells.clear()

    # =========================================================================
    # TILES
    # =========================================================================

    def place_tile(self, fine: FineCoordinate) -> Optional[PlacementResult]:
        """
        Place the selected tile at a clicked cell.

        Returns:
            The placement decision, or None if nothing was attempted
            (no tile selected or the cell is outside the map)
        """
        if not self.selected_tile or not self.geometry.in_bounds(fine):
            return None

        result = can_place(
            fine,
            self.catalog.classify(self.selected_tile),
            PlacementMode.TILE,
            self.paths,
            self.place_on_path_only,
        )
        if not result.legal:
            return result

        if self.map_data.set_tile(result.target, self.selected_tile):
            log_session(f"Placed {self.selected_tile} at {result.target}")
            self._changed(self.on_map_changed)
        return result

    def remove_tile(self, fine: FineCoordinate) -> bool:
        """Clear the tile at exactly the clicked cell"""
        if not self.geometry.in_bounds(fine):
            return False

        if self.map_data.clear_tile(fine):
            log_session(f"Removed tile at {fine}")
            self._changed(self.on_map_changed)
            return True
        return False

    # =========================================================================
    # PATHS
    # =========================================================================

    def add_path_point(self, fine: FineCoordinate, first_click: bool = False) -> bool:
        """
        Mark the block under a clicked CENTER cell as path.

        Each block is handled once per drag; the first click of a drag is
        always handled. Existing path cells are left alone (never toggled).

        Returns:
            True if a path cell was added
        """
        if not self.geometry.in_bounds(fine):
            return False

        result = can_place(fine, None, PlacementMode.PATH)
        if not result.legal:
            return False

        logical = fine_to_logical(result.target)
        if not first_click and logical in self._processed_cells:
            return False
        self._processed_cells.add(logical)

        if self.paths.add(logical):
            self._changed(self.on_paths_changed)
            return True
        return False

    def remove_path_point(self, fine: FineCoordinate) -> bool:
        """Remove the path cell containing the clicked cell"""
        if not self.geometry.in_bounds(fine):
            return False

        if self.paths.remove(fine_to_logical(fine)):
            self._changed(self.on_paths_changed)
            return True
        return False

    def wall_sides(self) -> Dict[LogicalCoordinate, WallSides]:
        return self.paths.all_wall_sides()

    def wall_rects(self) -> List[Tuple[int, int, int, int]]:
        return self.paths.wall_rects(self.map_data.tile_size * BLOCK_SIZE)

    # =========================================================================
    # ARROWS
    # =========================================================================

    def arrow_click(self, fine: FineCoordinate) -> bool:
        """Start an arrow or add a breakpoint to the current one"""
        if not self.geometry.in_bounds(fine):
            return False
        return self.arrows.accept_point(fine)

    def preview_segment_valid(self, fine: FineCoordinate) -> bool:
        """Whether clicking `fine` now would be accepted (renderer colours the preview)"""
        return self.geometry.in_bounds(fine) and self.arrows.is_valid_next(fine)

    def finish_arrow(self) -> Optional[Arrow]:
        """
        Finish the arrow being drawn and add it to the comment layer.

        Returns:
            The new Arrow, or None if it had fewer than two points
        """
        arrow = self.arrows.finalize()
        if arrow:
            self.map_data.arrows.append(arrow)
            self._changed(self.on_arrows_changed)
        return arrow

    def cancel_arrow(self):
        self.arrows.cancel()

    def remove_arrows_at(self, fine: FineCoordinate) -> int:
        """
        Remove every arrow with a point within one cell (Manhattan) of `fine`.

        Returns:
            Number of arrows removed
        """
        layer = self.map_data.ensure_comment_layer()
        doomed = {arrow.id for arrow in arrows_near(layer.arrows, fine)}
        if not doomed:
            return 0

        layer.arrows = [arrow for arrow in layer.arrows if arrow.id not in doomed]
        log_session(f"Removed {len(doomed)} arrow(s) near {fine}")
        self._changed(self.on_arrows_changed)
        return len(doomed)

    def clear_arrows(self):
        layer = self.map_data.ensure_comment_layer()
        if layer.arrows:
            layer.arrows = []
            self._changed(self.on_arrows_changed)

    def arrow_offsets(self) -> Dict[str, List[Offset]]:
        return compute_offsets(self.map_data.arrows)

    # =========================================================================
    # WHEEL
    # =========================================================================

    def rotate_selected(self, delta: int) -> bool:
        """
        Handle wheel input over the canvas.

        Door tiles rotate by 90 degrees per step; water current tiles cycle
        to the next/previous variant.

        Args:
            delta: Wheel delta, positive for scrolling down

        Returns:
            True if the selection or its rotation changed
        """
        if not self.selected_tile or delta == 0:
            return False

        step = 1 if delta > 0 else -1

        if self.catalog.is_rotatable(self.selected_tile):
            self.tile_rotation = (self.tile_rotation + 90 * step) % 360
            return True

        variant = self.catalog.next_variant(self.selected_tile, step)
        if variant and variant != self.selected_tile:
            self.selected_tile = variant
            return True
        return False
