"""
Mouse Event Handler - Routes canvas mouse events to the editor session
"""
from typing import Optional, Tuple
from enum import Enum
from PyQt6 import QtCore

from wizmap.core.grid import FineCoordinate
from wizmap.core.session import EditorSession
from wizmap.core.tool_manager import AppMode, ToolType
from wizmap.core.constants import INVALID_ARROW_COLOR
from wizmap.core.logging import log_handler


# Mouse buttons
LEFT_BUTTON = 1
RIGHT_BUTTON = 2


class DragState(Enum):
    """Press-drag state in edit mode"""
    IDLE = "idle"
    DRAWING = "drawing"
    ERASING = "erasing"


class MouseEventHandler(QtCore.QObject):
    """
    Handles mouse events for the map canvas.

    Edit mode:
    - Left press/drag places tiles or adds path cells
    - Right press/drag erases tiles or path cells

    Comment mode:
    - Left press starts an arrow or adds a breakpoint
    - Right press finishes the arrow, or removes arrows under the cursor
      when none is being drawn

    Positions are canvas pixels; the canvas scale factor is undone before
    converting to fine cells.
    """

    # Signals
    map_changed = QtCore.pyqtSignal()
    paths_changed = QtCore.pyqtSignal()
    arrows_changed = QtCore.pyqtSignal()
    hover_changed = QtCore.pyqtSignal(object)  # Fine cell under the cursor, or None

    def __init__(self, session: EditorSession, scale: float = 1.0, parent=None):
        """
        Initialize the mouse event handler.

        Args:
            session: Editor session to apply edits to
            scale: Canvas scale factor (canvas pixels per map pixel)
            parent: Parent object
        """
        super().__init__(parent)
        self.session = session
        self.scale = scale
        self.state = DragState.IDLE
        self.hover: Optional[FineCoordinate] = None

        session.on_map_changed = self.map_changed.emit
        session.on_paths_changed = self.paths_changed.emit
        session.on_arrows_changed = self.arrows_changed.emit

    def to_fine(self, pos: Tuple[float, float]) -> FineCoordinate:
        return self.session.geometry.canvas_to_fine(pos[0], pos[1], self.scale)

    def _apply_drag(self, fine: FineCoordinate, first_click: bool):
        path_tool = self.session.tools.is_active(ToolType.PATH)

        if self.state == DragState.DRAWING:
            if path_tool:
                self.session.add_path_point(fine, first_click)
            else:
                self.session.place_tile(fine)
        elif self.state == DragState.ERASING:
            if path_tool:
                self.session.remove_path_point(fine)
            else:
                self.session.remove_tile(fine)

    def on_mouse_press(self, pos: Tuple[float, float], button: int) -> bool:
        """
        Handle mouse press event.

        Args:
            pos: Mouse position (x, y) in canvas pixels
            button: Mouse button (1=left, 2=right)

        Returns:
            True if event was handled, False otherwise
        """
        fine = self.to_fine(pos)

        if self.session.app_mode == AppMode.COMMENT:
            if button == LEFT_BUTTON:
                return self.session.arrow_click(fine)
            if button == RIGHT_BUTTON:
                if self.session.arrows.is_drawing():
                    self.session.finish_arrow()
                else:
                    self.session.remove_arrows_at(fine)
                return True
            return False

        if button == LEFT_BUTTON:
            self.state = DragState.DRAWING
        elif button == RIGHT_BUTTON:
            self.state = DragState.ERASING
        else:
            return False

        self.session.begin_drag()
        self._apply_drag(fine, first_click=True)
        return True

    def on_mouse_move(self, pos: Tuple[float, float]) -> bool:
        """
        Handle mouse move event.

        Returns:
            True if a drag action was applied
        """
        fine = self.to_fine(pos)
        if fine != self.hover:
            self.hover = fine
            self.hover_changed.emit(fine)

        if self.state == DragState.IDLE:
            return False

        self._apply_drag(fine, first_click=False)
        return True

    def on_mouse_release(self, pos: Tuple[float, float], button: int) -> bool:
        """Handle mouse release event, ending any drag"""
        if self.state == DragState.IDLE:
            return False
        self.state = DragState.IDLE
        self.session.end_drag()
        return True

    def on_mouse_leave(self):
        """Cursor left the canvas: hide the preview and end any drag"""
        self.hover = None
        self.hover_changed.emit(None)
        if self.state != DragState.IDLE:
            self.state = DragState.IDLE
            self.session.end_drag()

    def on_wheel(self, delta: int) -> bool:
        """Rotate door tiles or cycle water variants"""
        changed = self.session.rotate_selected(delta)
        if changed:
            log_handler(f"Selection now {self.session.selected_tile} at {self.session.tile_rotation} deg")
        return changed

    def preview_valid(self) -> bool:
        """Whether the arrow segment to the hovered cell would be accepted"""
        if self.hover is None:
            return False
        return self.session.preview_segment_valid(self.hover)

    def preview_color(self) -> str:
        """Colour for the preview segment: the arrow colour, or red when invalid"""
        if self.preview_valid():
            return self.session.arrows.color
        return INVALID_ARROW_COLOR
