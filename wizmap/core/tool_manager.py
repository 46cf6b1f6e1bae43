"""
Tool Manager - Tracks the active editing tool and the app mode.

Edit mode uses the tile and path tools; comment mode uses the arrow tool.
"""
from enum import Enum, auto
from typing import Optional, Callable
from PyQt6 import QtCore

from .logging import log_tools


class ToolType(Enum):
    """Available tool types"""
    NONE = auto()
    TILE = auto()
    PATH = auto()
    ARROW = auto()


class AppMode(Enum):
    """Overall editor mode"""
    EDIT = "edit"
    COMMENT = "comment"


DRAWING_TOOLS = (ToolType.TILE, ToolType.PATH)


class ToolManager(QtCore.QObject):
    """
    Manager for tracking the active tool.

    Signals:
        tool_changed: Emitted when the active tool changes (new_tool, old_tool)
        tool_deactivated: Emitted when the active tool is deactivated
        mode_changed: Emitted when the app mode changes (new_mode)
    """

    # Signals
    tool_changed = QtCore.pyqtSignal(object, object)  # new_tool, old_tool
    tool_deactivated = QtCore.pyqtSignal()
    mode_changed = QtCore.pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)

        self._active_tool: ToolType = ToolType.TILE
        self._app_mode: AppMode = AppMode.EDIT
        # Drawing tool to restore when returning to edit mode
        self._last_drawing_tool: ToolType = ToolType.TILE

        # Callbacks for tool activation/deactivation
        self._on_activate_callbacks: dict = {}
        self._on_deactivate_callbacks: dict = {}

    @property
    def active_tool(self) -> ToolType:
        """Get the currently active tool"""
        return self._active_tool

    @property
    def app_mode(self) -> AppMode:
        return self._app_mode

    def is_active(self, tool_type: ToolType) -> bool:
        """Check if a specific tool is active"""
        return self._active_tool == tool_type

    def is_comment_mode(self) -> bool:
        return self._app_mode == AppMode.COMMENT

    def activate_tool(self, tool_type: ToolType) -> bool:
        """
        Activate a tool, deactivating the previous one.

        Drawing tools can only be activated in edit mode and the arrow
        tool only in comment mode.

        Args:
            tool_type: The tool to activate

        Returns:
            True if the tool is active afterwards
        """
        if tool_type == self._active_tool:
            return True  # Already active

        if tool_type in DRAWING_TOOLS and self._app_mode != AppMode.EDIT:
            log_tools(f"Cannot activate {tool_type.name} in comment mode")
            return False
        if tool_type == ToolType.ARROW and self._app_mode != AppMode.COMMENT:
            log_tools("Cannot activate ARROW in edit mode")
            return False

        old_tool = self._active_tool

        # Deactivate current tool
        if old_tool != ToolType.NONE:
            self._call_deactivate_callback(old_tool)

        # Activate new tool
        self._active_tool = tool_type
        if tool_type in DRAWING_TOOLS:
            self._last_drawing_tool = tool_type

        if tool_type != ToolType.NONE:
            self._call_activate_callback(tool_type)

        self.tool_changed.emit(tool_type, old_tool)

        log_tools(f"Tool changed: {old_tool.name} -> {tool_type.name}")
        return True

    def deactivate_tool(self):
        """Deactivate the current tool"""
        if self._active_tool != ToolType.NONE:
            old_tool = self._active_tool
            self._call_deactivate_callback(old_tool)
            self._active_tool = ToolType.NONE
            self.tool_changed.emit(ToolType.NONE, old_tool)
            self.tool_deactivated.emit()
            log_tools(f"Tool deactivated: {old_tool.name}")

    def set_app_mode(self, mode: AppMode):
        """
        Switch between edit and comment mode.

        Comment mode always uses the arrow tool; edit mode restores the
        last drawing tool.
        """
        if mode == self._app_mode:
            return

        self.deactivate_tool()
        self._app_mode = mode

        if mode == AppMode.COMMENT:
            self.activate_tool(ToolType.ARROW)
        else:
            self.activate_tool(self._last_drawing_tool)

        self.mode_changed.emit(mode)
        log_tools(f"App mode: {mode.value}")

    def register_activate_callback(self, tool_type: ToolType, callback: Callable):
        """Register a callback for when a tool is activated"""
        self._on_activate_callbacks[tool_type] = callback

    def register_deactivate_callback(self, tool_type: ToolType, callback: Callable):
        """Register a callback for when a tool is deactivated"""
        self._on_deactivate_callbacks[tool_type] = callback

    def _call_activate_callback(self, tool_type: ToolType):
        """Call the activation callback for a tool"""
        if tool_type in self._on_activate_callbacks:
            try:
                self._on_activate_callbacks[tool_type]()
            except Exception as e:
                log_tools(f"Error in activate callback for {tool_type.name}: {e}")

    def _call_deactivate_callback(self, tool_type: ToolType):
        """Call the deactivation callback for a tool"""
        if tool_type in self._on_deactivate_callbacks:
            try:
                self._on_deactivate_callbacks[tool_type]()
            except Exception as e:
                log_tools(f"Error in deactivate callback for {tool_type.name}: {e}")

    # =========================================================================
    # DISPLAY NAME
    # =========================================================================

    def get_tool_display_name(self) -> str:
        """Get a human-readable name for the current tool"""
        names = {
            ToolType.NONE: "No Tool",
            ToolType.TILE: "Tile",
            ToolType.PATH: "Path",
            ToolType.ARROW: "Comment Arrow",
        }
        return names.get(self._active_tool, "Unknown")
