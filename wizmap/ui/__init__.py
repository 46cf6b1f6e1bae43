"""
UI glue for Wizmap
"""

from .events import MouseEventHandler, DragState

__all__ = [
    'MouseEventHandler',
    'DragState',
]
