"""
Wizmap - Tile map editor core: grid addressing, placement rules, paths and comment arrows.
"""

from .core.catalog import TileCatalog
from .core.session import EditorSession

__version__ = '1.0.0'
__all__ = [
    'TileCatalog',
    'EditorSession',
]
