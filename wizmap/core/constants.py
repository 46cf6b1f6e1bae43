"""
Editor constants - map geometry, wall and arrow drawing defaults
"""

# Fine (drawable) grid
DEFAULT_MAP_WIDTH = 81
DEFAULT_MAP_HEIGHT = 81
DEFAULT_TILE_SIZE = 40  # Pixels per fine cell

# Each logical cell is a 3x3 block of fine cells
BLOCK_SIZE = 3
LOGICAL_CELL_SIZE = DEFAULT_TILE_SIZE * BLOCK_SIZE  # 120px

# Path walls
WALL_WIDTH = 12

# Arrows
ARROW_OFFSET_DISTANCE = 12  # Pixels between parallel arrows
DEFAULT_ARROW_THICKNESS = 10
DEFAULT_ARROW_COLOR = '#ff0000'
INVALID_ARROW_COLOR = '#ff4444'  # Preview color for rejected segments

# Canvas
MAX_CANVAS_SIZE = 1080

# Persistence
DEFAULT_MAP_ID = '100001'
DEFAULT_MAP_NAME = 'New Map'
MAP_FORMAT_VERSION = '1.0'
AUTOSAVE_MAX_AGE = 3600  # Seconds
