# Centralized constants and defaults for building generation

VERSION = "v1"

# Grid / packing
GRID_STEP = 5                 # footprint quantization (world units per cell)
AREA_BUDGET_FRACTION = 0.8    # rooms may claim at most this share of a floor
SHRINK_SCALE = 0.85           # one-shot scale for non-fixed rooms over budget

# Doors and windows
DOOR_WIDTH_DEFAULT = 4.0
DOOR_HEIGHT_DEFAULT = 8.0
WINDOW_WIDTH_DEFAULT = 4.0
WINDOW_HEIGHT_DEFAULT = 4.0
WINDOW_SILL_FRACTION = 0.5    # window centre as a fraction of floor height
WINDOW_EDGE_MARGIN = 1.0

# Exterior segmentation
GAP_SCALE_FACTOR = 0.5
GAP_POSITION_OFFSET = 0.25
WALL_THICKNESS_DEFAULT = 1.0

# Interior carving
SEGMENT_THRESHOLD = 0.05
HEADER_DEDUP_TOLERANCE = 2.0
DOOR_CLEARANCE_MARGIN = 2.0

# Cell blocks
CELL_WIDTH = 20
CELLS_PER_SIDE = 10

# Building defaults
FLOOR_HEIGHT_DEFAULT = 10
FIXED_ROOM_TYPES_DEFAULT = ("Staircase",)
CELL_BLOCK_TYPES_DEFAULT = ("Cell Block",)
