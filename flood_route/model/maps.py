"""Built-in map presets.

Tile codes: 0 road (walkable), 1 building, 2 flood/lake. Rows are y,
columns are x. Every preset shares the same 13x8 footprint.
"""

import numpy as np

MAP_NORMAL = np.array([
    [0, 0, 0, 0, 0, 0, 0, 0],
    [1, 1, 1, 1, 0, 1, 1, 0],
    [1, 1, 1, 1, 0, 1, 1, 0],
    [0, 0, 0, 0, 0, 0, 0, 0],
    [2, 0, 1, 1, 0, 1, 1, 0],
    [2, 0, 1, 1, 0, 1, 1, 0],
    [2, 0, 1, 1, 0, 0, 0, 0],
    [2, 0, 1, 1, 0, 1, 1, 0],
    [2, 0, 1, 1, 0, 1, 1, 0],
    [0, 0, 0, 0, 0, 0, 0, 0],
    [2, 0, 1, 1, 1, 1, 1, 1],
    [2, 0, 1, 1, 1, 1, 1, 1],
    [2, 0, 1, 1, 1, 1, 1, 1],
], dtype=np.uint8)

# Water rises along the west edge: column 0 from row 3 down, column 1 rows 4-8
MAP_FLOOD = np.array([
    [0, 0, 0, 0, 0, 0, 0, 0],
    [1, 1, 1, 1, 0, 1, 1, 0],
    [1, 1, 1, 1, 0, 1, 1, 0],
    [2, 0, 0, 0, 0, 0, 0, 0],
    [2, 2, 1, 1, 0, 1, 1, 0],
    [2, 2, 1, 1, 0, 1, 1, 0],
    [2, 2, 1, 1, 0, 0, 0, 0],
    [2, 2, 1, 1, 0, 1, 1, 0],
    [2, 2, 1, 1, 0, 1, 1, 0],
    [2, 0, 0, 0, 0, 0, 0, 0],
    [2, 0, 1, 1, 1, 1, 1, 1],
    [2, 0, 1, 1, 1, 1, 1, 1],
    [2, 0, 1, 1, 1, 1, 1, 1],
], dtype=np.uint8)

DEFAULT_VARIANT = "normal"

MAP_PRESETS = {
    "normal": MAP_NORMAL,
    "flood": MAP_FLOOD,
}
