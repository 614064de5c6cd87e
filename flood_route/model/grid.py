"""Tile grid management for the flood route scenario."""

import logging
from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional

import numpy as np

from .maps import DEFAULT_VARIANT, MAP_PRESETS

logger = logging.getLogger(__name__)

# Von Neumann neighbourhood; the order decides search tie-breaks
NEIGHBOR_OFFSETS = [(1, 0), (-1, 0), (0, 1), (0, -1)]


class Cell(NamedTuple):
    """Grid coordinate: x is the column, y is the row."""
    x: int
    y: int


class TileValue(IntEnum):
    """Tile kinds, using the integer codes of the map presets."""
    ROAD = 0
    BUILDING = 1
    FLOOD = 2


class OutOfBounds(IndexError):
    """Raised when a tile lookup falls outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"cell ({x}, {y}) outside {width}x{height} grid")
        self.x = x
        self.y = y


class GridMap:
    """
    Fixed-size tile grid with a set of interchangeable named variants.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    Switching variant swaps the whole tile array; cells are never edited
    in place.
    """

    def __init__(self, variants: Optional[Dict[str, np.ndarray]] = None,
                 variant: str = DEFAULT_VARIANT):
        if variants is None:
            variants = MAP_PRESETS
        if not variants:
            raise ValueError("At least one map variant is required")

        self._variants: Dict[str, np.ndarray] = {}
        shape = None
        for name, table in variants.items():
            tiles = np.array(table, dtype=np.uint8)
            if tiles.ndim != 2 or tiles.size == 0:
                raise ValueError(f"Variant '{name}' is not a 2D tile table")
            if shape is None:
                shape = tiles.shape
            elif tiles.shape != shape:
                raise ValueError(
                    f"Variant '{name}' has shape {tiles.shape}, expected {shape}"
                )
            if not np.isin(tiles, [t.value for t in TileValue]).all():
                raise ValueError(f"Variant '{name}' contains unknown tile codes")
            tiles.setflags(write=False)
            self._variants[name] = tiles

        self.height, self.width = shape
        self.variant = ""
        self._tiles = None
        self.select_variant(variant)

    @property
    def variant_names(self) -> List[str]:
        return list(self._variants)

    @property
    def tiles(self) -> np.ndarray:
        """Copy of the active tile array, indexed [y, x]."""
        return self._tiles.copy()

    def select_variant(self, name: str) -> None:
        """Replace the whole tile mapping with the named preset."""
        if name not in self._variants:
            raise ValueError(
                f"Unknown map variant: {name} "
                f"(available: {', '.join(self._variants)})"
            )
        self._tiles = self._variants[name]
        self.variant = name
        logger.debug("Grid variant set to %s", name)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> TileValue:
        """Tile at (x, y); raises OutOfBounds outside the grid."""
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)
        return TileValue(int(self._tiles[y, x]))

    def is_walkable(self, x: int, y: int) -> bool:
        """Check if cell is within bounds and a road."""
        if not self.in_bounds(x, y):
            return False
        return bool(self._tiles[y, x] == TileValue.ROAD)

    def walkable_mask(self) -> np.ndarray:
        """Boolean array, True where the active variant has a road."""
        return self._tiles == TileValue.ROAD

    def get_neighbors(self, x: int, y: int) -> List[Cell]:
        """Walkable 4-connected neighbours in (+x, -x, +y, -y) order."""
        neighbors = []
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.is_walkable(nx, ny):
                neighbors.append(Cell(nx, ny))
        return neighbors
