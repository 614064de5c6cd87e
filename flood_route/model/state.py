"""State snapshot dataclasses for the flood route scenario."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np

from .grid import Cell


@dataclass(frozen=True)
class PlaybackState:
    """Route being played, index of the next cell to emit, and whether a tick is pending."""
    route: Tuple[Cell, ...]
    cursor: int
    running: bool


@dataclass(frozen=True)
class PlaybackFrame:
    """Immutable record of one emitted vehicle position."""
    tick: int
    time_ms: float
    x: int
    y: int
    tile: str  # "road", "building", "flood"

    def to_csv_row(self) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "tick": self.tick,
            "time_ms": self.time_ms,
            "x": self.x,
            "y": self.y,
            "tile": self.tile
        }


@dataclass
class SessionSnapshot:
    """Complete picture of a session at one playback tick."""
    tick: int
    variant: str
    tiles: np.ndarray             # Copy of the active tile array, [y, x]
    start: Optional[Cell]
    end: Optional[Cell]
    route: Optional[Tuple[Cell, ...]]
    vehicle: Optional[Cell]
