"""Visualization and export for the flood route scenario."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.patches import FancyBboxPatch, Rectangle
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.grid import TileValue

if TYPE_CHECKING:
    from ..model.state import SessionSnapshot


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation of the vehicle playback
    """

    # Color scheme
    COLORS = {
        'background': '#E9F3FB',
        'road': '#737373',      # Road gray
        'building': '#FFFCEF',  # Off-white roof
        'flood': '#41BFED',     # Lake blue
        'route': '#A5E4FF',     # Light blue highlight
        'start': '#00B050',     # Green
        'end': '#FFB300',       # Amber
        'vehicle': '#0047FF',   # Blue
    }

    TILE_COLOR_KEYS = {
        TileValue.ROAD: 'road',
        TileValue.BUILDING: 'building',
        TileValue.FLOOD: 'flood',
    }

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []

    def _tile_image(self, tiles: np.ndarray) -> np.ndarray:
        base = np.ones((self.height, self.width, 3))
        base[:, :] = to_rgb(self.COLORS['background'])
        for tile, key in self.TILE_COLOR_KEYS.items():
            base[tiles == tile] = to_rgb(self.COLORS[key])
        return base

    def _marker(self, ax, cell, color: str, size: float = 0.76) -> None:
        x, y = cell
        pad = size / 2
        ax.add_patch(FancyBboxPatch(
            (x - pad, y - pad), size, size,
            boxstyle="round,pad=0,rounding_size=0.12",
            facecolor=color, edgecolor='none'
        ))

    def _create_figure(self, snapshot: "SessionSnapshot") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(3, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        # Row 0 at the top, like the map tables
        ax.imshow(self._tile_image(snapshot.tiles), origin='upper', aspect='equal',
                  extent=[-0.5, self.width - 0.5, self.height - 0.5, -0.5])

        if snapshot.route:
            for x, y in snapshot.route:
                ax.add_patch(Rectangle((x - 0.5, y - 0.5), 1, 1,
                                       facecolor=self.COLORS['route'],
                                       edgecolor='none'))

        if snapshot.start is not None:
            self._marker(ax, snapshot.start, self.COLORS['start'])
        if snapshot.end is not None:
            self._marker(ax, snapshot.end, self.COLORS['end'])

        if snapshot.vehicle is not None:
            vx, vy = snapshot.vehicle
            ax.add_patch(FancyBboxPatch(
                (vx - 0.35, vy - 0.25), 0.7, 0.5,
                boxstyle="round,pad=0,rounding_size=0.08",
                facecolor=self.COLORS['vehicle'], edgecolor='none'
            ))

        route_len = len(snapshot.route) if snapshot.route else 0
        ax.set_title(f'{snapshot.variant} | Tick {snapshot.tick} | '
                     f'Route: {route_len} cells')
        ax.set_xlabel('X')
        ax.set_ylabel('Y')

        ax.set_xlim(-0.5, self.width - 0.5)
        ax.set_ylim(self.height - 0.5, -0.5)

        legend_elements = [
            plt.Line2D([0], [0], marker='s', color='w', label='Start',
                       markerfacecolor=self.COLORS['start'], markersize=8),
            plt.Line2D([0], [0], marker='s', color='w', label='End',
                       markerfacecolor=self.COLORS['end'], markersize=8),
            plt.Line2D([0], [0], marker='s', color='w', label='Vehicle',
                       markerfacecolor=self.COLORS['vehicle'], markersize=8),
            plt.Line2D([0], [0], marker='s', color='w', label='Flood',
                       markerfacecolor=self.COLORS['flood'], markersize=8),
        ]
        ax.legend(handles=legend_elements, loc='upper left',
                  bbox_to_anchor=(1.02, 1), fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, snapshot: "SessionSnapshot") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(snapshot)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, snapshot: "SessionSnapshot", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(snapshot)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, interval_ms: float = 250) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=max(1, int(interval_ms)),
            loop=0
        )
