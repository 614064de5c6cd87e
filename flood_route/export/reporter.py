"""Summary report generation for the flood route scenario."""

from typing import List, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.session import Session, SessionResult
    from ..model.state import PlaybackFrame


class Reporter:
    """Collects playback frames and builds the formatted text report."""

    def __init__(self, config_path: Optional[str]):
        self.config_path = config_path
        self.frames: List["PlaybackFrame"] = []
        self.cancelled = False

    def update(self, frame: "PlaybackFrame") -> None:
        """Record one emitted vehicle position."""
        self.frames.append(frame)

    def generate_summary(self, session: "Session",
                         result: "SessionResult",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        start = session.get_start()
        end = session.get_end()
        route = session.get_route()
        search = session.last_search

        if self.cancelled:
            playback = "cancelled"
        elif route and len(self.frames) == len(route):
            playback = "completed"
        else:
            playback = "not played"

        lines = [
            "",
            "=" * 80,
            "                      FLOOD ROUTE SCENARIO REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            f"Map Variant:   {session.grid.variant} "
            f"({session.grid.width}x{session.grid.height})",
            "",
            "SEARCH",
            "-" * 40,
            f"Start:                 {tuple(start) if start else '(unset)'}",
            f"End:                   {tuple(end) if end else '(unset)'}",
            f"Outcome:               {result.outcome.value}",
        ]
        if result.message:
            lines.append(f"Message:               {result.message}")
        if search is not None:
            lines.append(f"Cells Expanded:        {len(search.expanded)}")
        if route:
            lines.append(f"Route Length:          {len(route)} cells "
                         f"({len(route) - 1} moves)")

        lines += [
            "",
            "PLAYBACK",
            "-" * 40,
            f"Ticks Emitted:         {len(self.frames)}",
            f"Status:                {playback}",
        ]
        if self.frames:
            last = self.frames[-1]
            lines.append(f"Final Position:        ({last.x}, {last.y}) "
                         f"at {last.time_ms:.0f} ms")

        lines += [
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'playback_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'playback.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
