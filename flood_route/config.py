"""Configuration dataclasses and YAML loader for the flood route scenario."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import yaml

from .model.grid import Cell
from .model.maps import DEFAULT_VARIANT
from .model.playback import DEFAULT_INTERVAL_MS


@dataclass
class PlaybackConfig:
    interval_ms: float = DEFAULT_INTERVAL_MS
    cancel_after: Optional[int] = None  # stop after this many ticks


@dataclass
class ScenarioConfig:
    variant: str = DEFAULT_VARIANT
    start: Optional[Cell] = None
    end: Optional[Cell] = None
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def parse_cell(raw: Any) -> Optional[Cell]:
    """Accept [x, y], (x, y) or "x,y"; None stays None."""
    if raw is None:
        return None
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.split(',')]
    else:
        parts = list(raw)
    if len(parts) != 2:
        raise ValueError(f"Expected a cell as x,y, got: {raw!r}")
    try:
        return Cell(int(parts[0]), int(parts[1]))
    except (TypeError, ValueError):
        raise ValueError(f"Cell coordinates must be integers, got: {raw!r}")


def _parse_playback(playback_raw: Dict) -> PlaybackConfig:
    """Parse playback settings from raw YAML data."""
    cancel_after = playback_raw.get('cancel_after')
    config = PlaybackConfig(
        interval_ms=float(playback_raw.get('interval_ms', DEFAULT_INTERVAL_MS)),
        cancel_after=int(cancel_after) if cancel_after is not None else None
    )
    if config.interval_ms < 0:
        raise ValueError(f"interval_ms must be >= 0, got {config.interval_ms}")
    if config.cancel_after is not None and config.cancel_after < 1:
        raise ValueError(f"cancel_after must be >= 1, got {config.cancel_after}")
    return config


def default_config() -> ScenarioConfig:
    """Baseline map, no endpoints, 250 ms playback."""
    return ScenarioConfig()


def load_config(config_path: Path) -> ScenarioConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError("Configuration root must be a mapping")

    # Parse scenario
    scenario_raw = raw.get('scenario') or {}

    # Parse export config (optional)
    export_raw = raw.get('export') or {}

    return ScenarioConfig(
        variant=scenario_raw.get('variant', DEFAULT_VARIANT),
        start=parse_cell(scenario_raw.get('start')),
        end=parse_cell(scenario_raw.get('end')),
        playback=_parse_playback(raw.get('playback') or {}),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False)
    )
