"""Session state: active map, endpoints, last route and its playback."""

import logging
from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Callable, Dict, Optional

import numpy as np

from .grid import Cell, GridMap, TileValue
from .maps import DEFAULT_VARIANT
from .playback import DEFAULT_INTERVAL_MS, PlaybackController
from .search import EndpointNotWalkable, Route, SearchResult, greedy_best_first
from .state import SessionSnapshot

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """How a session request ended."""
    OK = "ok"
    REJECTED = "rejected"        # precondition violated, state unchanged
    UNREACHABLE = "unreachable"  # search ran, no road connects the endpoints


@dataclass(frozen=True)
class SessionResult:
    outcome: Outcome
    message: str = ""
    route: Optional[Route] = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.OK


class Session:
    """
    Owns the grid, the start/end markers, the current route and the
    playback controller. Every mutation goes through these methods;
    failures come back as SessionResult values instead of exceptions.
    """

    def __init__(self, scheduler=None,
                 on_tick: Optional[Callable[[Cell], None]] = None,
                 on_clear: Optional[Callable[[], None]] = None,
                 on_done: Optional[Callable[[], None]] = None,
                 interval_ms: float = DEFAULT_INTERVAL_MS,
                 variants: Optional[Dict[str, np.ndarray]] = None,
                 variant: str = DEFAULT_VARIANT):
        self.grid = GridMap(variants, variant)
        self.base_variant = (DEFAULT_VARIANT if DEFAULT_VARIANT in self.grid.variant_names
                             else variant)
        self.playback = PlaybackController(
            scheduler,
            on_tick=on_tick,
            on_clear=on_clear,
            on_done=on_done,
            interval_ms=interval_ms,
        )
        self.start: Optional[Cell] = None
        self.end: Optional[Cell] = None
        self.route: Optional[Route] = None
        self.last_search: Optional[SearchResult] = None

    # Queries for the renderer

    def get_route(self) -> Optional[Route]:
        return self.route

    def get_start(self) -> Optional[Cell]:
        return self.start

    def get_end(self) -> Optional[Cell]:
        return self.end

    def current_tile(self, cell: Cell) -> Optional[TileValue]:
        """Tile under `cell` in the active variant, None outside the grid."""
        x, y = cell
        if not (isinstance(x, Integral) and isinstance(y, Integral)):
            return None
        if not self.grid.in_bounds(x, y):
            return None
        return self.grid.tile_at(x, y)

    @property
    def vehicle(self) -> Optional[Cell]:
        return self.playback.vehicle

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            tick=self.playback.ticks_emitted,
            variant=self.grid.variant,
            tiles=self.grid.tiles,
            start=self.start,
            end=self.end,
            route=self.route,
            vehicle=self.playback.vehicle,
        )

    # Requests from the UI layer

    def set_start(self, cell: Cell) -> SessionResult:
        return self._set_endpoint("start", cell)

    def set_end(self, cell: Cell) -> SessionResult:
        return self._set_endpoint("end", cell)

    def _set_endpoint(self, role: str, cell: Cell) -> SessionResult:
        try:
            x, y = cell
        except (TypeError, ValueError):
            return self._reject(f"The {role} cell must be an (x, y) pair, got {cell!r}.")
        if not (isinstance(x, Integral) and isinstance(y, Integral)):
            return self._reject(f"The {role} cell must have integer coordinates, "
                                f"got {cell!r}.")
        cell = Cell(int(x), int(y))
        if not self.grid.is_walkable(*cell):
            return self._reject(f"The {role} cell must be a road cell; "
                                f"{tuple(cell)} is not.")
        setattr(self, role, cell)
        logger.debug("%s set to %s", role.capitalize(), tuple(cell))
        return SessionResult(Outcome.OK)

    def request_search(self) -> SessionResult:
        """Search from start to end and start playback of the route."""
        if self.start is None or self.end is None:
            return self._reject("Start or end has not been set.")
        if not (self.grid.is_walkable(*self.start) and self.grid.is_walkable(*self.end)):
            return self._reject("Start or end is no longer on a road cell; "
                                "place it again.")

        try:
            result = greedy_best_first(self.grid, self.start, self.end)
        except EndpointNotWalkable as e:
            return self._reject(str(e))

        self.last_search = result
        if result.route is None:
            self.route = None
            self.playback.reset()
            return SessionResult(
                Outcome.UNREACHABLE,
                "No safe route found (blocked by buildings or flood).",
            )

        self.route = result.route
        self.playback.start(self.route)
        return SessionResult(Outcome.OK, route=self.route)

    def select_grid_variant(self, name: str) -> SessionResult:
        """Swap the map; drops the route and playback, keeps the endpoints."""
        try:
            self.grid.select_variant(name)
        except ValueError as e:
            return self._reject(str(e))
        self.route = None
        self.playback.reset()
        return SessionResult(Outcome.OK)

    def cancel_playback(self) -> SessionResult:
        self.playback.cancel()
        return SessionResult(Outcome.OK)

    def reset_session(self) -> SessionResult:
        """Back to the base map with no endpoints, route or playback."""
        self.grid.select_variant(self.base_variant)
        self.start = None
        self.end = None
        self.route = None
        self.last_search = None
        self.playback.reset()
        return SessionResult(Outcome.OK)

    def _reject(self, message: str) -> SessionResult:
        logger.warning("Request rejected: %s", message)
        return SessionResult(Outcome.REJECTED, message)

    def __repr__(self) -> str:
        return (f"Session(variant={self.grid.variant}, start={self.start}, "
                f"end={self.end}, route_len={len(self.route) if self.route else 0})")
