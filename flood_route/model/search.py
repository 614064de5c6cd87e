"""Greedy best-first route search over a GridMap."""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .grid import Cell, GridMap

logger = logging.getLogger(__name__)

Route = Tuple[Cell, ...]


class EndpointNotWalkable(ValueError):
    """Raised when a search is started from or towards a non-road cell."""

    def __init__(self, role: str, cell: Cell):
        super().__init__(f"{role} cell {tuple(cell)} is not walkable")
        self.role = role
        self.cell = cell


@dataclass
class SearchResult:
    """Outcome of one search: the route (None if unreachable) and expansions."""
    route: Optional[Route]
    expanded: List[Cell] = field(default_factory=list)

    @property
    def reachable(self) -> bool:
        return self.route is not None


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reconstruct(parent: Dict[Cell, Optional[Cell]], goal: Cell) -> Route:
    path = []
    v = goal
    while v is not None:
        path.append(v)
        v = parent[v]
    path.reverse()
    return tuple(path)


def greedy_best_first(grid: GridMap, start: Cell, end: Cell) -> SearchResult:
    """
    Expand the frontier cell closest to `end` (Manhattan) until `end` is
    reached or the frontier runs dry.

    Ties go to the cell that entered the frontier first. Cells are marked
    visited when discovered and never re-opened, so the route is
    deterministic but not necessarily shortest.
    """
    start, end = Cell(*start), Cell(*end)
    if not grid.is_walkable(*start):
        raise EndpointNotWalkable("start", start)
    if not grid.is_walkable(*end):
        raise EndpointNotWalkable("end", end)

    # (heuristic, insertion sequence, cell): popping the minimum picks the
    # earliest-inserted cell among equal heuristics
    counter = 0
    frontier: List[Tuple[int, int, Cell]] = [(manhattan(start, end), counter, start)]
    parent: Dict[Cell, Optional[Cell]] = {start: None}
    expanded: List[Cell] = []

    while frontier:
        _, _, current = heapq.heappop(frontier)
        expanded.append(current)

        if current == end:
            route = reconstruct(parent, current)
            logger.info("Route found: %d cells, %d expanded",
                        len(route), len(expanded))
            return SearchResult(route=route, expanded=expanded)

        for neighbor in grid.get_neighbors(*current):
            if neighbor in parent:
                continue
            parent[neighbor] = current
            counter += 1
            heapq.heappush(frontier, (manhattan(neighbor, end), counter, neighbor))

    logger.info("No route from %s to %s (%d cells expanded)",
                tuple(start), tuple(end), len(expanded))
    return SearchResult(route=None, expanded=expanded)


def find_route(grid: GridMap, start: Cell, end: Cell) -> Optional[Route]:
    """Route from start to end inclusive, or None when unreachable."""
    return greedy_best_first(grid, start, end).route
