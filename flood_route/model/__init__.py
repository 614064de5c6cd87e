"""Model package for the flood route scenario."""

from .grid import Cell, TileValue, GridMap, OutOfBounds
from .maps import MAP_NORMAL, MAP_FLOOD, MAP_PRESETS
from .search import EndpointNotWalkable, SearchResult, find_route, greedy_best_first
from .state import PlaybackState, PlaybackFrame, SessionSnapshot
from .playback import (
    ManualScheduler,
    ThreadingScheduler,
    PlaybackController,
    PlaybackPhase,
)
from .session import Outcome, Session, SessionResult

__all__ = [
    'Cell',
    'TileValue',
    'GridMap',
    'OutOfBounds',
    'MAP_NORMAL',
    'MAP_FLOOD',
    'MAP_PRESETS',
    'EndpointNotWalkable',
    'SearchResult',
    'find_route',
    'greedy_best_first',
    'PlaybackState',
    'PlaybackFrame',
    'SessionSnapshot',
    'ManualScheduler',
    'ThreadingScheduler',
    'PlaybackController',
    'PlaybackPhase',
    'Outcome',
    'Session',
    'SessionResult',
]
