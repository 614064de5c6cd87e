"""Timed playback of a route as a moving vehicle marker."""

import heapq
import itertools
import logging
import threading
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .grid import Cell
from .state import PlaybackState

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 250


class TimerHandle:
    """Cancellable reference to one scheduled callback."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Virtual clock measured in milliseconds.

    Callbacks only run inside advance()/run_until_idle(), in due-time
    order; callbacks scheduled while advancing fire in the same call if
    they fall due within the window.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now + delay_ms, callback)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, duration_ms: float) -> None:
        """Move the clock forward, firing everything that falls due."""
        target = self.now + duration_ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            handle.callback()
        self.now = target

    def run_next(self) -> bool:
        """Jump to the next pending callback and fire only that one."""
        while self._queue:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, due)
            handle.callback()
            return True
        return False

    def run_until_idle(self, max_ms: Optional[float] = None) -> None:
        """Fire callbacks until none are pending (or max_ms elapses)."""
        limit = None if max_ms is None else self.now + max_ms
        while self._queue:
            due, _, handle = self._queue[0]
            if limit is not None and due > limit:
                break
            heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            handle.callback()
        if limit is not None:
            self.now = max(self.now, limit)


class _ThreadTimerHandle:
    def __init__(self, timer: threading.Timer):
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler:
    """Wall-clock scheduler backed by threading.Timer."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _ThreadTimerHandle:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return _ThreadTimerHandle(timer)


class PlaybackPhase(Enum):
    """Lifecycle of a playback."""
    IDLE = "idle"
    PLAYING = "playing"
    DONE = "done"


class PlaybackController:
    """
    Steps a single vehicle marker along a route, one cell per tick.

    The first cell is emitted as soon as playback starts; every following
    cell is emitted `interval_ms` after the previous one. Only one tick is
    ever pending. Each playback gets a fresh generation number and a tick
    whose generation is stale does nothing, so cancel() is effective
    before the next tick fires.
    """

    def __init__(self, scheduler=None,
                 on_tick: Optional[Callable[[Cell], None]] = None,
                 on_clear: Optional[Callable[[], None]] = None,
                 on_done: Optional[Callable[[], None]] = None,
                 interval_ms: float = DEFAULT_INTERVAL_MS):
        if interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.on_tick = on_tick
        self.on_clear = on_clear
        self.on_done = on_done
        self.interval_ms = interval_ms

        self.phase = PlaybackPhase.IDLE
        self.route: Tuple[Cell, ...] = ()
        self.cursor = 0
        self.vehicle: Optional[Cell] = None
        self.ticks_emitted = 0

        self._generation = 0
        self._pending = None
        self._lock = threading.RLock()

    @property
    def state(self) -> PlaybackState:
        with self._lock:
            return PlaybackState(
                route=self.route,
                cursor=self.cursor,
                running=self.phase == PlaybackPhase.PLAYING,
            )

    def start(self, route: Sequence[Cell]) -> None:
        """Begin playing `route`, cancelling whatever was playing."""
        with self._lock:
            self.cancel()
            self._clear_marker()
            self.phase = PlaybackPhase.IDLE
            self.route = tuple(Cell(*c) for c in route)
            self.cursor = 0
            self.ticks_emitted = 0
            if not self.route:
                logger.debug("Empty route; playback stays idle")
                return
            self._generation += 1
            self.phase = PlaybackPhase.PLAYING
            logger.debug("Playback %d started: %d cells",
                         self._generation, len(self.route))
            self._tick(self._generation)

    def cancel(self) -> None:
        """Stop playback and clear the marker; no-op unless playing."""
        with self._lock:
            if self.phase != PlaybackPhase.PLAYING:
                return
            self._generation += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self.phase = PlaybackPhase.IDLE
            logger.debug("Playback cancelled after %d ticks", self.ticks_emitted)
            self._clear_marker()

    def reset(self) -> None:
        """Cancel and forget the route, including a finished one."""
        with self._lock:
            self.cancel()
            self._clear_marker()
            self.phase = PlaybackPhase.IDLE
            self.route = ()
            self.cursor = 0

    def _clear_marker(self) -> None:
        if self.vehicle is None:
            return
        self.vehicle = None
        if self.on_clear is not None:
            self.on_clear()

    def is_finished(self) -> bool:
        return self.phase != PlaybackPhase.PLAYING

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self.phase != PlaybackPhase.PLAYING:
                return
            self._pending = None

            cell = self.route[self.cursor]
            self.vehicle = cell
            self.ticks_emitted += 1
            if self.on_tick is not None:
                self.on_tick(cell)

            # on_tick may have cancelled or restarted playback
            if generation != self._generation:
                return

            if self.cursor + 1 == len(self.route):
                self.cursor = len(self.route)
                self.phase = PlaybackPhase.DONE
                logger.debug("Playback %d done", generation)
                if self.on_done is not None:
                    self.on_done()
                return

            self.cursor += 1
            self._pending = self.scheduler.call_later(
                self.interval_ms, lambda: self._tick(generation)
            )
