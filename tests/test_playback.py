import threading
import time

import pytest

from flood_route.model.grid import Cell
from flood_route.model.playback import (
    ManualScheduler,
    PlaybackController,
    PlaybackPhase,
    ThreadingScheduler,
)

ROUTE = [Cell(0, 0), Cell(1, 0), Cell(2, 0), Cell(3, 0), Cell(4, 0)]


class Recorder:
    def __init__(self):
        self.ticks = []
        self.clears = 0
        self.dones = 0

    def on_tick(self, cell):
        self.ticks.append(cell)

    def on_clear(self):
        self.clears += 1

    def on_done(self):
        self.dones += 1


def make_controller(interval_ms=250):
    scheduler = ManualScheduler()
    rec = Recorder()
    controller = PlaybackController(
        scheduler,
        on_tick=rec.on_tick,
        on_clear=rec.on_clear,
        on_done=rec.on_done,
        interval_ms=interval_ms,
    )
    return controller, scheduler, rec


def test_first_cell_is_emitted_immediately():
    controller, scheduler, rec = make_controller()
    controller.start(ROUTE)
    assert rec.ticks == [Cell(0, 0)]
    assert controller.phase == PlaybackPhase.PLAYING
    assert controller.vehicle == Cell(0, 0)
    assert controller.state.cursor == 1
    assert controller.state.running


def test_ticks_follow_the_interval():
    controller, scheduler, rec = make_controller()
    controller.start(ROUTE)
    scheduler.advance(249)
    assert len(rec.ticks) == 1
    scheduler.advance(1)
    assert rec.ticks == ROUTE[:2]
    assert scheduler.pending == 1


def test_cancel_after_two_ticks_emits_exactly_two_positions():
    controller, scheduler, rec = make_controller()
    controller.start(ROUTE)
    scheduler.advance(250)
    assert len(rec.ticks) == 2

    controller.cancel()
    scheduler.advance(10_000)

    assert rec.ticks == ROUTE[:2]
    assert controller.phase == PlaybackPhase.IDLE
    assert controller.vehicle is None
    assert rec.clears == 1
    assert scheduler.pending == 0


def test_full_playback_ends_on_last_cell():
    controller, scheduler, rec = make_controller()
    controller.start(ROUTE)
    scheduler.run_until_idle()

    assert rec.ticks == ROUTE
    assert controller.phase == PlaybackPhase.DONE
    assert controller.vehicle == ROUTE[-1]
    assert controller.state.cursor == len(ROUTE)
    assert not controller.state.running
    assert rec.dones == 1
    assert rec.clears == 0
    assert scheduler.now == 250 * (len(ROUTE) - 1)


def test_single_cell_route_is_done_after_one_tick():
    controller, scheduler, rec = make_controller()
    controller.start([Cell(2, 2)])
    assert rec.ticks == [Cell(2, 2)]
    assert controller.phase == PlaybackPhase.DONE
    assert scheduler.pending == 0


def test_empty_route_stays_idle():
    controller, scheduler, rec = make_controller()
    controller.start([])
    assert controller.phase == PlaybackPhase.IDLE
    assert rec.ticks == []
    assert scheduler.pending == 0


def test_cancel_is_a_no_op_when_idle_or_done():
    controller, scheduler, rec = make_controller()
    controller.cancel()
    assert controller.phase == PlaybackPhase.IDLE
    assert rec.clears == 0

    controller.start(ROUTE[:2])
    scheduler.run_until_idle()
    controller.cancel()
    controller.cancel()
    assert controller.phase == PlaybackPhase.DONE
    assert controller.vehicle == ROUTE[1]
    assert rec.clears == 0


def test_restart_cancels_the_previous_playback():
    controller, scheduler, rec = make_controller()
    other = [Cell(7, 0), Cell(7, 1), Cell(7, 2)]
    controller.start(ROUTE)
    scheduler.advance(250)
    controller.start(other)
    scheduler.run_until_idle()

    assert rec.ticks == ROUTE[:2] + other
    assert rec.clears == 1
    assert rec.dones == 1
    assert controller.route == tuple(other)


def test_cancel_from_inside_a_tick_stops_further_ticks():
    scheduler = ManualScheduler()
    ticks = []
    controller = PlaybackController(scheduler, interval_ms=100)

    def on_tick(cell):
        ticks.append(cell)
        if len(ticks) == 2:
            controller.cancel()

    controller.on_tick = on_tick
    controller.start(ROUTE)
    scheduler.run_until_idle()

    assert ticks == ROUTE[:2]
    assert controller.phase == PlaybackPhase.IDLE


def test_reset_clears_a_finished_playback():
    controller, scheduler, rec = make_controller()
    controller.start(ROUTE[:2])
    scheduler.run_until_idle()
    controller.reset()
    assert controller.phase == PlaybackPhase.IDLE
    assert controller.vehicle is None
    assert controller.route == ()
    assert rec.clears == 1


def test_zero_interval_plays_everything_on_next_advance():
    controller, scheduler, rec = make_controller(interval_ms=0)
    controller.start(ROUTE)
    scheduler.advance(0)
    assert rec.ticks == ROUTE


def test_negative_interval_is_rejected():
    with pytest.raises(ValueError):
        PlaybackController(ManualScheduler(), interval_ms=-1)


def test_manual_scheduler_skips_cancelled_handles():
    scheduler = ManualScheduler()
    fired = []
    handle = scheduler.call_later(10, lambda: fired.append("a"))
    scheduler.call_later(20, lambda: fired.append("b"))
    handle.cancel()
    scheduler.advance(30)
    assert fired == ["b"]
    assert scheduler.now == 30


class TestThreadingScheduler:
    def test_plays_whole_route(self):
        done = threading.Event()
        ticks = []
        controller = PlaybackController(
            ThreadingScheduler(),
            on_tick=ticks.append,
            on_done=done.set,
            interval_ms=5,
        )
        controller.start(ROUTE)
        assert done.wait(timeout=5)
        assert ticks == ROUTE
        assert controller.phase == PlaybackPhase.DONE

    def test_cancel_prevents_pending_tick(self):
        ticks = []
        controller = PlaybackController(
            ThreadingScheduler(),
            on_tick=ticks.append,
            interval_ms=50,
        )
        controller.start(ROUTE)
        controller.cancel()
        time.sleep(0.2)
        assert ticks == ROUTE[:1]
        assert controller.phase == PlaybackPhase.IDLE


def test_run_next_fires_one_callback_at_a_time():
    controller, scheduler, rec = make_controller(interval_ms=0)
    controller.start(ROUTE)
    assert scheduler.run_next()
    assert rec.ticks == ROUTE[:2]
    controller.cancel()
    assert not scheduler.run_next()
    assert rec.ticks == ROUTE[:2]


def test_run_next_moves_clock_to_due_time():
    controller, scheduler, rec = make_controller()
    controller.start(ROUTE)
    scheduler.run_next()
    scheduler.run_next()
    assert scheduler.now == 500
    assert rec.ticks == ROUTE[:3]
