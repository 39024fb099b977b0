"""Tests for the interval countdown."""

import pytest

from interval_timer.countdown import (
    COMPLETE,
    CUE_NAME,
    IDLE,
    PAUSED,
    RUNNING,
    CountdownLogic,
    format_clock,
)

DAY = "2024-05-01"


class Recorder:
    """Collects countdown callbacks and cue requests."""

    def __init__(self):
        self.updates = []
        self.changes = []
        self.completed = 0
        self.cues = []

    def on_update(self, remaining, index):
        self.updates.append((remaining, index))

    def on_interval_change(self, index, record):
        self.changes.append((index, record.kind))

    def on_complete(self):
        self.completed += 1

    def play_cue(self, name):
        self.cues.append(name)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def countdown(store, scheduler, recorder):
    c = CountdownLogic(
        store,
        scheduler,
        play_cue=recorder.play_cue,
        on_update=recorder.on_update,
        on_interval_change=recorder.on_interval_change,
        on_complete=recorder.on_complete,
    )
    c.select(DAY)
    return c


def state_of(c):
    return (c.state, c.current_index, c.remaining)


class TestStart:
    def test_empty_sequence_is_noop(self, countdown, scheduler):
        assert countdown.start() is False
        assert state_of(countdown) == (IDLE, 0, 0)
        assert scheduler.pending == {}

    def test_start_loads_first_interval(self, countdown, store, scheduler):
        store.add(DAY, "Run", 60)
        store.add(DAY, "Walk", 30)

        assert countdown.start() is True
        assert state_of(countdown) == (RUNNING, 0, 60.0)
        assert countdown.is_running
        assert countdown.current.kind == "Run"
        assert len(scheduler.pending) == 1
        ms, _ = next(iter(scheduler.pending.values()))
        assert ms == 1000

    def test_start_while_running_is_ignored(self, countdown, store, scheduler):
        store.add(DAY, "Run", 5)
        countdown.start()
        scheduler.fire(2)

        assert countdown.start() is False
        assert countdown.remaining == 3.0

    def test_select_uses_that_dates_sequence(self, countdown, store):
        store.add("2024-05-02", "Walk", 10)
        countdown.select("2024-05-02")
        countdown.start()
        assert countdown.current.kind == "Walk"


class TestTick:
    def test_run_two_walk_one(self, countdown, store, scheduler, recorder):
        store.add(DAY, "Run", 2)
        store.add(DAY, "Walk", 1)
        countdown.start()

        scheduler.fire()
        assert (countdown.current_index, countdown.remaining) == (0, 1.0)
        assert recorder.changes == []

        scheduler.fire()
        assert recorder.changes == [(1, "Walk")]
        assert (countdown.current_index, countdown.remaining) == (1, 1.0)
        assert recorder.cues == [CUE_NAME]

        scheduler.fire()
        assert countdown.state == COMPLETE
        assert recorder.completed == 1
        assert recorder.cues == [CUE_NAME, CUE_NAME]
        assert not countdown.is_running
        assert scheduler.pending == {}

    def test_single_interval_completes(self, countdown, store, scheduler, recorder):
        store.add(DAY, "Run", 3)
        countdown.start()

        scheduler.fire(3)

        assert countdown.state == COMPLETE
        assert recorder.changes == []
        assert recorder.completed == 1

    def test_fractional_duration(self, countdown, store, scheduler, recorder):
        store.add(DAY, "Run", 1.5)
        store.add(DAY, "Walk", 1)
        countdown.start()

        scheduler.fire()
        assert countdown.remaining == 0.5
        scheduler.fire()
        assert recorder.changes == [(1, "Walk")]

    def test_updates_report_each_second(self, countdown, store, scheduler, recorder):
        store.add(DAY, "Run", 3)
        countdown.start()
        scheduler.fire(2)
        assert recorder.updates == [(3.0, 0), (2.0, 0), (1.0, 0)]

    def test_tick_when_idle_does_nothing(self, countdown):
        assert countdown.tick() is False
        assert state_of(countdown) == (IDLE, 0, 0)

    def test_restart_after_complete(self, countdown, store, scheduler):
        store.add(DAY, "Run", 1)
        countdown.start()
        scheduler.fire()
        assert countdown.state == COMPLETE

        assert countdown.start() is True
        assert state_of(countdown) == (RUNNING, 0, 1.0)


class TestSnapshot:
    def test_store_edits_do_not_affect_run(self, countdown, store, scheduler, recorder):
        first = store.add(DAY, "Run", 2)
        store.add(DAY, "Walk", 1)
        countdown.start()

        store.remove(DAY, first)
        store.add(DAY, "Run", 99)
        countdown.select("2024-05-09")

        scheduler.fire(3)
        assert recorder.changes == [(1, "Walk")]
        assert countdown.state == COMPLETE


class TestPauseResume:
    def test_pause_cancels_tick(self, countdown, store, scheduler):
        store.add(DAY, "Run", 5)
        countdown.start()
        scheduler.fire()

        countdown.pause()

        assert state_of(countdown) == (PAUSED, 0, 4.0)
        assert scheduler.pending == {}
        scheduler.fire(3)
        assert countdown.remaining == 4.0

    def test_pause_resume_matches_uninterrupted_run(self, store, make_scheduler):
        store.add(DAY, "Run", 2)
        store.add(DAY, "Walk", 2)

        def run(pause_after):
            sched = make_scheduler()
            rec = Recorder()
            c = CountdownLogic(store, sched, play_cue=rec.play_cue,
                               on_interval_change=rec.on_interval_change,
                               on_complete=rec.on_complete)
            c.select(DAY)
            c.start()
            trace = []
            for n in range(5):
                if n == pause_after:
                    c.toggle()
                    assert c.state == PAUSED
                    sched.fire(4)
                    c.toggle()
                    assert c.state == RUNNING
                sched.fire()
                trace.append(state_of(c))
            return trace, rec.changes, rec.completed

        assert run(pause_after=None) == run(pause_after=1)
        assert run(pause_after=None) == run(pause_after=3)

    def test_toggle_cycle(self, countdown, store):
        store.add(DAY, "Run", 5)
        assert countdown.toggle() == RUNNING
        assert countdown.toggle() == PAUSED
        assert countdown.toggle() == RUNNING

    def test_stale_callback_is_ignored(self, countdown, store, scheduler):
        store.add(DAY, "Run", 5)
        countdown.start()
        (_, stale), = scheduler.pending.values()

        countdown.pause()
        countdown.resume()
        stale()

        assert countdown.remaining == 5.0
        scheduler.fire()
        assert countdown.remaining == 4.0


class TestReset:
    @pytest.mark.parametrize("ticks", [0, 1, 2, 3])
    def test_reset_while_running(self, countdown, store, scheduler, ticks):
        store.add(DAY, "Run", 2)
        store.add(DAY, "Walk", 2)
        countdown.start()
        scheduler.fire(ticks)

        countdown.reset()

        assert state_of(countdown) == (IDLE, 0, 0)
        assert store.get(DAY) == []
        assert scheduler.pending == {}
        scheduler.fire(5)
        assert state_of(countdown) == (IDLE, 0, 0)

    def test_reset_while_paused(self, countdown, store, scheduler):
        store.add(DAY, "Run", 5)
        countdown.start()
        countdown.pause()

        countdown.reset()

        assert state_of(countdown) == (IDLE, 0, 0)
        assert store.get(DAY) == []

    def test_reset_can_keep_saved_intervals(self, countdown, store, scheduler):
        store.add(DAY, "Run", 5)
        countdown.start()
        scheduler.fire()

        countdown.reset(clear_saved=False)

        assert state_of(countdown) == (IDLE, 0, 0)
        assert len(store.get(DAY)) == 1

    def test_reset_default_follows_setting(self, store, scheduler):
        store.add(DAY, "Run", 5)
        c = CountdownLogic(store, scheduler, reset_clears_intervals=False)
        c.select(DAY)
        c.start()
        c.reset()
        assert len(store.get(DAY)) == 1

    def test_reset_from_callback_stops_run(self, store, scheduler):
        store.add(DAY, "Run", 1)
        store.add(DAY, "Walk", 5)
        c = CountdownLogic(store, scheduler)
        c.on_interval_change = lambda index, record: c.reset(clear_saved=False)
        c.select(DAY)
        c.start()

        scheduler.fire()

        assert c.state == IDLE
        assert scheduler.pending == {}


class TestCue:
    def test_playback_failure_does_not_stop_run(self, store, scheduler, capsys):
        def broken(name):
            raise RuntimeError("no audio device")

        store.add(DAY, "Run", 1)
        store.add(DAY, "Walk", 1)
        c = CountdownLogic(store, scheduler, play_cue=broken)
        c.select(DAY)
        c.start()

        scheduler.fire()
        assert c.current_index == 1
        scheduler.fire()
        assert c.state == COMPLETE
        assert capsys.readouterr().out.count("Play error: no audio device") == 2

    def test_no_cue_player(self, store, scheduler):
        store.add(DAY, "Run", 1)
        c = CountdownLogic(store, scheduler)
        c.select(DAY)
        c.start()
        scheduler.fire()
        assert c.state == COMPLETE


class TestFormatClock:
    @pytest.mark.parametrize("seconds,text", [
        (0, "00:00"),
        (59.9, "00:59"),
        (61, "01:01"),
        (3600, "1:00:00"),
        (-0.5, "00:00"),
    ])
    def test_format(self, seconds, text):
        assert format_clock(seconds) == text
