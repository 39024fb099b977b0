"""Countdown through one date's intervals.

The controller never sleeps or spawns threads. It asks a scheduler for a
one-shot callback every ``tick_ms`` and re-arms it from the callback, the way
a tkinter ``root.after`` loop does. Any object with ``after(ms, func)`` and
``after_cancel(job)`` can drive it.
"""

from .store import date_key

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"
COMPLETE = "complete"

CUE_NAME = "beep"
TICK_MS = 1000


class CountdownLogic:
    """Runs a snapshot of intervals, one decrement per tick"""
    def __init__(self, store, scheduler, play_cue=None, tick_ms=TICK_MS,
                 reset_clears_intervals=True,
                 on_update=None, on_interval_change=None, on_complete=None):
        self.store = store
        self.scheduler = scheduler
        self.play_cue = play_cue
        self.tick_ms = tick_ms
        self.reset_clears_intervals = reset_clears_intervals
        self.on_update = on_update
        self.on_interval_change = on_interval_change
        self.on_complete = on_complete

        self.date_key = date_key()
        self.state = IDLE
        self.snapshot = ()
        self.current_index = 0
        self.remaining = 0
        self._job = None
        self._generation = 0

    @property
    def is_running(self):
        return self.state == RUNNING

    @property
    def current(self):
        if self.state in (RUNNING, PAUSED) and self.snapshot:
            return self.snapshot[self.current_index]
        return None

    def select(self, key):
        """Make ``key`` the active date; an in-progress run keeps its snapshot"""
        self.date_key = date_key(key)
        return self.store.get(self.date_key)

    def start(self):
        if self.state in (RUNNING, PAUSED):
            return False
        intervals = self.store.get(self.date_key)
        if not intervals:
            return False

        self.snapshot = tuple(intervals)
        self.current_index = 0
        self.remaining = self.snapshot[0].duration
        self.state = RUNNING
        self._schedule()
        self._notify_update()
        return True

    def pause(self):
        if self.state != RUNNING:
            return
        self._cancel()
        self.state = PAUSED

    def resume(self):
        if self.state != PAUSED:
            return
        self.state = RUNNING
        self._schedule()

    def toggle(self):
        """Start/Pause button"""
        if self.state == RUNNING:
            self.pause()
        elif self.state == PAUSED:
            self.resume()
        else:
            self.start()
        return self.state

    def reset(self, clear_saved=None):
        self._cancel()
        self.state = IDLE
        self.snapshot = ()
        self.current_index = 0
        self.remaining = 0

        if clear_saved is None:
            clear_saved = self.reset_clears_intervals
        if clear_saved:
            self.store.clear(self.date_key)
        self._notify_update()

    def tick(self):
        """One second of countdown; returns True while the run continues"""
        if self.state != RUNNING:
            return False

        if self.remaining > 0:
            self.remaining -= 1

        if self.remaining <= 0:
            if self.current_index < len(self.snapshot) - 1:
                self.current_index += 1
                self.remaining = self.snapshot[self.current_index].duration
                self._notify_update()
                self._cue()
                if self.on_interval_change:
                    self.on_interval_change(self.current_index, self.snapshot[self.current_index])
            else:
                self._cancel()
                self.state = COMPLETE
                self.snapshot = ()
                self.current_index = 0
                self.remaining = 0
                self._notify_update()
                self._cue()
                if self.on_complete:
                    self.on_complete()
                return False
        else:
            self._notify_update()

        return True

    def _on_timer(self, generation):
        # A callback from a cancelled job must not touch state
        if generation != self._generation:
            return
        self._job = None
        if self.state != RUNNING:
            return
        self.tick()
        if self.state == RUNNING and self._job is None:
            self._schedule()

    def _schedule(self):
        self._cancel()
        generation = self._generation
        self._job = self.scheduler.after(self.tick_ms, lambda: self._on_timer(generation))

    def _cancel(self):
        self._generation += 1
        if self._job is not None:
            job, self._job = self._job, None
            self.scheduler.after_cancel(job)

    def _cue(self):
        if not self.play_cue:
            return
        try:
            self.play_cue(CUE_NAME)
        except Exception as e:
            print(f"Play error: {e}")

    def _notify_update(self):
        if self.on_update:
            self.on_update(self.remaining, self.current_index)


def format_clock(seconds):
    """Whole seconds as MM:SS (H:MM:SS past an hour)"""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    hours, mins = divmod(mins, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins:02d}:{secs:02d}"
