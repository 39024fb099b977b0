"""Shared fixtures for interval timer tests.

The mixer runs on SDL's dummy driver so sound tests need no audio device.
"""

import os

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from interval_timer.store import IntervalStore


class FakeScheduler:
    """Stands in for tk.Tk: after()/after_cancel() with manual firing."""

    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next_id = 0

    def after(self, ms, func):
        self._next_id += 1
        job = f"after#{self._next_id}"
        self.pending[job] = (ms, func)
        return job

    def after_cancel(self, job):
        self.cancelled.append(job)
        self.pending.pop(job, None)

    def fire(self, times=1):
        """Run the pending callbacks, one scheduling round per tick."""
        for _ in range(times):
            jobs = list(self.pending.items())
            self.pending.clear()
            for _job, (_ms, func) in jobs:
                func()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "intervals.json"


@pytest.fixture
def store(data_file):
    s = IntervalStore(data_file)
    s.load()
    return s


@pytest.fixture
def make_scheduler():
    return FakeScheduler
