"""Tests for Debouncer — cancellable delayed call."""

import threading

from ambientstate import Debouncer


class TestDebouncer:
    def test_runs_once_after_burst(self):
        calls = []
        done = threading.Event()

        def fn():
            calls.append(1)
            done.set()

        d = Debouncer(0.05, fn)
        d.schedule()
        d.schedule()
        d.schedule()

        assert done.wait(timeout=1)
        # give a stale timer a chance to misfire
        threading.Event().wait(0.1)
        assert calls == [1]
        assert not d.pending

    def test_flush_runs_pending_now(self):
        calls = []
        d = Debouncer(60, lambda: calls.append(1))
        d.schedule()
        assert d.pending
        assert d.flush() is True
        assert calls == [1]
        assert not d.pending

    def test_flush_without_pending(self):
        calls = []
        d = Debouncer(60, lambda: calls.append(1))
        assert d.flush() is False
        assert calls == []

    def test_cancel(self):
        calls = []
        d = Debouncer(0.02, lambda: calls.append(1))
        d.schedule()
        d.cancel()
        threading.Event().wait(0.1)
        assert calls == []
        assert d.flush() is False

    def test_reschedule_after_fire(self):
        calls = []
        fired = threading.Event()

        def fn():
            calls.append(1)
            fired.set()

        d = Debouncer(0.02, fn)
        d.schedule()
        assert fired.wait(timeout=1)
        fired.clear()
        d.schedule()
        assert fired.wait(timeout=1)
        assert calls == [1, 1]
