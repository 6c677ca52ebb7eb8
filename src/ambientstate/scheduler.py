"""Debounced task — run a function once after a burst of schedule() calls.

Uses threading.Timer (daemon=True). Each schedule() cancels the previous
timer, so only the last call in a burst fires. flush() runs a pending job
on the caller's thread, which gives tests a deterministic way to observe
the write without sleeping.
"""

from __future__ import annotations

import threading
from typing import Callable


class Debouncer:
    """Cancellable, re-armable delayed call."""

    def __init__(self, delay: float, fn: Callable[[], None]) -> None:
        self.delay = delay
        self._fn = fn
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        # Bumped on every schedule/cancel/flush; a timer only runs if its
        # generation is still current when it fires.
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            t = threading.Timer(self.delay, self._fire, args=[self._generation])
            t.daemon = True
            self._timer = t
            t.start()

    def cancel(self) -> None:
        with self._lock:
            self._disarm()

    def flush(self) -> bool:
        """Run the pending job now. Returns False if nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._disarm()
        self._fn()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        self._fn()

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def __repr__(self) -> str:
        return f"Debouncer({self.delay}s, {'pending' if self._timer else 'idle'})"
