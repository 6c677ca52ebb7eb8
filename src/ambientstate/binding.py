"""StateBinding — tie one consumer to one path of the store.

bind() subscribes and immediately applies the current value, so a widget
renders once on creation and again on every change. update() writes back
under the same path. destroy() drops every subscription.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ambientstate.bus import Subscription
from ambientstate.store import StateStore
from ambientstate.tree import build_partial

logger = logging.getLogger(__name__)


class StateBinding:
    """Path subscription with initial apply and write-back."""

    def __init__(
        self,
        store: StateStore,
        path: str,
        on_state: Callable[[Any], None],
        *,
        fallback: Any = None,
    ) -> None:
        if not path:
            raise ValueError("StateBinding requires a non-empty path")
        self.store = store
        self.path = path
        self._on_state = on_state
        self._fallback = fallback
        self._subscriptions: list[Subscription] = []

    @property
    def bound(self) -> bool:
        return bool(self._subscriptions)

    def bind(self) -> None:
        """Subscribe to the path and apply its current value (or the fallback)."""
        self._subscriptions.append(self.store.subscribe(self.path, self._on_state))
        current = self.store.get(self.path)
        self._on_state(current if current is not None else self._fallback)

    def update(self, changes: Any) -> None:
        """Merge changes into the store under this binding's path."""
        self.store.update(build_partial(self.path, changes))

    def destroy(self) -> None:
        if self._subscriptions:
            logger.debug("Destroying %d subscription(s) for %r", len(self._subscriptions), self.path)
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()

    def __repr__(self) -> str:
        return f"StateBinding({self.path!r}, {'bound' if self.bound else 'unbound'})"
