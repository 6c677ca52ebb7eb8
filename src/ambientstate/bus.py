"""Notification bus — string-keyed publish/subscribe.

The bus knows nothing about state shape; the store publishes through it and
consumers subscribe to the topics they care about.

Callbacks run synchronously inside publish(), in registration order. A
callback that raises is logged and skipped; siblings still run.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

Callback = Callable[[Any], None]

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by subscribe(). unsubscribe() removes one registration."""

    __slots__ = ("_remove", "_active")

    def __init__(self, remove: Callable[[], None]) -> None:
        self._remove = remove
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._remove()

    def __repr__(self) -> str:
        return f"Subscription({'active' if self._active else 'removed'})"


class EventBus:
    """Topic -> ordered listener list. Construct one per application and pass it around."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callback]] = {}

    def subscribe(self, topic: str, callback: Callback) -> Subscription:
        """Register callback for topic. The returned Subscription removes it again."""
        listeners = self._listeners.setdefault(topic, [])
        listeners.append(callback)
        logger.debug("Subscribed to %r. Listener count: %d", topic, len(listeners))

        def _remove() -> None:
            if self._listeners.get(topic) is not listeners:
                return  # topic was cleared since
            try:
                listeners.remove(callback)
            except ValueError:
                pass
            if not listeners:
                del self._listeners[topic]

        return Subscription(_remove)

    def publish(self, topic: str, payload: Any = None) -> None:
        listeners = self._listeners.get(topic)
        if not listeners:
            return
        logger.debug("Publishing %r to %d listener(s)", topic, len(listeners))
        # Snapshot: callbacks may (un)subscribe while we iterate.
        for cb in list(listeners):
            try:
                cb(payload)
            except Exception:
                logger.exception("Error in subscriber for event %r", topic)

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, ()))

    def clear(self, topic: str | None = None) -> None:
        """Drop one topic's listeners, or every listener when topic is None."""
        if topic is None:
            self._listeners.clear()
        else:
            self._listeners.pop(topic, None)
