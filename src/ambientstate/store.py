"""StateStore — one serializable state tree with path-based notifications.

Writes go through update() or reset_state(). Each write replaces the live
tree with a freshly merged one (never mutated in place), then publishes
``state:<path>:changed`` for every touched path whose value actually
changed, then one ``state:changed`` catch-all. Persistence is a debounced
JSON write of the whole tree into a single storage slot.

Construct one store at application start and hand it to every consumer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable

from ambientstate import tree as _tree
from ambientstate.bus import EventBus, Subscription
from ambientstate.scheduler import Debouncer
from ambientstate.storage import Storage
from ambientstate.topics import (
    STATE_CHANGED,
    STATE_RESET,
    Notification,
    StateChanged,
    changed_topic,
)

STORAGE_KEY = "ambient-clock-v2-settings"
SAVE_DELAY = 1.0  # seconds

logger = logging.getLogger(__name__)

Normalizer = Callable[[dict], dict]


def diff_paths(paths: Iterable[str], old_state: dict, new_state: dict) -> list[Notification]:
    """Notifications for paths (plus their ancestors) whose value differs.

    A path that no longer resolves in new_state yields a None value.
    """
    notes = []
    for path in _tree.with_ancestors(paths):
        old = _tree.get_nested_value(old_state, path, _tree.MISSING)
        new = _tree.get_nested_value(new_state, path, _tree.MISSING)
        if not _tree.deep_equal(old, new):
            notes.append(Notification(path, None if new is _tree.MISSING else new))
    return notes


class StateStore:
    """Canonical state tree: merge, diff, notify, persist, reset."""

    get_nested_value = staticmethod(_tree.get_nested_value)

    def __init__(
        self,
        bus: EventBus,
        storage: Storage,
        *,
        storage_key: str = STORAGE_KEY,
        save_delay: float = SAVE_DELAY,
        normalize: Normalizer | None = None,
    ) -> None:
        self.bus = bus
        self.storage = storage
        self.storage_key = storage_key
        self._normalize = normalize
        self._state: dict = {}
        self._default: dict = {}
        self._ready = False
        self._reset_subscription: Subscription | None = None
        self._saver = Debouncer(save_delay, self.save_state)

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def save_pending(self) -> bool:
        return self._saver.pending

    # --- Lifecycle ---

    def init(self, default_tree: dict) -> None:
        """Capture defaults, reconcile with the persisted tree, become ready.

        Persisted values are merged over a copy of the defaults, so keys
        added to the default schema since the last save are always present.
        Storage problems only mean falling back to the defaults.
        """
        if not isinstance(default_tree, dict):
            raise TypeError(f"Default state must be a dict, got {type(default_tree).__name__}")
        self._default = _tree.deep_copy(default_tree)
        logger.debug("Stored default state: %r", self._default)

        loaded = self.load_state()
        if loaded:
            logger.info("Loaded state from storage. Merging into defaults.")
            state = _tree.deep_merge(self._default, loaded)
        else:
            logger.info("No saved state found, using defaults.")
            state = _tree.deep_copy(self._default)

        if self._normalize is not None:
            try:
                state = _tree.deep_copy(self._normalize(state))
            except Exception:
                logger.exception("State normalization failed; keeping reconciled state")

        self._state = state
        self._ready = True
        # Write back so storage always holds the reconciled shape.
        self.schedule_save()

        if self._reset_subscription is not None:
            self._reset_subscription.unsubscribe()
        self._reset_subscription = self.bus.subscribe(STATE_RESET, self._on_reset)

    def dispose(self) -> None:
        """Write any pending save now and stop listening for reset requests."""
        self._saver.flush()
        if self._reset_subscription is not None:
            self._reset_subscription.unsubscribe()
            self._reset_subscription = None

    # --- Reads ---

    def get_state(self) -> dict:
        """Deep copy of the live tree. Mutating it never affects the store."""
        return _tree.deep_copy(self._state)

    def get(self, path: str, default: Any = None) -> Any:
        """Deep copy of the value at path, or default when nothing is there."""
        value = _tree.get_nested_value(self._state, path, _tree.MISSING)
        if value is _tree.MISSING:
            return default
        return _tree.deep_copy(value)

    def get_default_state(self) -> dict:
        return _tree.deep_copy(self._default)

    def subscribe(self, path: str, callback: Callable[[Any], None]) -> Subscription:
        """Listen for changes at path. The empty path means every write."""
        topic = changed_topic(path) if path else STATE_CHANGED
        return self.bus.subscribe(topic, callback)

    # --- Writes ---

    def update(self, changes: dict) -> None:
        """Deep-merge changes into the live tree and notify what changed.

        A merge that leaves the tree equal to before is a no-op: nothing is
        published and no save is scheduled.
        """
        if not isinstance(changes, dict):
            raise TypeError(f"State changes must be a dict, got {type(changes).__name__}")
        new_state = _tree.deep_merge(self._state, changes)
        if _tree.deep_equal(new_state, self._state):
            return

        old_state = self._state
        self._state = new_state
        self._notify(_tree.iter_paths(changes), old_state, new_state, changes)
        self.schedule_save()

    def reset_state(self) -> None:
        """Replace the live tree with a copy of the defaults captured by init().

        Every path of both the old and new tree is checked, so keys that
        only existed before the reset are published with None.
        """
        logger.info("Resetting state to default")
        old_state = self._state
        new_state = _tree.deep_copy(self._default)
        self._state = new_state
        paths = [*_tree.iter_paths(new_state), *_tree.iter_paths(old_state)]
        self._notify(paths, old_state, new_state, new_state)
        self.schedule_save()

    def _on_reset(self, _payload: Any = None) -> None:
        self.reset_state()

    def _notify(
        self,
        paths: Iterable[str],
        old_state: dict,
        new_state: dict,
        changes: dict,
    ) -> None:
        for note in diff_paths(paths, old_state, new_state):
            if self.bus.listener_count(note.topic):
                self.bus.publish(note.topic, _tree.deep_copy(note.value))

        if self.bus.listener_count(STATE_CHANGED):
            self.bus.publish(
                STATE_CHANGED,
                StateChanged(new_state=_tree.deep_copy(new_state), changes=_tree.deep_copy(changes)),
            )

    # --- Persistence ---

    def schedule_save(self) -> None:
        """(Re)arm the debounced save. Only the last call in a burst writes."""
        self._saver.schedule()

    def flush(self) -> bool:
        """Write a pending save now. Returns False if none was pending."""
        return self._saver.flush()

    def save_state(self) -> None:
        # The live tree is replaced, never mutated, so this reference is stable
        # even when called from the timer thread.
        state = self._state
        try:
            self.storage.write(self.storage_key, json.dumps(state))
        except Exception:
            logger.exception("Failed to save state to storage")

    def load_state(self) -> dict:
        """Persisted tree, or {} when the slot is empty, unreadable or corrupt."""
        try:
            blob = self.storage.read(self.storage_key)
            if not blob:
                return {}
            loaded = json.loads(blob)
        except Exception:
            logger.exception("Failed to load or parse state from storage")
            return {}
        if not isinstance(loaded, dict):
            logger.warning("Ignoring persisted state of type %s", type(loaded).__name__)
            return {}
        return loaded

    def __repr__(self) -> str:
        status = "ready" if self._ready else "uninitialized"
        return f"StateStore({self.storage_key!r}, {status})"
