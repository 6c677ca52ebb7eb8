"""ambientstate: reactive, persisted state tree with path-based notifications."""

from importlib.metadata import version as _version

__version__ = _version("ambientstate")

from ambientstate.bus import EventBus, Subscription
from ambientstate.scheduler import Debouncer
from ambientstate.storage import FileStorage, MemoryStorage, Storage, StorageError
from ambientstate.store import SAVE_DELAY, STORAGE_KEY, StateStore
from ambientstate.topics import (
    SETTINGS_IMPORTED,
    STATE_CHANGED,
    STATE_RESET,
    Notification,
    StateChanged,
    changed_topic,
    path_from_topic,
)
from ambientstate.tree import (
    MISSING,
    build_partial,
    deep_copy,
    deep_equal,
    deep_merge,
    get_nested_value,
)
from ambientstate.binding import StateBinding
# ambientstate.textual is opt-in (requires textual); import it explicitly

__all__ = [
    "EventBus",
    "Subscription",
    "Debouncer",
    "Storage",
    "MemoryStorage",
    "FileStorage",
    "StorageError",
    "StateStore",
    "STORAGE_KEY",
    "SAVE_DELAY",
    "STATE_CHANGED",
    "STATE_RESET",
    "SETTINGS_IMPORTED",
    "Notification",
    "StateChanged",
    "changed_topic",
    "path_from_topic",
    "MISSING",
    "build_partial",
    "deep_copy",
    "deep_equal",
    "deep_merge",
    "get_nested_value",
    "StateBinding",
]
