"""Topic names and notification payloads published by the store.

The bus is keyed by plain strings; this module is the one place that knows
how those strings are built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

STATE_CHANGED = "state:changed"
STATE_RESET = "state:reset"
SETTINGS_IMPORTED = "settings:imported"

_PREFIX = "state:"
_SUFFIX = ":changed"


def changed_topic(path: str) -> str:
    """Topic for changes at a dot path: ``state:<path>:changed``."""
    return f"{_PREFIX}{path}{_SUFFIX}"


def path_from_topic(topic: str) -> str | None:
    """Inverse of changed_topic(). None for the catch-all and other topics."""
    if topic == STATE_CHANGED:
        return None
    if topic.startswith(_PREFIX) and topic.endswith(_SUFFIX):
        path = topic[len(_PREFIX):-len(_SUFFIX)]
        return path or None
    return None


@dataclass(frozen=True)
class Notification:
    """A single path change. Published on the bus as the bare value."""

    path: str
    value: Any

    @property
    def topic(self) -> str:
        return changed_topic(self.path)


@dataclass(frozen=True)
class StateChanged:
    """Payload of the catch-all ``state:changed`` topic."""

    new_state: dict
    changes: dict
