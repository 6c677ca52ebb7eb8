"""Keep logger verbosity in step with ``settings.debugModeEnabled``."""

from __future__ import annotations

import logging

from ambientstate.bus import Subscription
from ambientstate.store import StateStore
from ambientstate.tree import build_partial

DEBUG_PATH = "settings.debugModeEnabled"

logger = logging.getLogger(__name__)


def sync_debug_mode(store: StateStore, logger_name: str = "ambientstate") -> Subscription:
    """Follow the state flag on logger_name, now and on every change.

    On: DEBUG. Off: the level the logger had when syncing started (NOTSET
    unless the host configured one), so host logging config is kept.
    """
    target = logging.getLogger(logger_name)
    baseline = target.level

    def _apply(enabled) -> None:
        level = logging.DEBUG if enabled is True else baseline
        if target.level != level:
            target.setLevel(level)
            logger.info("Debug mode %s for %r", "enabled" if level == logging.DEBUG else "disabled", logger_name)

    _apply(store.get(DEBUG_PATH, False))
    return store.subscribe(DEBUG_PATH, _apply)


def toggle_debug_mode(store: StateStore) -> bool:
    """Flip the flag in state. Returns the new value."""
    enabled = store.get(DEBUG_PATH) is not True
    store.update(build_partial(DEBUG_PATH, enabled))
    return enabled
