"""Textual integration for ambientstate. Opt-in — requires textual.

bind() is the only place widgets meet the store: it drops notifications
while an app is paused or not running, ignores NoMatches from widgets that
are not mounted, and hops back to the app thread for updates published
elsewhere. Paused apps are tracked here by id, never on the app object.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

_paused_app_ids: set[int] = set()


@contextmanager
def pause(app):
    """Hold back bound effects for app, e.g. while widgets are being replaced."""
    _paused_app_ids.add(id(app))
    try:
        yield
    finally:
        _paused_app_ids.discard(id(app))


def is_safe(app) -> bool:
    """True when app is running and not inside pause()."""
    return bool(app.is_running) and id(app) not in _paused_app_ids


class _WidgetEffect:
    """Store callback that applies effect on the app's own thread."""

    __slots__ = ("app", "effect", "thread_id")

    def __init__(self, app, effect):
        self.app = app
        self.effect = effect
        self.thread_id = threading.get_ident()

    def __call__(self, value):
        if not is_safe(self.app):
            return
        if threading.get_ident() == self.thread_id:
            self.apply(value)
        else:
            self.app.call_from_thread(self.apply, value)

    def apply(self, value):
        try:
            self.effect(value)
        except NoMatches:
            pass  # widget not mounted (yet/anymore)


def bind(app, store, path, effect, *, fire_immediately=False):
    """Run effect(value) for every change at path. Returns the Subscription."""
    callback = _WidgetEffect(app, effect)
    subscription = store.subscribe(path, callback)
    if fire_immediately:
        callback(store.get(path))
    return subscription
