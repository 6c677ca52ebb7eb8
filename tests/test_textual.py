"""Tests for ambientstate.textual — Textual integration layer."""

import logging
import threading

import pytest
from textual.css.query import NoMatches

from ambientstate import EventBus, MemoryStorage, StateStore
from ambientstate import textual as atx


class _MockApp:
    """Stand-in for the parts of a Textual App that bind() touches."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)


@pytest.fixture
def store():
    s = StateStore(EventBus(), MemoryStorage(), save_delay=60)
    s.init({"clock": {"face": "led"}})
    return s


class TestBind:
    def test_skips_when_not_running(self, store):
        app = _MockApp(is_running=False)
        effects = []
        atx.bind(app, store, "clock.face", effects.append)
        store.update({"clock": {"face": "analog"}})
        assert effects == []

    def test_skips_during_pause(self, store):
        app = _MockApp()
        effects = []
        atx.bind(app, store, "clock.face", effects.append)
        with atx.pause(app):
            store.update({"clock": {"face": "analog"}})
        assert effects == []

    def test_fires_when_safe(self, store):
        app = _MockApp()
        effects = []
        atx.bind(app, store, "clock.face", effects.append)
        store.update({"clock": {"face": "analog"}})
        assert effects == ["analog"]

    def test_fire_immediately(self, store):
        app = _MockApp()
        effects = []
        atx.bind(app, store, "clock.face", effects.append, fire_immediately=True)
        assert effects == ["led"]

    def test_catches_nomatch(self, store, caplog):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()

        def _raise_nomatch(v):
            raise NoMatches("ClockFace")

        atx.bind(app, store, "clock.face", _raise_nomatch)
        with caplog.at_level(logging.ERROR, logger="ambientstate.bus"):
            store.update({"clock": {"face": "analog"}})
        assert "Error in subscriber" not in caplog.text

    def test_real_errors_reach_the_bus(self, store, caplog):
        """Other exceptions are logged by the bus, not swallowed here."""
        app = _MockApp()

        def _raise_value_error(v):
            raise ValueError("boom")

        atx.bind(app, store, "clock.face", _raise_value_error)
        with caplog.at_level(logging.ERROR, logger="ambientstate.bus"):
            store.update({"clock": {"face": "analog"}})
        assert "Error in subscriber" in caplog.text

    def test_unsubscribe_stops_binding(self, store):
        app = _MockApp()
        effects = []
        sub = atx.bind(app, store, "clock.face", effects.append)
        store.update({"clock": {"face": "analog"}})
        sub.unsubscribe()
        store.update({"clock": {"face": "clean"}})
        assert effects == ["analog"]

    def test_thread_marshal(self, store):
        """Updates from a background thread use call_from_thread."""
        app = _MockApp()
        effects = []
        atx.bind(app, store, "clock.face", effects.append)

        t = threading.Thread(target=lambda: store.update({"clock": {"face": "analog"}}))
        t.start()
        t.join()

        assert effects == ["analog"]
        assert len(app._call_from_thread_log) == 1


class TestPause:
    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert atx.is_safe(app)

        with pytest.raises(RuntimeError):
            with atx.pause(app):
                assert not atx.is_safe(app)
                raise RuntimeError("oops")

        assert atx.is_safe(app)

    def test_pause_does_not_mutate_app(self):
        """Pause state lives in the module, not on the app."""
        app = _MockApp()
        attrs_before = set(vars(app))
        with atx.pause(app):
            attrs_during = set(vars(app))
        assert attrs_before == attrs_during
        assert attrs_before == set(vars(app))

    def test_multiple_apps_independent(self):
        """Pausing one app does not affect another."""
        app_a = _MockApp()
        app_b = _MockApp()
        with atx.pause(app_a):
            assert not atx.is_safe(app_a)
            assert atx.is_safe(app_b)
