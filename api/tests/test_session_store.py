"""Tests for the in-process session store and flash queue."""

import pytest
from backoffice.session import store as store_module
from backoffice.session.store import FlashBag, SessionStore


class _Clock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch) -> _Clock:
    fake = _Clock()
    monkeypatch.setattr(store_module.time, "monotonic", fake)
    return fake


class TestSessionStore:
    def test_create_and_load(self):
        store = SessionStore(max_age=60)

        session = store.create()

        assert store.load(session.session_id) is session
        assert len(store) == 1

    def test_load_unknown_or_empty_id(self):
        store = SessionStore(max_age=60)

        assert store.load("nope") is None
        assert store.load(None) is None
        assert store.load("") is None

    def test_load_or_create_reuses_live_session(self):
        store = SessionStore(max_age=60)
        session = store.create()

        assert store.load_or_create(session.session_id) is session
        assert store.load_or_create("unknown") is not session
        assert len(store) == 2

    def test_session_ids_are_unique(self):
        store = SessionStore(max_age=60)

        ids = {store.create().session_id for _ in range(50)}

        assert len(ids) == 50

    def test_idle_session_expires(self, clock):
        store = SessionStore(max_age=60)
        session = store.create()

        clock.now += 61

        assert store.load(session.session_id) is None
        assert len(store) == 0

    def test_access_refreshes_idle_timer(self, clock):
        store = SessionStore(max_age=60)
        session = store.create()

        clock.now += 50
        assert store.load(session.session_id) is session
        clock.now += 50

        assert store.load(session.session_id) is session

    def test_purge_expired(self, clock):
        store = SessionStore(max_age=60, purge_interval=3600)
        old = store.create()
        clock.now += 61
        fresh = store.create()

        assert store.purge_expired() == 1
        assert store.load(old.session_id) is None
        assert store.load(fresh.session_id) is fresh

    def test_create_reclaims_expired_sessions(self, clock):
        store = SessionStore(max_age=60)
        for _ in range(50):
            store.create()

        clock.now += 61
        survivor = store.create()

        assert len(store) == 1
        assert store.load(survivor.session_id) is survivor

    def test_reclaim_is_throttled(self, clock):
        store = SessionStore(max_age=10, purge_interval=60)
        store.create()

        clock.now += 30
        store.create()
        assert len(store) == 2

        clock.now += 31
        store.create()
        assert len(store) == 1

    def test_default_purge_interval_is_bounded_by_max_age(self):
        assert SessionStore(max_age=1).purge_interval == 1
        assert SessionStore(max_age=86400).purge_interval == store_module.PURGE_INTERVAL_SECONDS

    def test_destroy(self):
        store = SessionStore(max_age=60)
        session = store.create()

        store.destroy(session.session_id)

        assert store.load(session.session_id) is None


class TestSession:
    def test_get_set_remove(self):
        session = SessionStore(max_age=60).create()

        session.set("k", "v")
        assert session.get("k") == "v"
        assert "k" in session

        session.remove("k")
        session.remove("k")
        assert session.get("k", "default") == "default"


class TestFlashBag:
    def test_messages_are_consumed_exactly_once(self):
        bag = FlashBag()
        bag.add("error", "first")
        bag.add("info", "second")

        assert bag.peek_all() == [("error", "first"), ("info", "second")]
        assert bag.consume_all() == [("error", "first"), ("info", "second")]
        assert bag.consume_all() == []
        assert len(bag) == 0
