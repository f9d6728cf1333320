from __future__ import annotations

import json
from datetime import timedelta

from attendance_tracker.sessions.service import SessionManager
from attendance_tracker.sessions.store import InMemoryStore


def test_create_session_persists_serialized_payload(fixed_now):
    store = InMemoryStore()
    manager = SessionManager(store, key="buildathon_session", clock=lambda: fixed_now)

    session = manager.create_session("admin")

    assert session.expires_at - session.login_time == timedelta(hours=24)
    payload = json.loads(store.get("buildathon_session"))
    assert payload == {
        "username": "admin",
        "loginTime": "2025-12-26T09:00:00.000Z",
        "expiresAt": "2025-12-27T09:00:00.000Z",
    }
    assert manager.is_valid()
    assert manager.current().username == "admin"


def test_absent_session_is_invalid():
    assert not SessionManager(InMemoryStore()).is_valid()


def test_session_one_second_before_expiry_is_valid(fixed_now, make_clock):
    clock = make_clock(fixed_now)
    store = InMemoryStore()
    manager = SessionManager(store, clock=clock)
    manager.create_session("coordinator")

    clock.state["now"] = fixed_now + timedelta(hours=24) - timedelta(seconds=1)

    assert manager.is_valid()
    assert store.get("buildathon_session") is not None


def test_expired_session_is_invalid_and_cleared(fixed_now, make_clock):
    clock = make_clock(fixed_now)
    store = InMemoryStore()
    manager = SessionManager(store, clock=clock)
    manager.create_session("coordinator")

    clock.state["now"] = fixed_now + timedelta(hours=24, seconds=1)

    assert not manager.is_valid()
    assert store.get("buildathon_session") is None


def test_corrupt_payload_is_cleared_silently():
    store = InMemoryStore({"buildathon_session": "{not json"})
    manager = SessionManager(store)

    assert manager.current() is None
    assert not manager.is_valid()
    assert store.get("buildathon_session") is None


def test_payload_missing_fields_counts_as_corrupt():
    store = InMemoryStore({"buildathon_session": json.dumps({"username": "admin"})})

    assert not SessionManager(store).is_valid()
    assert store.get("buildathon_session") is None


def test_destroy_is_unconditional():
    store = InMemoryStore()
    manager = SessionManager(store)

    manager.destroy()
    manager.create_session("admin")
    manager.destroy()

    assert store.get("buildathon_session") is None
