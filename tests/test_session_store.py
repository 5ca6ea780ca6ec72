from __future__ import annotations

import json
from datetime import timedelta

from fintrack.client.session import SessionStore

USER = {"id": 7, "email": "ada@example.com", "name": "Ada"}


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_in_memory_login_and_logout():
    store = SessionStore()
    assert store.get_user_id() is None

    store.login(USER)

    assert store.is_authenticated()
    assert store.get_user_id() == 7
    assert store.get_user() == USER

    store.logout()
    assert store.get_session() is None
    assert store.get_user_id() is None


def test_session_persists_to_file(tmp_path):
    path = tmp_path / "session" / "user.json"
    SessionStore(path).login(USER)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["id"] == 7
    assert data["is_logged_in"] is True

    assert SessionStore(path).get_user_id() == 7


def test_session_expires_after_max_age(tmp_path):
    clock = FakeClock()
    path = tmp_path / "user.json"
    store = SessionStore(path, clock=clock, max_age=timedelta(days=7))
    store.login(USER)

    clock.now += timedelta(days=6).total_seconds()
    assert store.is_session_valid()

    clock.now += timedelta(days=2).total_seconds()
    assert store.get_user_id() is None
    assert not path.exists()


def test_corrupt_session_file_is_ignored(tmp_path):
    path = tmp_path / "user.json"
    path.write_text("{not json", encoding="utf-8")

    store = SessionStore(path)

    assert store.get_session() is None
    assert not store.is_authenticated()


def test_malformed_session_data_is_ignored(tmp_path):
    path = tmp_path / "user.json"
    path.write_text(json.dumps({"email": "x@example.com"}), encoding="utf-8")

    assert SessionStore(path).get_session() is None
