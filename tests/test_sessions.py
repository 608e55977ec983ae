from datetime import datetime, timedelta, timezone

import pytest

from core.db.users import sessions


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn

    def execute(self, sql, params=None):
        self.conn.statements.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.conn.row


class FakeConn:
    def __init__(self, row=None):
        self.row = row
        self.statements = []

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        pass

    def close(self):
        pass


@pytest.fixture
def fake_conn(monkeypatch):
    conn = FakeConn()
    monkeypatch.setattr(sessions, "get_conn", lambda: conn)
    return conn


def _row(expires_at):
    return {"id": "tok", "user_id": 3, "created_at": "", "last_seen_at": "", "expires_at": expires_at}


def test_create_session_stores_utc_offset_timestamps(fake_conn):
    token = sessions.create_session(3)

    sql, params = fake_conn.statements[0]
    assert sql.startswith("INSERT INTO sessions")
    assert params[0] == token
    expires_at = datetime.fromisoformat(params[4])
    assert expires_at.utcoffset() == timedelta(0)
    assert expires_at - datetime.now(timezone.utc) > timedelta(days=6)


def test_live_session_is_returned(fake_conn):
    fake_conn.row = _row((datetime.now(timezone.utc) + timedelta(hours=1)).isoformat())
    assert sessions.get_session("tok")["user_id"] == 3


@pytest.mark.parametrize(
    "expires_at",
    [
        (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat(timespec="seconds"),
        # legacy rows without an offset are read as UTC
        (datetime.now(timezone.utc) - timedelta(days=1)).replace(tzinfo=None).isoformat(timespec="seconds"),
        "garbage",
    ],
)
def test_expired_or_unreadable_session_is_dropped(fake_conn, expires_at):
    fake_conn.row = _row(expires_at)

    assert sessions.get_session("tok") is None
    assert fake_conn.statements[-1] == ("DELETE FROM sessions WHERE id = ?", ("tok",))
