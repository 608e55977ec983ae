"""
Browser sessions for signed-in owners.

A session is an opaque random token stored in the `session_id` cookie. Expiry
slides forward on every authenticated request; an expired row is removed the
next time it is looked up.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from core.db.base import get_conn

SESSION_TIMEOUT_MINUTES = 60 * 24 * 7  # inactivity timeout


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _stamp(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


def _parse_stamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    # Rows written before timestamps carried an offset are UTC.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _expires_from(moment: datetime) -> datetime:
    return moment + timedelta(minutes=SESSION_TIMEOUT_MINUTES)


def create_session(user_id: int) -> str:
    """Start a session for `user_id` and return its token."""
    token = secrets.token_urlsafe(32)
    now = _now()

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO sessions (id, user_id, created_at, last_seen_at, expires_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (token, user_id, _stamp(now), _stamp(now), _stamp(_expires_from(now))),
    )
    conn.commit()
    conn.close()
    return token


def delete_session(session_id: str) -> None:
    if not session_id:
        return

    conn = get_conn()
    cur = conn.cursor()
    cur.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
    conn.commit()
    conn.close()


def get_session(session_id: str) -> Optional[Dict]:
    """Return the live session row, or None (dropping it when expired or unreadable)."""
    if not session_id:
        return None

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "SELECT id, user_id, created_at, last_seen_at, expires_at FROM sessions WHERE id = ?",
        (session_id,),
    )
    row = cur.fetchone()
    conn.close()
    if not row:
        return None

    try:
        expires_at = _parse_stamp(row["expires_at"])
    except (TypeError, ValueError):
        delete_session(session_id)
        return None

    if expires_at < _now():
        delete_session(session_id)
        return None
    return dict(row)


def touch_session(session_id: str) -> None:
    """Slide the session's expiry forward from now."""
    if not session_id:
        return

    now = _now()
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "UPDATE sessions SET last_seen_at = ?, expires_at = ? WHERE id = ?",
        (_stamp(now), _stamp(_expires_from(now)), session_id),
    )
    conn.commit()
    conn.close()


__all__ = [
    "SESSION_TIMEOUT_MINUTES",
    "create_session",
    "delete_session",
    "get_session",
    "touch_session",
]
