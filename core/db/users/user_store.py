"""
Owner (user) storage helpers.

Owners are identified by their remote-host username; the email is collected
after the first sign-in and is where reminder emails go.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from core.db.base import get_conn


def _normalize_username(github_username: str) -> str:
    return (github_username or "").strip()


def upsert_user(github_username: str, email: Optional[str] = None) -> Dict:
    """
    Create the owner row on first sign-in; on later sign-ins only fill a missing email.
    Returns the stored user dict.
    """
    username = _normalize_username(github_username)
    if not username:
        raise ValueError("github_username is required")

    now = datetime.now(timezone.utc).isoformat(timespec="seconds")
    clean_email = (email or "").strip().lower() or None

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO users (github_username, email, created_at)
        VALUES (?, ?, ?)
        ON CONFLICT (github_username) DO UPDATE
        SET email = COALESCE(users.email, EXCLUDED.email)
        RETURNING id, github_username, email, created_at
        """,
        (username, clean_email, now),
    )
    row = cur.fetchone()
    conn.commit()
    conn.close()
    return dict(row)


def get_user_by_username(github_username: str) -> Dict | None:
    conn = get_conn()
    cur = conn.cursor()

    cur.execute(
        """
        SELECT id, github_username, email, created_at
        FROM users
        WHERE github_username = ?
        """,
        (_normalize_username(github_username),),
    )
    row = cur.fetchone()
    conn.close()

    return dict(row) if row else None


def get_user_by_id(user_id: int) -> Optional[Dict]:
    """Look up a user by numeric id. Returns dict or None."""
    conn = get_conn()
    cur = conn.cursor()

    cur.execute(
        """
        SELECT id, github_username, email, created_at
        FROM users
        WHERE id = ?
        """,
        (user_id,),
    )
    row = cur.fetchone()
    conn.close()

    return dict(row) if row else None


def update_user_email(user_id: int, email: str) -> None:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "UPDATE users SET email=? WHERE id=?",
        (email.strip().lower(), user_id),
    )
    conn.commit()
    conn.close()


__all__ = [
    "upsert_user",
    "get_user_by_username",
    "get_user_by_id",
    "update_user_email",
]
