"""
Schema helpers for Postgres.
"""
from __future__ import annotations

from core.db.base import get_conn

TABLES = [
    "sessions",
    "projects",
    "users",
]


def init_db() -> None:
    """Create the users, sessions, and projects tables if they don't exist."""
    conn = get_conn()
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS users(
            id SERIAL PRIMARY KEY,
            github_username TEXT NOT NULL UNIQUE,
            email TEXT,
            created_at TEXT
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS sessions(
            id TEXT PRIMARY KEY,
            user_id INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            last_seen_at TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        )
        """
    )
    # One row per (owner, remote repository id); the same repository id under
    # two owners is two independent annotations.
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS projects(
            id TEXT NOT NULL,
            owner_username TEXT NOT NULL,
            name TEXT NOT NULL,
            progress INTEGER NOT NULL DEFAULT 0,
            reminder_enabled BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TEXT,
            updated_at TEXT,
            PRIMARY KEY (owner_username, id)
        )
        """
    )
    cur.execute(
        """
        CREATE INDEX IF NOT EXISTS projects_reminder_idx
        ON projects (reminder_enabled)
        WHERE reminder_enabled
        """
    )

    conn.commit()
    conn.close()


__all__ = [
    "TABLES",
    "init_db",
]
