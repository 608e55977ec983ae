"""
The two owner-initiated edits to a project: progress and the reminder flag.
"""
from __future__ import annotations

from core.errors import ProjectNotFound

MIN_PROGRESS = 0
MAX_PROGRESS = 100


def _default_store():
    from core.db import projects

    return projects


def clamp_progress(value) -> int:
    """Coerce to int and clamp into 0..100. Booleans and non-numbers are rejected."""
    if isinstance(value, bool):
        raise ValueError("progress must be a number")
    if isinstance(value, str):
        value = value.strip()
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"progress must be a number, got {value!r}") from exc
    return max(MIN_PROGRESS, min(MAX_PROGRESS, number))


def update_progress(owner_username: str, repo_id, progress, *, store=None) -> int:
    """Store a clamped progress value for one of the owner's projects; returns the stored value."""
    store = store or _default_store()
    value = clamp_progress(progress)
    if not store.update_project(owner_username, str(repo_id), {"progress": value}):
        raise ProjectNotFound(owner_username, str(repo_id))
    return value


def set_reminder(owner_username: str, repo_id, enabled: bool, *, store=None) -> bool:
    store = store or _default_store()
    enabled = bool(enabled)
    if not store.update_project(owner_username, str(repo_id), {"reminder_enabled": enabled}):
        raise ProjectNotFound(owner_username, str(repo_id))
    return enabled


__all__ = [
    "MIN_PROGRESS",
    "MAX_PROGRESS",
    "clamp_progress",
    "update_progress",
    "set_reminder",
]
