"""
Project annotation storage.

Every query here is scoped to a single owner except the reminder query used by
the weekly job, which reads across owners but never writes.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import psycopg

from core.db.base import get_conn
from core.errors import StoreReadFailure, StoreWriteFailure
from core.models import ProjectRecord

UPDATABLE_FIELDS = ("progress", "reminder_enabled")


def _row_to_record(row: Dict) -> ProjectRecord:
    return ProjectRecord(
        id=str(row["id"]),
        owner_username=row["owner_username"],
        name=row["name"],
        progress=int(row["progress"] or 0),
        reminder_enabled=bool(row["reminder_enabled"]),
    )


def find_all_projects_by_owner(owner_username: str) -> List[ProjectRecord]:
    """Return every stored project of one owner."""
    try:
        conn = get_conn()
    except psycopg.Error as exc:
        raise StoreReadFailure(f"Could not connect to read projects: {exc}") from exc

    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, owner_username, name, progress, reminder_enabled
            FROM projects
            WHERE owner_username = ?
            """,
            (owner_username,),
        )
        rows = cur.fetchall()
    except psycopg.Error as exc:
        raise StoreReadFailure(f"Could not read projects for {owner_username}: {exc}") from exc
    finally:
        conn.close()

    return [_row_to_record(r) for r in rows]


def get_project(owner_username: str, project_id: str) -> Optional[ProjectRecord]:
    try:
        conn = get_conn()
    except psycopg.Error as exc:
        raise StoreReadFailure(f"Could not connect to read project {project_id}: {exc}") from exc

    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, owner_username, name, progress, reminder_enabled
            FROM projects
            WHERE owner_username = ? AND id = ?
            """,
            (owner_username, str(project_id)),
        )
        row = cur.fetchone()
    except psycopg.Error as exc:
        raise StoreReadFailure(f"Could not read project {project_id}: {exc}") from exc
    finally:
        conn.close()

    return _row_to_record(row) if row else None


def create_projects_if_absent(records: Iterable[ProjectRecord]) -> List[str]:
    """
    Insert records in one transaction, skipping any (owner, id) that already exists.

    Returns the ids that were actually inserted. A concurrent pass that created the
    same rows first simply makes this a no-op for them.
    """
    records = list(records)
    if not records:
        return []

    now = datetime.now(timezone.utc).isoformat(timespec="seconds")
    inserted: List[str] = []

    try:
        conn = get_conn()
    except psycopg.Error as exc:
        raise StoreWriteFailure(f"Could not connect to write projects: {exc}") from exc

    try:
        cur = conn.cursor()
        for record in records:
            cur.execute(
                """
                INSERT INTO projects
                  (id, owner_username, name, progress, reminder_enabled, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (owner_username, id) DO NOTHING
                RETURNING id
                """,
                (
                    str(record.id),
                    record.owner_username,
                    record.name,
                    int(record.progress),
                    bool(record.reminder_enabled),
                    now,
                    now,
                ),
            )
            if cur.fetchone():
                inserted.append(str(record.id))
        conn.commit()
    except psycopg.Error as exc:
        conn.rollback()
        raise StoreWriteFailure(f"Could not create {len(records)} project(s): {exc}") from exc
    finally:
        conn.close()

    return inserted


def update_project(owner_username: str, project_id: str, fields: Dict) -> bool:
    """
    Update progress and/or reminder_enabled for one of the owner's projects.
    Returns False when the owner has no such project.
    """
    updates = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update project fields: {', '.join(sorted(unknown))}")
    if not updates:
        return False

    assignments = ", ".join(f"{name}=?" for name in updates)
    params = list(updates.values())
    params.extend([datetime.now(timezone.utc).isoformat(timespec="seconds"), owner_username, str(project_id)])

    try:
        conn = get_conn()
    except psycopg.Error as exc:
        raise StoreWriteFailure(f"Could not connect to update project {project_id}: {exc}") from exc

    try:
        cur = conn.cursor()
        cur.execute(
            f"UPDATE projects SET {assignments}, updated_at=? WHERE owner_username=? AND id=?",
            params,
        )
        updated = cur.rowcount
        conn.commit()
    except psycopg.Error as exc:
        conn.rollback()
        raise StoreWriteFailure(f"Could not update project {project_id}: {exc}") from exc
    finally:
        conn.close()

    return bool(updated)


def find_all_projects_with_reminder_enabled() -> List[Dict]:
    """
    Reminder-enabled projects grouped by owner, joined to the owner's email.

    Owners without an email are left out. Returns
    [{"owner_username", "email", "projects": [ProjectRecord, ...]}] ordered by owner.
    """
    try:
        conn = get_conn()
    except psycopg.Error as exc:
        raise StoreReadFailure(f"Could not connect to read reminder projects: {exc}") from exc

    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT p.id, p.owner_username, p.name, p.progress, p.reminder_enabled, u.email
            FROM projects p
            JOIN users u ON u.github_username = p.owner_username
            WHERE p.reminder_enabled
              AND u.email IS NOT NULL
              AND u.email <> ''
            ORDER BY p.owner_username, p.name
            """
        )
        rows = cur.fetchall()
    except psycopg.Error as exc:
        raise StoreReadFailure(f"Could not read reminder projects: {exc}") from exc
    finally:
        conn.close()

    grouped: Dict[str, Dict] = {}
    for row in rows:
        owner = row["owner_username"]
        entry = grouped.setdefault(
            owner, {"owner_username": owner, "email": row["email"], "projects": []}
        )
        entry["projects"].append(_row_to_record(row))
    return list(grouped.values())


__all__ = [
    "UPDATABLE_FIELDS",
    "find_all_projects_by_owner",
    "get_project",
    "create_projects_if_absent",
    "update_project",
    "find_all_projects_with_reminder_enabled",
]
