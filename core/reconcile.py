"""
Repository-list reconciliation.

Merges the owner's remote repository list with their stored project
annotations: unseen repositories get a fresh record (progress 0, reminder off),
known ones keep whatever the owner set. Records are never deleted or reset here.
"""
from __future__ import annotations

import logging
from typing import Dict, List

from core.errors import RemoteUnavailable, StoreReadFailure, StoreWriteFailure
from core.models import ProjectRecord, ReconcileResult, merge_repository

log = logging.getLogger("reconcile")


def _default_fetcher():
    from core import github_client

    return github_client


def _default_store():
    from core.db import projects

    return projects


def reconcile(owner_username: str, *, fetcher=None, store=None) -> ReconcileResult:
    """
    Run one reconciliation pass for a single owner.

    `fetcher` needs fetch_repositories(username) -> FetchResult and may raise
    RemoteUnavailable. `store` needs find_all_projects_by_owner(owner) and
    create_projects_if_absent(records). Both default to GitHub and Postgres.

    A remote failure degrades to an empty result flagged remote_unavailable and
    performs no store access. Store failures are raised (StoreReadFailure before
    any write, StoreWriteFailure when the batch create fails).
    """
    owner = (owner_username or "").strip()
    if not owner:
        raise ValueError("owner_username is required")

    fetcher = fetcher or _default_fetcher()
    store = store or _default_store()

    try:
        fetched = fetcher.fetch_repositories(owner)
    except RemoteUnavailable as exc:
        log.warning("Remote fetch failed, showing no repositories: owner=%s error=%s", owner, exc)
        return ReconcileResult(total_count=0, items=[], remote_unavailable=True)

    if not fetched.items:
        log.info("No repositories fetched: owner=%s", owner)
        return ReconcileResult(total_count=0, items=[])

    try:
        existing = store.find_all_projects_by_owner(owner)
    except StoreReadFailure:
        log.error("Could not load stored projects: owner=%s", owner)
        raise

    known: Dict[str, ProjectRecord] = {
        record.id: record for record in existing if record.owner_username == owner
    }

    new_records: List[ProjectRecord] = []
    queued = set()
    for item in fetched.items:
        key = str(item.id)
        if key in known or key in queued:
            continue
        queued.add(key)
        new_records.append(
            ProjectRecord(
                id=key,
                owner_username=owner,
                name=item.name,
                progress=0,
                reminder_enabled=False,
            )
        )

    if new_records:
        try:
            store.create_projects_if_absent(new_records)
        except StoreWriteFailure:
            log.error("Could not create projects: owner=%s count=%d", owner, len(new_records))
            raise

    items = [merge_repository(item, known.get(str(item.id))) for item in fetched.items]

    log.info(
        "Reconciled repositories: owner=%s fetched=%d known=%d created=%d",
        owner,
        len(fetched.items),
        len(known),
        len(new_records),
    )
    return ReconcileResult(total_count=fetched.total_count, items=items)


__all__ = ["reconcile"]
