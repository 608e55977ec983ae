"""
Typed records passed between the fetcher, the stores and the dashboard.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class RemoteRepositorySummary:
    """A repository as listed by the remote host. Read-only to this system."""

    id: int
    name: str
    description: Optional[str]
    language: Optional[str]
    star_count: int
    fork_count: int
    updated_at: datetime
    url: str
    is_fork: bool


@dataclass
class ProjectRecord:
    """The locally stored annotation layer for one repository of one owner."""

    id: str
    owner_username: str
    name: str
    progress: int = 0
    reminder_enabled: bool = False


@dataclass(frozen=True)
class ReconciledRepository:
    id: int
    name: str
    description: Optional[str]
    language: Optional[str]
    star_count: int
    fork_count: int
    updated_at: datetime
    url: str
    is_fork: bool
    progress: int = 0
    reminder_enabled: bool = False


@dataclass
class FetchResult:
    total_count: int
    items: List[RemoteRepositorySummary] = field(default_factory=list)


@dataclass
class ReconcileResult:
    total_count: int
    items: List[ReconciledRepository] = field(default_factory=list)
    remote_unavailable: bool = False

    @property
    def no_repositories(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class RepositoryActivity:
    """Staleness details for one repository, used by the reminder job."""

    name: str
    url: str
    pushed_at: datetime
    size_kb: int
    open_issues: int
    stars: int


def merge_repository(
    summary: RemoteRepositorySummary, record: Optional[ProjectRecord]
) -> ReconciledRepository:
    """
    Attach stored annotations to a remote summary.

    Descriptive fields always come from the remote summary (including the name,
    even when the stored copy has drifted). Progress and reminder come from the
    record, or default to 0 / False when there is none yet.
    """
    return ReconciledRepository(
        id=summary.id,
        name=summary.name,
        description=summary.description,
        language=summary.language,
        star_count=summary.star_count,
        fork_count=summary.fork_count,
        updated_at=summary.updated_at,
        url=summary.url,
        is_fork=summary.is_fork,
        progress=record.progress if record else 0,
        reminder_enabled=record.reminder_enabled if record else False,
    )


__all__ = [
    "RemoteRepositorySummary",
    "ProjectRecord",
    "ReconciledRepository",
    "FetchResult",
    "ReconcileResult",
    "RepositoryActivity",
    "merge_repository",
]
