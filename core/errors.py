"""
Exception types shared by the fetcher, the stores and the reconciliation routine.
"""
from __future__ import annotations


class JobNotFinishedError(Exception):
    """Base exception for application failures."""


class RemoteUnavailable(JobNotFinishedError):
    """The remote host could not be reached, authenticated against, or understood."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StoreError(JobNotFinishedError):
    """Base exception for persistence failures."""


class StoreReadFailure(StoreError):
    """Reading project records failed; nothing was written."""


class StoreWriteFailure(StoreError):
    """Persisting project records failed (duplicate keys are not failures)."""


class ProjectNotFound(JobNotFinishedError):
    """No project record exists for this owner and repository id."""

    def __init__(self, owner_username: str, repo_id: str):
        super().__init__(f"No project {repo_id!r} for owner {owner_username!r}")
        self.owner_username = owner_username
        self.repo_id = repo_id


__all__ = [
    "JobNotFinishedError",
    "RemoteUnavailable",
    "StoreError",
    "StoreReadFailure",
    "StoreWriteFailure",
    "ProjectNotFound",
]
