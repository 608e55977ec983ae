from datetime import datetime, timezone

import pytest

from app import security
from core.errors import RemoteUnavailable
from core.models import FetchResult, ProjectRecord, RemoteRepositorySummary


def make_summary(repo_id, name=None, **overrides):
    fields = {
        "id": repo_id,
        "name": name or f"repo-{repo_id}",
        "description": None,
        "language": "Python",
        "star_count": 0,
        "fork_count": 0,
        "updated_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "url": f"https://github.com/someone/{name or f'repo-{repo_id}'}",
        "is_fork": False,
    }
    fields.update(overrides)
    return RemoteRepositorySummary(**fields)


class StaticFetcher:
    """Fetcher stub returning a fixed list, or raising RemoteUnavailable."""

    def __init__(self, items=None, total_count=None, fail=False):
        self.items = list(items or [])
        self.total_count = len(self.items) if total_count is None else total_count
        self.fail = fail
        self.calls = []

    def fetch_repositories(self, username):
        self.calls.append(username)
        if self.fail:
            raise RemoteUnavailable("GitHub returned 503", status_code=503)
        return FetchResult(total_count=self.total_count, items=list(self.items))


class InMemoryProjectStore:
    """Project store keyed by (owner, id) with the same contract as core.db.projects."""

    def __init__(self):
        self.rows = {}
        self.reads = 0
        self.write_calls = 0
        self.before_create = None

    def seed(self, record: ProjectRecord):
        self.rows[(record.owner_username, record.id)] = record

    def records_for(self, owner):
        return sorted(
            (r for (o, _), r in self.rows.items() if o == owner),
            key=lambda r: r.id,
        )

    def find_all_projects_by_owner(self, owner_username):
        self.reads += 1
        return [
            ProjectRecord(**vars(r))
            for (owner, _), r in self.rows.items()
            if owner == owner_username
        ]

    def create_projects_if_absent(self, records):
        self.write_calls += 1
        if self.before_create:
            hook, self.before_create = self.before_create, None
            hook()
        inserted = []
        for record in records:
            key = (record.owner_username, record.id)
            if key in self.rows:
                continue
            self.rows[key] = ProjectRecord(**vars(record))
            inserted.append(record.id)
        return inserted

    def update_project(self, owner_username, project_id, fields):
        record = self.rows.get((owner_username, str(project_id)))
        if record is None:
            return False
        for name, value in fields.items():
            setattr(record, name, value)
        return True


@pytest.fixture
def memory_store():
    return InMemoryProjectStore()


@pytest.fixture
def make_repo():
    return make_summary


@pytest.fixture
def fetcher_for():
    return StaticFetcher


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    security._rate_state.clear()
    yield
    security._rate_state.clear()
