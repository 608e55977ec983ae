import psycopg
import pytest

from core.db.projects import projects_store
from core.errors import StoreReadFailure, StoreWriteFailure
from core.models import ProjectRecord


@pytest.fixture
def db_down(monkeypatch):
    def _refuse():
        raise psycopg.OperationalError("connection failed: Connection refused")

    monkeypatch.setattr(projects_store, "get_conn", _refuse)


@pytest.mark.parametrize(
    "call",
    [
        lambda: projects_store.find_all_projects_by_owner("alice"),
        lambda: projects_store.get_project("alice", "1"),
        lambda: projects_store.find_all_projects_with_reminder_enabled(),
    ],
)
def test_reads_wrap_connection_errors(db_down, call):
    with pytest.raises(StoreReadFailure):
        call()


@pytest.mark.parametrize(
    "call",
    [
        lambda: projects_store.update_project("alice", "1", {"progress": 10}),
        lambda: projects_store.create_projects_if_absent([ProjectRecord(id="1", owner_username="alice", name="a")]),
    ],
)
def test_writes_wrap_connection_errors(db_down, call):
    with pytest.raises(StoreWriteFailure):
        call()
