import pytest

from core.annotations import clamp_progress, set_reminder, update_progress
from core.errors import ProjectNotFound
from core.models import ProjectRecord


@pytest.mark.parametrize(
    "raw,expected",
    [(50, 50), ("75", 75), (" 30 ", 30), (12.9, 12), (-5, 0), (250, 100), ("100", 100)],
)
def test_clamp_progress(raw, expected):
    assert clamp_progress(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", None, True, float("inf")])
def test_clamp_progress_rejects_non_numbers(raw):
    with pytest.raises(ValueError):
        clamp_progress(raw)


def test_update_progress_stores_clamped_value(memory_store):
    memory_store.seed(ProjectRecord(id="1", owner_username="alice", name="a"))

    assert update_progress("alice", 1, 140, store=memory_store) == 100
    assert memory_store.rows[("alice", "1")].progress == 100


def test_update_progress_is_owner_scoped(memory_store):
    memory_store.seed(ProjectRecord(id="1", owner_username="alice", name="a", progress=20))

    with pytest.raises(ProjectNotFound):
        update_progress("mallory", "1", 90, store=memory_store)
    assert memory_store.rows[("alice", "1")].progress == 20


def test_set_reminder_round_trip(memory_store):
    memory_store.seed(ProjectRecord(id="8", owner_username="alice", name="a"))

    assert set_reminder("alice", "8", True, store=memory_store) is True
    assert memory_store.rows[("alice", "8")].reminder_enabled is True
    assert set_reminder("alice", "8", False, store=memory_store) is False
    assert memory_store.rows[("alice", "8")].reminder_enabled is False


def test_set_reminder_unknown_project(memory_store):
    with pytest.raises(ProjectNotFound):
        set_reminder("alice", "404", True, store=memory_store)
