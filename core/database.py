"""
Single import point for storage helpers used by routes and the worker.
"""
from core.db.schema import init_db
from core.db.users import (
    create_session,
    delete_session,
    get_session,
    get_user_by_id,
    get_user_by_username,
    touch_session,
    update_user_email,
    upsert_user,
)
from core.db.projects import (
    create_projects_if_absent,
    find_all_projects_by_owner,
    find_all_projects_with_reminder_enabled,
    get_project,
    update_project,
)

__all__ = [
    "init_db",
    "create_session",
    "delete_session",
    "get_session",
    "get_user_by_id",
    "get_user_by_username",
    "touch_session",
    "update_user_email",
    "upsert_user",
    "create_projects_if_absent",
    "find_all_projects_by_owner",
    "find_all_projects_with_reminder_enabled",
    "get_project",
    "update_project",
]
